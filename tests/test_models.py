from pathlib import Path

from pkgmover.models import PackageDescriptor, RelocationBatch


def descriptor(name):
    return PackageDescriptor(name=name, resolved_path=Path("/project/Packages") / name)


def test_batch_keeps_first_occurrence():
    batch = RelocationBatch([descriptor("a"), descriptor("b"), descriptor("a")])

    assert batch.names == ["a", "b"]
    assert not batch.add(descriptor("b"))
    assert len(batch) == 2


def test_batch_membership_is_by_name():
    batch = RelocationBatch.of(descriptor("a"))

    assert "a" in batch
    assert "b" not in batch
    assert batch[0].folder_name == "a"
