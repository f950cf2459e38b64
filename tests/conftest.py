"""Shared fixtures: on-disk project trees and recording collaborators."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from pkgmover.config import RelocatorConfig
from pkgmover.models import PackageDescriptor
from pkgmover.relocator import PackageRelocator


def write_json(path: Path, data: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def read_json(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


def make_package(
    parent: Path,
    name: str,
    dependencies: Optional[Dict[str, str]] = None,
    folder: Optional[str] = None,
    version: str = "1.0.0",
) -> Path:
    """Create ``parent/<folder or name>/package.json`` and a source file."""
    directory = parent / (folder or name)
    write_json(
        directory / "package.json",
        {"name": name, "version": version, "dependencies": dependencies or {}},
    )
    (directory / "Runtime").mkdir(exist_ok=True)
    (directory / "Runtime" / "Tool.cs").write_text("class Tool {}\n", encoding="utf-8")
    return directory


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Empty project: ``Assets/`` and a manifest with no dependencies."""
    (tmp_path / "Assets").mkdir()
    write_json(tmp_path / "Packages" / "manifest.json", {"dependencies": {}})
    return tmp_path


# ---------------------------------------------------------------------------
# Recording fakes for the relocator collaborators
# ---------------------------------------------------------------------------


class FakeLookup:
    def __init__(self, packages: Optional[Dict[str, PackageDescriptor]] = None) -> None:
        self.packages: Dict[str, PackageDescriptor] = dict(packages or {})
        self.queries: List[object] = []

    def add(self, descriptor: PackageDescriptor) -> PackageDescriptor:
        self.packages[descriptor.name] = descriptor
        return descriptor

    def find_package(self, path_or_selection: object) -> Optional[PackageDescriptor]:
        self.queries.append(path_or_selection)
        name = str(path_or_selection)
        if name.startswith("Packages/"):
            name = name[len("Packages/"):]
        return self.packages.get(name)


class FakeRequest:
    def __init__(self, polls: int, error: Optional[BaseException]) -> None:
        self.polls = polls
        self.checks = 0
        self._error = error

    def is_complete(self) -> bool:
        self.checks += 1
        return self.checks > self.polls

    @property
    def error(self) -> Optional[BaseException]:
        return self._error


class FakeRegistry:
    def __init__(self, events: List[str]) -> None:
        self.events = events
        self.removed: List[str] = []
        self.failures: Dict[str, BaseException] = {}
        self.polls = 0
        self.requests: List[FakeRequest] = []
        self.on_remove = None

    def remove(self, package_name: str) -> FakeRequest:
        self.events.append(f"remove:{package_name}")
        self.removed.append(package_name)
        if self.on_remove is not None:
            self.on_remove(package_name)
        request = FakeRequest(self.polls, self.failures.get(package_name))
        self.requests.append(request)
        return request


class FakeSession:
    def __init__(self, events: List[str]) -> None:
        self.events = events
        self.begins = 0
        self.ends = 0

    def begin_batch_edit(self) -> None:
        self.events.append("begin")
        self.begins += 1

    def end_batch_edit(self) -> None:
        self.events.append("end")
        self.ends += 1


class FakeProgress:
    def __init__(self, events: List[str]) -> None:
        self.events = events
        self.reports: List[tuple] = []
        self.clears = 0

    def report(self, title: str, message: str, fraction: float) -> None:
        self.events.append(f"report:{message}")
        self.reports.append((title, message, fraction))

    def clear(self) -> None:
        self.events.append("clear")
        self.clears += 1


@pytest.fixture
def events() -> List[str]:
    return []


@pytest.fixture
def lookup() -> FakeLookup:
    return FakeLookup()


@pytest.fixture
def registry(events: List[str]) -> FakeRegistry:
    return FakeRegistry(events)


@pytest.fixture
def session(events: List[str]) -> FakeSession:
    return FakeSession(events)


@pytest.fixture
def progress(events: List[str]) -> FakeProgress:
    return FakeProgress(events)


@pytest.fixture
def relocator(tmp_path, lookup, registry, session, progress) -> PackageRelocator:
    config = RelocatorConfig(asset_root=tmp_path / "Assets", poll_interval=0)
    return PackageRelocator(lookup, registry, session, progress, config)


@pytest.fixture
def package_factory(tmp_path: Path, lookup: FakeLookup):
    """Create a package directory under ``tmp_path/Packages`` and register it."""

    def factory(name: str, dependencies: tuple = ()) -> PackageDescriptor:
        directory = make_package(tmp_path / "Packages", name, dict.fromkeys(dependencies, "1.0.0"))
        return lookup.add(PackageDescriptor(name=name, resolved_path=directory.resolve(), dependencies=tuple(dependencies)))

    return factory
