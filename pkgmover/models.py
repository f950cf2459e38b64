"""
Value types shared by the lookup, the registry and the relocator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple

__all__ = ["PackageDescriptor", "RelocationBatch"]


@dataclass(frozen=True)
class PackageDescriptor:
    """A package found on disk.

    Parameters
    ----------
    name: str
        Unique package name, e.g. ``com.example.tools``.
    resolved_path: Path
        Absolute path of the package directory.
    dependencies: tuple[str, ...]
        Names of the direct dependencies in declaration order.
    version: str, optional
        Version string from ``package.json``.
    source: str
        Where the package was found: ``embedded``, ``local`` or ``cache``.
    """

    name: str
    resolved_path: Path
    dependencies: Tuple[str, ...] = ()
    version: Optional[str] = None
    source: str = "embedded"

    @property
    def folder_name(self) -> str:
        return self.resolved_path.name


@dataclass
class RelocationBatch:
    """Ordered, duplicate-free list of packages processed in one session.

    Insertion order is processing order.  Adding a package whose name is
    already present is ignored, so the first occurrence wins.
    """

    items: List[PackageDescriptor] = field(default_factory=list)

    def __post_init__(self) -> None:
        unique = list(self.items)
        self.items = []
        self.extend(unique)

    @classmethod
    def of(cls, *descriptors: PackageDescriptor) -> "RelocationBatch":
        return cls(list(descriptors))

    def add(self, descriptor: PackageDescriptor) -> bool:
        if descriptor.name in self:
            return False
        self.items.append(descriptor)
        return True

    def extend(self, descriptors: Iterable[PackageDescriptor]) -> None:
        for descriptor in descriptors:
            self.add(descriptor)

    @property
    def names(self) -> List[str]:
        return [d.name for d in self.items]

    def __contains__(self, name: object) -> bool:
        return any(d.name == name for d in self.items)

    def __iter__(self) -> Iterator[PackageDescriptor]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> PackageDescriptor:
        return self.items[index]
