"""
Collaborators the relocator talks to.

The relocator never touches the manifest, the session or the display
directly; it calls through these narrow protocols.  ``pkgmover.registry``,
``pkgmover.session`` and ``pkgmover.progress`` provide the implementations
used by the CLI, and the tests substitute recording fakes.
"""

from __future__ import annotations

from typing import Optional, Protocol

from .models import PackageDescriptor

__all__ = [
    "PackageLookup",
    "RemovalHandle",
    "RegistryClient",
    "EditingSession",
    "ProgressReporter",
]


class PackageLookup(Protocol):
    def find_package(self, path_or_selection: object) -> Optional[PackageDescriptor]:
        """Return the package for a name or path, or ``None``.  Must not raise."""
        ...


class RemovalHandle(Protocol):
    """A pending removal request."""

    def is_complete(self) -> bool:
        ...

    @property
    def error(self) -> Optional[BaseException]:
        """The failure of a completed request, ``None`` on success."""
        ...


class RegistryClient(Protocol):
    def remove(self, package_name: str) -> RemovalHandle:
        ...


class EditingSession(Protocol):
    def begin_batch_edit(self) -> None:
        ...

    def end_batch_edit(self) -> None:
        ...


class ProgressReporter(Protocol):
    def report(self, title: str, message: str, fraction: float) -> None:
        ...

    def clear(self) -> None:
        ...
