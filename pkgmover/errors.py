"""Exceptions raised while relocating packages."""

from __future__ import annotations

__all__ = [
    "RelocationError",
    "MoveFailure",
    "RegistryRemovalFailure",
    "RelocationInProgress",
]


class RelocationError(Exception):
    """A batch step failed for one package.

    ``package`` names the offending package and ``step`` the stage of the
    batch that failed.  The batch stops at the first ``RelocationError``.
    """

    step = "relocate"

    def __init__(self, package: str, reason: str) -> None:
        super().__init__(reason)
        self.package = package
        self.reason = reason

    def describe(self) -> str:
        return f"{self.package}: {self.step} failed: {self.reason}"


class MoveFailure(RelocationError):
    """The package directory could not be moved into the asset tree."""

    step = "move"


class RegistryRemovalFailure(RelocationError):
    """The manifest removal request completed with an error.

    The directory has already been moved when this is raised.
    """

    step = "remove"


class RelocationInProgress(RuntimeError):
    """A batch was started while another one is still running."""
