"""
Utilities for turning managed packages into ordinary project assets.

This package provides a command‑line interface (CLI) that moves a package
directory out of the package manager's area (``Packages/`` or
``Library/PackageCache/``) into the project's asset tree and removes the
package from ``Packages/manifest.json``.  The move can optionally cascade
over the package's dependencies; built-in modules and dependencies that are
not present on disk are skipped.

Example::

    # Move a single package
    pkgmover move com.example.tools

    # Move a package together with its dependencies
    pkgmover move-with-deps Packages/com.example.tools

The CLI is built on top of :mod:`click` and exposes two subcommands
``move`` and ``move‑with‑deps``.  See ``pkgmover.cli`` for details.
"""

__all__ = [
    "PackageDescriptor",
    "RelocationBatch",
    "PackageRelocator",
    "ManifestRegistry",
    "ProjectSession",
    "RelocatorConfig",
    "RelocationError",
    "MoveFailure",
    "RegistryRemovalFailure",
    "RelocationInProgress",
]

from .config import RelocatorConfig  # noqa: F401
from .errors import MoveFailure, RegistryRemovalFailure, RelocationError, RelocationInProgress  # noqa: F401
from .models import PackageDescriptor, RelocationBatch  # noqa: F401
from .registry import ManifestRegistry  # noqa: F401
from .relocator import PackageRelocator  # noqa: F401
from .session import ProjectSession  # noqa: F401
