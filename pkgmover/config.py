"""
Configuration for relocating packages.

The names below describe the project layout ``pkgmover`` expects::

    <project>/Assets/                      asset tree
    <project>/Packages/manifest.json       dependency manifest
    <project>/Packages/packages-lock.json  lock file (optional)
    <project>/Library/PackageCache/        cached registry packages

:class:`RelocatorConfig` bundles the values that change how a batch is
processed.  The CLI builds one from its options.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

__all__ = [
    "ASSETS_DIR",
    "PACKAGES_DIR",
    "MANIFEST_NAME",
    "LOCK_NAME",
    "PACKAGE_JSON",
    "PACKAGE_CACHE_DIR",
    "BUILTIN_PREFIX",
    "RelocatorConfig",
]

ASSETS_DIR = "Assets"
PACKAGES_DIR = "Packages"
MANIFEST_NAME = "manifest.json"
LOCK_NAME = "packages-lock.json"
PACKAGE_JSON = "package.json"
PACKAGE_CACHE_DIR = Path("Library") / "PackageCache"

# Built-in modules ship with the editor and have no directory to move.
BUILTIN_PREFIX = "com.unity.modules."


@dataclass(frozen=True)
class RelocatorConfig:
    """Settings for a :class:`~pkgmover.relocator.PackageRelocator`.

    Parameters
    ----------
    asset_root: Path
        Directory that relocated packages are moved into.
    builtin_prefix: str
        Dependency names starting with this prefix are never relocated.
    poll_interval: float
        Seconds to sleep between checks of a pending removal request.
    progress_title: str
        Title passed to the progress reporter for every item.
    """

    asset_root: Path
    builtin_prefix: str = BUILTIN_PREFIX
    poll_interval: float = 0.05
    progress_title: str = "Package to Asset"

    @classmethod
    def for_project(cls, project_root: Path, asset_root: str | Path | None = None, **kwargs) -> "RelocatorConfig":
        """Build a config whose asset root is resolved against ``project_root``."""
        assets = Path(asset_root) if asset_root else Path(ASSETS_DIR)
        if not assets.is_absolute():
            assets = project_root / assets
        return cls(asset_root=assets.resolve(), **kwargs)
