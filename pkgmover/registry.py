"""
File-backed package lookup and dependency registry.

:class:`ManifestRegistry` answers two questions for the relocator: *which
package does this selection refer to?* and *please drop this package from
the dependency manifest*.  Packages are discovered on disk in three places,
in priority order:

1. embedded packages, i.e. directories under ``Packages/`` that contain a
   ``package.json``;
2. local packages referenced from ``Packages/manifest.json`` with a
   ``file:`` version;
3. cached registry packages under ``Library/PackageCache/<name>@<version>``.

When the same name is found more than once the first location wins, which
mirrors how embedded packages override cached ones.

Removal requests run on a single background worker and are returned as
:class:`RemovalRequest` handles.  The caller polls the handle and inspects
its ``error`` once it completes.  Removing a name the manifest does not list
succeeds without changing anything: embedded packages are found on disk and
need no manifest entry.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Iterator, List, Optional

from .config import LOCK_NAME, MANIFEST_NAME, PACKAGE_CACHE_DIR, PACKAGE_JSON, PACKAGES_DIR
from .models import PackageDescriptor

__all__ = [
    "ManifestRegistry",
    "RemovalRequest",
    "read_package",
]

logger = logging.getLogger(__name__)


def read_package(directory: Path, source: str = "embedded") -> Optional[PackageDescriptor]:
    """Return the descriptor for the package rooted at ``directory``.

    ``None`` is returned when the directory holds no ``package.json`` or the
    file cannot be parsed; malformed files are logged, not raised.
    """
    package_file = directory / PACKAGE_JSON
    if not package_file.is_file():
        return None
    try:
        data = json.loads(package_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring %s: %s", package_file, exc)
        return None
    if not isinstance(data, dict) or not isinstance(data.get("name"), str):
        logger.warning("Ignoring %s: no package name", package_file)
        return None
    dependencies = data.get("dependencies") or {}
    if not isinstance(dependencies, dict):
        dependencies = {}
    version = data.get("version")
    return PackageDescriptor(
        name=data["name"],
        resolved_path=directory.resolve(),
        dependencies=tuple(dependencies),
        version=version if isinstance(version, str) else None,
        source=source,
    )


class RemovalRequest:
    """Handle for a removal queued on the registry worker."""

    def __init__(self, package_name: str, future: "Future[None]") -> None:
        self.package_name = package_name
        self._future = future

    def is_complete(self) -> bool:
        return self._future.done()

    @property
    def error(self) -> Optional[BaseException]:
        if not self._future.done():
            return None
        return self._future.exception()

    def __repr__(self) -> str:
        state = "complete" if self.is_complete() else "pending"
        return f"<RemovalRequest {self.package_name} {state}>"


class ManifestRegistry:
    """Package lookup and manifest editing for one project.

    Parameters
    ----------
    project_root: Path
        Directory containing ``Packages/`` and ``Assets/``.
    executor: Executor, optional
        Runs the manifest edits.  A private single-worker pool is created
        (and shut down by :meth:`close`) when omitted.
    """

    def __init__(self, project_root: Path, executor: Optional[Executor] = None) -> None:
        self.project_root = Path(project_root).resolve()
        self.packages_dir = self.project_root / PACKAGES_DIR
        self.manifest_path = self.packages_dir / MANIFEST_NAME
        self.lock_path = self.packages_dir / LOCK_NAME
        self.cache_dir = self.project_root / PACKAGE_CACHE_DIR
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="pkgmover-registry")
        self._lock = threading.Lock()
        self._removed: List[str] = []

    def __enter__(self) -> "ManifestRegistry":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    # -- lookup ---------------------------------------------------------

    def packages(self) -> Dict[str, PackageDescriptor]:
        """Return every package found on disk, keyed by name."""
        found: Dict[str, PackageDescriptor] = {}
        for descriptor in self._scan():
            found.setdefault(descriptor.name, descriptor)
        return found

    def find_package(self, path_or_selection: object) -> Optional[PackageDescriptor]:
        """Resolve a selection to a package.

        ``path_or_selection`` may be a package name, a ``Packages/<name>``
        path as shown in the editor, or a filesystem path to the package
        directory or to any file inside it.  Relative paths are taken from
        the project root.  Returns ``None`` when nothing matches.
        """
        if path_or_selection is None:
            return None
        text = str(path_or_selection).strip()
        if not text:
            return None
        packages = self.packages()
        virtual = PurePosixPath(text.replace("\\", "/")).parts
        if len(virtual) >= 2 and virtual[0] == PACKAGES_DIR and virtual[1] in packages:
            return packages[virtual[1]]
        if text in packages:
            return packages[text]
        candidate = Path(text)
        if not candidate.is_absolute():
            candidate = self.project_root / candidate
        try:
            candidate = candidate.resolve()
        except (OSError, ValueError):
            return None
        for descriptor in packages.values():
            root = descriptor.resolved_path
            if candidate == root or root in candidate.parents:
                return descriptor
        return None

    def _scan(self) -> Iterator[PackageDescriptor]:
        if self.packages_dir.is_dir():
            for child in sorted(self.packages_dir.iterdir()):
                if child.is_dir():
                    descriptor = read_package(child, "embedded")
                    if descriptor is not None:
                        yield descriptor
        for version in self._listed_dependencies().values():
            if isinstance(version, str) and version.startswith("file:"):
                descriptor = read_package((self.packages_dir / version[len("file:"):]).resolve(), "local")
                if descriptor is not None:
                    yield descriptor
        if self.cache_dir.is_dir():
            for child in sorted(self.cache_dir.iterdir()):
                if child.is_dir():
                    descriptor = read_package(child, "cache")
                    if descriptor is not None:
                        yield descriptor

    def _listed_dependencies(self) -> Dict[str, Any]:
        if not self.manifest_path.is_file():
            return {}
        try:
            manifest = self._load_manifest()
        except (OSError, ValueError) as exc:
            logger.warning("Cannot read %s: %s", self.manifest_path, exc)
            return {}
        dependencies = manifest.get("dependencies")
        return dependencies if isinstance(dependencies, dict) else {}

    # -- registry -------------------------------------------------------

    def dependencies(self) -> List[str]:
        """Names currently listed in the manifest."""
        return list(self._listed_dependencies())

    def remove(self, package_name: str) -> RemovalRequest:
        """Queue removal of ``package_name`` from the manifest."""
        logger.debug("Queueing removal of %s", package_name)
        future = self._executor.submit(self._remove_dependency, package_name)
        return RemovalRequest(package_name, future)

    def _remove_dependency(self, package_name: str) -> None:
        with self._lock:
            manifest = self._load_manifest()
            dependencies = manifest.get("dependencies")
            changed = False
            if isinstance(dependencies, dict) and package_name in dependencies:
                del dependencies[package_name]
                changed = True
            testables = manifest.get("testables")
            if isinstance(testables, list) and package_name in testables:
                testables.remove(package_name)
                changed = True
            if changed:
                _write_json(self.manifest_path, manifest)
                logger.info("Removed %s from %s", package_name, self.manifest_path)
            else:
                logger.debug("%s is not listed in %s", package_name, self.manifest_path)
            self._removed.append(package_name)

    def _load_manifest(self) -> Dict[str, Any]:
        manifest = json.loads(self.manifest_path.read_text(encoding="utf-8"))
        if not isinstance(manifest, dict):
            raise ValueError(f"{self.manifest_path} must contain a JSON object")
        return manifest

    def sync_lock_file(self) -> None:
        """Drop the packages removed so far from ``packages-lock.json``.

        The lock file is derived data that the editor regenerates, so a
        lock file that cannot be read or written is logged and left alone.
        """
        with self._lock:
            removed, self._removed = self._removed, []
            if not removed or not self.lock_path.is_file():
                return
            try:
                lock = json.loads(self.lock_path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                logger.warning("Not updating %s: %s", self.lock_path, exc)
                return
            entries = lock.get("dependencies") if isinstance(lock, dict) else None
            if not isinstance(entries, dict):
                return
            pruned = [name for name in removed if entries.pop(name, None) is not None]
            if not pruned:
                return
            try:
                _write_json(self.lock_path, lock)
            except OSError as exc:
                logger.warning("Not updating %s: %s", self.lock_path, exc)
                return
            logger.info("Pruned %s from %s", ", ".join(pruned), self.lock_path)


def _write_json(path: Path, data: Any) -> None:
    """Replace ``path`` with ``data`` through a temp file in the same directory."""
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(json.dumps(data, indent=2) + "\n")
        os.replace(tmp_path, path)
    except Exception:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
