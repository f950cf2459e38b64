"""
Core routine for moving packages into the asset tree.

This module implements the functionality behind the CLI exposed in
``pkgmover.cli``.  A :class:`PackageRelocator` takes a selected package,
optionally widens the selection to the package's dependencies, and then
processes the resulting batch one package at a time:

1. report progress,
2. rename the package directory to ``<asset root>/<folder name>``,
3. ask the registry to drop the package from the dependency manifest and
   wait until the request completes.

The batch runs inside a single editing session so the project refresh
happens once at the end.  The session is closed and the progress display
cleared even when a step fails.  A failure stops the batch; packages that
were already moved stay moved and nothing is rolled back.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Set

from .config import PACKAGES_DIR, RelocatorConfig
from .errors import MoveFailure, RegistryRemovalFailure, RelocationInProgress
from .interfaces import EditingSession, PackageLookup, ProgressReporter, RegistryClient
from .models import PackageDescriptor, RelocationBatch

__all__ = ["PackageRelocator"]

logger = logging.getLogger(__name__)


class PackageRelocator:
    """Move packages out of the managed-dependency area.

    Parameters
    ----------
    lookup: PackageLookup
        Resolves selections and dependency names to packages.
    registry: RegistryClient
        Receives one removal request per moved package.
    session: EditingSession
        Bracket opened around the whole batch.
    progress: ProgressReporter
        Receives one report per package and a final ``clear()``.
    config: RelocatorConfig
        Asset root, built-in prefix and polling settings.
    """

    def __init__(
        self,
        lookup: PackageLookup,
        registry: RegistryClient,
        session: EditingSession,
        progress: ProgressReporter,
        config: RelocatorConfig,
    ) -> None:
        self.lookup = lookup
        self.registry = registry
        self.session = session
        self.progress = progress
        self.config = config
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    def find_selected(self, selection: object) -> Optional[PackageDescriptor]:
        """Return the package behind ``selection`` or ``None``."""
        return self.lookup.find_package(selection)

    def expand_dependencies(self, root: PackageDescriptor) -> RelocationBatch:
        """Return ``root`` together with the dependencies that can be moved.

        Dependencies are walked depth first in declaration order and each one
        is placed before the package that needs it, so ``root`` comes last.
        Built-in modules and names that do not resolve to a package on disk
        are left out.
        """
        batch = RelocationBatch()
        self._collect_dependencies(root, batch, {root.name})
        batch.add(root)
        return batch

    def _collect_dependencies(self, descriptor: PackageDescriptor, batch: RelocationBatch, seen: Set[str]) -> None:
        for name in descriptor.dependencies:
            if name.startswith(self.config.builtin_prefix):
                logger.debug("Skipping built-in module %s", name)
                continue
            if name in seen:
                continue
            seen.add(name)
            dependency = self.lookup.find_package(f"{PACKAGES_DIR}/{name}")
            if dependency is None:
                logger.debug("Dropping %s: dependency of %s not found on disk", name, descriptor.name)
                continue
            self._collect_dependencies(dependency, batch, seen)
            batch.add(dependency)

    def destination_for(self, descriptor: PackageDescriptor) -> Path:
        return self.config.asset_root / descriptor.folder_name

    def move(
        self,
        selection: object,
        include_dependencies: bool = False,
        dry_run: bool = False,
    ) -> Optional[RelocationBatch]:
        """Resolve ``selection``, build its batch and relocate it.

        Returns the batch that was processed (or would be, with
        ``dry_run``), or ``None`` if ``selection`` is not a package.
        """
        root = self.find_selected(selection)
        if root is None:
            logger.info("Nothing to move: %s is not a package", selection)
            return None
        if include_dependencies:
            batch = self.expand_dependencies(root)
        else:
            batch = RelocationBatch.of(root)
        if not dry_run:
            self.relocate(batch)
        return batch

    def relocate(self, batch: RelocationBatch) -> None:
        """Move every package in ``batch`` into the asset root, in order.

        Raises
        ------
        ValueError
            If ``batch`` is empty.
        RelocationInProgress
            If this relocator is already processing a batch.
        MoveFailure
            If a directory cannot be moved.
        RegistryRemovalFailure
            If the registry reports a failed removal.
        """
        if not len(batch):
            raise ValueError("Cannot relocate an empty batch")
        if self._busy:
            raise RelocationInProgress("A relocation batch is already running")
        self._busy = True
        try:
            with self._editing():
                total = len(batch)
                for index, descriptor in enumerate(batch):
                    destination = self.destination_for(descriptor)
                    self.progress.report(
                        self.config.progress_title,
                        f"{index + 1}/{total} {descriptor.name}",
                        index / total,
                    )
                    self._move_directory(descriptor, destination)
                    self._remove_from_registry(descriptor)
        finally:
            self._busy = False

    @contextmanager
    def _editing(self) -> Iterator[None]:
        self.session.begin_batch_edit()
        try:
            yield
        finally:
            try:
                self.session.end_batch_edit()
            finally:
                self.progress.clear()

    def _move_directory(self, descriptor: PackageDescriptor, destination: Path) -> None:
        source = descriptor.resolved_path
        if not source.exists():
            raise MoveFailure(descriptor.name, f"source {source} does not exist")
        if destination.exists():
            raise MoveFailure(descriptor.name, f"destination {destination} already exists")
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            # A plain rename: moves across filesystems are rejected, not copied.
            source.rename(destination)
        except OSError as exc:
            raise MoveFailure(descriptor.name, f"cannot move {source} to {destination}: {exc}") from exc
        logger.info("Moved %s to %s", source, destination)

    def _remove_from_registry(self, descriptor: PackageDescriptor) -> None:
        request = self.registry.remove(descriptor.name)
        while not request.is_complete():
            time.sleep(self.config.poll_interval)
        error = request.error
        if error is not None:
            raise RegistryRemovalFailure(descriptor.name, str(error) or type(error).__name__) from error
        logger.info("Removed %s from the dependency manifest", descriptor.name)
