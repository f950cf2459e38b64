"""
Command‑line interface for the pkgmover package.

This module exposes two commands using :mod:`click`:

* ``move`` – move the selected package into the asset tree and remove it
  from the dependency manifest.
* ``move‑with‑deps`` – do the same for the package and every dependency
  that can be moved, dependencies first.

Both commands take the package as a name (``com.example.tools``), as an
editor path (``Packages/com.example.tools``) or as a filesystem path to the
package directory or a file inside it.  The ``--project-root`` option
defaults to the current working directory and may also be set through
``PKGMOVER_PROJECT_ROOT``.

Exit codes: ``0`` on success, ``1`` when a package could not be moved or
removed from the manifest, ``2`` when the selection is not a package.
"""

from __future__ import annotations

import logging
import pathlib
import sys
from typing import Callable

import click

from .config import RelocatorConfig
from .errors import RelocationError
from .progress import LoggingProgressReporter, RichProgressReporter
from .registry import ManifestRegistry
from .relocator import PackageRelocator
from .session import ProjectSession


class NothingSelected(click.ClickException):
    exit_code = 2


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def resolve_project_root(project_root: str | None) -> pathlib.Path:
    """Return the absolute project root, defaulting to the working directory."""
    root = pathlib.Path(project_root) if project_root else pathlib.Path.cwd()
    if not root.is_dir():
        raise click.UsageError(f"Project root {root!s} does not exist or is not a directory")
    return root.resolve()


def _display(path: pathlib.Path, root: pathlib.Path) -> str:
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


@click.group()
@click.version_option(package_name="pkgmover")
@click.option(
    "--project-root", "project_root", type=click.Path(file_okay=False), default=None,
    envvar="PKGMOVER_PROJECT_ROOT",
    help="Root directory of the project (defaults to current working directory).",
)
@click.option("-v", "--verbose", is_flag=True, help="Log every step.")
@click.pass_context
def cli(ctx: click.Context, project_root: str | None, verbose: bool) -> None:
    """Move packages into the asset tree and drop them from the manifest.

    A moved package becomes ordinary, directly editable project content.
    """
    configure_logging(verbose)
    ctx.obj = resolve_project_root(project_root)


def relocation_options(func: Callable) -> Callable:
    func = click.option(
        "--no-progress", "no_progress", is_flag=True,
        help="Log progress instead of drawing a progress bar.",
    )(func)
    func = click.option(
        "--dry-run", "dry_run", is_flag=True,
        help="Print the packages that would be moved and change nothing.",
    )(func)
    func = click.option(
        "--asset-root", "asset_root", type=click.Path(file_okay=False), default=None,
        envvar="PKGMOVER_ASSET_ROOT",
        help="Destination directory, relative to the project root (defaults to Assets).",
    )(func)
    func = click.argument("package")(func)
    return func


def run_move(
    project_root: pathlib.Path,
    package: str,
    asset_root: str | None,
    include_dependencies: bool,
    dry_run: bool,
    no_progress: bool,
) -> None:
    config = RelocatorConfig.for_project(project_root, asset_root)
    if no_progress or not sys.stderr.isatty():
        progress = LoggingProgressReporter()
    else:
        progress = RichProgressReporter()
    with ManifestRegistry(project_root) as registry:
        session = ProjectSession([registry.sync_lock_file])
        relocator = PackageRelocator(registry, registry, session, progress, config)
        try:
            batch = relocator.move(package, include_dependencies=include_dependencies, dry_run=dry_run)
        except RelocationError as exc:
            raise click.ClickException(exc.describe()) from exc
    if batch is None:
        raise NothingSelected(f"{package} is not a package; nothing to move")
    verb = "Would move" if dry_run else "Moved"
    for descriptor in batch:
        destination = relocator.destination_for(descriptor)
        click.echo(f"{verb} {descriptor.name} -> {_display(destination, project_root)}")
    if not dry_run:
        click.echo(f"Done. {len(batch)} package(s) moved.")


@cli.command("move", help="Move a package into the asset tree, excluding its dependencies.")
@relocation_options
@click.pass_obj
def move_cmd(
    project_root: pathlib.Path, package: str, asset_root: str | None, dry_run: bool, no_progress: bool
) -> None:
    """Move PACKAGE into the asset tree and remove it from the manifest."""
    run_move(project_root, package, asset_root, False, dry_run, no_progress)


@cli.command("move-with-deps", help="Move a package and its dependencies into the asset tree.")
@relocation_options
@click.pass_obj
def move_with_deps_cmd(
    project_root: pathlib.Path, package: str, asset_root: str | None, dry_run: bool, no_progress: bool
) -> None:
    """Move PACKAGE and its movable dependencies, dependencies first.

    Built-in modules and dependencies that are not present on disk are
    skipped.
    """
    run_move(project_root, package, asset_root, True, dry_run, no_progress)


def main(argv: list[str] | None = None) -> None:
    """Entrypoint for console_scripts.

    Allows the CLI to be executed via ``python -m pkgmover`` or when
    installed through a ``console_scripts`` entry point.
    """
    cli.main(args=argv, prog_name="pkgmover")


if __name__ == "__main__":  # pragma: no cover
    main(sys.argv[1:])
