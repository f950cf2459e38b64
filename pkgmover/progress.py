"""
Progress reporters.

:class:`RichProgressReporter` draws a transient bar on stderr using
:mod:`rich`.  :class:`LoggingProgressReporter` writes one log record per
update and is used with ``--no-progress`` or when stderr is not a terminal.
"""

from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.progress import BarColumn, Progress, TaskID, TextColumn

__all__ = ["RichProgressReporter", "LoggingProgressReporter"]

logger = logging.getLogger(__name__)


class RichProgressReporter:
    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console(stderr=True)
        self._progress: Optional[Progress] = None
        self._task: Optional[TaskID] = None

    def report(self, title: str, message: str, fraction: float) -> None:
        progress, task = self._progress, self._task
        if progress is None or task is None:
            progress = Progress(
                TextColumn("[bold]{task.fields[title]}"),
                BarColumn(),
                TextColumn("{task.description}"),
                console=self._console,
                transient=True,
            )
            progress.start()
            task = progress.add_task(message, total=1.0, title=title)
            self._progress, self._task = progress, task
        progress.update(task, description=message, completed=fraction, title=title)

    @property
    def active(self) -> bool:
        return self._progress is not None

    def clear(self) -> None:
        if self._progress is not None:
            self._progress.stop()
        self._progress = None
        self._task = None


class LoggingProgressReporter:
    def __init__(self, level: int = logging.INFO) -> None:
        self.level = level

    def report(self, title: str, message: str, fraction: float) -> None:
        logger.log(self.level, "%s: %s (%.0f%%)", title, message, fraction * 100)

    def clear(self) -> None:
        pass
