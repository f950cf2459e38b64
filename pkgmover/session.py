"""
Editing-session bracket for a relocation batch.

While a session is open the expensive project refresh is deferred; it runs
once, when the outermost :meth:`ProjectSession.end_batch_edit` closes the
bracket.  Sessions nest, so a caller that already holds one can run a batch
without triggering an intermediate refresh.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List

__all__ = ["ProjectSession"]

logger = logging.getLogger(__name__)


class ProjectSession:
    def __init__(self, refresh_callbacks: Iterable[Callable[[], None]] = ()) -> None:
        self._depth = 0
        self._callbacks: List[Callable[[], None]] = list(refresh_callbacks)

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def active(self) -> bool:
        return self._depth > 0

    def add_refresh(self, callback: Callable[[], None]) -> None:
        self._callbacks.append(callback)

    def begin_batch_edit(self) -> None:
        self._depth += 1
        logger.debug("Batch edit started (depth %d)", self._depth)

    def end_batch_edit(self) -> None:
        if self._depth == 0:
            raise RuntimeError("end_batch_edit() called without a matching begin_batch_edit()")
        self._depth -= 1
        logger.debug("Batch edit ended (depth %d)", self._depth)
        if self._depth == 0:
            self.refresh()

    def refresh(self) -> None:
        for callback in self._callbacks:
            callback()
