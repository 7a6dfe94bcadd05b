from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from domain.ports.scheduling import ScheduledTask, Scheduler

logger = logging.getLogger(__name__)


class AsyncioRepeatingTask(ScheduledTask):
    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        interval_seconds: float,
        callback: Callable[[], None],
    ) -> None:
        self._loop = loop
        self._interval = interval_seconds
        self._callback = callback
        self._cancelled = False
        self._handle: asyncio.TimerHandle | None = loop.call_later(interval_seconds, self._run)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _run(self) -> None:
        self._handle = None
        if self._cancelled:
            return
        try:
            self._callback()
        except Exception:
            logger.exception("Scheduled callback failed.")
        # The callback may have cancelled its own task.
        if not self._cancelled:
            self._handle = self._loop.call_later(self._interval, self._run)


class AsyncioScheduler(Scheduler):
    """Recurring callbacks on the running event loop (no threads involved)."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def schedule_repeating(
        self, interval_seconds: float, callback: Callable[[], None]
    ) -> AsyncioRepeatingTask:
        loop = self._loop or asyncio.get_running_loop()
        return AsyncioRepeatingTask(loop, interval_seconds, callback)
