from __future__ import annotations

from collections.abc import Callable
from typing import Protocol


class ScheduledTask(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def schedule_repeating(
        self, interval_seconds: float, callback: Callable[[], None]
    ) -> ScheduledTask: ...
