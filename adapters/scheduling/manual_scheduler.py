from __future__ import annotations

from collections.abc import Callable

from domain.ports.scheduling import ScheduledTask, Scheduler


class ManualTask(ScheduledTask):
    def __init__(self, interval_seconds: float, callback: Callable[[], None]) -> None:
        self.interval_seconds = interval_seconds
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(Scheduler):
    """Scheduler driven by explicit ``advance`` calls instead of wall-clock time."""

    def __init__(self) -> None:
        self._tasks: list[ManualTask] = []

    @property
    def active_tasks(self) -> list[ManualTask]:
        return [task for task in self._tasks if not task.cancelled]

    def schedule_repeating(
        self, interval_seconds: float, callback: Callable[[], None]
    ) -> ManualTask:
        task = ManualTask(interval_seconds, callback)
        self._tasks.append(task)
        return task

    def advance(self, ticks: int = 1) -> int:
        """Fire every live task ``ticks`` times; returns how many callbacks ran."""
        fired = 0
        for _ in range(ticks):
            live = self.active_tasks
            if not live:
                break
            for task in live:
                if task.cancelled:
                    continue
                task.callback()
                fired += 1
        self._tasks = self.active_tasks
        return fired

    def run_until_idle(self, max_ticks: int) -> int:
        ticks = 0
        while self.active_tasks and ticks < max_ticks:
            self.advance()
            ticks += 1
        return ticks
