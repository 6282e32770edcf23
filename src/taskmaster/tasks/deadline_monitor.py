# src/taskmaster/tasks/deadline_monitor.py

from __future__ import annotations

"""
Deadline monitor.

A small polling loop that, every interval:
- asks the task source for incomplete tasks whose deadline is today,
- hands one Reminder per task to an injected notifier port.

It never mutates tasks. Presentation (alert, console line, ...) belongs to the notifier.
"""

import asyncio
import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from enum import Enum

from ..core.ports import Notifier, TaskSource
from .task_models import Task

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 60 * 60


class MonitorState(str, Enum):
    IDLE = "idle"
    ARMED = "armed"


@dataclass(slots=True, frozen=True)
class Reminder:
    task: Task
    due: date

    @property
    def text(self) -> str:
        return f'⏰ Reminder: Task "{self.task.text}" is due today!'


class DeadlineMonitor:
    """
    Idle -> Armed on start(), Armed -> Idle on stop().

    While armed, sweep() runs once per interval on the event loop that called start().
    The first firing is one full interval after start().
    """

    def __init__(
        self,
        source: TaskSource,
        notifier: Notifier,
        *,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._source = source
        self._notifier = notifier
        self._interval = max(0.01, float(interval_seconds))
        self._today = today
        self._runner: asyncio.Task[None] | None = None

    @property
    def state(self) -> MonitorState:
        if self._runner is None or self._runner.done():
            return MonitorState.IDLE
        return MonitorState.ARMED

    @property
    def interval_seconds(self) -> float:
        return self._interval

    def sweep(self, today: date | None = None) -> list[Reminder]:
        day = today if today is not None else self._today()

        try:
            tasks = self._source.due_today(day)
        except Exception:
            logger.exception("due_today failed during deadline sweep")
            return []

        reminders: list[Reminder] = []
        for task in tasks:
            reminder = Reminder(task=task, due=day)
            try:
                self._notifier.notify(reminder)
            except Exception:
                logger.exception("notify failed task_id=%s", task.id)
                continue
            reminders.append(reminder)

        if reminders:
            logger.info("Deadline sweep: %d task(s) due %s", len(reminders), day.isoformat())
        else:
            logger.debug("Deadline sweep: nothing due %s", day.isoformat())
        return reminders

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self.sweep()

    def start(self) -> None:
        """Arm the timer. Must be called from a running event loop."""
        if self.state is MonitorState.ARMED:
            return
        self._runner = asyncio.get_running_loop().create_task(self._run(), name="deadline-monitor")
        logger.info("Deadline monitor armed interval=%.0fs", self._interval)

    def stop(self) -> None:
        runner, self._runner = self._runner, None
        if runner is None:
            return
        runner.cancel()
        logger.info("Deadline monitor stopped")

    async def aclose(self) -> None:
        runner = self._runner
        self.stop()
        if runner is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await runner
