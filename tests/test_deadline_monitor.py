# tests/test_deadline_monitor.py

from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import date

import pytest

from taskmaster.tasks.deadline_monitor import DeadlineMonitor, MonitorState
from taskmaster.tasks.task_models import Task
from taskmaster.tasks.task_store import TaskStore, is_due_today

from .fakes import FailingNotifier, FakeClock, RecordingNotifier

TODAY = date(2024, 6, 1)


class FakeTaskSource:
    """
    In-memory TaskSource used for monitor unit tests.

    This avoids the store and persistence and makes tests purely about the
    sweep: one reminder per task the source reports due, no mutation.
    """

    def __init__(self, tasks: list[Task]) -> None:
        self.tasks = tasks
        self.calls = 0
        self.asked: list[date] = []

    def due_today(self, today: date) -> list[Task]:
        self.calls += 1
        self.asked.append(today)
        return [t for t in self.tasks if is_due_today(t, today)]


def _monitor(source, notifier, interval: float = 3600) -> DeadlineMonitor:
    return DeadlineMonitor(source, notifier, interval_seconds=interval, today=lambda: TODAY)


def test_sweep_notifies_incomplete_tasks_due_today() -> None:
    due = Task(id=1, text="due", deadline=TODAY)
    tasks = [
        due,
        Task(id=2, text="done", completed=True, deadline=TODAY),
        Task(id=3, text="late", deadline=date(2024, 5, 31)),
        Task(id=4, text="later", deadline=date(2024, 6, 2)),
        Task(id=5, text="no deadline"),
    ]
    notifier = RecordingNotifier()

    reminders = _monitor(FakeTaskSource(tasks), notifier).sweep()

    assert [r.task for r in reminders] == [due]
    assert [r.task.id for r in notifier.sent] == [1]
    assert notifier.sent[0].text == '⏰ Reminder: Task "due" is due today!'


def test_sweep_does_not_mutate_tasks() -> None:
    tasks = [Task(id=1, text="a", deadline=TODAY), Task(id=2, text="b", deadline=TODAY)]
    snapshot = [replace(t) for t in tasks]

    _monitor(FakeTaskSource(tasks), RecordingNotifier()).sweep()
    _monitor(FakeTaskSource(tasks), RecordingNotifier()).sweep()

    assert tasks == snapshot


def test_sweep_with_explicit_date() -> None:
    task = Task(id=1, text="a", deadline=date(2030, 1, 1))
    notifier = RecordingNotifier()
    source = FakeTaskSource([task])
    monitor = _monitor(source, notifier)

    assert monitor.sweep() == []
    assert len(monitor.sweep(today=date(2030, 1, 1))) == 1
    assert source.asked == [TODAY, date(2030, 1, 1)]


def test_notifier_failure_does_not_stop_the_sweep() -> None:
    tasks = [Task(id=1, text="boom", deadline=TODAY), Task(id=2, text="ok", deadline=TODAY)]
    notifier = FailingNotifier(fail_on="boom")

    reminders = _monitor(FakeTaskSource(tasks), notifier).sweep()

    assert [r.task.id for r in reminders] == [2]
    assert [r.task.id for r in notifier.sent] == [2]


def test_sweep_reads_live_store(store: TaskStore, clock: FakeClock) -> None:
    notifier = RecordingNotifier()
    monitor = DeadlineMonitor(store, notifier, today=clock.today)

    assert monitor.sweep() == []
    task = store.add_task("due now", deadline=clock.today())
    assert task is not None
    assert [r.task.id for r in monitor.sweep()] == [task.id]


@pytest.mark.asyncio
async def test_monitor_fires_on_interval_and_stops() -> None:
    source = FakeTaskSource([Task(id=1, text="due", deadline=TODAY)])
    notifier = RecordingNotifier()
    monitor = _monitor(source, notifier, interval=0.01)

    assert monitor.state is MonitorState.IDLE
    monitor.start()
    assert monitor.state is MonitorState.ARMED

    await asyncio.sleep(0.05)
    await monitor.aclose()

    assert monitor.state is MonitorState.IDLE
    assert notifier.sent, "Monitor should fire at least once"

    fired = len(notifier.sent)
    await asyncio.sleep(0.03)
    assert len(notifier.sent) == fired


@pytest.mark.asyncio
async def test_first_firing_waits_one_interval() -> None:
    source = FakeTaskSource([Task(id=1, text="due", deadline=TODAY)])
    notifier = RecordingNotifier()
    monitor = _monitor(source, notifier, interval=3600)

    monitor.start()
    await asyncio.sleep(0.01)
    monitor.stop()

    assert source.calls == 0
    assert notifier.sent == []


@pytest.mark.asyncio
async def test_start_twice_keeps_single_timer() -> None:
    source = FakeTaskSource([])
    monitor = _monitor(source, RecordingNotifier(), interval=3600)

    monitor.start()
    runner = monitor._runner
    monitor.start()

    assert monitor._runner is runner
    await monitor.aclose()
    monitor.stop()
    assert monitor.state is MonitorState.IDLE


def test_start_requires_running_loop() -> None:
    monitor = _monitor(FakeTaskSource([]), RecordingNotifier())
    with pytest.raises(RuntimeError):
        monitor.start()
    assert monitor.state is MonitorState.IDLE
