# tests/test_bootstrap.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from taskmaster.cli.bootstrap import create_initial_state
from taskmaster.cli.main import run_session
from taskmaster.tasks.deadline_monitor import MonitorState

from .fakes import InMemoryStorage, RecordingNotifier


def test_state_survives_restart_on_sqlite(settings: SimpleNamespace) -> None:
    state = create_initial_state(settings=settings, notifier=RecordingNotifier())
    task = state.task_store.add_task("Persist me", deadline="2030-01-01", priority="Low")
    assert task is not None
    state.task_store.toggle_task(task.id)
    state.theme.toggle()

    assert settings.storage_path.exists()

    again = create_initial_state(settings=settings, notifier=RecordingNotifier())
    assert again.task_store.list_tasks() == state.task_store.list_tasks()
    assert len(again.history) == 1
    assert again.theme.dark_mode is True
    assert again.monitor.interval_seconds == settings.reminder_interval_seconds


def test_injected_storage_skips_filesystem(settings: SimpleNamespace) -> None:
    storage = InMemoryStorage()
    state = create_initial_state(settings=settings, storage=storage, notifier=RecordingNotifier())

    state.task_store.add_task("in memory")

    assert "tasks" in storage.data
    assert not settings.data_dir.exists()


@pytest.mark.asyncio
async def test_session_disarms_monitor_on_exit(settings: SimpleNamespace, monkeypatch) -> None:
    state = create_initial_state(settings=settings, storage=InMemoryStorage(), notifier=RecordingNotifier())
    seen: list[MonitorState] = []

    async def fake_console(st, **_kwargs) -> None:
        seen.append(st.monitor.state)

    monkeypatch.setattr("taskmaster.cli.main.run_console_loop", fake_console)

    await run_session(state)

    assert seen == [MonitorState.ARMED]
    assert state.monitor.state is MonitorState.IDLE


def test_corrupt_storage_file_does_not_crash_startup(settings: SimpleNamespace) -> None:
    settings.storage_path.parent.mkdir(parents=True)
    settings.storage_path.write_bytes(b"this is not an sqlite database " * 16)

    state = create_initial_state(settings=settings, notifier=RecordingNotifier())

    assert len(state.task_store) == 0
    assert len(state.history) == 0
    assert state.theme.dark_mode is False
    moved = [
        p
        for p in settings.storage_path.parent.glob("taskmaster.sqlite3.corrupt-*")
        if not p.name.endswith(("-wal", "-shm"))
    ]
    assert len(moved) == 1

    state.task_store.add_task("fresh start")
    again = create_initial_state(settings=settings, notifier=RecordingNotifier())
    assert [t.text for t in again.task_store.list_tasks()] == ["fresh start"]


def test_unopenable_storage_runs_in_memory(settings: SimpleNamespace, tmp_path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("a file where a directory should be")
    settings.data_dir = blocker / "data"
    settings.storage_path = blocker / "data" / "taskmaster.sqlite3"

    state = create_initial_state(settings=settings, notifier=RecordingNotifier())

    task = state.task_store.add_task("kept in memory")
    assert task is not None
    assert state.task_store.list_tasks() == [task]
    assert state.theme.toggle() is True
