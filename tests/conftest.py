# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskmaster.core.preferences import ThemePreference
from taskmaster.core.state import AppState
from taskmaster.storage.persistence import PersistenceAdapter
from taskmaster.tasks.deadline_monitor import DeadlineMonitor
from taskmaster.tasks.task_store import TaskStore

from .fakes import FakeClock, InMemoryStorage, RecordingNotifier


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskmaster-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        storage_path=tmp_path / "data" / "taskmaster.sqlite3",
        reminder_interval_seconds=3600.0,
        history_display_limit=10,
    )


@pytest.fixture()
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture()
def persistence(storage: InMemoryStorage) -> PersistenceAdapter:
    return PersistenceAdapter(storage)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(persistence: PersistenceAdapter, clock: FakeClock) -> TaskStore:
    return TaskStore(persistence, now=clock.now, today=clock.today)


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    store: TaskStore,
    persistence: PersistenceAdapter,
    notifier: RecordingNotifier,
    clock: FakeClock,
) -> AppState:
    """
    AppState wired with in-memory storage and a fixed clock.
    """
    return AppState(
        settings=settings,
        task_store=store,
        theme=ThemePreference(persistence),
        monitor=DeadlineMonitor(store, notifier, interval_seconds=3600, today=clock.today),
    )
