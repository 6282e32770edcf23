# src/taskmaster/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires storage -> persistence -> task store / theme / deadline monitor into AppState.
"""

from __future__ import annotations

import logging
import sqlite3

from ..config import get_settings
from ..connectors.console_connector import ConsoleNotifier
from ..core.ports import KeyValueStorage, Notifier
from ..core.preferences import ThemePreference
from ..core.state import AppState
from ..storage.kv_store import SqliteKeyValueStorage, UnavailableStorage
from ..storage.persistence import PersistenceAdapter
from ..tasks.deadline_monitor import DeadlineMonitor
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def _open_storage(settings) -> KeyValueStorage:
    try:
        _ensure_local_dirs(settings)
        return SqliteKeyValueStorage(settings.storage_path)
    except (sqlite3.Error, OSError) as e:
        logger.exception("Cannot open storage at %s; running without persistence", settings.storage_path)
        return UnavailableStorage(str(e))


def create_initial_state(
    *,
    settings=None,
    storage: KeyValueStorage | None = None,
    notifier: Notifier | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings, storage and notifier injectable makes the app easy to test
    (in-memory storage, recording notifier) and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if storage is None:
        storage = _open_storage(settings)

    persistence = PersistenceAdapter(storage)
    task_store = TaskStore(persistence)

    monitor = DeadlineMonitor(
        task_store,
        notifier if notifier is not None else ConsoleNotifier(),
        interval_seconds=settings.reminder_interval_seconds,
    )

    state = AppState(
        settings=settings,
        task_store=task_store,
        theme=ThemePreference(persistence),
        monitor=monitor,
    )
    logger.debug("AppState created tasks=%d history=%d", len(task_store), len(task_store.history))
    return state
