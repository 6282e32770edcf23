# src/taskmaster/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.deadline_monitor import DeadlineMonitor
from ..tasks.history_log import HistoryLog
from ..tasks.task_models import TaskFilter
from ..tasks.task_store import TaskStore
from .preferences import ThemePreference


@dataclass
class AppState:
    # Settings kept on the state so commands can read limits without global config.
    settings: Any

    task_store: TaskStore
    theme: ThemePreference
    monitor: DeadlineMonitor

    # Ephemeral view state, never persisted.
    filter: TaskFilter = TaskFilter.ALL

    @property
    def history(self) -> HistoryLog:
        return self.task_store.history

    @property
    def history_limit(self) -> int:
        return int(getattr(self.settings, "history_display_limit", 10))
