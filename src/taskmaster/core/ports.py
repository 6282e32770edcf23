# src/taskmaster/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage backends and the view layer swappable and makes testing easier.
"""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import date

    from ..tasks.deadline_monitor import Reminder
    from ..tasks.task_models import Task


class KeyValueStorage(Protocol):
    """
    Durable string key -> string value storage (localStorage-like).

    Backends may raise on I/O failure; the persistence adapter absorbs it.
    """

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...


class TaskSource(Protocol):
    """Read-only view of the task collection (what the deadline monitor polls)."""

    def due_today(self, today: date) -> list[Task]: ...


class Notifier(Protocol):
    """
    View-side port: how the deadline monitor delivers reminders.

    The view decides how to present them (console line, alert, desktop popup, ...).
    """

    def notify(self, reminder: Reminder) -> None: ...
