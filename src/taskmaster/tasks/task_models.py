# src/taskmaster/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import Any, cast


class Priority(StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def parse(cls, raw: str | Priority | None) -> Priority:
        """Strict parse for user input (case-insensitive). Raises ValueError."""
        if isinstance(raw, Priority):
            return raw
        if raw is None or not str(raw).strip():
            return cls.MEDIUM
        key = str(raw).strip().lower()
        for p in cls:
            if p.value.lower() == key:
                return p
        raise ValueError(f"unknown priority: {raw!r} (expected Low, Medium or High)")

    @classmethod
    def from_db(cls, raw: Any) -> Priority:
        """Lenient parse for stored data: anything unknown becomes Medium."""
        try:
            return cls.parse(raw)
        except ValueError:
            return cls.MEDIUM


class TaskFilter(StrEnum):
    """View-level predicate over the task collection (never persisted)."""

    ALL = "All"
    ACTIVE = "Active"
    COMPLETED = "Completed"

    @classmethod
    def parse(cls, raw: str | TaskFilter) -> TaskFilter:
        if isinstance(raw, TaskFilter):
            return raw
        key = str(raw).strip().lower()
        for f in cls:
            if f.value.lower() == key:
                return f
        raise ValueError(f"unknown filter: {raw!r} (expected All, Active or Completed)")

    def matches(self, task: Task) -> bool:
        if self is TaskFilter.ACTIVE:
            return not task.completed
        if self is TaskFilter.COMPLETED:
            return task.completed
        return True


def parse_deadline(raw: date | str | None) -> date | None:
    """
    Normalize a deadline to a calendar date.

    Accepts a date, an ISO "YYYY-MM-DD" string, "" or None (no deadline).
    Datetimes are truncated to their date.
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    s = str(raw).strip()
    if not s:
        return None
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        raise ValueError(f"invalid deadline: {raw!r} (expected YYYY-MM-DD)") from None


def _format_deadline(d: date | None) -> str | None:
    return d.isoformat() if d is not None else None


def _parse_ts(raw: Any) -> datetime | None:
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return raw
    s = str(raw).strip()
    # JS toISOString() emits a trailing "Z".
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    return datetime.fromisoformat(s)


@dataclass(slots=True)
class Task:
    id: int
    text: str
    completed: bool = False
    deadline: date | None = None
    priority: Priority = Priority.MEDIUM

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "deadline": _format_deadline(self.deadline),
            "priority": self.priority.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        text = str(data.get("text") or "").strip()
        if not text:
            raise ValueError("task text is required")
        return cls(
            id=int(data["id"]),
            text=text,
            completed=bool(data.get("completed", False)),
            deadline=parse_deadline(data.get("deadline")),
            priority=Priority.from_db(data.get("priority")),
        )


@dataclass(slots=True, frozen=True)
class HistoryEntry:
    """
    Immutable snapshot of a task at a terminal event.

    Exactly one of completed_at / deleted_at is set.
    """

    id: int
    text: str
    completed: bool
    deadline: date | None
    priority: Priority
    completed_at: datetime | None = None
    deleted_at: datetime | None = None

    def __post_init__(self) -> None:
        if (self.completed_at is None) == (self.deleted_at is None):
            raise ValueError("history entry needs exactly one of completed_at / deleted_at")

    @classmethod
    def completion(cls, task: Task, at: datetime) -> HistoryEntry:
        return cls(
            id=task.id,
            text=task.text,
            completed=task.completed,
            deadline=task.deadline,
            priority=task.priority,
            completed_at=at,
        )

    @classmethod
    def deletion(cls, task: Task, at: datetime) -> HistoryEntry:
        return cls(
            id=task.id,
            text=task.text,
            completed=task.completed,
            deadline=task.deadline,
            priority=task.priority,
            deleted_at=at,
        )

    @property
    def event(self) -> str:
        return "completed" if self.completed_at is not None else "deleted"

    @property
    def timestamp(self) -> datetime:
        # __post_init__ guarantees exactly one of the two is set.
        return cast(datetime, self.completed_at if self.completed_at is not None else self.deleted_at)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "deadline": _format_deadline(self.deadline),
            "priority": self.priority.value,
        }
        if self.completed_at is not None:
            out["completedAt"] = self.completed_at.isoformat()
        if self.deleted_at is not None:
            out["deletedAt"] = self.deleted_at.isoformat()
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HistoryEntry:
        return cls(
            id=int(data["id"]),
            text=str(data.get("text") or ""),
            completed=bool(data.get("completed", False)),
            deadline=parse_deadline(data.get("deadline")),
            priority=Priority.from_db(data.get("priority")),
            completed_at=_parse_ts(data.get("completedAt")),
            deleted_at=_parse_ts(data.get("deletedAt")),
        )


@dataclass(slots=True, frozen=True)
class TaskCounts:
    active: int
    completed: int
    overdue: int
