# src/taskmaster/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, date, datetime

from ..storage.persistence import TASKS_KEY, PersistenceAdapter
from .history_log import HistoryLog
from .task_models import HistoryEntry, Priority, Task, TaskCounts, TaskFilter, parse_deadline

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
DateClock = Callable[[], date]


def _utc_now() -> datetime:
    return datetime.now(UTC)


def is_overdue(task: Task, today: date) -> bool:
    """Incomplete, has a deadline, and the deadline is strictly before today."""
    return task.deadline is not None and not task.completed and task.deadline < today


def is_due_today(task: Task, today: date) -> bool:
    return task.deadline is not None and not task.completed and task.deadline == today


class TaskStore:
    """
    Ordered task collection (newest first) and the only writer of task history.

    Every mutation is followed by a save of the affected slice through the
    injected persistence adapter. Unknown ids are a no-op, not an error.
    """

    def __init__(
        self,
        persistence: PersistenceAdapter,
        history: HistoryLog | None = None,
        *,
        now: Clock = _utc_now,
        today: DateClock = date.today,
    ) -> None:
        self._persistence = persistence
        self.history = history if history is not None else HistoryLog(persistence)
        self._now = now
        self._today = today
        self._tasks: list[Task] = self._load()
        self._last_id = max((t.id for t in self._tasks), default=0)
        logger.info("TaskStore ready total=%d", len(self._tasks))

    # ---- low-level helpers ----

    def _load(self) -> list[Task]:
        raw = self._persistence.load(TASKS_KEY, [])
        if not isinstance(raw, list):
            logger.warning("Stored tasks are not a list; starting empty")
            return []

        out: list[Task] = []
        seen: set[int] = set()
        for item in raw:
            if not isinstance(item, dict):
                continue
            try:
                task = Task.from_dict(item)
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping undecodable task: %r", item)
                continue
            if task.id in seen:
                logger.warning("Skipping task with duplicate id=%s", task.id)
                continue
            seen.add(task.id)
            out.append(task)
        return out

    def _save(self) -> None:
        self._persistence.save(TASKS_KEY, [t.to_dict() for t in self._tasks])

    def _next_id(self) -> int:
        # Millisecond timestamp, bumped past the last issued id so ids never collide.
        candidate = int(self._now().timestamp() * 1000)
        self._last_id = max(candidate, self._last_id + 1)
        return self._last_id

    def _index_of(self, task_id: int) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    # ---- commands ----

    def add_task(
        self,
        text: str,
        deadline: date | str | None = None,
        priority: Priority | str = Priority.MEDIUM,
    ) -> Task | None:
        if not text or not text.strip():
            return None

        # Parse first: a rejected deadline or priority must not consume an id.
        parsed_deadline = parse_deadline(deadline)
        parsed_priority = Priority.parse(priority)
        task = Task(
            id=self._next_id(),
            text=text.strip(),
            completed=False,
            deadline=parsed_deadline,
            priority=parsed_priority,
        )
        self._tasks.insert(0, task)
        logger.debug(
            "Task added id=%s priority=%s deadline=%s", task.id, task.priority.value, task.deadline
        )
        self._save()
        return task

    def toggle_task(self, task_id: int) -> Task | None:
        idx = self._index_of(task_id)
        if idx is None:
            return None

        task = self._tasks[idx]
        task.completed = not task.completed
        if task.completed:
            self.history.record(HistoryEntry.completion(task, self._now()))
        logger.debug("Task %s -> completed=%s", task.id, task.completed)
        self._save()
        return task

    def delete_task(self, task_id: int) -> Task | None:
        idx = self._index_of(task_id)
        if idx is None:
            return None

        task = self._tasks[idx]
        self.history.record(HistoryEntry.deletion(task, self._now()))
        del self._tasks[idx]
        logger.debug("Task deleted id=%s", task.id)
        self._save()
        return task

    def clear_completed(self) -> int:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if not t.completed]
        removed = before - len(self._tasks)
        logger.debug("Cleared completed tasks removed=%d", removed)
        self._save()
        return removed

    # ---- derived views ----

    def list_tasks(self) -> list[Task]:
        return list(self._tasks)

    def filtered_view(self, task_filter: TaskFilter | str = TaskFilter.ALL) -> list[Task]:
        f = TaskFilter.parse(task_filter)
        return [t for t in self._tasks if f.matches(t)]

    def is_overdue(self, task: Task, today: date | None = None) -> bool:
        return is_overdue(task, today if today is not None else self._today())

    def due_today(self, today: date | None = None) -> list[Task]:
        day = today if today is not None else self._today()
        return [t for t in self._tasks if is_due_today(t, day)]

    def counts(self, today: date | None = None) -> TaskCounts:
        day = today if today is not None else self._today()
        completed = sum(1 for t in self._tasks if t.completed)
        return TaskCounts(
            active=len(self._tasks) - completed,
            completed=completed,
            overdue=sum(1 for t in self._tasks if is_overdue(t, day)),
        )

    def __len__(self) -> int:
        return len(self._tasks)
