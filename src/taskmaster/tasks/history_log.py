# src/taskmaster/tasks/history_log.py

from __future__ import annotations

import logging
from collections.abc import Iterator

from ..storage.persistence import HISTORY_KEY, PersistenceAdapter
from .task_models import HistoryEntry

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_LIMIT = 10


class HistoryLog:
    """
    Append-only log of task completions and deletions, newest first.

    There is no way to remove or edit an entry; the display cap is applied by
    recent(), the stored log keeps everything.
    """

    def __init__(self, persistence: PersistenceAdapter) -> None:
        self._persistence = persistence
        self._entries: list[HistoryEntry] = self._load()
        logger.info("HistoryLog ready entries=%d", len(self._entries))

    def _load(self) -> list[HistoryEntry]:
        raw = self._persistence.load(HISTORY_KEY, [])
        if not isinstance(raw, list):
            logger.warning("Stored history is not a list; starting empty")
            return []

        out: list[HistoryEntry] = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            try:
                out.append(HistoryEntry.from_dict(item))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping undecodable history entry: %r", item)
        return out

    def _save(self) -> None:
        self._persistence.save(HISTORY_KEY, [e.to_dict() for e in self._entries])

    def record(self, entry: HistoryEntry) -> None:
        self._entries.insert(0, entry)
        logger.debug("History %s id=%s", entry.event, entry.id)
        self._save()

    def recent(self, n: int = DEFAULT_DISPLAY_LIMIT) -> list[HistoryEntry]:
        if n <= 0:
            return []
        return self._entries[:n]

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(tuple(self._entries))
