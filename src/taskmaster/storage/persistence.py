# src/taskmaster/storage/persistence.py

"""
Persistence adapter: JSON (de)serialization over a key-value backend.

Loads never fail: a missing key, malformed content or a broken backend all
degrade to the caller-supplied default. Saves are best-effort overwrites.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Final

from ..core.ports import KeyValueStorage

logger = logging.getLogger(__name__)

TASKS_KEY: Final = "tasks"
HISTORY_KEY: Final = "task-history"
DARK_MODE_KEY: Final = "darkMode"


class PersistenceAdapter:
    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage

    def load(self, key: str, default: Any) -> Any:
        try:
            raw = self._storage.get(key)
        except Exception:
            logger.exception("Storage read failed key=%s; using default", key)
            return default

        if raw is None:
            return default

        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Malformed stored value key=%s; using default", key)
            return default

    def save(self, key: str, value: Any) -> bool:
        try:
            raw = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError):
            logger.exception("Failed to JSON-encode value for key=%s", key)
            return False

        try:
            self._storage.set(key, raw)
        except Exception:
            # Not retried: the in-memory state stays authoritative until the next save.
            logger.exception("Storage write failed key=%s", key)
            return False
        return True
