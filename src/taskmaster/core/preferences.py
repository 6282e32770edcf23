# src/taskmaster/core/preferences.py

from __future__ import annotations

import logging

from ..storage.persistence import DARK_MODE_KEY, PersistenceAdapter

logger = logging.getLogger(__name__)


class ThemePreference:
    """Dark-mode flag, persisted on its own key as "true"/"false"."""

    def __init__(self, persistence: PersistenceAdapter) -> None:
        self._persistence = persistence
        raw = persistence.load(DARK_MODE_KEY, False)
        self._dark_mode = raw is True

    @property
    def dark_mode(self) -> bool:
        return self._dark_mode

    def set(self, value: bool) -> None:
        self._dark_mode = bool(value)
        logger.debug("Theme dark_mode=%s", self._dark_mode)
        self._persistence.save(DARK_MODE_KEY, self._dark_mode)

    def toggle(self) -> bool:
        self.set(not self._dark_mode)
        return self._dark_mode
