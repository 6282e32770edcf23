# src/taskmaster/storage/kv_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from pathlib import Path

logger = logging.getLogger(__name__)


class SqliteKeyValueStorage:
    """
    SQLite-backed key-value storage.

    One table, one row per key; set() overwrites the whole value.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "taskmaster.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._ensure_schema()
        except sqlite3.OperationalError:
            # Locked or unreachable: the file may be fine, never move it.
            raise
        except sqlite3.DatabaseError:
            logger.exception("Storage file is not a usable database: %s", self._db_path)
            self._quarantine()
            self._ensure_schema()
        logger.info("SqliteKeyValueStorage ready db=%s keys=%s", self._db_path, len(self.keys()))

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    def _quarantine(self) -> None:
        """Move a corrupt database (and its WAL sidecars) aside so a fresh one can be created."""
        stamp = time.strftime("%Y%m%d-%H%M%S")
        target = self._db_path.with_name(f"{self._db_path.name}.corrupt-{stamp}")
        self._db_path.replace(target)
        for suffix in ("-wal", "-shm"):
            sidecar = self._db_path.with_name(self._db_path.name + suffix)
            with contextlib.suppress(FileNotFoundError):
                sidecar.replace(target.with_name(target.name + suffix))
        logger.warning("Moved corrupt storage to %s; starting with empty storage", target)

    # ---- public API ----

    def get(self, key: str) -> str | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            return str(row["value"]) if row else None
        finally:
            conn.close()

    def set(self, key: str, value: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO kv(key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value, time.time()),
            )
            conn.commit()
            logger.debug("kv set key=%s bytes=%d", key, len(value))
        finally:
            conn.close()

    def keys(self) -> list[str]:
        conn = self._get_conn()
        try:
            return [str(r["key"]) for r in conn.execute("SELECT key FROM kv ORDER BY key")]
        finally:
            conn.close()


class UnavailableStorage:
    """
    Stand-in backend used when the storage file cannot be opened at all.

    Reads find nothing and writes fail, so the persistence adapter degrades to
    defaults and in-memory state for the rest of the session.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason

    def get(self, key: str) -> str | None:
        return None

    def set(self, key: str, value: str) -> None:
        raise OSError(f"storage unavailable: {self.reason}")
