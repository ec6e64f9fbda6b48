# src/unitrack/storage/kv_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from pathlib import Path

logger = logging.getLogger(__name__)


class SqliteKeyValueStorage:
    """
    SQLite key-value storage: the local, durable equivalent of a browser's localStorage.

    One table, one row per key, values stored as BLOBs. `set` fully overwrites the
    previous value (last write wins).

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "storage.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("KeyValueStorage ready db=%s", self._db_path)

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
                    value BLOB NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    # ---- public API ----

    def get(self, key: str) -> bytes | None:
        """Return the stored value, or None when the key is absent or unreadable."""
        try:
            conn = self._get_conn()
        except sqlite3.Error:
            logger.exception("KeyValueStorage open failed db=%s", self._db_path)
            return None
        try:
            cur = conn.execute("SELECT value FROM kv WHERE key = ?", (key,))
            row = cur.fetchone()
        except sqlite3.Error:
            logger.exception("KeyValueStorage read failed key=%s", key)
            return None
        finally:
            conn.close()

        if row is None:
            return None
        value = row["value"]
        if isinstance(value, str):
            return value.encode("utf-8")
        return bytes(value)

    def set(self, key: str, value: bytes) -> bool:
        """
        Overwrite the value under `key`.

        Returns False (and logs) when the write fails; never raises for storage errors.
        """
        try:
            conn = self._get_conn()
        except (sqlite3.Error, OSError):
            logger.exception("KeyValueStorage open failed db=%s", self._db_path)
            return False
        try:
            conn.execute(
                """
                INSERT INTO kv(key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, sqlite3.Binary(value), time.time()),
            )
            conn.commit()
            logger.debug("KeyValueStorage wrote key=%s bytes=%d", key, len(value))
            return True
        except (sqlite3.Error, OSError):
            logger.exception("KeyValueStorage write failed key=%s", key)
            return False
        finally:
            conn.close()

