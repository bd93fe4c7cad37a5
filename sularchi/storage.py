"""SQLite-backed key-value storage for the local installation."""

from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path
from typing import Dict, Optional, Union

from sularchi.models import to_iso, utc_now

logger = logging.getLogger(__name__)

DATABASE_SETUP_SQL = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""

IN_MEMORY = ":memory:"


class StorageError(RuntimeError):
    """Raised when persisted state cannot be read or written."""


class KeyValueStorage:
    """Named text records in a single SQLite table.

    The connection is opened by :meth:`open` and released by :meth:`close`.
    All access goes through one re-entrant lock so the storage can be shared
    between threads.
    """

    def __init__(self, path: Union[str, Path] = IN_MEMORY):
        self.path = str(path)
        self._connection: Optional[sqlite3.Connection] = None
        self.lock = threading.RLock()

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    def open(self) -> None:
        with self.lock:
            if self._connection is not None:
                return
            if self.path != IN_MEMORY:
                Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            try:
                connection = sqlite3.connect(self.path, check_same_thread=False)
                connection.executescript(DATABASE_SETUP_SQL)
            except sqlite3.Error as error:
                raise StorageError(f"Unable to open storage at {self.path}: {error}") from error
            self._connection = connection
            logger.info(f"Opened storage at {self.path}")

    def close(self) -> None:
        with self.lock:
            if self._connection is None:
                return
            self._connection.close()
            self._connection = None
            logger.info(f"Closed storage at {self.path}")

    def _require_connection(self) -> sqlite3.Connection:
        if self._connection is None:
            raise StorageError("Storage is not open. Call open() first.")
        return self._connection

    def get(self, key: str) -> Optional[str]:
        with self.lock:
            connection = self._require_connection()
            try:
                row = connection.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
            except sqlite3.Error as error:
                raise StorageError(f"Unable to read '{key}': {error}") from error
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def set_many(self, records: Dict[str, str]) -> None:
        """Write every record in one transaction; nothing is written on failure."""
        with self.lock:
            connection = self._require_connection()
            now = to_iso(utc_now())
            try:
                with connection:
                    connection.executemany(
                        """
                        INSERT INTO kv_store (key, value, updated_at)
                        VALUES (?, ?, ?)
                        ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                        """,
                        [(key, value, now) for key, value in records.items()],
                    )
            except sqlite3.Error as error:
                logger.error(f"Failed to write {sorted(records)}: {error}")
                raise StorageError(f"Unable to write {sorted(records)}: {error}") from error
