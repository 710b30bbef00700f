"""SQLite-backed key-value store for small persisted settings.

Synchronous ``sqlite3`` on purpose: callers need the write to be durable
before the call returns, and the lockout policy runs from sensor callbacks
that have no event loop.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator, Mapping
from contextlib import closing, contextmanager
from datetime import UTC, datetime
from pathlib import Path

_SCHEMA = (
    "CREATE TABLE IF NOT EXISTS kv ("
    "  namespace TEXT NOT NULL,"
    "  key TEXT NOT NULL,"
    "  value TEXT NOT NULL,"
    "  updated_at TEXT NOT NULL,"
    "  PRIMARY KEY (namespace, key)"
    ")"
)


class SQLiteKeyValueStore:
    def __init__(self, db_path: str | Path, namespace: str) -> None:
        if not namespace:
            raise ValueError("namespace must not be empty")
        self.db_path = str(db_path)
        self.namespace = namespace
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.execute(_SCHEMA)

    def get(self, key: str) -> str | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM kv WHERE namespace = ? AND key = ?",
                (self.namespace, key),
            ).fetchone()
        return None if row is None else str(row[0])

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def set_many(self, values: Mapping[str, str]) -> None:
        """Write all pairs in a single transaction."""
        now = datetime.now(UTC).isoformat()
        rows = [(self.namespace, key, value, now) for key, value in values.items()]
        with self._connect() as conn:
            conn.executemany(
                "INSERT INTO kv (namespace, key, value, updated_at) VALUES (?, ?, ?, ?) "
                "ON CONFLICT(namespace, key) DO UPDATE SET "
                "value = excluded.value, updated_at = excluded.updated_at",
                rows,
            )

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        # ``with conn`` commits on success and rolls back on error; closing() releases the handle.
        with closing(sqlite3.connect(self.db_path)) as conn, conn:
            yield conn


__all__ = ["SQLiteKeyValueStore"]
