"""Persistence: SQLite key-value store and the lockout policy built on it."""

from shakegate.persistence.kv_store import SQLiteKeyValueStore
from shakegate.persistence.lockout_store import LockoutStore

__all__ = ["LockoutStore", "SQLiteKeyValueStore"]
