"""Key-value store port and its adapters.

The checklist session only needs ``get``/``set``/``remove`` by string key over
string values. Adapters raise ``StoreError`` for backend failures so callers
can decide to log and carry on.
"""

from __future__ import annotations

import sqlite3
from typing import Protocol

from interviewprep.storage.database import Database


class StoreError(Exception):
    """A durable store operation failed."""


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)

    def keys(self, prefix: str = "") -> list[str]:
        return sorted(k for k in self.data if k.startswith(prefix))


class SQLiteStore:
    """Store backed by the ``kv_store`` table of an initialized Database."""

    def __init__(self, db: Database):
        self.db = db

    def get(self, key: str) -> str | None:
        try:
            row = self.db.conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"read failed for {key!r}: {e}") from e
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        try:
            self.db.conn.execute(
                """INSERT INTO kv_store (key, value, updated_at)
                   VALUES (?, ?, datetime('now'))
                   ON CONFLICT(key) DO UPDATE SET
                       value = excluded.value,
                       updated_at = excluded.updated_at""",
                (key, value),
            )
            self.db.conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"write failed for {key!r}: {e}") from e

    def remove(self, key: str) -> None:
        try:
            self.db.conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            self.db.conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"delete failed for {key!r}: {e}") from e

    def keys(self, prefix: str = "") -> list[str]:
        """Stored keys starting with ``prefix``, sorted."""
        try:
            rows = self.db.conn.execute(
                "SELECT key FROM kv_store WHERE substr(key, 1, ?) = ? ORDER BY key",
                (len(prefix), prefix),
            ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"key scan failed: {e}") from e
        return [r["key"] for r in rows]
