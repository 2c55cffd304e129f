"""Key-value stores holding serialized cache entries."""

from pathlib import Path
from typing import Dict, Optional, Protocol

from .connection import get_db_connection, init_kv_table


class KeyValueStore(Protocol):
    """String key-value storage shared by all caches. Last writer wins."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """Process-local store, used for tests and one-off runs."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class SQLiteStore:
    """Store persisted in a single SQLite table."""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = db_path
        conn = get_db_connection(self.db_path)
        try:
            init_kv_table(conn)
        finally:
            conn.close()

    def get(self, key: str) -> Optional[str]:
        conn = get_db_connection(self.db_path)
        try:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        finally:
            conn.close()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        conn = get_db_connection(self.db_path)
        try:
            conn.execute("""
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
            """, (key, value))
            conn.commit()
        finally:
            conn.close()

    def remove(self, key: str) -> None:
        conn = get_db_connection(self.db_path)
        try:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()
