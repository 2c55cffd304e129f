"""Database connection management for the local cache store."""

import sqlite3
from pathlib import Path
from typing import Optional

from config.settings import settings


def get_db_connection(db_path: Optional[Path] = None) -> sqlite3.Connection:
    """
    Get a connection to the SQLite database backing the key-value store.

    Args:
        db_path: Optional custom database path. Uses settings.database_path if not provided.

    Returns:
        SQLite connection with Row factory enabled.
    """
    if db_path is None:
        db_path = settings.database_path

    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    return conn


def init_kv_table(conn: sqlite3.Connection) -> None:
    """Create the key-value table if it doesn't exist."""
    conn.execute("""
        CREATE TABLE IF NOT EXISTS kv_store (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    conn.commit()
