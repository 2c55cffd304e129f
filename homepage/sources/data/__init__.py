"""Data storage module for cached publications and metrics."""

from .connection import get_db_connection, init_kv_table
from .kv_store import KeyValueStore, MemoryStore, SQLiteStore
from .models import (
    PUBLICATION_TYPES,
    CacheEntry,
    CacheInfo,
    Publication,
    ScholarStats,
    Update,
)
from .ttl_cache import TTLCache

__all__ = [
    "get_db_connection",
    "init_kv_table",
    "KeyValueStore",
    "MemoryStore",
    "SQLiteStore",
    "PUBLICATION_TYPES",
    "CacheEntry",
    "CacheInfo",
    "Publication",
    "ScholarStats",
    "Update",
    "TTLCache",
]
