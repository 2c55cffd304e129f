"""
Generic time-to-live cache over a key-value store.

One slot per storage key holds a JSON document::

    {"payload": ..., "last_updated": "<iso>", "expires_at": "<iso>"}

A fresh slot is served without fetching. A missing or expired slot triggers
one fetch. When the fetch fails the previous payload is served even if
expired, and only when nothing was ever stored does the cache fall back to
its default value.
"""

import json
import logging
import threading
from datetime import datetime, timedelta
from typing import Any, Callable, Generic, Optional, TypeVar

from homepage.exceptions import CacheEntryError

from .kv_store import KeyValueStore
from .models import CacheEntry, CacheInfo

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _identity(value: Any) -> Any:
    return value


class TTLCache(Generic[T]):
    """Cache of a single value of type T fetched on demand."""

    def __init__(
        self,
        key: str,
        fetch: Callable[[], T],
        store: KeyValueStore,
        ttl: timedelta,
        default: Callable[[], T],
        serialize: Callable[[T], Any] = _identity,
        deserialize: Callable[[Any], T] = _identity,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.key = key
        self.fetch = fetch
        self.store = store
        self.ttl = ttl
        self.default = default
        self.serialize = serialize
        self.deserialize = deserialize
        self.clock = clock
        # Concurrent callers share one in-flight fetch
        self._lock = threading.Lock()

    def get(self) -> T:
        """Return the cached payload, fetching when missing or expired."""
        with self._lock:
            entry = self._read_entry()
            if entry is not None and not entry.is_expired(self.clock()):
                logger.info(f"Using cached data for {self.key}")
                return entry.payload

            logger.info(f"Fetching fresh data for {self.key}")
            return self._fetch_and_store(previous=entry)

    def refresh(self) -> T:
        """Drop the stored entry and fetch unconditionally."""
        with self._lock:
            previous = self._read_entry()
            self._remove_entry()
            logger.info(f"Cache cleared for {self.key}, forcing refresh")
            return self._fetch_and_store(previous=previous, restore_on_failure=True)

    def info(self) -> CacheInfo:
        entry = self._read_entry()
        if entry is None:
            return CacheInfo.missing()
        return CacheInfo(
            last_updated=entry.last_updated,
            expires_at=entry.expires_at,
            is_expired=entry.is_expired(self.clock()),
        )

    def clear(self) -> None:
        self._remove_entry()

    def _fetch_and_store(
        self,
        previous: Optional[CacheEntry[T]],
        restore_on_failure: bool = False,
    ) -> T:
        try:
            payload = self.fetch()
        except Exception as e:
            logger.error(f"Fetch failed for {self.key}: {e}")
            if previous is not None:
                logger.warning(
                    f"Using stale cached data for {self.key} "
                    f"(last updated {previous.last_updated.isoformat()})"
                )
                if restore_on_failure:
                    self._write_entry(previous)
                return previous.payload
            logger.warning(f"No cached data for {self.key}, returning default")
            return self.default()

        now = self.clock()
        self._write_entry(CacheEntry(payload=payload, last_updated=now, expires_at=now + self.ttl))
        return payload

    def _read_entry(self) -> Optional[CacheEntry[T]]:
        try:
            raw = self.store.get(self.key)
        except Exception:
            logger.exception(f"Could not read cache entry {self.key}")
            return None

        if raw is None:
            return None

        try:
            return self._decode(raw)
        except CacheEntryError as e:
            logger.warning(f"Ignoring corrupted cache entry {self.key}: {e}")
            return None

    def _write_entry(self, entry: CacheEntry[T]) -> None:
        document = {
            "payload": self.serialize(entry.payload),
            "last_updated": entry.last_updated.isoformat(),
            "expires_at": entry.expires_at.isoformat(),
        }
        try:
            self.store.set(self.key, json.dumps(document, ensure_ascii=False))
        except Exception:
            logger.exception(f"Could not write cache entry {self.key}")

    def _remove_entry(self) -> None:
        try:
            self.store.remove(self.key)
        except Exception:
            logger.exception(f"Could not remove cache entry {self.key}")

    def _parse_timestamp(self, value: str) -> datetime:
        """Parse an ISO timestamp into the clock's timezone convention."""
        stamp = datetime.fromisoformat(value)
        now = self.clock()
        if stamp.tzinfo is not None and now.tzinfo is None:
            # Aware stored time, naive local clock
            return stamp.astimezone().replace(tzinfo=None)
        if stamp.tzinfo is None and now.tzinfo is not None:
            return stamp.replace(tzinfo=now.tzinfo)
        return stamp

    def _decode(self, raw: str) -> CacheEntry[T]:
        try:
            document = json.loads(raw)
            return CacheEntry(
                payload=self.deserialize(document["payload"]),
                last_updated=self._parse_timestamp(document["last_updated"]),
                expires_at=self._parse_timestamp(document["expires_at"]),
            )
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise CacheEntryError(str(e)) from e
