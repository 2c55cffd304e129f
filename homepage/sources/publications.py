"""
Publication list cache backed by DBLP.

Publications are fetched from DBLP, classified with the ingestion taxonomy
and kept in the local key-value store for a fixed time-to-live. When DBLP
cannot be reached the last stored list is served, even if expired.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from config.settings import settings
from homepage.research_areas import AreaTaxonomy, get_taxonomy

from .classifier import classify_publications
from .dblp import DBLPClient
from .data import CacheInfo, KeyValueStore, Publication, SQLiteStore, TTLCache

logger = logging.getLogger(__name__)

CACHE_KEY = "dblp_publications_cache"
CACHE_DURATION = timedelta(hours=24)


def _serialize(publications: List[Publication]) -> List[Dict]:
    return [pub.to_dict() for pub in publications]


def _deserialize(data: List[Dict]) -> List[Publication]:
    return [Publication.from_dict(item) for item in data]


class PublicationCache:
    """TTL cache of the classified publication list."""

    def __init__(
        self,
        fetch_records: Callable[[], List[Publication]],
        store: KeyValueStore,
        taxonomy: Optional[AreaTaxonomy] = None,
        ttl: timedelta = CACHE_DURATION,
        clock: Callable[[], datetime] = datetime.now,
        key: str = CACHE_KEY,
    ):
        self.fetch_records = fetch_records
        self.taxonomy = taxonomy or get_taxonomy(settings.ingestion_taxonomy)
        self._cache: TTLCache[List[Publication]] = TTLCache(
            key=key,
            fetch=self._fetch_classified,
            store=store,
            ttl=ttl,
            default=list,
            serialize=_serialize,
            deserialize=_deserialize,
            clock=clock,
        )

    def _fetch_classified(self) -> List[Publication]:
        records = [pub for pub in self.fetch_records() if pub.title]
        publications = classify_publications(records, self.taxonomy)
        logger.info(
            f"Classified {len(publications)} publications with taxonomy '{self.taxonomy.name}'"
        )
        return publications

    def get_cached_publications(self) -> List[Publication]:
        """Cached publications, fetched when missing or expired. Empty means no data."""
        return self._cache.get()

    def refresh_cache(self) -> List[Publication]:
        """Clear the stored list and fetch fresh data."""
        return self._cache.refresh()

    def get_cache_info(self) -> CacheInfo:
        return self._cache.info()

    def clear_cache(self) -> None:
        self._cache.clear()


_default_cache: Optional[PublicationCache] = None


def get_publication_cache() -> PublicationCache:
    """Default cache instance configured from settings."""
    global _default_cache
    if _default_cache is None:
        client = DBLPClient()
        _default_cache = PublicationCache(
            fetch_records=client.fetch_records,
            store=SQLiteStore(settings.database_path),
            ttl=timedelta(hours=settings.cache_ttl_hours),
        )
    return _default_cache


def get_cached_publications() -> List[Publication]:
    return get_publication_cache().get_cached_publications()


def refresh_cache() -> List[Publication]:
    return get_publication_cache().refresh_cache()


def get_cache_info() -> CacheInfo:
    return get_publication_cache().get_cache_info()


def clear_cache() -> None:
    get_publication_cache().clear_cache()
