"""
Google Scholar citation metrics.

Google Scholar has no public API. The live provider downloads the public
profile page, directly or through configured proxy services, and reads the
citation table. The static provider returns manually maintained numbers.
Which one runs, and whether the static numbers back up the live scrape,
is decided by configuration in :func:`build_stats_provider`.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Protocol
from urllib.parse import quote

import requests
from bs4 import BeautifulSoup

from config.settings import Settings, settings
from homepage.exceptions import ConfigurationError, FetchError, MalformedResponseError

from .data import CacheInfo, KeyValueStore, ScholarStats, SQLiteStore, TTLCache

logger = logging.getLogger(__name__)

SCHOLAR_PROFILE_URL = (
    "https://scholar.google.com/citations?hl=en&user={user_id}&view_op=list_works&sortby=pubdate"
)
SCHOLAR_CACHE_KEY = "google_scholar_cache"
SCHOLAR_CACHE_DURATION = timedelta(hours=24)

# Row labels of the profile's citation table, mapped to ScholarStats fields
STAT_LABELS = {
    "citations": "total_citations",
    "h-index": "h_index",
    "i10-index": "i10_index",
}


class StatsProvider(Protocol):
    """Source of citation metrics."""

    def fetch_stats(self) -> ScholarStats: ...


def parse_scholar_html(html: str) -> Dict[str, int]:
    """
    Extract citation metrics from a Google Scholar profile page.

    Reads the first value column ("All") of the citation table.

    Returns:
        Dict with any of total_citations, h_index, i10_index that were found
    """
    soup = BeautifulSoup(html, "html.parser")
    stats = {}

    for row in soup.find_all("tr"):
        label_cell = row.find("td")
        if label_cell is None:
            continue
        field = STAT_LABELS.get(label_cell.get_text(strip=True).lower())
        if field is None:
            continue

        value_cell = row.select_one("td.gsc_rsb_std")
        if value_cell is None:
            continue
        try:
            stats[field] = int(value_cell.get_text(strip=True).replace(",", ""))
        except ValueError:
            logger.debug(f"Non-numeric value for {field}: {value_cell.get_text(strip=True)}")

    return stats


class LiveScholarStatsProvider:
    """Scrapes the public profile page."""

    DEFAULT_HEADERS = {
        "User-Agent": (
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
        ),
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
    }

    def __init__(
        self,
        user_id: Optional[str] = None,
        proxy_urls: Optional[List[str]] = None,
        partial_defaults: Optional[Dict[str, int]] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[int] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.user_id = user_id or settings.scholar_user_id
        self.proxy_urls = settings.scholar_proxy_urls if proxy_urls is None else proxy_urls
        self.partial_defaults = partial_defaults or {
            "total_citations": settings.scholar_fallback_citations,
            "i10_index": settings.scholar_fallback_i10_index,
            "total_publications": settings.scholar_fallback_publications,
        }
        self.timeout = timeout or settings.request_timeout
        self.clock = clock
        if session is None:
            session = requests.Session()
            session.headers.update(self.DEFAULT_HEADERS)
        self.session = session

    @property
    def profile_url(self) -> str:
        return SCHOLAR_PROFILE_URL.format(user_id=self.user_id)

    def candidate_urls(self) -> List[str]:
        """Proxy URLs in configured order, then the profile page itself."""
        encoded = quote(self.profile_url, safe="")
        urls = [template.replace("{url}", encoded) for template in self.proxy_urls]
        urls.append(self.profile_url)
        return urls

    def fetch_stats(self) -> ScholarStats:
        errors = []

        for url in self.candidate_urls():
            logger.info(f"Trying Google Scholar source: {url.split('?')[0]}")
            try:
                html = self._fetch_html(url)
            except FetchError as e:
                errors.append(e.message)
                continue

            parsed = parse_scholar_html(html)
            if "h_index" not in parsed:
                errors.append(f"No h-index found in response from {url.split('?')[0]}")
                continue

            logger.info(f"Parsed Google Scholar stats: {parsed}")
            return ScholarStats(
                total_citations=parsed.get("total_citations", self.partial_defaults["total_citations"]),
                h_index=parsed["h_index"],
                i10_index=parsed.get("i10_index", self.partial_defaults["i10_index"]),
                total_publications=self.partial_defaults["total_publications"],
                last_updated=self.clock(),
            )

        raise MalformedResponseError(
            "Could not extract Google Scholar stats: " + "; ".join(errors)
        )

    def _fetch_html(self, url: str) -> str:
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            raise FetchError(f"Timeout after {self.timeout}s") from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise FetchError(f"HTTP {status}", status_code=status) from e
        except requests.exceptions.RequestException as e:
            raise FetchError(str(e)) from e

        html = response.text
        # JSON-wrapping proxies return {"contents": "<html>..."}
        if "application/json" in response.headers.get("Content-Type", ""):
            try:
                data = response.json()
            except ValueError:
                data = None
            if isinstance(data, dict):
                html = data.get("contents") or data.get("data") or ""

        if not isinstance(html, str) or "gsc_rsb_std" not in html:
            raise FetchError("Response does not contain a citation table")
        return html


class StaticScholarStatsProvider:
    """Manually maintained numbers from the public profile."""

    def __init__(
        self,
        total_citations: Optional[int] = None,
        h_index: Optional[int] = None,
        i10_index: Optional[int] = None,
        total_publications: Optional[int] = None,
        as_of: Optional[datetime] = None,
    ):
        self.total_citations = settings.scholar_fallback_citations if total_citations is None else total_citations
        self.h_index = settings.scholar_fallback_h_index if h_index is None else h_index
        self.i10_index = settings.scholar_fallback_i10_index if i10_index is None else i10_index
        self.total_publications = (
            settings.scholar_fallback_publications if total_publications is None else total_publications
        )
        if as_of is None:
            as_of = datetime.combine(settings.scholar_fallback_as_of, datetime.min.time())
        self.as_of = as_of

    def fetch_stats(self) -> ScholarStats:
        return ScholarStats(
            total_citations=self.total_citations,
            h_index=self.h_index,
            i10_index=self.i10_index,
            total_publications=self.total_publications,
            last_updated=self.as_of,
        )


class FallbackStatsProvider:
    """Tries the primary provider and falls back to the secondary one on failure."""

    def __init__(self, primary: StatsProvider, fallback: StatsProvider):
        self.primary = primary
        self.fallback = fallback

    def fetch_stats(self) -> ScholarStats:
        try:
            return self.primary.fetch_stats()
        except (FetchError, MalformedResponseError) as e:
            logger.warning(
                f"{self.primary.__class__.__name__} failed ({e}), "
                f"using {self.fallback.__class__.__name__}"
            )
            return self.fallback.fetch_stats()


def build_stats_provider(config: Optional[Settings] = None) -> StatsProvider:
    """Select the stats provider described by the settings."""
    config = config or settings
    kind = config.scholar_stats_provider.lower()

    static = StaticScholarStatsProvider(
        total_citations=config.scholar_fallback_citations,
        h_index=config.scholar_fallback_h_index,
        i10_index=config.scholar_fallback_i10_index,
        total_publications=config.scholar_fallback_publications,
        as_of=datetime.combine(config.scholar_fallback_as_of, datetime.min.time()),
    )
    if kind == "static":
        return static

    if kind == "live":
        live = LiveScholarStatsProvider(
            user_id=config.scholar_user_id,
            proxy_urls=config.scholar_proxy_urls,
            partial_defaults={
                "total_citations": config.scholar_fallback_citations,
                "i10_index": config.scholar_fallback_i10_index,
                "total_publications": config.scholar_fallback_publications,
            },
            timeout=config.request_timeout,
        )
        if config.scholar_fallback_enabled:
            return FallbackStatsProvider(primary=live, fallback=static)
        return live

    raise ConfigurationError(f"Unknown scholar stats provider '{config.scholar_stats_provider}'")


class ScholarStatsCache:
    """TTL cache of the citation metrics."""

    def __init__(
        self,
        provider: StatsProvider,
        store: KeyValueStore,
        ttl: timedelta = SCHOLAR_CACHE_DURATION,
        clock: Callable[[], datetime] = datetime.now,
        key: str = SCHOLAR_CACHE_KEY,
    ):
        self.provider = provider
        self._cache: TTLCache[ScholarStats] = TTLCache(
            key=key,
            fetch=provider.fetch_stats,
            store=store,
            ttl=ttl,
            default=ScholarStats.empty,
            serialize=lambda stats: stats.to_dict(),
            deserialize=ScholarStats.from_dict,
            clock=clock,
        )

    def get_cached_scholar_stats(self) -> ScholarStats:
        return self._cache.get()

    def refresh_scholar_cache(self) -> ScholarStats:
        return self._cache.refresh()

    def get_scholar_cache_info(self) -> CacheInfo:
        return self._cache.info()

    def clear_scholar_cache(self) -> None:
        self._cache.clear()


_default_cache: Optional[ScholarStatsCache] = None


def get_scholar_stats_cache() -> ScholarStatsCache:
    """Default cache instance configured from settings."""
    global _default_cache
    if _default_cache is None:
        _default_cache = ScholarStatsCache(
            provider=build_stats_provider(),
            store=SQLiteStore(settings.database_path),
            ttl=timedelta(hours=settings.cache_ttl_hours),
        )
    return _default_cache


def get_cached_scholar_stats() -> ScholarStats:
    return get_scholar_stats_cache().get_cached_scholar_stats()


def refresh_scholar_cache() -> ScholarStats:
    return get_scholar_stats_cache().refresh_scholar_cache()


def get_scholar_cache_info() -> CacheInfo:
    return get_scholar_stats_cache().get_scholar_cache_info()


def clear_scholar_cache() -> None:
    get_scholar_stats_cache().clear_scholar_cache()
