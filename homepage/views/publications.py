"""
Publications page data.

Combines the cached publication list with the citation metrics and cache
status into the figures shown on the page: per-area counts and filters,
co-author statistics and venue badges.
"""

import logging
from collections import Counter
from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple

from config.settings import settings
from homepage.research_areas import AreaTaxonomy, get_taxonomy
from homepage.sources import publications as publication_source
from homepage.sources import scholar as scholar_source
from homepage.sources.classifier import classify
from homepage.sources.data import CacheInfo, Publication, ScholarStats
from homepage.sources.publications import PublicationCache
from homepage.sources.scholar import ScholarStatsCache

logger = logging.getLogger(__name__)

ALL_AREAS = "All"
NO_PUBLICATIONS_ERROR = "No publications available"

# Tailwind classes for venue badges
VENUE_BADGE_COLORS = [
    "bg-red-100 text-red-800",
    "bg-blue-100 text-blue-800",
    "bg-green-100 text-green-800",
    "bg-purple-100 text-purple-800",
    "bg-yellow-100 text-yellow-800",
    "bg-indigo-100 text-indigo-800",
    "bg-pink-100 text-pink-800",
    "bg-cyan-100 text-cyan-800",
    "bg-orange-100 text-orange-800",
]


def venue_hash(venue: str) -> int:
    """Stable 32-bit string hash (h = 31 * h + c), independent of PYTHONHASHSEED."""
    h = 0
    for char in venue:
        h = (31 * h + ord(char)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


def venue_badge(venue: str) -> str:
    return VENUE_BADGE_COLORS[abs(venue_hash(venue)) % len(VENUE_BADGE_COLORS)]


def format_citations(total_citations: int) -> str:
    """Compact citation figure, e.g. 18105 -> '18k+'."""
    if total_citations < 1000:
        return str(total_citations)
    return f"{total_citations // 1000}k+"


class PublicationsView:
    """Read-only view over classified publications."""

    def __init__(
        self,
        publications: List[Publication],
        taxonomy: Optional[AreaTaxonomy] = None,
        owner_names: Optional[List[str]] = None,
        stats: Optional[ScholarStats] = None,
        cache_info: Optional[CacheInfo] = None,
    ):
        self.taxonomy = taxonomy or get_taxonomy(settings.page_taxonomy)
        self.owner_names = owner_names if owner_names is not None else settings.owner_names
        self._owner_keys = {name.lower() for name in self.owner_names}
        self.stats = stats
        self.cache_info = cache_info or CacheInfo.missing()
        # Copies keep the cached objects' ingestion labels intact
        self.publications = [
            replace(pub, areas=classify(pub, self.taxonomy)) for pub in publications
        ]

    @property
    def areas(self) -> List[str]:
        return self.taxonomy.areas

    def is_owner(self, author: str) -> bool:
        return author.lower() in self._owner_keys

    def filter_by_area(self, area: str = ALL_AREAS) -> List[Publication]:
        if area == ALL_AREAS:
            return list(self.publications)
        return [pub for pub in self.publications if area in pub.areas]

    def counts_by_area(self) -> Dict[str, int]:
        """Publication count per area, including areas with no publications."""
        counts = {area: 0 for area in self.areas}
        for pub in self.publications:
            for area in pub.areas:
                counts[area] = counts.get(area, 0) + 1
        return counts

    def group_by_area(self) -> Dict[str, List[Publication]]:
        return {area: self.filter_by_area(area) for area in self.areas}

    def _coauthor_counter(self) -> Counter:
        counter = Counter()
        for pub in self.publications:
            for author in set(pub.authors):
                if not self.is_owner(author):
                    counter[author] += 1
        return counter

    def coauthor_count(self) -> int:
        """Number of distinct co-authors, excluding the owner's name variants."""
        return len(self._coauthor_counter())

    def top_coauthors(self, limit: int = 10) -> List[Tuple[str, int]]:
        return self._coauthor_counter().most_common(limit)

    def venue_stats(self) -> List[Tuple[str, int]]:
        """Venues by number of publications, most frequent first."""
        return Counter(pub.venue for pub in self.publications).most_common()

    def year_stats(self) -> Dict[int, int]:
        """Publications per year, newest year first."""
        counts = Counter(pub.year for pub in self.publications)
        return dict(sorted(counts.items(), reverse=True))

    def venue_badge(self, venue: str) -> str:
        return venue_badge(venue)

    def summary(self) -> Dict[str, Any]:
        stats = self.stats
        return {
            "publications": len(self.publications),
            "coauthors": self.coauthor_count(),
            "citations": stats.total_citations if stats else None,
            "citations_label": format_citations(stats.total_citations) if stats else None,
            "h_index": stats.h_index if stats else None,
            "i10_index": stats.i10_index if stats else None,
            "last_updated": (
                self.cache_info.last_updated.isoformat() if self.cache_info.last_updated else None
            ),
        }

    def to_dict(self, area: str = ALL_AREAS) -> Dict[str, Any]:
        return {
            "taxonomy": self.taxonomy.name,
            "areas": self.areas,
            "counts": self.counts_by_area(),
            "summary": self.summary(),
            "publications": [
                dict(pub.to_dict(), badge=venue_badge(pub.venue))
                for pub in self.filter_by_area(area)
            ],
        }


def load_publications_view(
    force_refresh: bool = False,
    publication_cache: Optional[PublicationCache] = None,
    stats_cache: Optional[ScholarStatsCache] = None,
    taxonomy: Optional[AreaTaxonomy] = None,
) -> Tuple[PublicationsView, Optional[str]]:
    """
    Build the publications page view.

    Args:
        force_refresh: Refresh the publication cache instead of reading it
        publication_cache: Cache to read; defaults to the configured one
        stats_cache: Citation metrics cache; defaults to the configured one
        taxonomy: Page taxonomy; defaults to settings.page_taxonomy

    Returns:
        Tuple of (view, error message or None)
    """
    publication_cache = publication_cache or publication_source.get_publication_cache()
    stats_cache = stats_cache or scholar_source.get_scholar_stats_cache()

    if force_refresh:
        publications = publication_cache.refresh_cache()
    else:
        publications = publication_cache.get_cached_publications()
    stats = stats_cache.get_cached_scholar_stats()

    view = PublicationsView(
        publications,
        taxonomy=taxonomy,
        stats=stats,
        cache_info=publication_cache.get_cache_info(),
    )
    logger.info(f"Publications view: {len(view.publications)} publications")

    if not view.publications:
        return view, NO_PUBLICATIONS_ERROR
    return view, None
