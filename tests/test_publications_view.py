from datetime import datetime, timedelta

from homepage.exceptions import FetchError
from homepage.research_areas import (
    AUTONOMOUS_AGENTS,
    COMPUTER_ARCHITECTURE,
    CORE_TAXONOMY,
    EXTENDED_TAXONOMY,
    ML_SYSTEMS,
)
from homepage.sources.data import CacheInfo, MemoryStore, ScholarStats
from homepage.sources.publications import PublicationCache
from homepage.sources.scholar import ScholarStatsCache, StaticScholarStatsProvider
from homepage.views.publications import (
    NO_PUBLICATIONS_ERROR,
    PublicationsView,
    format_citations,
    load_publications_view,
    venue_badge,
)
from tests.fakes import CountingFetch, FakeClock, make_publication

T0 = datetime(2025, 1, 6, 12, 0, 0)
OWNER_NAMES = ["Vijay Janapa Reddi", "Vijay J. Reddi", "V. Reddi"]


def sample_publications():
    return [
        make_publication(
            "Energy-Efficient Cache Architectures for Mobile GPUs", "ISCA", 2024,
            authors=["Vijay Janapa Reddi", "Alice Smith", "Bob Jones"],
            areas=["Networking"],
        ),
        make_publication(
            "Federated Learning for TinyML Inference", "MLSys", 2023,
            authors=["vijay j. reddi", "Alice Smith", "Carol White"],
        ),
        make_publication(
            "Multi-Agent Planning for Autonomous Drones", "ICRA", 2023,
            authors=["V. Reddi", "Dan Brown"],
        ),
    ]


def make_view(publications=None, **kwargs):
    return PublicationsView(
        sample_publications() if publications is None else publications,
        taxonomy=CORE_TAXONOMY,
        owner_names=OWNER_NAMES,
        **kwargs,
    )


def test_view_relabels_copies_with_page_taxonomy() -> None:
    pubs = sample_publications()

    view = make_view(pubs)

    assert [p.areas for p in view.publications] == [
        [COMPUTER_ARCHITECTURE], [ML_SYSTEMS], [AUTONOMOUS_AGENTS],
    ]
    assert pubs[0].areas == ["Networking"]


def test_filter_by_area() -> None:
    view = make_view()

    assert len(view.filter_by_area("All")) == 3
    assert [p.venue for p in view.filter_by_area(COMPUTER_ARCHITECTURE)] == ["ISCA"]
    assert view.filter_by_area("Quantum") == []


def test_counts_include_empty_areas() -> None:
    view = make_view(sample_publications()[:1])

    assert view.counts_by_area() == {
        COMPUTER_ARCHITECTURE: 1,
        ML_SYSTEMS: 0,
        AUTONOMOUS_AGENTS: 0,
    }
    assert view.group_by_area()[ML_SYSTEMS] == []


def test_coauthors_exclude_owner_names_case_insensitively() -> None:
    view = make_view()

    assert view.coauthor_count() == 4
    assert view.top_coauthors(1) == [("Alice Smith", 2)]
    assert view.is_owner("VIJAY JANAPA REDDI")


def test_venue_and_year_stats() -> None:
    view = make_view()

    assert view.venue_stats() == [("ISCA", 1), ("MLSys", 1), ("ICRA", 1)]
    assert list(view.year_stats().items()) == [(2024, 1), (2023, 2)]


def test_venue_badge_is_stable() -> None:
    assert venue_badge("ISCA") == "bg-pink-100 text-pink-800"
    assert venue_badge("ISCA") == make_view().venue_badge("ISCA")


def test_summary() -> None:
    stats = ScholarStats(18105, 55, 145, 120, T0)
    info = CacheInfo(last_updated=T0, expires_at=T0 + timedelta(hours=24), is_expired=False)

    summary = make_view(stats=stats, cache_info=info).summary()

    assert summary["publications"] == 3
    assert summary["coauthors"] == 4
    assert summary["citations"] == 18105
    assert summary["citations_label"] == "18k+"
    assert summary["h_index"] == 55
    assert summary["i10_index"] == 145
    assert summary["last_updated"] == T0.isoformat()


def test_format_citations() -> None:
    assert format_citations(999) == "999"
    assert format_citations(18105) == "18k+"


def make_stats_cache():
    provider = StaticScholarStatsProvider(total_citations=18105, h_index=55, i10_index=145, total_publications=120)
    return ScholarStatsCache(provider, MemoryStore(), clock=FakeClock(T0))


def test_load_view_from_caches() -> None:
    publication_cache = PublicationCache(
        CountingFetch(payload=sample_publications()), MemoryStore(),
        taxonomy=EXTENDED_TAXONOMY, clock=FakeClock(T0),
    )

    view, error = load_publications_view(
        publication_cache=publication_cache,
        stats_cache=make_stats_cache(),
        taxonomy=CORE_TAXONOMY,
    )

    assert error is None
    assert len(view.publications) == 3
    assert view.stats.h_index == 55
    assert view.cache_info.last_updated == T0


def test_load_view_reports_missing_publications() -> None:
    publication_cache = PublicationCache(
        CountingFetch(error=FetchError("DBLP unreachable")), MemoryStore(),
        taxonomy=EXTENDED_TAXONOMY, clock=FakeClock(T0),
    )

    view, error = load_publications_view(
        force_refresh=True,
        publication_cache=publication_cache,
        stats_cache=make_stats_cache(),
        taxonomy=CORE_TAXONOMY,
    )

    assert error == NO_PUBLICATIONS_ERROR
    assert view.publications == []
