import json
from datetime import datetime

from homepage.exceptions import FetchError
from homepage.research_areas import AUTONOMOUS_AGENTS, EXTENDED_TAXONOMY, NETWORKING
from homepage.sources.data import MemoryStore
from homepage.sources.publications import CACHE_KEY, PublicationCache
from tests.fakes import CountingFetch, FakeClock, make_publication

T0 = datetime(2024, 12, 19, 9, 0, 0)


def test_fetch_classifies_with_ingestion_taxonomy() -> None:
    fetch = CountingFetch(payload=[
        make_publication("Multi-Agent Planning for Autonomous Drones", "ICRA", 2024),
        make_publication("Congestion Control for Datacenter Networks", "SIGCOMM", 2022),
    ])
    cache = PublicationCache(fetch, MemoryStore(), taxonomy=EXTENDED_TAXONOMY, clock=FakeClock(T0))

    pubs = cache.get_cached_publications()

    assert AUTONOMOUS_AGENTS in pubs[0].areas
    assert NETWORKING in pubs[1].areas


def test_publications_stored_under_fixed_key() -> None:
    store = MemoryStore()
    fetch = CountingFetch(payload=[make_publication("Quantum Bits", "ASPLOS", 2020, authors=["A"])])
    cache = PublicationCache(fetch, store, taxonomy=EXTENDED_TAXONOMY, clock=FakeClock(T0))

    cache.get_cached_publications()

    document = json.loads(store.get(CACHE_KEY))
    assert CACHE_KEY == "dblp_publications_cache"
    assert document["payload"][0]["title"] == "Quantum Bits"
    assert document["payload"][0]["areas"] == ["Computer Architecture"]


def test_cached_publications_survive_reload() -> None:
    store = MemoryStore()
    fetch = CountingFetch(payload=[make_publication("Quantum Bits", "ASPLOS", 2020)])
    PublicationCache(fetch, store, taxonomy=EXTENDED_TAXONOMY, clock=FakeClock(T0)).get_cached_publications()

    reloaded = PublicationCache(fetch, store, taxonomy=EXTENDED_TAXONOMY, clock=FakeClock(T0))
    pubs = reloaded.get_cached_publications()

    assert fetch.calls == 1
    assert pubs[0].title == "Quantum Bits"
    assert pubs[0].year == 2020


def test_titleless_records_are_dropped() -> None:
    fetch = CountingFetch(payload=[
        make_publication("", "ISCA", 2023),
        make_publication("Quantum Bits", "ASPLOS", 2020),
    ])
    cache = PublicationCache(fetch, MemoryStore(), taxonomy=EXTENDED_TAXONOMY, clock=FakeClock(T0))

    pubs = cache.get_cached_publications()

    assert [p.title for p in pubs] == ["Quantum Bits"]


def test_empty_list_when_index_unreachable_and_nothing_cached() -> None:
    fetch = CountingFetch(error=FetchError("DBLP returned HTTP 503", status_code=503))
    cache = PublicationCache(fetch, MemoryStore(), taxonomy=EXTENDED_TAXONOMY, clock=FakeClock(T0))

    assert cache.get_cached_publications() == []
    assert cache.get_cache_info().last_updated is None


def test_refresh_and_clear() -> None:
    fetch = CountingFetch(payload=[make_publication("Quantum Bits", "ASPLOS", 2020)])
    clock = FakeClock(T0)
    cache = PublicationCache(fetch, MemoryStore(), taxonomy=EXTENDED_TAXONOMY, clock=clock)
    cache.get_cached_publications()

    clock.advance(hours=1)
    cache.refresh_cache()
    assert fetch.calls == 2
    assert cache.get_cache_info().last_updated == clock.now

    cache.clear_cache()
    assert cache.get_cache_info().is_expired is True
