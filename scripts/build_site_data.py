"""
Inspect the homepage caches and export the front-end data files.

Examples:
    python scripts/build_site_data.py publications --area "Autonomous Agents"
    python scripts/build_site_data.py stats --refresh
    python scripts/build_site_data.py export public/data --template rainbow
"""

import argparse
import logging
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config.settings import settings
from homepage.exceptions import HomepageError
from homepage.research_areas import TAXONOMIES
from homepage.site_data import export_site_data
from homepage.sources import publications, scholar
from homepage.views.publications import ALL_AREAS, load_publications_view
from homepage.views.wordcloud import DEFAULT_TEMPLATE, TEMPLATES


def show_publications(refresh: bool, area: str):
    view, error = load_publications_view(force_refresh=refresh)
    if error:
        print(error)
        return

    summary = view.summary()
    print(f"{summary['publications']} publications, {summary['coauthors']} co-authors")
    print(f"Taxonomy: {view.taxonomy.name}")
    for name, count in view.counts_by_area().items():
        print(f"  {name}: {count}")

    print(f"\n{'='*60}")
    for pub in view.filter_by_area(area):
        print(f"[{pub.year}] {pub.title}")
        print(f"    {pub.venue} | {', '.join(pub.areas)}")


def show_stats(refresh: bool):
    stats = scholar.refresh_scholar_cache() if refresh else scholar.get_cached_scholar_stats()
    print(f"Citations:    {stats.total_citations}")
    print(f"h-index:      {stats.h_index}")
    print(f"i10-index:    {stats.i10_index}")
    print(f"Publications: {stats.total_publications}")
    print(f"Last updated: {stats.last_updated.isoformat()}")


def show_cache_info():
    for label, info in (
        (publications.CACHE_KEY, publications.get_cache_info()),
        (scholar.SCHOLAR_CACHE_KEY, scholar.get_scholar_cache_info()),
    ):
        if info.last_updated is None:
            print(f"{label}: empty")
            continue
        state = "expired" if info.is_expired else "fresh"
        print(
            f"{label}: {state}, updated {info.last_updated.isoformat()}, "
            f"expires {info.expires_at.isoformat()}"
        )


def clear_caches():
    publications.clear_cache()
    scholar.clear_scholar_cache()
    print("Cleared publication and scholar caches")


def show_taxonomies():
    for name, taxonomy in TAXONOMIES.items():
        markers = []
        if name == settings.page_taxonomy:
            markers.append("page")
        if name == settings.ingestion_taxonomy:
            markers.append("ingestion")
        suffix = f" ({', '.join(markers)})" if markers else ""
        print(f"{name}{suffix}: default '{taxonomy.default_area}'")
        for area in taxonomy.areas:
            print(f"  {area}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Manage cached publications and citation metrics for the homepage"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    pubs = subparsers.add_parser("publications", help="List classified publications")
    pubs.add_argument("--refresh", action="store_true", help="Refetch from DBLP first")
    pubs.add_argument("--area", default=ALL_AREAS, help="Only show this research area")

    stats = subparsers.add_parser("stats", help="Show Google Scholar metrics")
    stats.add_argument("--refresh", action="store_true", help="Refetch from Google Scholar first")

    subparsers.add_parser("cache-info", help="Show cache timestamps")
    subparsers.add_parser("clear", help="Clear both caches")
    subparsers.add_parser("taxonomies", help="List research area taxonomies")

    export = subparsers.add_parser("export", help="Write front-end data files")
    export.add_argument("out_dir", help="Output directory")
    export.add_argument(
        "--template",
        default=DEFAULT_TEMPLATE,
        choices=sorted(TEMPLATES),
        help=f"Word cloud template (default: {DEFAULT_TEMPLATE})",
    )
    export.add_argument("--refresh", action="store_true", help="Refetch publications first")

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "publications":
            show_publications(args.refresh, args.area)
        elif args.command == "stats":
            show_stats(args.refresh)
        elif args.command == "cache-info":
            show_cache_info()
        elif args.command == "clear":
            clear_caches()
        elif args.command == "taxonomies":
            show_taxonomies()
        elif args.command == "export":
            written = export_site_data(args.out_dir, template=args.template, refresh=args.refresh)
            for name, path in written.items():
                print(f"  {name}: {path}")
    except HomepageError as e:
        print(f"Error: {e.message}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
