"""
Export the data files consumed by the static front end.

Writes into one output directory:

    publications.json   classified publications, per-area counts, summary
    scholar_stats.json  citation metrics and cache status
    wordcloud.json      weighted title words for the selected template
    updates.json        news feed, newest first
    flow_diagram.html   standalone Sankey of periods into research areas
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from homepage.sources.data import CacheInfo
from homepage.sources.publications import PublicationCache
from homepage.sources.scholar import ScholarStatsCache, get_scholar_stats_cache
from homepage.sources.updates import load_updates, updates_to_dicts
from homepage.views.flow_diagram import build_flow_data, write_flow_diagram
from homepage.views.publications import load_publications_view
from homepage.views.wordcloud import DEFAULT_TEMPLATE, build_word_cloud

logger = logging.getLogger(__name__)


def _cache_info_dict(info: CacheInfo) -> Dict[str, Any]:
    return {
        "last_updated": info.last_updated.isoformat() if info.last_updated else None,
        "expires_at": info.expires_at.isoformat() if info.expires_at else None,
        "is_expired": info.is_expired,
    }


def _write_json(path: Path, data: Any) -> Path:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    logger.info(f"Wrote {path}")
    return path


def export_site_data(
    out_dir: Union[str, Path],
    template: str = DEFAULT_TEMPLATE,
    refresh: bool = False,
    publication_cache: Optional[PublicationCache] = None,
    stats_cache: Optional[ScholarStatsCache] = None,
    updates_source: Optional[Union[str, Path]] = None,
    current_year: Optional[int] = None,
) -> Dict[str, Path]:
    """
    Write every front-end data file to out_dir.

    Args:
        out_dir: Target directory, created if missing
        template: Word cloud template name
        refresh: Refresh the publication cache before exporting
        publication_cache: Publication cache; defaults to the configured one
        stats_cache: Citation metrics cache; defaults to the configured one
        updates_source: Updates YAML path or URL; defaults to settings.updates_path
        current_year: Reference year for the flow diagram periods

    Returns:
        Dict of file name to written path
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    stats_cache = stats_cache or get_scholar_stats_cache()

    view, error = load_publications_view(
        force_refresh=refresh,
        publication_cache=publication_cache,
        stats_cache=stats_cache,
    )
    if error:
        logger.warning(f"Exporting without publications: {error}")

    written = {}

    publications_data = view.to_dict()
    publications_data["cache"] = _cache_info_dict(view.cache_info)
    publications_data["error"] = error
    written["publications.json"] = _write_json(out_dir / "publications.json", publications_data)

    stats_data = view.stats.to_dict() if view.stats else None
    written["scholar_stats.json"] = _write_json(
        out_dir / "scholar_stats.json",
        {
            "stats": stats_data,
            "cache": _cache_info_dict(stats_cache.get_scholar_cache_info()),
        },
    )

    written["wordcloud.json"] = _write_json(
        out_dir / "wordcloud.json",
        build_word_cloud(view.publications, template=template),
    )

    updates, updates_error = load_updates(updates_source)
    written["updates.json"] = _write_json(
        out_dir / "updates.json",
        {"updates": updates_to_dicts(updates), "error": updates_error},
    )

    flow = build_flow_data(view.publications, view.areas, current_year=current_year)
    written["flow_diagram.html"] = write_flow_diagram(flow, out_dir / "flow_diagram.html")

    logger.info(f"Exported {len(written)} site data files to {out_dir}")
    return written
