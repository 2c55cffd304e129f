"""Configuration settings for the academic homepage.

Handles the publication index, Google Scholar, cache and content paths.
"""

import os
from datetime import date
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

# Project root directory
ROOT_DIR = Path(__file__).parent.parent


def _env_list(name: str, default: str = "") -> List[str]:
    """Read a comma separated environment variable into a list."""
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # DBLP
    dblp_pid: str = os.getenv("DBLP_PID", "88/2610")
    dblp_format: str = os.getenv("DBLP_FORMAT", "xml")
    dblp_author_query: str = os.getenv("DBLP_AUTHOR_QUERY", "Vijay Janapa Reddi")

    # Google Scholar
    scholar_user_id: str = os.getenv("SCHOLAR_USER_ID", "gy4UVGcAAAAJ")
    scholar_proxy_urls: List[str] = _env_list("SCHOLAR_PROXY_URLS")
    scholar_stats_provider: str = os.getenv("SCHOLAR_STATS_PROVIDER", "live")
    scholar_fallback_enabled: bool = _env_bool("SCHOLAR_FALLBACK_ENABLED", True)

    # Manually maintained numbers from the public profile
    scholar_fallback_citations: int = int(os.getenv("SCHOLAR_FALLBACK_CITATIONS", "18105"))
    scholar_fallback_h_index: int = int(os.getenv("SCHOLAR_FALLBACK_H_INDEX", "55"))
    scholar_fallback_i10_index: int = int(os.getenv("SCHOLAR_FALLBACK_I10_INDEX", "145"))
    scholar_fallback_publications: int = int(os.getenv("SCHOLAR_FALLBACK_PUBLICATIONS", "120"))
    scholar_fallback_as_of: date = date.fromisoformat(
        os.getenv("SCHOLAR_FALLBACK_AS_OF", "2024-12-19")
    )

    # Cache
    cache_ttl_hours: float = float(os.getenv("CACHE_TTL_HOURS", "24"))
    database_path: Path = ROOT_DIR / os.getenv("DATABASE_PATH", "data/site_cache.sqlite")

    # Content
    updates_path: Path = ROOT_DIR / os.getenv("UPDATES_PATH", "content/updates.yaml")
    build_mode: str = os.getenv("BUILD_MODE", "development")

    # Research area classification profiles
    page_taxonomy: str = os.getenv("PAGE_TAXONOMY", "core")
    ingestion_taxonomy: str = os.getenv("INGESTION_TAXONOMY", "extended")

    # Name variants of the site owner, excluded from co-author statistics
    owner_names: List[str] = _env_list(
        "OWNER_NAMES",
        "Vijay Janapa Reddi,Vijay J. Reddi,V. Janapa Reddi,V. J. Reddi,Vijay Reddi,V. Reddi",
    )

    request_timeout: int = int(os.getenv("REQUEST_TIMEOUT", "30"))

    @property
    def asset_base_path(self) -> str:
        """Base path prefixed to static assets; production builds live under /homepage."""
        return "/homepage" if self.build_mode == "production" else ""


settings = Settings()
