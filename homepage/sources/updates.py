"""News/updates feed stored as a YAML document."""

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import requests
import yaml

from config.settings import Settings, settings
from homepage.exceptions import FetchError, MalformedResponseError

from .data import Update

logger = logging.getLogger(__name__)

UPDATES_ERROR = "Failed to load updates"
UPDATES_RELATIVE_URL = "content/updates.yaml"


def updates_url(base_url: str = "", config: Optional[Settings] = None) -> str:
    """URL of the updates document, prefixed with the build-mode base path."""
    config = config or settings
    return f"{base_url.rstrip('/')}{config.asset_base_path}/{UPDATES_RELATIVE_URL}"


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip())


def parse_updates(text: str) -> List[Update]:
    """
    Parse the YAML updates document.

    Raises:
        MalformedResponseError: The document is not valid YAML or an entry
            lacks a date, title or description
    """
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise MalformedResponseError(f"Invalid updates YAML: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("updates", []), list):
        raise MalformedResponseError("Updates document must contain an 'updates' list")

    updates = []
    for item in data.get("updates") or []:
        try:
            updates.append(
                Update(
                    date=_parse_date(item["date"]),
                    title=str(item["title"]),
                    description=str(item["description"]),
                    link=item.get("link"),
                    link_text=item.get("link_text"),
                )
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise MalformedResponseError(f"Invalid update entry {item!r}: {e}") from e
    return updates


def _read_source(source: Union[str, Path], timeout: int) -> str:
    source = str(source)
    if source.startswith(("http://", "https://")):
        try:
            response = requests.get(source, timeout=timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Could not download updates from {source}: {e}") from e
        return response.text

    try:
        return Path(source).read_text(encoding="utf-8")
    except OSError as e:
        raise FetchError(f"Could not read updates file {source}: {e}") from e


def load_updates(
    source: Optional[Union[str, Path]] = None,
    max_items: Optional[int] = None,
) -> Tuple[List[Update], Optional[str]]:
    """
    Load updates sorted newest first.

    Args:
        source: Local path or http(s) URL; defaults to the configured file
        max_items: Keep only this many of the newest entries

    Returns:
        Tuple of (updates, error message or None)
    """
    source = source or settings.updates_path
    try:
        updates = parse_updates(_read_source(source, settings.request_timeout))
    except (FetchError, MalformedResponseError) as e:
        logger.error(f"Error loading updates: {e}")
        return [], UPDATES_ERROR

    updates.sort(key=lambda u: u.date, reverse=True)
    if max_items:
        updates = updates[:max_items]
    return updates, None


def updates_to_dicts(updates: List[Update]) -> List[Dict[str, Any]]:
    return [u.to_dict() for u in updates]
