"""Minimal BibTeX parsing for DBLP exports."""

import logging
import re
from datetime import datetime
from typing import Dict, List

from .data import PUBLICATION_TYPES, Publication

logger = logging.getLogger(__name__)

ENTRY_START_PATTERN = re.compile(r"(?m)^\s*@")
ENTRY_HEAD_PATTERN = re.compile(r"^(\w+)\s*\{\s*([^,\s]+)")
# One level of nested braces, e.g. title = {{TinyML}: Machine Learning}
FIELD_PATTERN = re.compile(r"(\w+)\s*=\s*\{([^{}]*(?:\{[^{}]*\}[^{}]*)*)\}")
PROCEEDINGS_PREFIX_PATTERN = re.compile(r"^Proceedings of (the )?", re.IGNORECASE)


def clean_bibtex_string(value: str) -> str:
    """Remove braces, unescape common TeX sequences and normalize whitespace."""
    value = value.replace("{", "").replace("}", "")
    value = value.replace("\\&", "&").replace("\\'", "'").replace("\\$", "$")
    return " ".join(value.split())


def parse_authors(author_field: str) -> List[str]:
    """Split an ``and``-separated BibTeX author field."""
    parts = re.split(r"\s+and\s+", author_field)
    return [name for name in (clean_bibtex_string(p) for p in parts) if name]


def _parse_fields(body: str) -> Dict[str, str]:
    return {
        name.lower(): clean_bibtex_string(value)
        for name, value in FIELD_PATTERN.findall(body)
    }


def parse_bibtex(text: str) -> List[Publication]:
    """
    Parse BibTeX entries into publications.

    Entries without a title are skipped. The venue is the first of
    booktitle, journal or school, with a leading "Proceedings of (the)"
    removed.
    """
    publications = []

    for chunk in ENTRY_START_PATTERN.split(text):
        chunk = chunk.strip()
        if not chunk:
            continue

        head = ENTRY_HEAD_PATTERN.match(chunk)
        if not head:
            continue

        entry_type, key = head.group(1).lower(), head.group(2)
        fields = _parse_fields(chunk)

        title = fields.get("title")
        if not title:
            logger.debug(f"Skipping BibTeX entry without title: {key}")
            continue

        venue = fields.get("booktitle") or fields.get("journal") or fields.get("school") or "Unknown"
        venue = PROCEEDINGS_PREFIX_PATTERN.sub("", venue)

        try:
            year = int(fields["year"])
        except (KeyError, ValueError):
            year = datetime.now().year

        publications.append(
            Publication(
                title=title,
                authors=parse_authors(fields.get("author", "")),
                venue=venue,
                year=year,
                type=entry_type if entry_type in PUBLICATION_TYPES else "misc",
                url=fields.get("url"),
                key=clean_bibtex_string(key),
                doi=fields.get("doi"),
                pages=fields.get("pages"),
                volume=fields.get("volume"),
                number=fields.get("number"),
            )
        )

    return publications
