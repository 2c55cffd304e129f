"""
Fetch an author's publication list from DBLP.

Three response shapes are supported: the person XML export
(``/pid/<pid>.xml``), the publication search API in JSON and the BibTeX
export (``/pid/<pid>.bib``). Every path yields unclassified Publication
objects sorted newest first.
"""

import logging
import xml.etree.ElementTree as ET
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests

from config.settings import settings
from homepage.exceptions import ConfigurationError, FetchError, MalformedResponseError

from .bibtex import parse_bibtex
from .data import Publication

logger = logging.getLogger(__name__)

DBLP_PERSON_XML = "https://dblp.org/pid/{pid}.xml"
DBLP_PERSON_BIB = "https://dblp.org/pid/{pid}.bib"
DBLP_SEARCH_API = "https://dblp.org/search/publ/api"

XML_RECORD_TYPES = (
    "article",
    "inproceedings",
    "proceedings",
    "book",
    "incollection",
    "phdthesis",
    "mastersthesis",
)

# DBLP search API "type" values
JSON_TYPE_MAP = {
    "Journal Articles": "article",
    "Conference and Workshop Papers": "inproceedings",
    "Editorship": "proceedings",
    "Books and Theses": "book",
    "Parts in Books or Collections": "incollection",
    "Informal and Other Publications": "misc",
    "Informal Publications": "misc",
}

SUPPORTED_FORMATS = ("xml", "json", "bib")


class DBLPClient:
    """Retrieves publication records for one author from DBLP."""

    DEFAULT_HEADERS = {
        "User-Agent": "Mozilla/5.0 (compatible; Academic Website)",
    }

    def __init__(
        self,
        pid: Optional[str] = None,
        fmt: Optional[str] = None,
        author_query: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[int] = None,
        max_hits: int = 1000,
    ):
        self.pid = pid or settings.dblp_pid
        self.fmt = (fmt or settings.dblp_format).lower()
        self.author_query = author_query or settings.dblp_author_query
        self.timeout = timeout or settings.request_timeout
        self.max_hits = max_hits
        if self.fmt not in SUPPORTED_FORMATS:
            raise ConfigurationError(
                f"Unsupported DBLP format '{self.fmt}'. Use one of {SUPPORTED_FORMATS}"
            )
        if session is None:
            session = requests.Session()
            session.headers.update(self.DEFAULT_HEADERS)
        self.session = session

    def fetch_records(self) -> List[Publication]:
        """
        Fetch and parse the author's publications.

        Returns:
            Publications sorted by year, newest first

        Raises:
            FetchError: DBLP could not be reached or returned an error status
            MalformedResponseError: The body could not be parsed
        """
        if self.fmt == "json":
            response = self._get(
                DBLP_SEARCH_API,
                params={
                    "q": f"author:{self.author_query.replace(' ', '_')}:",
                    "format": "json",
                    "h": self.max_hits,
                },
            )
            try:
                payload = response.json()
            except ValueError as e:
                raise MalformedResponseError(f"DBLP returned invalid JSON: {e}") from e
            publications = parse_dblp_json(payload)
        elif self.fmt == "bib":
            response = self._get(DBLP_PERSON_BIB.format(pid=self.pid))
            publications = parse_bibtex(response.text)
        else:
            response = self._get(DBLP_PERSON_XML.format(pid=self.pid))
            publications = parse_dblp_xml(response.text)

        logger.info(f"Parsed {len(publications)} publications from DBLP ({self.fmt})")
        return sort_by_year(publications)

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        logger.info(f"Requesting DBLP: {url}")
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response
        except requests.exceptions.Timeout as e:
            raise FetchError(f"Request to DBLP timed out after {self.timeout}s") from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise FetchError(f"DBLP returned HTTP {status}", status_code=status) from e
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Network error while contacting DBLP: {e}") from e


def sort_by_year(publications: List[Publication]) -> List[Publication]:
    return sorted(publications, key=lambda p: p.year, reverse=True)


def _parse_year(value: Optional[str]) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return datetime.now().year


def _element_text(element: Optional[ET.Element]) -> Optional[str]:
    """Text of an element including inline markup such as <i> or <sub>."""
    if element is None:
        return None
    text = " ".join("".join(element.itertext()).split())
    return text or None


def parse_dblp_xml(xml_text: str) -> List[Publication]:
    """
    Parse a DBLP person XML export.

    Records are the children of ``<r>`` elements. Records without a title
    are skipped.
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise MalformedResponseError(f"DBLP returned invalid XML: {e}") from e

    publications = []
    for wrapper in root.iter("r"):
        for item in wrapper:
            if item.tag not in XML_RECORD_TYPES:
                continue

            title = _element_text(item.find("title"))
            if not title:
                logger.debug(f"Skipping DBLP record without title: {item.get('key')}")
                continue

            venue_element = next(
                (item.find(tag) for tag in ("journal", "booktitle", "school") if item.find(tag) is not None),
                None,
            )

            publications.append(
                Publication(
                    title=title,
                    authors=[
                        name for name in (_element_text(a) for a in item.findall("author")) if name
                    ],
                    venue=_element_text(venue_element) or "Unknown Venue",
                    year=_parse_year(_element_text(item.find("year"))),
                    type=item.tag,
                    url=_element_text(item.find("url")),
                    ee=_element_text(item.find("ee")),
                    key=item.get("key"),
                    pages=_element_text(item.find("pages")),
                    volume=_element_text(item.find("volume")),
                    number=_element_text(item.find("number")),
                )
            )

    return publications


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _json_text(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        value = value.get("text")
    if isinstance(value, list):
        value = ", ".join(str(v) for v in value if v)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_dblp_json(payload: Dict[str, Any]) -> List[Publication]:
    """Parse a DBLP publication search API response."""
    try:
        hits = payload["result"]["hits"].get("hit", [])
    except (KeyError, TypeError, AttributeError) as e:
        raise MalformedResponseError(f"Unexpected DBLP JSON shape: missing {e}") from e

    publications = []
    for hit in _as_list(hits):
        info = hit.get("info") if isinstance(hit, dict) else None
        if not isinstance(info, dict):
            continue

        title = _json_text(info.get("title"))
        if not title:
            continue

        authors_obj = info.get("authors") or {}
        authors = [
            name
            for name in (_json_text(a) for a in _as_list(authors_obj.get("author")))
            if name
        ]

        publications.append(
            Publication(
                title=title,
                authors=authors,
                venue=_json_text(info.get("venue")) or "Unknown Venue",
                year=_parse_year(info.get("year")),
                type=JSON_TYPE_MAP.get(info.get("type", ""), "misc"),
                url=_json_text(info.get("url")),
                ee=_json_text(info.get("ee")),
                key=_json_text(info.get("key")),
                doi=_json_text(info.get("doi")),
                pages=_json_text(info.get("pages")),
                volume=_json_text(info.get("volume")),
                number=_json_text(info.get("number")),
            )
        )

    return publications
