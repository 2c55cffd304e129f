"""Data models for publications, scholar metrics and cached entries."""

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")

PUBLICATION_TYPES = (
    "article",
    "inproceedings",
    "proceedings",
    "book",
    "incollection",
    "phdthesis",
    "mastersthesis",
    "misc",
)


@dataclass
class Publication:
    """Represents a single bibliographic record."""

    title: str
    authors: List[str]
    venue: str
    year: int
    type: str
    url: Optional[str] = None
    ee: Optional[str] = None
    areas: List[str] = field(default_factory=list)
    key: Optional[str] = None
    doi: Optional[str] = None
    pages: Optional[str] = None
    volume: Optional[str] = None
    number: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Publication":
        title = data.get("title")
        if not title:
            raise ValueError("Publication record has no title")
        year = data.get("year")
        return cls(
            title=title,
            authors=list(data.get("authors") or []),
            venue=data.get("venue") or "Unknown",
            year=int(year) if year else datetime.now().year,
            type=data.get("type") or "misc",
            url=data.get("url"),
            ee=data.get("ee"),
            areas=list(data.get("areas") or []),
            key=data.get("key"),
            doi=data.get("doi"),
            pages=data.get("pages"),
            volume=data.get("volume"),
            number=data.get("number"),
        )


@dataclass
class ScholarStats:
    """Aggregate citation metrics of the site owner."""

    total_citations: int
    h_index: int
    i10_index: int
    total_publications: int
    last_updated: datetime

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["last_updated"] = self.last_updated.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScholarStats":
        return cls(
            total_citations=int(data["total_citations"]),
            h_index=int(data["h_index"]),
            i10_index=int(data["i10_index"]),
            total_publications=int(data["total_publications"]),
            last_updated=datetime.fromisoformat(data["last_updated"]),
        )

    @classmethod
    def empty(cls) -> "ScholarStats":
        return cls(
            total_citations=0,
            h_index=0,
            i10_index=0,
            total_publications=0,
            last_updated=datetime.now(),
        )


@dataclass
class CacheEntry(Generic[T]):
    """A timestamped payload persisted in the key-value store."""

    payload: T
    last_updated: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass
class CacheInfo:
    """Read-only status of a cache slot."""

    last_updated: Optional[datetime]
    expires_at: Optional[datetime]
    is_expired: bool

    @classmethod
    def missing(cls) -> "CacheInfo":
        return cls(last_updated=None, expires_at=None, is_expired=True)


@dataclass
class Update:
    """One entry of the news/updates feed."""

    date: date
    title: str
    description: str
    link: Optional[str] = None
    link_text: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["date"] = self.date.isoformat()
        return data
