"""Hand-written stand-ins for clocks and HTTP sessions."""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import requests

from homepage.sources.data import Publication


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeResponse:
    def __init__(
        self,
        text: str = "",
        status_code: int = 200,
        json_data: Any = None,
        content_type: str = "text/html",
    ):
        self.text = text
        self.status_code = status_code
        self._json_data = json_data
        self.headers = {"Content-Type": content_type}

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error", response=self)

    def json(self) -> Any:
        if self._json_data is None:
            raise ValueError("No JSON body")
        return self._json_data


class FakeSession:
    """Returns queued responses (or raises queued exceptions) in order."""

    def __init__(self, responses: List[Any]):
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def get(self, url: str, params: Optional[Dict[str, Any]] = None, timeout: Optional[int] = None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class CountingFetch:
    """Callable that returns a fixed payload or raises, counting its calls."""

    def __init__(self, payload: Any = None, error: Optional[Exception] = None):
        self.payload = payload
        self.error = error
        self.calls = 0

    def __call__(self) -> Any:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.payload


def make_publication(title: str, venue: str = "Unknown", year: int = 2023, authors=None, areas=None) -> Publication:
    return Publication(
        title=title,
        authors=list(authors or []),
        venue=venue,
        year=year,
        type="inproceedings",
        areas=list(areas or []),
    )
