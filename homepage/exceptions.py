"""Exception types shared by the homepage data layer."""

from typing import Optional


class HomepageError(Exception):
    """Base exception for the homepage data layer."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class FetchError(HomepageError):
    """A remote source could not be reached or answered with an error status."""

    def __init__(self, message: str = "Failed to fetch remote data", status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class MalformedResponseError(HomepageError):
    """A remote source answered with an unexpected XML, JSON or HTML shape."""

    def __init__(self, message: str = "Malformed response"):
        super().__init__(message)


class CacheEntryError(HomepageError):
    """A stored cache entry could not be decoded."""

    def __init__(self, message: str = "Corrupted cache entry"):
        super().__init__(message)


class ConfigurationError(HomepageError):
    """An unknown taxonomy, provider or format was requested."""

    def __init__(self, message: str = "Invalid configuration"):
        super().__init__(message)
