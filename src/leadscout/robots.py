"""
LeadScout crawl policy - decides whether a URL may be fetched.
"""

from abc import ABC, abstractmethod
from urllib.parse import urlsplit


class CrawlPolicy(ABC):
    """Abstract crawl policy interface."""

    @abstractmethod
    def can_fetch(self, url: str) -> bool:
        """Return True if the crawler may fetch this URL."""
        pass


class AllowAllPolicy(CrawlPolicy):
    """
    Best-effort policy that allows everything.

    robots.txt is not parsed; decisions are cached per host so a real
    parser can slot in behind the same interface.
    """

    def __init__(self) -> None:
        self._cache: dict[str, bool] = {}

    def can_fetch(self, url: str) -> bool:
        try:
            host = urlsplit(url).hostname or ""
        except ValueError:
            return True
        if host not in self._cache:
            self._cache[host] = True
        return self._cache[host]
