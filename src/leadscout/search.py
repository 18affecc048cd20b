"""
LeadScout search provider - discover company sites from search queries.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass

from .fetcher import Fetcher

SERPER_URL = "https://google.serper.dev/search"
SERPER_NUM_RESULTS = 20


class SearchError(Exception):
    """Raised when a search request fails outright."""

    pass


@dataclass
class SearchResult:
    """One organic search hit."""

    link: str
    title: str = ""
    snippet: str = ""


class SearchProvider(ABC):
    """Abstract search provider interface."""

    @abstractmethod
    def search(self, query: str) -> list[SearchResult]:
        """Execute search and return organic results in rank order."""
        pass


class SerperProvider(SearchProvider):
    """Serper.dev search API provider, rate-limited through the shared fetcher."""

    def __init__(self, fetcher: Fetcher, api_key: str):
        if not api_key:
            raise ValueError("SERPER_API_KEY not set")
        self.fetcher = fetcher
        self.api_key = api_key
        self.base_url = SERPER_URL

    def search(self, query: str) -> list[SearchResult]:
        headers = {
            "X-API-KEY": self.api_key,
            "Content-Type": "application/json",
        }
        payload = {
            "q": query,
            "num": SERPER_NUM_RESULTS,
        }

        body = self.fetcher.post(self.base_url, payload, headers=headers)
        if body is None:
            raise SearchError(f"Serper request failed for query: {query}")

        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise ValueError(f"Malformed Serper response: {e}") from e
        if not isinstance(data, dict):
            raise ValueError("Malformed Serper response: expected an object")

        results = []
        for item in data.get("organic", []):
            if isinstance(item, dict) and item.get("link"):
                results.append(
                    SearchResult(
                        link=item["link"],
                        title=item.get("title", ""),
                        snippet=item.get("snippet", ""),
                    )
                )

        return results


class MockSearchProvider(SearchProvider):
    """Mock provider for testing - returns predefined results per query."""

    def __init__(self, results: dict[str, list[SearchResult]] | None = None):
        self.results = results or {}
        self.queries: list[str] = []

    def search(self, query: str) -> list[SearchResult]:
        self.queries.append(query)
        return list(self.results.get(query, []))


def get_search_provider(fetcher: Fetcher, api_key: str | None) -> SearchProvider | None:
    """Factory for the search provider. None when no API key is configured."""
    if not api_key:
        return None
    return SerperProvider(fetcher, api_key)
