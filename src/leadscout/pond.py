"""
LeadScout PondFinder - expands seed domains or search queries into seed URLs.

Two modes:
- manual: a hand-curated domain list, one URL per configured path pattern
- serper: search queries through the Serper API, one URL per result host
"""

from pathlib import Path
from urllib.parse import urlsplit

from .logger import ProgressLogger
from .models import PondConfig, PondResult
from .search import SearchError, SearchProvider, SearchResult
from .urls import normalize_domain, read_lines

MAX_SEARCH_QUERIES = 3


class PondFinder:
    """Seed expander. Reads policy from a PondConfig and never changes it."""

    def __init__(
        self,
        config: PondConfig,
        deny_domains: list[str],
        search_provider: SearchProvider | None = None,
        logger: ProgressLogger | None = None,
    ):
        self.config = config
        self.deny_domains = {normalize_domain(d) for d in deny_domains if d}
        self.search_provider = search_provider
        self.logger = logger or ProgressLogger("ponds")

    def is_denied(self, domain: str) -> bool:
        """Exact deny-list membership after lowercasing and stripping www."""
        return normalize_domain(domain) in self.deny_domains

    def _expand(self, base: str) -> list[str]:
        return [f"{base}{pattern}" for pattern in self.config.url_patterns]

    # =========================================================================
    # MANUAL MODE
    # =========================================================================

    def discover_manual(self, seed_domains_path: Path) -> PondResult:
        """Expand every non-denied seed domain by the configured URL patterns."""
        if not seed_domains_path.exists():
            self.logger.warning(f"Seed domains file not found: {seed_domains_path}")
            return PondResult(mode="manual")

        domains = read_lines(seed_domains_path)
        self.logger.info(f"[Ponds] Loaded {len(domains)} seed domains")

        urls: list[str] = []
        sources: dict[str, str] = {}
        filtered = 0

        for domain in domains:
            if self.is_denied(domain):
                filtered += 1
                self.logger.debug(f"Denied seed domain: {domain}")
                continue

            for url in self._expand(f"https://{domain}"):
                if url not in sources:
                    urls.append(url)
                    sources[url] = domain

        return PondResult(
            urls=urls,
            mode="manual",
            count=len(urls),
            filtered_count=filtered,
            sources=sources,
        )

    # =========================================================================
    # SEARCH MODE
    # =========================================================================

    def _mentions(self, result: SearchResult, terms: list[str]) -> bool:
        haystack = f"{result.title} {result.snippet}".lower()
        return any(term.lower() in haystack for term in terms)

    def select_results(self, results: list[SearchResult]) -> list[SearchResult]:
        """Apply required terms, float Canada-boosted results up, then cap."""
        if self.config.required_terms:
            results = [r for r in results if self._mentions(r, self.config.required_terms)]

        if self.config.canada_boost_terms:
            boosted = [r for r in results if self._mentions(r, self.config.canada_boost_terms)]
            rest = [r for r in results if not self._mentions(r, self.config.canada_boost_terms)]
            results = boosted + rest

        return results[: self.config.max_results_per_query]

    def discover_search(self) -> PondResult:
        """Run the first few configured queries and expand each result's host."""
        if self.search_provider is None:
            self.logger.warning("SERPER_API_KEY not set - skipping search discovery")
            return PondResult(mode="serper")

        queries = self.config.queries[:MAX_SEARCH_QUERIES]
        urls: list[str] = []
        sources: dict[str, str] = {}
        filtered = 0

        for query in queries:
            self.logger.info(f"[Ponds] Searching: {query}")
            try:
                results = self.search_provider.search(query)
            except (SearchError, ValueError) as e:
                self.logger.warning(f"Search failed for '{query}': {e}")
                continue

            for result in self.select_results(results):
                try:
                    host = urlsplit(result.link).hostname
                except ValueError:
                    host = None
                if not host:
                    continue

                if self.is_denied(host):
                    filtered += 1
                    continue

                for url in [f"https://{host}", *self._expand(f"https://{host}")]:
                    if url not in sources:
                        urls.append(url)
                        sources[url] = query

        return PondResult(
            urls=urls,
            mode="serper",
            count=len(urls),
            filtered_count=filtered,
            sources=sources,
        )

    # =========================================================================
    # OUTPUT
    # =========================================================================

    def write_urls(self, result: PondResult, path: Path) -> Path:
        """Write discovered URLs, one per line."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(result.urls), encoding="utf-8")
        self.logger.info(f"[Ponds] Wrote {result.count} URLs to {path}")
        return path


def output_path(config: PondConfig, ponds_config_path: Path) -> Path:
    """Where refreshed seed URLs go: output_file next to the pond config."""
    return ponds_config_path.parent / (config.output_file or "seeds.urls.txt")


def seed_domains_path(ponds_config_path: Path) -> Path:
    """Manual-mode domain list lives beside the pond config."""
    return ponds_config_path.parent / "seeds.domains.txt"


# =============================================================================
# MANUAL SEED PROVIDERS
# =============================================================================


def read_seed_urls(path: Path) -> list[str]:
    """Seed URLs from a text file. Only lines starting with http are kept."""
    return [line for line in read_lines(path) if line.startswith("http")]


def read_seed_queries(path: Path) -> list[str]:
    """Seed search queries from a text file."""
    return read_lines(path)
