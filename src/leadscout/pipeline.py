"""
LeadScout pipeline - orchestrates the seeds-to-ranked-leads flow.

Selection (validation, dedup, deny list, crawl policy) always runs on the
calling thread. Only fetch -> extract -> score may fan out to workers, and
every worker shares the one RateLimiter.
"""

import os
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from .config import load_pond_config
from .exporter import export_csv, export_json, leads_filename
from .extractor import extract_content
from .fetcher import Fetcher, FetcherConfig, RateLimiter
from .logger import ProgressLogger
from .models import ExtractedContent, LeadCandidate, PondResult, RunConfig, RunResult, SourceMode
from .normalize import country_guess, infer_company_name, remote_signal
from .pond import PondFinder, output_path, read_seed_queries, read_seed_urls, seed_domains_path
from .robots import AllowAllPolicy, CrawlPolicy
from .scoring import Scorer, ScoringError, apply_score, get_scorer, rank_candidates
from .search import SearchProvider, get_search_provider
from .server import append_lead
from .signals import extract_signals
from .sources import SourcesLog
from .urls import extract_domain, is_denied_domain, is_valid_url, load_denylist, normalize_url

RAW_TEXT_SAMPLE_CHARS = 2000

FAILURE_LABELS = {
    "fetch_failed": "Fetch failed",
    "scoring_failed": "Scoring failed",
}


@dataclass
class SelectedUrl:
    """A seed URL that survived selection and will be fetched."""

    url: str
    domain: str
    source_query: str = "manual_urls"


@dataclass
class ProcessOutcome:
    """Result of fetch -> extract -> score for one selected URL."""

    item: SelectedUrl
    candidate: LeadCandidate | None = None
    fetched: bool = False
    reason: str = ""
    detail: str = ""


# =============================================================================
# CANDIDATE CONSTRUCTION + GATES
# =============================================================================


def build_candidate(
    url: str,
    domain: str,
    content: ExtractedContent,
    config: RunConfig,
    source_mode: SourceMode = "manual",
    source_query: str = "manual_urls",
) -> LeadCandidate:
    """Assemble an unscored candidate from one extracted page."""
    page = extract_signals(content.text, content.links, url)
    country = country_guess(f"{content.text} {content.title}", domain)

    return LeadCandidate(
        domain=domain,
        company_name=infer_company_name(url, content.title),
        company_url=url,
        source_url=url,
        emails=page.emails,
        contact_page_url=page.links.contact_page_url,
        careers_page_url=page.links.careers_page_url,
        demo_booking_url=page.links.demo_booking_url,
        social_links=page.links.social_links,
        video_keywords=page.video_keywords,
        location_keywords=page.location_keywords,
        signals=page.signals,
        country_guess=country,
        remote_signal=remote_signal(content.text),
        us_review_required=country == "US" and not config.include_us,
        source_mode=source_mode,
        source_query=source_query,
        raw_text_sample=content.text[:RAW_TEXT_SAMPLE_CHARS],
    )


def should_capture(candidate: LeadCandidate, config: RunConfig) -> bool:
    """Whether an accepted candidate may be appended to the leads sheet."""
    if config.tier_filter == "AB" and candidate.tier not in ("A", "B"):
        return False
    if config.tier_filter == "ABC" and candidate.tier == "SKIP":
        return False
    if candidate.us_review_required and not config.allow_us_capture:
        return False
    return True


def get_skip_reason(candidate: LeadCandidate, config: RunConfig) -> tuple[str, str] | None:
    """First failing gate as (reason key, human-readable detail), or None."""
    if config.tier_filter == "AB" and candidate.tier not in ("A", "B"):
        return "tier_filter", f"Tier {candidate.tier} (need A or B)"
    if candidate.us_review_required and not config.allow_us_capture:
        return "us_review", "US candidate (--allow-us-capture not set)"
    if candidate.tier == "SKIP":
        return "low_score", "Very low score"
    if config.remote_only and candidate.remote_signal == "NO":
        return "not_remote", "Not remote-friendly"
    return None


# =============================================================================
# PIPELINE
# =============================================================================


class Pipeline:
    """Main pipeline orchestrator."""

    def __init__(
        self,
        config: RunConfig,
        logger: ProgressLogger | None = None,
        fetcher: Fetcher | None = None,
        scorer: Scorer | None = None,
        policy: CrawlPolicy | None = None,
        search_provider: SearchProvider | None = None,
    ):
        self.config = config
        self.run_id = datetime.now().strftime("%Y%m%d_%H%M%S") + "_" + uuid.uuid4().hex[:6]
        self.logger = logger or ProgressLogger(self.run_id, verbose=config.debug)
        self.fetcher = fetcher or Fetcher(
            FetcherConfig(timeout=config.timeout_ms / 1000, user_agent=config.user_agent),
            rate_limiter=RateLimiter(config.rate_limit_ms),
            logger=self.logger,
        )
        self.scorer = scorer or get_scorer(config, self.fetcher)
        self.policy = policy or AllowAllPolicy()
        self.search_provider = search_provider
        self.deny_domains: list[str] = []

    # =========================================================================
    # SEEDS
    # =========================================================================

    def load_denylist(self) -> list[str]:
        self.deny_domains = load_denylist(Path(self.config.deny_domains))
        self.logger.info(f"Loaded {len(self.deny_domains)} denied domains")
        return self.deny_domains

    def refresh_seeds(self) -> PondResult | None:
        """Run PondFinder in the configured mode. None if there is no pond config."""
        ponds_path = Path(self.config.ponds_config)
        pond_config = load_pond_config(ponds_path)
        if pond_config is None:
            self.logger.warning(f"Pond config not found: {ponds_path}")
            return None

        provider = self.search_provider
        if provider is None and self.config.pond_mode == "serper":
            provider = get_search_provider(self.fetcher, os.getenv("SERPER_API_KEY"))

        finder = PondFinder(pond_config, self.deny_domains, provider, self.logger)
        if self.config.pond_mode == "serper":
            result = finder.discover_search()
        else:
            result = finder.discover_manual(seed_domains_path(ponds_path))

        self.logger.info(
            f"[Ponds] {result.count} URLs discovered ({result.filtered_count} filtered)"
        )
        if pond_config.output_mode == "urls_file" and result.urls:
            finder.write_urls(result, output_path(pond_config, ponds_path))
        return result

    def load_seeds(self, pond_result: PondResult | None = None) -> list[str]:
        """Seed URLs from a fresh pond pass, else the URL file, else nothing."""
        if pond_result is not None and pond_result.urls:
            return list(pond_result.urls)

        urls = read_seed_urls(Path(self.config.seeds_urls))
        if urls:
            self.logger.info(f"Loaded {len(urls)} seed URLs from {self.config.seeds_urls}")
            return urls

        queries = read_seed_queries(Path(self.config.seeds_queries))
        if queries:
            self.logger.info(f"Found {len(queries)} seed queries (not searched in manual mode):")
            for query in queries:
                self.logger.info(f"  - {query}")
            self.logger.info("Run with --refresh-seeds --pond-mode serper to search them")
        return []

    # =========================================================================
    # SELECTION (calling thread only)
    # =========================================================================

    def select_urls(
        self,
        urls: list[str],
        sources_log: SourcesLog,
        pond_result: PondResult | None = None,
    ) -> list[SelectedUrl]:
        """Validate, normalize, dedup by domain, apply deny list and crawl policy."""
        seen_domains: set[str] = set()
        selected: list[SelectedUrl] = []
        pond_sources = pond_result.sources if pond_result is not None else {}

        for raw_url in urls:
            if not is_valid_url(raw_url):
                self.logger.debug(f"Invalid URL: {raw_url}")
                sources_log.add_skipped(raw_url, "", "invalid", raw_url)
                continue

            url = normalize_url(raw_url)
            domain = extract_domain(url)

            if domain in seen_domains:
                self.logger.debug(f"Duplicate domain: {domain}")
                sources_log.add_skipped(url, domain, "duplicate", domain)
                continue
            seen_domains.add(domain)

            if is_denied_domain(domain, self.deny_domains):
                self.logger.skip("BLOCKED", domain)
                sources_log.add_skipped(url, domain, "denied", domain)
                continue

            if not self.policy.can_fetch(url):
                self.logger.skip("ROBOTS", url)
                sources_log.add_skipped(url, domain, "robots", url)
                continue

            selected.append(
                SelectedUrl(
                    url=url,
                    domain=domain,
                    source_query=pond_sources.get(raw_url, "manual_urls"),
                )
            )

        return selected

    # =========================================================================
    # FETCH -> EXTRACT -> SCORE (may run on workers)
    # =========================================================================

    def process(self, item: SelectedUrl, source_mode: SourceMode = "manual") -> ProcessOutcome:
        """Fetch, extract and score one URL. Never raises for per-item failures."""
        html = self.fetcher.fetch(item.url)
        if html is None:
            return ProcessOutcome(item=item, reason="fetch_failed", detail=item.url)

        content = extract_content(html)
        candidate = build_candidate(
            item.url,
            item.domain,
            content,
            self.config,
            source_mode=source_mode,
            source_query=item.source_query,
        )

        try:
            scored = apply_score(candidate, self.scorer.score(candidate))
        except ScoringError as e:
            return ProcessOutcome(
                item=item, fetched=True, reason="scoring_failed", detail=f"{item.url}: {e}"
            )

        return ProcessOutcome(item=item, candidate=scored, fetched=True)

    def process_all(
        self, selected: list[SelectedUrl], source_mode: SourceMode = "manual"
    ) -> list[ProcessOutcome]:
        """Process selected URLs, returning outcomes in input order."""
        total = len(selected)

        def process_one(indexed: tuple[int, SelectedUrl]) -> ProcessOutcome:
            index, item = indexed
            self.logger.fetch(item.url, index, total)
            return self.process(item, source_mode)

        indexed = list(enumerate(selected, 1))
        if self.config.workers <= 1 or total <= 1:
            return [process_one(pair) for pair in indexed]

        with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
            return list(executor.map(process_one, indexed))

    # =========================================================================
    # RUN
    # =========================================================================

    def run(self) -> RunResult:
        """Execute the full pipeline."""
        result = RunResult(run_id=self.run_id, started_at=datetime.now(UTC))
        sources_log = SourcesLog(run_id=self.run_id)

        self.logger.phase("Starting run", f"ID={self.run_id}")
        self.logger.info(
            f"Scorer: {self.scorer.name} | tier filter: {self.config.tier_filter} | "
            f"workers: {self.config.workers}"
        )

        # Step 1: Deny list + optional seed refresh
        self.logger.phase("Loading seeds", "Step 1/4")
        self.load_denylist()

        pond_result = None
        if self.config.refresh_seeds:
            pond_result = self.refresh_seeds()

        source_mode: SourceMode = "manual"
        if pond_result is not None and pond_result.urls:
            source_mode = pond_result.mode
        sources_log.seed_mode = source_mode

        urls = self.load_seeds(pond_result)
        if not urls:
            self.logger.warning(
                "No seed URLs found. Add URLs to the seeds file or refresh seeds."
            )
            result.finished_at = datetime.now(UTC)
            return result

        urls = urls[: self.config.max_pages]
        result.urls_total = len(urls)
        result.processed = len(urls)

        # Step 2: Selection
        self.logger.phase("Selecting URLs", f"Step 2/4 - {len(urls)} seeds")
        selected = self.select_urls(urls, sources_log, pond_result)
        self.logger.info(f"{len(selected)} unique domains to fetch")

        # Step 3: Fetch, extract, score
        self.logger.phase("Fetching and scoring", f"Step 3/4 - {len(selected)} URLs")
        outcomes = self.process_all(selected, source_mode)

        accepted: list[LeadCandidate] = []
        for outcome in outcomes:
            item = outcome.item
            if outcome.fetched:
                result.fetched += 1

            candidate = outcome.candidate
            if candidate is None:
                self.logger.skip(FAILURE_LABELS[outcome.reason], outcome.detail)
                sources_log.add_skipped(item.url, item.domain, outcome.reason, outcome.detail)
                if outcome.reason == "scoring_failed":
                    result.errors.append(f"Scoring error: {outcome.detail}")
                continue

            skip = get_skip_reason(candidate, self.config)
            if skip is not None:
                reason, detail = skip
                self.logger.skip(detail, candidate.company_name)
                sources_log.add_skipped(
                    item.url, item.domain, reason, detail, candidate.tier, candidate.score
                )
                continue

            accepted.append(candidate)
            sources_log.add_accepted(
                item.url, item.domain, candidate.tier, candidate.score, candidate.source_query
            )
            self.logger.found(
                candidate.tier, candidate.score, candidate.company_name, candidate.country_guess
            )

            if "server" in self.config.export_to and should_capture(candidate, self.config):
                if append_lead(self.fetcher, self.config.server_url, candidate):
                    result.appended += 1

        # Step 4: Rank + export
        self.logger.phase("Ranking and export", f"Step 4/4 - {len(accepted)} candidates")
        result.candidates = rank_candidates(accepted)
        result.accepted = len(result.candidates)
        result.skip_counts = dict(sources_log.skip_counts)
        result.finished_at = datetime.now(UTC)
        sources_log.finish()

        out_dir = Path(self.config.out_dir)
        if "json" in self.config.export_to:
            json_path = out_dir / leads_filename("json")
            export_json(result.candidates, json_path)
            result.export_paths["json"] = str(json_path)
            self.logger.info(f"JSON: {json_path}")
        if "csv" in self.config.export_to:
            csv_path = out_dir / leads_filename("csv")
            export_csv(result.candidates, csv_path)
            result.export_paths["csv"] = str(csv_path)
            self.logger.info(f"CSV: {csv_path}")
        sources_path = out_dir / "sources.json"
        sources_log.save(sources_path)
        result.export_paths["sources"] = str(sources_path)

        self.logger.tier_distribution(result.tier_counts())
        if "server" in self.config.export_to:
            self.logger.info(f"Appended to server: {result.appended}")
        self.logger.finish(len(result.candidates), str(out_dir))

        return result
