"""
LeadScout data models - strict Pydantic schemas for lead discovery.

Design principles:
- extra="forbid" everywhere (fail fast on misspelled config keys or payloads)
- Candidates are frozen once built; scoring produces a copy
- Score, confidence and discovery confidence are bounded 0-100
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# TYPE LITERALS
# =============================================================================

SignalCategory = Literal[
    "video_production",
    "content_marketing",
    "seniority",
    "remote_canada",
    "recency",
    "accessibility",
]

CountryGuess = Literal["CA", "US", "OTHER", "UNKNOWN"]
RemoteSignal = Literal["YES", "NO", "UNKNOWN"]
Tier = Literal["A", "B", "C", "SKIP"]
SourceMode = Literal["manual", "serper"]
ScorerName = Literal["local", "keyword", "server"]
ExportTarget = Literal["json", "csv", "server"]

TIER_ORDER: dict[str, int] = {"A": 0, "B": 1, "C": 2, "SKIP": 3}


# =============================================================================
# EXTRACTION
# =============================================================================


class SignalMatch(BaseModel):
    """A keyword category and the literal phrases that matched it."""

    model_config = ConfigDict(extra="forbid")

    category: SignalCategory
    matched: list[str] = Field(default_factory=list, description="Exact phrases found")


class ExtractedContent(BaseModel):
    """Parsed view of one fetched page. Produced once, never modified."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    text: str = Field(default="", max_length=10_000)
    links: list[str] = Field(default_factory=list, description="Raw href values, unresolved")
    title: str = ""
    meta_description: str = ""


class ExtractedFields(BaseModel):
    """Lead fields as the external scoring service sees them."""

    model_config = ConfigDict(extra="forbid")

    name: str = ""
    title: str = ""
    company: str = ""
    location: str = ""
    page_url: str = ""


# =============================================================================
# LEAD CANDIDATE (THE CENTRAL AGGREGATE)
# =============================================================================


class LeadCandidate(BaseModel):
    """
    A candidate company site discovered by the hunter.
    Built once per fetched domain, scored once, then left alone.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    domain: str
    company_name: str
    company_url: str
    source_url: str = ""

    # Contact signals
    emails: list[str] = Field(default_factory=list, max_length=5)
    contact_page_url: str | None = None
    careers_page_url: str | None = None
    demo_booking_url: str | None = None
    social_links: list[str] = Field(default_factory=list)

    # Keyword signals
    video_keywords: list[str] = Field(default_factory=list)
    location_keywords: list[str] = Field(default_factory=list)
    signals: list[SignalMatch] = Field(default_factory=list)

    # Derived
    country_guess: CountryGuess = "UNKNOWN"
    remote_signal: RemoteSignal = "UNKNOWN"
    us_review_required: bool = False

    # Scoring (filled in by a Scorer)
    score: int = Field(default=0, ge=0, le=100)
    tier: Tier = "C"
    confidence: int = Field(default=0, ge=0, le=100)
    evidence: list[str] = Field(default_factory=list)
    recommended_contact_method: str = "unknown"
    suggested_outreach_angle: str = "speed"

    # Discovery metadata
    source_mode: SourceMode = "manual"
    source_query: str = "manual_urls"
    discovery_confidence: int = Field(default=75, ge=0, le=100)

    raw_text_sample: str = Field(default="", max_length=2000)
    discovered_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ScoreResult(BaseModel):
    """Output of a Scorer, merged into a candidate with model_copy(update=...)."""

    model_config = ConfigDict(extra="forbid")

    score: int = Field(..., ge=0, le=100)
    tier: Tier
    confidence: int = Field(default=0, ge=0, le=100)
    evidence: list[str] = Field(default_factory=list)
    recommended_contact_method: str = "unknown"
    suggested_outreach_angle: str = "speed"
    discovery_confidence: int = Field(default=75, ge=0, le=100)


# =============================================================================
# SCORING SERVICE PAYLOADS
# =============================================================================


class OutreachReco(BaseModel):
    """Outreach recommendation returned with a server-side score."""

    model_config = ConfigDict(extra="ignore")

    suggested_contact_method: str = "unknown"
    suggested_angle: str = "Speed"
    outreach_hook: str = ""
    call_to_action: str = ""
    onboarding_next_step: str = ""


class AnalyzeRequest(BaseModel):
    """Body of POST /analyze."""

    model_config = ConfigDict(extra="forbid")

    page_url: str
    extracted_fields: ExtractedFields
    raw_text_sample: str = ""
    signals: list[SignalMatch] = Field(default_factory=list)


class AnalyzeResponse(BaseModel):
    """Body returned by POST /analyze."""

    model_config = ConfigDict(extra="ignore")

    score: int = Field(..., ge=0, le=100)
    tier: Literal["A", "B", "C"]
    evidence: list[str] = Field(default_factory=list)
    outreach_reco: OutreachReco


# =============================================================================
# SEED EXPANSION
# =============================================================================


class PondConfig(BaseModel):
    """Seed-expansion policy for PondFinder. Read-only to the pipeline."""

    model_config = ConfigDict(extra="forbid")

    queries: list[str] = Field(default_factory=list)
    required_terms: list[str] = Field(default_factory=list)
    canada_boost_terms: list[str] = Field(default_factory=list)
    url_patterns: list[str] = Field(default_factory=lambda: ["/"])
    max_results_per_query: int = Field(default=10, ge=1)
    # Reserved: accepted so existing pond files load. Discovery never filters
    # US hosts; the capture gate handles them via RunConfig.include_us.
    allow_us: bool = Field(
        default=False, description="Reserved; US candidates are gated at capture"
    )
    output_mode: Literal["urls_file", "direct"] = "urls_file"
    output_file: str = "seeds.urls.txt"


class PondResult(BaseModel):
    """URLs produced by one PondFinder discovery pass."""

    model_config = ConfigDict(extra="forbid")

    urls: list[str] = Field(default_factory=list)
    mode: SourceMode = "manual"
    count: int = 0
    filtered_count: int = 0
    discovered_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    sources: dict[str, str] = Field(
        default_factory=dict, description="URL -> query or seed domain that produced it"
    )


# =============================================================================
# RUN CONFIGURATION & RESULTS
# =============================================================================


class RunConfig(BaseModel):
    """Configuration for a single hunter run."""

    model_config = ConfigDict(extra="forbid")

    # Politeness
    rate_limit_ms: int = Field(default=800, ge=0)
    max_pages: int = Field(default=50, ge=0)
    timeout_ms: int = Field(default=15_000, ge=1)
    user_agent: str = "Mozilla/5.0 (compatible; HunterBot/1.0)"
    workers: int = Field(default=1, ge=1, le=16)

    # Filters
    remote_only: bool = False
    include_us: bool = False
    tier_filter: Literal["AB", "ABC"] = "AB"
    allow_us_capture: bool = False

    # Inputs
    seeds_urls: str = "data/seeds.urls.txt"
    seeds_queries: str = "data/seeds.queries.txt"
    deny_domains: str = "data/deny.domains.txt"

    # Outputs
    out_dir: str = "out"
    export_to: list[ExportTarget] = Field(default_factory=lambda: ["json", "csv"])

    # Scoring
    scorer: ScorerName = "local"
    server_url: str = "http://localhost:3789"

    # PondFinder
    refresh_seeds: bool = False
    pond_mode: SourceMode = "manual"
    ponds_config: str = "data/seeds.ponds.yml"

    debug: bool = False


def count_tiers(candidates: list[LeadCandidate]) -> dict[str, int]:
    """Count candidates per tier (all four tiers always present)."""
    counts = {tier: 0 for tier in TIER_ORDER}
    for candidate in candidates:
        counts[candidate.tier] += 1
    return counts


class RunResult(BaseModel):
    """Result of a pipeline run."""

    model_config = ConfigDict(extra="forbid")

    run_id: str = ""
    started_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    finished_at: datetime | None = None
    candidates: list[LeadCandidate] = Field(default_factory=list)

    # Stats
    urls_total: int = 0
    processed: int = 0
    fetched: int = 0
    accepted: int = 0
    appended: int = 0
    skip_counts: dict[str, int] = Field(default_factory=dict)

    export_paths: dict[str, str] = Field(default_factory=dict)
    errors: list[str] = Field(default_factory=list)

    def tier_counts(self) -> dict[str, int]:
        return count_tiers(self.candidates)
