"""
LeadScout scoring engine + ranking.

Two scoring policies live side by side and are never blended:
- LocalScorer: offline crawl policy (contact routes, geography, remote bonuses)
- KeywordScorer: server-side policy (six capped keyword buckets)
RemoteScorer asks a running LeadScout server to apply the server-side policy.
"""

from abc import ABC, abstractmethod

from .fetcher import Fetcher
from .keywords import SIGNAL_KEYWORDS
from .models import (
    TIER_ORDER,
    ExtractedFields,
    LeadCandidate,
    RunConfig,
    ScoreResult,
    SignalMatch,
    Tier,
)
from .outreach import build_outreach_reco
from .server import build_analyze_request, parse_analyze_response
from .signals import detect_signals, lookup, merge_signals

# =============================================================================
# TIER POLICIES
# =============================================================================


def local_tier(score: int) -> Tier:
    """Offline crawl thresholds: <20 SKIP, >=70 A, >=45 B, else C."""
    if score < 20:
        return "SKIP"
    if score >= 70:
        return "A"
    if score >= 45:
        return "B"
    return "C"


def keyword_tier(score: int) -> Tier:
    """Server-side thresholds: >=75 A, >=50 B, else C."""
    if score >= 75:
        return "A"
    if score >= 50:
        return "B"
    return "C"


def clamp(value: int, low: int = 0, high: int = 100) -> int:
    return max(low, min(high, value))


# =============================================================================
# KEYWORD BUCKET SCORING (server-side policy)
# =============================================================================

# category -> (per-hit weight, cap)
BUCKET_WEIGHTS: dict[str, tuple[int, int]] = {
    "video_production": (8, 30),
    "content_marketing": (7, 25),
    "seniority": (8, 15),
    "remote_canada": (5, 10),
    "recency": (5, 10),
    "accessibility": (5, 10),
}

MAX_EVIDENCE = 5


def bucket_score(matched: int, per_hit: int, cap: int) -> int:
    return min(matched * per_hit, cap)


def _unique(*phrase_lists: list[str]) -> list[str]:
    return list(dict.fromkeys(p for phrases in phrase_lists for p in phrases))


def compute_score(
    signals: list[SignalMatch], fields: ExtractedFields
) -> tuple[int, Tier, list[str]]:
    """
    Six-bucket keyword score. Pure: same input, same (score, tier, evidence).

    Seniority also counts keyword hits in the title field and remote/Canada
    hits in the location field. Evidence keeps the first few phrases per
    bucket behind a category marker, at most five lines overall.
    """
    score = 0
    evidence: list[str] = []

    video = lookup(signals, "video_production")
    score += bucket_score(len(video), *BUCKET_WEIGHTS["video_production"])
    evidence.extend(f"🎬 {m}" for m in video[:3])

    content = lookup(signals, "content_marketing")
    score += bucket_score(len(content), *BUCKET_WEIGHTS["content_marketing"])
    evidence.extend(f"📢 {m}" for m in content[:2])

    title_lower = fields.title.lower()
    title_hits = [kw for kw in SIGNAL_KEYWORDS["seniority"] if kw in title_lower]
    seniority = _unique(lookup(signals, "seniority"), title_hits)
    score += bucket_score(len(seniority), *BUCKET_WEIGHTS["seniority"])
    if seniority:
        evidence.append(f"👤 seniority: {seniority[0]}")

    location_lower = fields.location.lower()
    location_hits = [kw for kw in SIGNAL_KEYWORDS["remote_canada"] if kw in location_lower]
    remote_canada = _unique(lookup(signals, "remote_canada"), location_hits)
    score += bucket_score(len(remote_canada), *BUCKET_WEIGHTS["remote_canada"])
    if remote_canada:
        evidence.append(f"🌍 {remote_canada[0]}")

    recency = lookup(signals, "recency")
    score += bucket_score(len(recency), *BUCKET_WEIGHTS["recency"])
    if recency:
        evidence.append(f"🕒 {recency[0]}")

    accessibility = lookup(signals, "accessibility")
    score += bucket_score(len(accessibility), *BUCKET_WEIGHTS["accessibility"])
    if accessibility:
        evidence.append(f"♿ {accessibility[0]}")

    score = clamp(score)
    return score, keyword_tier(score), evidence[:MAX_EVIDENCE]


def _clean(value: str) -> str:
    return " ".join(value.split())


# =============================================================================
# SCORER STRATEGIES
# =============================================================================


class ScoringError(Exception):
    """Raised when a candidate cannot be scored (the item is skipped)."""

    pass


class Scorer(ABC):
    """Abstract scoring strategy."""

    name: str = ""

    @abstractmethod
    def score(self, candidate: LeadCandidate) -> ScoreResult:
        """Score a candidate. May raise ScoringError."""
        pass


class LocalScorer(Scorer):
    """Offline crawl policy: rewards reachable, remote-friendly Canadian companies."""

    name = "local"

    def score(self, candidate: LeadCandidate) -> ScoreResult:
        score = 0
        confidence = 0

        # Contact method scoring
        method = "unknown"
        if candidate.emails:
            score += 30
            method = "email"
            confidence += 40
        if candidate.contact_page_url:
            score += 15
            if method == "unknown":
                method = "contact_form"
            confidence += 20
        if candidate.demo_booking_url:
            score += 15
            method = "booking_link"
            confidence += 20

        # Signal keywords
        if candidate.video_keywords:
            score += min(len(candidate.video_keywords) * 5, 20)
            confidence += 15

        # Remote signal
        if candidate.remote_signal == "YES":
            score += 15
            confidence += 15
        elif candidate.remote_signal == "NO":
            score -= 20

        # Country preference
        if candidate.country_guess == "CA":
            score += 20
            confidence += 10
        elif candidate.country_guess == "US" and candidate.us_review_required:
            score -= 10

        if len(candidate.location_keywords) > 2:
            score += 10

        if candidate.careers_page_url:
            score += 5

        score = clamp(score)

        angle = "speed"
        if "training" in candidate.video_keywords:
            angle = "training"
        elif "podcast" in candidate.video_keywords or "webinar" in candidate.video_keywords:
            angle = "repurposing"
        elif candidate.remote_signal == "YES":
            angle = "accessibility"

        return ScoreResult(
            score=score,
            tier=local_tier(score),
            confidence=min(100, confidence),
            recommended_contact_method=method,
            suggested_outreach_angle=angle,
            discovery_confidence=70,
        )


class KeywordScorer(Scorer):
    """Server-side policy evaluated in-process, exactly as /analyze would."""

    name = "keyword"

    def score(self, candidate: LeadCandidate) -> ScoreResult:
        request = build_analyze_request(candidate)
        raw = request.extracted_fields
        fields = ExtractedFields(
            name=_clean(raw.name),
            title=_clean(raw.title),
            company=_clean(raw.company),
            location=_clean(raw.location),
            page_url=request.page_url,
        )

        field_text = " ".join([raw.name, raw.title, raw.company, raw.location])
        signals = merge_signals(
            request.signals,
            detect_signals(request.raw_text_sample),
            detect_signals(field_text),
        )

        score, tier, evidence = compute_score(signals, fields)
        reco = build_outreach_reco(fields, signals)
        return ScoreResult(
            score=score,
            tier=tier,
            confidence=85,
            evidence=evidence,
            recommended_contact_method=reco.suggested_contact_method,
            suggested_outreach_angle=reco.suggested_angle,
            discovery_confidence=80,
        )


class RemoteScorer(Scorer):
    """Server-side policy via a LeadScout server's POST /analyze."""

    name = "server"

    def __init__(self, fetcher: Fetcher, server_url: str):
        self.fetcher = fetcher
        self.server_url = server_url.rstrip("/")

    def score(self, candidate: LeadCandidate) -> ScoreResult:
        payload = build_analyze_request(candidate).model_dump(mode="json")
        body = self.fetcher.post(f"{self.server_url}/analyze", payload)
        if body is None:
            raise ScoringError(f"Server rejected {candidate.company_url}")

        try:
            analyzed = parse_analyze_response(body)
        except ValueError as e:
            raise ScoringError(str(e)) from e

        return ScoreResult(
            score=analyzed.score,
            tier=analyzed.tier,
            confidence=85,
            evidence=analyzed.evidence[:MAX_EVIDENCE],
            recommended_contact_method=analyzed.outreach_reco.suggested_contact_method,
            suggested_outreach_angle=analyzed.outreach_reco.suggested_angle,
            discovery_confidence=80,
        )


def get_scorer(config: RunConfig, fetcher: Fetcher | None = None) -> Scorer:
    """Factory to get the configured scoring strategy."""
    if config.scorer == "local":
        return LocalScorer()
    elif config.scorer == "keyword":
        return KeywordScorer()
    elif config.scorer == "server":
        if fetcher is None:
            raise ValueError("Server scoring needs a fetcher")
        return RemoteScorer(fetcher, config.server_url)
    else:
        raise ValueError(f"Unknown scorer: {config.scorer}")


def apply_score(candidate: LeadCandidate, result: ScoreResult) -> LeadCandidate:
    """Return a scored copy of the candidate."""
    return candidate.model_copy(update=result.model_dump())


# =============================================================================
# RANKING
# =============================================================================


def rank_candidates(candidates: list[LeadCandidate]) -> list[LeadCandidate]:
    """Order by tier (A first, SKIP last), then score descending. Stable for ties."""
    return sorted(candidates, key=lambda c: (TIER_ORDER[c.tier], -c.score))
