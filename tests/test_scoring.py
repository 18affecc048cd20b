"""Tests for scoring policies and ranking."""

import json

import httpx
import pytest

from leadscout.models import (
    ExtractedContent,
    ExtractedFields,
    LeadCandidate,
    RunConfig,
    SignalMatch,
)
from leadscout.pipeline import build_candidate
from leadscout.scoring import (
    KeywordScorer,
    LocalScorer,
    RemoteScorer,
    ScoringError,
    apply_score,
    bucket_score,
    compute_score,
    get_scorer,
    keyword_tier,
    local_tier,
    rank_candidates,
)


def _with(candidate: LeadCandidate, **update) -> LeadCandidate:
    return candidate.model_copy(update=update)


class TestTiers:
    """Tests for the two tier step functions."""

    def test_keyword_tiers(self) -> None:
        """Test the server-side thresholds."""
        assert keyword_tier(80) == "A"
        assert keyword_tier(75) == "A"
        assert keyword_tier(60) == "B"
        assert keyword_tier(50) == "B"
        assert keyword_tier(30) == "C"
        assert keyword_tier(0) == "C"

    def test_local_tiers(self) -> None:
        """Test the offline thresholds, including SKIP."""
        assert local_tier(10) == "SKIP"
        assert local_tier(19) == "SKIP"
        assert local_tier(20) == "C"
        assert local_tier(30) == "C"
        assert local_tier(45) == "B"
        assert local_tier(70) == "A"


class TestComputeScore:
    """Tests for the six-bucket keyword policy."""

    def test_buckets_and_evidence(self) -> None:
        """Test bucket points and evidence lines for a mixed signal set."""
        signals = [
            SignalMatch(category="video_production", matched=["video", "webinar"]),
            SignalMatch(category="content_marketing", matched=["marketing"]),
            SignalMatch(category="recency", matched=["days ago"]),
        ]
        fields = ExtractedFields(title="Director", location="Toronto")

        score, tier, evidence = compute_score(signals, fields)

        # video 16 + content 7 + seniority(title) 8 + remote(location) 5 + recency 5
        assert score == 41
        assert tier == "C"
        assert evidence == [
            "🎬 video",
            "🎬 webinar",
            "📢 marketing",
            "👤 seniority: director",
            "🌍 toronto",
        ]

    def test_bucket_caps(self) -> None:
        """Test that a bucket stops at its cap and keeps three evidence lines."""
        signals = [
            SignalMatch(
                category="video_production",
                matched=["video", "webinar", "podcast", "explainer", "animation"],
            )
        ]
        score, _, evidence = compute_score(signals, ExtractedFields())
        assert score == 30
        assert len([e for e in evidence if e.startswith("🎬")]) == 3

    def test_bucket_score(self) -> None:
        """Test per-hit weight with a cap."""
        assert bucket_score(2, 8, 30) == 16
        assert bucket_score(10, 8, 30) == 30
        assert bucket_score(0, 8, 30) == 0

    def test_all_buckets_full_is_100(self) -> None:
        """Test that every bucket at its cap scores 100."""
        signals = [
            SignalMatch(category="video_production", matched=["a", "b", "c", "d"]),
            SignalMatch(category="content_marketing", matched=["a", "b", "c", "d"]),
            SignalMatch(category="seniority", matched=["a", "b"]),
            SignalMatch(category="remote_canada", matched=["a", "b"]),
            SignalMatch(category="recency", matched=["a", "b"]),
            SignalMatch(category="accessibility", matched=["a", "b"]),
        ]
        score, tier, evidence = compute_score(signals, ExtractedFields())
        assert score == 100
        assert tier == "A"
        assert len(evidence) == 5

    def test_no_signals(self) -> None:
        """Test that no signals score zero."""
        assert compute_score([], ExtractedFields()) == (0, "C", [])

    def test_pure(self) -> None:
        """Same input, same output."""
        signals = [SignalMatch(category="accessibility", matched=["captions"])]
        fields = ExtractedFields(title="VP Marketing", location="Remote")
        assert compute_score(signals, fields) == compute_score(signals, fields)


class TestLocalScorer:
    """Tests for the offline crawl policy."""

    def test_strong_candidate(self, sample_candidate: LeadCandidate) -> None:
        """Test a fully signalled Canadian candidate."""
        result = LocalScorer().score(sample_candidate)
        assert result.score == 100
        assert result.tier == "A"
        assert result.confidence == 100
        assert result.recommended_contact_method == "booking_link"
        assert result.suggested_outreach_angle == "training"
        assert result.discovery_confidence == 70

    def test_bare_candidate_skipped(self, bare_candidate: LeadCandidate) -> None:
        """Test that a candidate with nothing scores SKIP."""
        result = LocalScorer().score(bare_candidate)
        assert result.score == 0
        assert result.tier == "SKIP"
        assert result.recommended_contact_method == "unknown"
        assert result.suggested_outreach_angle == "speed"

    def test_email_and_canada(self, bare_candidate: LeadCandidate) -> None:
        """Test email plus Canada alone."""
        candidate = _with(bare_candidate, emails=["hi@acme.ca"], country_guess="CA")
        result = LocalScorer().score(candidate)
        assert result.score == 50
        assert result.tier == "B"
        assert result.recommended_contact_method == "email"

    def test_contact_form_method(self, bare_candidate: LeadCandidate) -> None:
        """Test a contact page without an email."""
        candidate = _with(bare_candidate, contact_page_url="https://acme.ca/contact")
        assert LocalScorer().score(candidate).recommended_contact_method == "contact_form"

    def test_office_penalty_clamped(self, bare_candidate: LeadCandidate) -> None:
        """Test that the office penalty cannot go below zero."""
        candidate = _with(bare_candidate, remote_signal="NO")
        assert LocalScorer().score(candidate).score == 0

    def test_us_review_penalty(self, bare_candidate: LeadCandidate) -> None:
        """Test the US review penalty."""
        candidate = _with(
            bare_candidate, emails=["hi@acme.com"], country_guess="US", us_review_required=True
        )
        result = LocalScorer().score(candidate)
        assert result.score == 20
        assert result.tier == "C"

    def test_angles(self, bare_candidate: LeadCandidate) -> None:
        """Test the outreach angle rules."""
        scorer = LocalScorer()
        podcast = _with(bare_candidate, video_keywords=["podcast"])
        remote = _with(bare_candidate, remote_signal="YES")
        assert scorer.score(podcast).suggested_outreach_angle == "repurposing"
        assert scorer.score(remote).suggested_outreach_angle == "accessibility"

    def test_pure(self, sample_candidate: LeadCandidate) -> None:
        """Test that scoring the same candidate twice agrees."""
        scorer = LocalScorer()
        assert scorer.score(sample_candidate) == scorer.score(sample_candidate)


class TestKeywordScorer:
    """Tests for the server-side policy run in-process."""

    def test_sample_candidate(self, sample_candidate: LeadCandidate) -> None:
        """Test the keyword policy on a strong candidate."""
        result = KeywordScorer().score(sample_candidate)
        # video 4 phrases (cap 30) + seniority "lead" from the hunter title 8
        # + remote/canada 3 phrases (cap 10)
        assert result.score == 48
        assert result.tier == "C"
        assert result.confidence == 85
        assert result.discovery_confidence == 80
        assert result.evidence[0] == "🎬 webinar"
        assert "👤 seniority: lead" in result.evidence
        assert result.recommended_contact_method == "Email"
        assert result.suggested_outreach_angle == "Speed"

    def test_text_past_sample_not_scored(self, run_config: RunConfig) -> None:
        """Test that keywords beyond the raw text sample add no points."""
        text = "x" * 2100 + " marketing brand content campaigns director senior"
        candidate = build_candidate(
            "https://far.example", "far.example", ExtractedContent(text=text), run_config
        )

        result = KeywordScorer().score(candidate)

        assert result.score == 8
        assert result.tier == "C"
        assert result.evidence == ["👤 seniority: lead"]

    def test_bounds(self, bare_candidate: LeadCandidate) -> None:
        """Test that a bare candidate stays within range."""
        result = KeywordScorer().score(bare_candidate)
        assert 0 <= result.score <= 100
        assert result.tier in ("A", "B", "C")


class TestRemoteScorer:
    """Tests for scoring through a LeadScout server."""

    def test_success(self, make_fetcher, sample_candidate: LeadCandidate) -> None:
        """Test a successful /analyze round trip."""
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "score": 82,
                    "tier": "A",
                    "evidence": ["🎬 video"],
                    "outreach_reco": {
                        "suggested_contact_method": "Email",
                        "suggested_angle": "Speed",
                        "outreach_hook": "ignored",
                    },
                },
            )

        scorer = RemoteScorer(make_fetcher(handler), "http://localhost:3789/")
        result = scorer.score(sample_candidate)

        assert seen["url"] == "http://localhost:3789/analyze"
        assert seen["body"]["extracted_fields"]["location"] == "Canada"
        assert result.score == 82
        assert result.tier == "A"
        assert result.recommended_contact_method == "Email"
        assert result.discovery_confidence == 80

    def test_server_error(self, make_fetcher, sample_candidate: LeadCandidate) -> None:
        """Test that a 5xx raises ScoringError."""
        scorer = RemoteScorer(make_fetcher(lambda r: httpx.Response(500)), "http://x")
        with pytest.raises(ScoringError):
            scorer.score(sample_candidate)

    def test_malformed_json(self, make_fetcher, sample_candidate: LeadCandidate) -> None:
        """Test that an unreadable body raises ScoringError."""
        scorer = RemoteScorer(make_fetcher(lambda r: httpx.Response(200, text="{oops")), "http://x")
        with pytest.raises(ScoringError):
            scorer.score(sample_candidate)

    def test_schema_invalid(self, make_fetcher, sample_candidate: LeadCandidate) -> None:
        """Test that an out-of-range score raises ScoringError."""
        body = {"score": 150, "tier": "A", "outreach_reco": {}}
        scorer = RemoteScorer(make_fetcher(lambda r: httpx.Response(200, json=body)), "http://x")
        with pytest.raises(ScoringError):
            scorer.score(sample_candidate)


class TestGetScorer:
    """Tests for the scorer factory."""

    def test_selects_by_config(self, make_fetcher) -> None:
        """Test choosing the scorer from the run config."""
        fetcher = make_fetcher(lambda r: httpx.Response(200))
        assert isinstance(get_scorer(RunConfig()), LocalScorer)
        assert isinstance(get_scorer(RunConfig(scorer="keyword")), KeywordScorer)
        assert isinstance(get_scorer(RunConfig(scorer="server"), fetcher), RemoteScorer)

    def test_server_needs_fetcher(self) -> None:
        """Test that server scoring without a fetcher fails."""
        with pytest.raises(ValueError):
            get_scorer(RunConfig(scorer="server"))


class TestRanking:
    """Tests for rank_candidates and apply_score."""

    def test_tier_then_score(self, bare_candidate: LeadCandidate) -> None:
        """Test ordering by tier, then score descending."""
        b90 = _with(bare_candidate, tier="B", score=90, company_name="b90")
        a10 = _with(bare_candidate, tier="A", score=10, company_name="a10")
        a50 = _with(bare_candidate, tier="A", score=50, company_name="a50")

        ranked = rank_candidates([b90, a10, a50])
        assert [c.company_name for c in ranked] == ["a50", "a10", "b90"]

    def test_skip_last_and_stable(self, bare_candidate: LeadCandidate) -> None:
        """Test that SKIP sorts last and ties keep input order."""
        skip = _with(bare_candidate, tier="SKIP", score=5, company_name="skip")
        c1 = _with(bare_candidate, tier="C", score=30, company_name="c1")
        c2 = _with(bare_candidate, tier="C", score=30, company_name="c2")

        ranked = rank_candidates([skip, c1, c2])
        assert [c.company_name for c in ranked] == ["c1", "c2", "skip"]

    def test_returns_new_list(self, bare_candidate: LeadCandidate) -> None:
        """Test that ranking does not return the input list."""
        original = [bare_candidate]
        assert rank_candidates(original) is not original

    def test_apply_score_copies(self, sample_candidate: LeadCandidate) -> None:
        """Test that applying a score leaves the original alone."""
        result = LocalScorer().score(sample_candidate)
        scored = apply_score(sample_candidate, result)
        assert scored.score == 100
        assert scored.tier == "A"
        assert sample_candidate.score == 0
