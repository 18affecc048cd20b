"""
LeadScout server client - payloads for the external /analyze and /append-lead
endpoints, plus response parsing.
"""

import json
from datetime import UTC, datetime

from pydantic import ValidationError

from .fetcher import Fetcher
from .models import AnalyzeRequest, AnalyzeResponse, ExtractedFields, LeadCandidate, SignalMatch

HUNTER_TITLE = "Lead from Hunter discovery"


def candidate_fields(candidate: LeadCandidate) -> ExtractedFields:
    """Map a crawled candidate onto the service's person-centric field set."""
    location = "Canada" if candidate.country_guess == "CA" else candidate.country_guess
    return ExtractedFields(
        name=candidate.company_name,
        title=HUNTER_TITLE,
        company=candidate.company_name,
        location=location,
        page_url=candidate.company_url,
    )


def hunter_signals(candidate: LeadCandidate) -> list[SignalMatch]:
    """Translate crawl keywords into service signal categories."""
    signals = []

    if candidate.video_keywords:
        signals.append(
            SignalMatch(category="video_production", matched=list(candidate.video_keywords))
        )

    if candidate.remote_signal == "YES" or "remote" in candidate.location_keywords:
        matched = [
            kw
            for kw in candidate.location_keywords
            if "remote" in kw.lower() or "canada" in kw.lower()
        ]
        signals.append(SignalMatch(category="remote_canada", matched=matched))

    return signals


def build_analyze_request(candidate: LeadCandidate) -> AnalyzeRequest:
    """
    Serialize a candidate for POST /analyze.

    Only the crawl keyword lists travel as signals. The service detects the
    rest from raw_text_sample, so text past the sample never scores.
    """
    return AnalyzeRequest(
        page_url=candidate.company_url,
        extracted_fields=candidate_fields(candidate),
        raw_text_sample=candidate.raw_text_sample,
        signals=hunter_signals(candidate),
    )


def parse_analyze_response(body: str) -> AnalyzeResponse:
    """Parse an /analyze body. Raises ValueError when it is not a valid response."""
    try:
        return AnalyzeResponse.model_validate_json(body)
    except ValidationError as e:
        raise ValueError(f"Malformed analyze response: {e.error_count()} error(s)") from e


def build_lead_row(candidate: LeadCandidate) -> dict:
    """Flat row for the leads sheet behind /append-lead."""
    keywords = ", ".join(candidate.video_keywords)
    return {
        "timestamp_iso": datetime.now(UTC).isoformat(),
        "name": candidate.company_name,
        "title": "Hunter Discovery",
        "company": candidate.company_name,
        "location": candidate.country_guess,
        "page_url": candidate.company_url,
        "score": candidate.score,
        "tier": candidate.tier,
        "evidence": candidate.raw_text_sample[:500] or "Hunter discovery",
        "suggested_contact_method": candidate.recommended_contact_method,
        "suggested_angle": candidate.suggested_outreach_angle,
        "outreach_hook": f"Discovered via Hunter: {candidate.company_name}",
        "call_to_action": "Schedule a call",
        "onboarding_next_step": "60-sec audit",
        "status": "new",
        "pipeline_stage": "New",
        "next_action": "Connect",
        "followup_date": "",
        "notes": f"US Review: {str(candidate.us_review_required).lower()}. Keywords: {keywords}",
    }


def append_lead(fetcher: Fetcher, server_url: str, candidate: LeadCandidate) -> bool:
    """Append a captured lead via the server. Duplicates and failures return False."""
    body = fetcher.post(
        f"{server_url.rstrip('/')}/append-lead", {"lead": build_lead_row(candidate)}
    )
    if body is None:
        fetcher.logger.debug(f"Could not append {candidate.company_name} (rejected or duplicate)")
        return False

    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        data = None
    if not isinstance(data, dict):
        fetcher.logger.warning(f"Unreadable append response for {candidate.company_name}")
        return False

    if data.get("success"):
        return True
    if not data.get("duplicate"):
        fetcher.logger.warning(
            f"Failed to append {candidate.company_name}: {data.get('message', '')}"
        )
    return False
