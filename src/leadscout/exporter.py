"""
LeadScout exporters - JSON (canonical) and CSV (derived) lead files.
"""

import csv
import json
from datetime import UTC, date, datetime
from pathlib import Path
from typing import TextIO

from .models import LeadCandidate, count_tiers

# CSV column order (stable schema - derived from LeadCandidate)
CSV_COLUMNS = [
    # Company
    "company_name",
    "domain",
    "company_url",
    # Score
    "score",
    "tier",
    "country_guess",
    "remote_signal",
    "us_review_required",
    # Contact routes
    "emails",
    "contact_page_url",
    "careers_page_url",
    "demo_booking_url",
    # Approach advice
    "recommended_contact_method",
    "suggested_outreach_angle",
    # Evidence + quality
    "video_keywords",
    "location_keywords",
    "confidence",
]


def leads_filename(extension: str, day: date | None = None) -> str:
    """Dated export name, e.g. leads-2024-03-01.csv."""
    day = day or datetime.now(UTC).date()
    return f"leads-{day.isoformat()}.{extension}"


def candidate_to_row(candidate: LeadCandidate) -> dict:
    """Convert a candidate to a flat CSV row dict."""
    return {
        "company_name": candidate.company_name,
        "domain": candidate.domain,
        "company_url": candidate.company_url,
        "score": candidate.score,
        "tier": candidate.tier,
        "country_guess": candidate.country_guess,
        "remote_signal": candidate.remote_signal,
        "us_review_required": "yes" if candidate.us_review_required else "no",
        "emails": "; ".join(candidate.emails),
        "contact_page_url": candidate.contact_page_url or "",
        "careers_page_url": candidate.careers_page_url or "",
        "demo_booking_url": candidate.demo_booking_url or "",
        "recommended_contact_method": candidate.recommended_contact_method,
        "suggested_outreach_angle": candidate.suggested_outreach_angle,
        "video_keywords": "; ".join(candidate.video_keywords),
        "location_keywords": "; ".join(candidate.location_keywords),
        "confidence": candidate.confidence,
    }


def export_csv(candidates: list[LeadCandidate], output: Path | TextIO) -> int:
    """Export candidates to CSV. Returns number of rows written."""
    rows = [candidate_to_row(c) for c in candidates]

    if isinstance(output, Path):
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS)
            writer.writeheader()
            writer.writerows(rows)
    else:
        writer = csv.DictWriter(output, fieldnames=CSV_COLUMNS)
        writer.writeheader()
        writer.writerows(rows)

    return len(rows)


def export_json(candidates: list[LeadCandidate], output: Path) -> int:
    """Export candidates plus run metadata to JSON (canonical format)."""
    output.parent.mkdir(parents=True, exist_ok=True)
    data = {
        "metadata": {
            "exported_at": datetime.now(UTC).isoformat(),
            "total_candidates": len(candidates),
            "tiers": count_tiers(candidates),
        },
        "candidates": [c.model_dump(mode="json") for c in candidates],
    }
    with open(output, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, default=str)
    return len(candidates)
