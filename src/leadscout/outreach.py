"""
LeadScout outreach rules - deterministic contact method, angle and next step.

Used by the server-side scoring policy. Message copy (hooks, CTAs) is produced
by the outreach service, not here.
"""

from .models import ExtractedFields, OutreachReco, SignalMatch

ONBOARDING_STEPS: dict[str, str] = {
    "Speed": "Pilot clip",
    "Accessibility": "60-sec audit",
    "Repurposing": "Repurposing plan",
    "Training/L&D": "10-min call",
    "Overflow capacity": "10-min call",
}


def has_category(signals: list[SignalMatch], category: str) -> bool:
    return any(s.category == category for s in signals)


def pick_contact_method(fields: ExtractedFields, signals: list[SignalMatch]) -> str:
    """LinkedIn pages get a message, content teams a comment-then-DM, else email/form."""
    if "linkedin.com" in fields.page_url.lower():
        return "LinkedIn message"
    if has_category(signals, "content_marketing"):
        return "Comment-then-DM"
    if fields.company:
        return "Email"
    return "Contact form"


def pick_angle(signals: list[SignalMatch]) -> str:
    if has_category(signals, "accessibility"):
        return "Accessibility"
    if has_category(signals, "video_production"):
        return "Speed"
    if has_category(signals, "content_marketing"):
        return "Repurposing"
    return "Overflow capacity"


def build_outreach_reco(fields: ExtractedFields, signals: list[SignalMatch]) -> OutreachReco:
    """Pick method, angle and onboarding step for a scored lead."""
    angle = pick_angle(signals)
    return OutreachReco(
        suggested_contact_method=pick_contact_method(fields, signals),
        suggested_angle=angle,
        onboarding_next_step=ONBOARDING_STEPS[angle],
    )
