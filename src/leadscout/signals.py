"""
LeadScout signal detector - keyword categories, link sub-signals and emails.

Detection is case-insensitive substring matching: no tokenization, no
stemming, no word boundaries ("lead" matches inside "leadership").
Every function here is total over any string input.
"""

import re
from dataclasses import dataclass, field

from .keywords import (
    CAREERS_LINK_TERMS,
    CONTACT_LINK_TERMS,
    DEMO_LINK_TERMS,
    LOCATION_KEYWORDS,
    SIGNAL_KEYWORDS,
    SOCIAL_DOMAINS,
    VIDEO_KEYWORDS,
)
from .models import SignalMatch
from .urls import resolve_url

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
STRICT_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
EMAIL_EXCLUDE_SUBSTRINGS = ("example", "test")
MAX_EMAILS = 5


@dataclass
class LinkSignals:
    """Contact-route links found among a page's anchors."""

    contact_page_url: str | None = None
    careers_page_url: str | None = None
    demo_booking_url: str | None = None
    social_links: list[str] = field(default_factory=list)


@dataclass
class PageSignals:
    """Everything the detector found on one page."""

    emails: list[str] = field(default_factory=list)
    links: LinkSignals = field(default_factory=LinkSignals)
    video_keywords: list[str] = field(default_factory=list)
    location_keywords: list[str] = field(default_factory=list)
    signals: list[SignalMatch] = field(default_factory=list)


def contains_keywords(text: str, keywords: list[str]) -> list[str]:
    """Return the keywords that occur in text, in keyword order."""
    lower = text.lower()
    return [kw for kw in keywords if kw.lower() in lower]


def detect_signals(text: str) -> list[SignalMatch]:
    """Scan text for each signal category; only categories with a hit are returned."""
    results = []
    for category, keywords in SIGNAL_KEYWORDS.items():
        matched = contains_keywords(text, keywords)
        if matched:
            results.append(SignalMatch(category=category, matched=matched))  # type: ignore[arg-type]
    return results


def merge_signals(*signal_lists: list[SignalMatch]) -> list[SignalMatch]:
    """Union matches per category, keeping first-seen category and phrase order."""
    merged: dict[str, list[str]] = {}
    for signals in signal_lists:
        for sig in signals:
            phrases = merged.setdefault(sig.category, [])
            for phrase in sig.matched:
                if phrase not in phrases:
                    phrases.append(phrase)
    return [
        SignalMatch(category=category, matched=matched)  # type: ignore[arg-type]
        for category, matched in merged.items()
        if matched
    ]


def lookup(signals: list[SignalMatch], category: str) -> list[str]:
    """Matched phrases for one category ([] if absent)."""
    for sig in signals:
        if sig.category == category:
            return sig.matched
    return []


def is_valid_email(email: str) -> bool:
    """Single @, something on each side, a dot in the domain part."""
    return bool(STRICT_EMAIL_PATTERN.match(email.lower()))


def extract_emails(text: str) -> list[str]:
    """Find up to 5 distinct plausible emails, excluding example/test addresses."""
    emails: list[str] = []
    for candidate in EMAIL_PATTERN.findall(text):
        if not is_valid_email(candidate):
            continue
        if any(bad in candidate for bad in EMAIL_EXCLUDE_SUBSTRINGS):
            continue
        if candidate not in emails:
            emails.append(candidate)
    return emails[:MAX_EMAILS]


def extract_link_signals(links: list[str], base_url: str) -> LinkSignals:
    """
    Classify anchors into contact/careers/demo routes and social profiles.

    For the three route categories the last matching link wins; social links
    accumulate without duplicates. Stored links are resolved against base_url.
    """
    result = LinkSignals()

    for link in links:
        lower_link = link.lower()
        if any(term in lower_link for term in CONTACT_LINK_TERMS):
            result.contact_page_url = resolve_url(base_url, link)
        if any(term in lower_link for term in CAREERS_LINK_TERMS):
            result.careers_page_url = resolve_url(base_url, link)
        if any(term in lower_link for term in DEMO_LINK_TERMS):
            result.demo_booking_url = resolve_url(base_url, link)
        if any(social in lower_link for social in SOCIAL_DOMAINS):
            resolved = resolve_url(base_url, link)
            if resolved not in result.social_links:
                result.social_links.append(resolved)

    return result


def extract_signals(text: str, links: list[str], base_url: str) -> PageSignals:
    """Run every detector over one page's text and links."""
    return PageSignals(
        emails=extract_emails(text),
        links=extract_link_signals(links, base_url),
        video_keywords=contains_keywords(text, VIDEO_KEYWORDS),
        location_keywords=contains_keywords(text, LOCATION_KEYWORDS),
        signals=detect_signals(text),
    )
