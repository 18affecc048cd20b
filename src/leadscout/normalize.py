"""
LeadScout normalizer - company name, country guess and remote signal.
"""

from .keywords import CANADA_INDICATORS, OFFICE_INDICATORS, REMOTE_INDICATORS, US_INDICATORS
from .models import CountryGuess, RemoteSignal
from .urls import extract_domain


def _count_present(haystack: str, indicators: list[str]) -> int:
    return sum(1 for indicator in indicators if indicator in haystack)


def infer_company_name(url: str, page_title: str) -> str:
    """
    Name from the domain's first label ("acme-video.ca" -> "Acme Video"),
    replaced by the page title's leading segment when the title is 4-99 chars.
    """
    name = ""

    domain = extract_domain(url)
    if domain:
        parts = domain.split(".")[0].split("-")
        name = " ".join(part[:1].upper() + part[1:] for part in parts)

    if page_title and 3 < len(page_title) < 100:
        name = page_title.split("|")[0].split("-")[0].strip()

    return name or "Unknown"


def country_guess(text: str, domain: str) -> CountryGuess:
    """Guess CA/US from indicator counts in text + domain, then from the TLD."""
    haystack = text.lower() + " " + domain.lower()

    ca_matches = _count_present(haystack, CANADA_INDICATORS)
    us_matches = _count_present(haystack, US_INDICATORS)

    if ca_matches > 0 and ca_matches > us_matches:
        return "CA"
    if us_matches > 0:
        return "US"
    if domain.endswith(".ca"):
        return "CA"
    if domain.endswith(".us"):
        return "US"
    return "UNKNOWN"


def remote_signal(text: str) -> RemoteSignal:
    """YES if remote indicators outnumber office ones, NO on any office indicator."""
    lower = text.lower()

    remote_matches = _count_present(lower, REMOTE_INDICATORS)
    office_matches = _count_present(lower, OFFICE_INDICATORS)

    if remote_matches > 0 and remote_matches > office_matches:
        return "YES"
    if office_matches > 0:
        return "NO"
    return "UNKNOWN"
