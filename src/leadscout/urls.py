"""
LeadScout URL utilities - validation, normalization, domains and deny lists.
"""

from pathlib import Path
from urllib.parse import urljoin, urlsplit, urlunsplit


def is_valid_url(url: str) -> bool:
    """True for absolute http(s) URLs with a host."""
    try:
        parts = urlsplit(url.strip())
        return parts.scheme in ("http", "https") and bool(parts.hostname)
    except ValueError:
        return False


def normalize_url(url: str) -> str:
    """
    Drop the fragment and any trailing slash; lowercase scheme and host.
    Idempotent. Unparseable input is returned unchanged.
    """
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return url
    if not parts.scheme or not parts.netloc:
        return url
    path = parts.path.rstrip("/")
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, parts.query, ""))


def normalize_domain(url_or_domain: str) -> str:
    """Normalize a URL or bare hostname to its lowercase, www-less domain."""
    if not url_or_domain:
        return ""
    if "://" in url_or_domain:
        return extract_domain(url_or_domain)
    domain = url_or_domain.lower().strip()
    return domain.removeprefix("www.")


def extract_domain(url: str) -> str:
    """Extract the candidate domain from a URL (e.g. https://www.Foo.com/x -> foo.com)."""
    try:
        host = urlsplit(url.strip()).hostname
    except ValueError:
        return ""
    if not host:
        return ""
    return host.lower().removeprefix("www.")


def is_denied_domain(domain: str, denied: list[str]) -> bool:
    """True if any deny-list entry is a substring of the www-stripped domain."""
    normalized = domain.lower().removeprefix("www.")
    return any(entry.lower() in normalized for entry in denied if entry)


def resolve_url(base_url: str, relative_url: str) -> str:
    """Resolve a link against the page URL. Unresolvable links become ""."""
    if not relative_url:
        return ""
    if relative_url.startswith("http"):
        return relative_url
    if relative_url.startswith("//"):
        return "https:" + relative_url
    try:
        return urljoin(base_url, relative_url)
    except ValueError:
        return ""


def read_lines(path: Path) -> list[str]:
    """Read non-blank, non-comment lines from a text file. Missing file -> []."""
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return []
    lines = []
    for line in content.splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            lines.append(line)
    return lines


def load_denylist(path: Path) -> list[str]:
    """Load deny-list domain substrings (one per line, lowercased)."""
    return [line.lower() for line in read_lines(path)]
