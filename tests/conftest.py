"""Pytest configuration and fixtures."""

from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from leadscout.fetcher import Fetcher, FetcherConfig, RateLimiter
from leadscout.logger import ProgressLogger
from leadscout.models import LeadCandidate, RunConfig, SignalMatch

CANADIAN_STUDIO_HTML = """
<html>
  <head>
    <title>Maple Frame Studio | Video Production</title>
    <meta name="description" content="Remote video team based in Toronto, Canada.">
  </head>
  <body>
    <h1>Maple Frame Studio</h1>
    <p>We are a remote, distributed video production team in Toronto, Canada.</p>
    <p>Webinar recording, podcast editing and training video for Canadian companies.</p>
    <p>Email hello@mapleframe.ca to start.</p>
    <a href="/contact">Contact</a>
    <a href="/careers">Careers</a>
    <a href="https://calendly.com/mapleframe/demo">Book a demo</a>
    <a href="https://twitter.com/mapleframe">Twitter</a>
    <script>var tracking = "ignore me";</script>
  </body>
</html>
"""

OFFICE_ONLY_HTML = """
<html>
  <head><title>Plain Widgets</title></head>
  <body><p>Our staff work on-site at our office.</p></body>
</html>
"""


@pytest.fixture
def studio_html() -> str:
    """Homepage of a remote Canadian video studio."""
    return CANADIAN_STUDIO_HTML


@pytest.fixture
def office_html() -> str:
    """Homepage of an office-only company with no signals."""
    return OFFICE_ONLY_HTML


class FakeClock:
    """Manual clock: sleep() advances time instead of blocking."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def time(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    """A controllable clock for rate limiter tests."""
    return FakeClock()


@pytest.fixture
def quiet_logger() -> ProgressLogger:
    """Non-verbose logger."""
    return ProgressLogger("test")


@pytest.fixture
def make_fetcher(quiet_logger: ProgressLogger) -> Callable[..., Fetcher]:
    """Build a Fetcher around an httpx.MockTransport handler, without real sleeps."""

    def _make(
        handler: Callable[[httpx.Request], httpx.Response],
        rate_limiter: RateLimiter | None = None,
    ) -> Fetcher:
        return Fetcher(
            FetcherConfig(timeout=5.0, backoff_seconds=0.0),
            rate_limiter=rate_limiter or RateLimiter(0),
            logger=quiet_logger,
            transport=httpx.MockTransport(handler),
            sleep=lambda _seconds: None,
        )

    return _make


@pytest.fixture
def sample_candidate() -> LeadCandidate:
    """A well-signalled Canadian candidate (unscored)."""
    return LeadCandidate(
        domain="mapleframe.ca",
        company_name="Maple Frame Studio",
        company_url="https://mapleframe.ca",
        source_url="https://mapleframe.ca",
        emails=["hello@mapleframe.ca"],
        contact_page_url="https://mapleframe.ca/contact",
        careers_page_url="https://mapleframe.ca/careers",
        demo_booking_url="https://calendly.com/mapleframe/demo",
        video_keywords=["webinar", "podcast", "training", "video"],
        location_keywords=["canada", "canadian", "remote", "distributed"],
        signals=[
            SignalMatch(category="video_production", matched=["video", "webinar", "podcast"]),
            SignalMatch(category="remote_canada", matched=["remote", "canada", "toronto"]),
        ],
        country_guess="CA",
        remote_signal="YES",
        raw_text_sample="Remote video production team in Toronto, Canada. Webinar and podcast.",
    )


@pytest.fixture
def bare_candidate() -> LeadCandidate:
    """A candidate with no signals at all."""
    return LeadCandidate(
        domain="plain.example",
        company_name="Plain",
        company_url="https://plain.example",
    )


@pytest.fixture
def run_config(tmp_path: Path) -> RunConfig:
    """RunConfig pointing every file at a temp directory, no delays."""
    data = tmp_path / "data"
    data.mkdir()
    return RunConfig(
        rate_limit_ms=0,
        seeds_urls=str(data / "seeds.urls.txt"),
        seeds_queries=str(data / "seeds.queries.txt"),
        deny_domains=str(data / "deny.domains.txt"),
        ponds_config=str(data / "seeds.ponds.yml"),
        out_dir=str(tmp_path / "out"),
    )
