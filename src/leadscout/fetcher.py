"""
LeadScout fetcher - polite HTTP fetching with a global rate limit and retries.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from .logger import ProgressLogger

ACCEPT_HTML = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


class RateLimiter:
    """
    Minimum spacing between outbound requests.

    One instance gates every request made through the fetchers that share it,
    regardless of target domain. The lock is held across the sleep so
    concurrent callers queue up behind a single gate.
    """

    def __init__(
        self,
        min_interval_ms: int,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.min_interval = max(0, min_interval_ms) / 1000.0
        self.last_request_time: float | None = None
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()

    def wait(self) -> float:
        """Block until the next request may go out. Returns seconds slept."""
        with self._lock:
            waited = 0.0
            if self.last_request_time is not None:
                elapsed = self._clock() - self.last_request_time
                waited = max(0.0, self.min_interval - elapsed)
                if waited > 0:
                    self._sleep(waited)
            self.last_request_time = self._clock()
            return waited


@dataclass
class FetcherConfig:
    """Fetcher configuration."""

    timeout: float = 15.0
    user_agent: str = "Mozilla/5.0 (compatible; HunterBot/1.0)"
    backoff_seconds: float = 1.0  # Wait backoff * attempt between retries


class Fetcher:
    """HTTP client for the hunter: GET with bounded retries, POST without."""

    def __init__(
        self,
        config: FetcherConfig | None = None,
        rate_limiter: RateLimiter | None = None,
        logger: ProgressLogger | None = None,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config or FetcherConfig()
        self.rate_limiter = rate_limiter or RateLimiter(0)
        self.logger = logger or ProgressLogger("fetcher")
        self._transport = transport
        self._sleep = sleep

    def _client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self.config.timeout,
            follow_redirects=True,
            headers={"User-Agent": self.config.user_agent},
            transport=self._transport,
        )

    def _get(self, url: str) -> httpx.Response:
        with self._client() as client:
            return client.get(url, headers={"Accept": ACCEPT_HTML})

    def _log_attempt(self, url: str, retries: int) -> Callable[[RetryCallState], None]:
        def before_sleep(state: RetryCallState) -> None:
            error = state.outcome.exception() if state.outcome else None
            self.logger.debug(
                f"Attempt {state.attempt_number}/{retries} failed for {url}: {error}"
            )

        return before_sleep

    def fetch(self, url: str, retries: int = 3) -> str | None:
        """
        GET a page body, or None.

        Non-2xx responses return None at once. Network errors and timeouts are
        retried up to `retries` attempts, waiting backoff * attempt between
        them; an unsupported scheme is not retried. The rate limit applies once
        per call, not per attempt.
        """
        self.rate_limiter.wait()
        retries = max(1, retries)
        retryer = Retrying(
            stop=stop_after_attempt(retries),
            wait=wait_incrementing(
                start=self.config.backoff_seconds, increment=self.config.backoff_seconds
            ),
            retry=(
                retry_if_exception_type(httpx.TransportError)
                & retry_if_not_exception_type(httpx.UnsupportedProtocol)
            ),
            before_sleep=self._log_attempt(url, retries),
            sleep=self._sleep,
            reraise=True,
        )

        try:
            resp = retryer(self._get, url)
        except httpx.UnsupportedProtocol as e:
            self.logger.debug(f"Cannot fetch {url}: {e}")
            return None
        except httpx.TransportError as e:
            self.logger.warning(f"Failed to fetch {url} after {retries} attempts: {e}")
            return None
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self.logger.debug(f"Cannot fetch {url}: {e}")
            return None

        if not resp.is_success:
            self.logger.debug(f"Status {resp.status_code} for {url}")
            return None
        return resp.text

    def post(
        self, url: str, payload: Any, headers: dict[str, str] | None = None
    ) -> str | None:
        """POST a JSON payload once and return the body, or None on any failure."""
        self.rate_limiter.wait()

        try:
            with self._client() as client:
                resp = client.post(url, json=payload, headers=headers or {})
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self.logger.warning(f"POST failed for {url}: {e}")
            return None

        if not resp.is_success:
            self.logger.debug(f"POST {resp.status_code} for {url}")
            return None
        return resp.text
