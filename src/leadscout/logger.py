"""
LeadScout hunt log - console telemetry for seed crawls.

An operator watching a hunt should be able to tell which seed URL is being
fetched, which candidates were accepted at what tier, and which gate turned
the rest away. Progress goes to stdout; warnings and errors go to stderr so a
redirected progress log still surfaces failures.
"""

import sys
from datetime import UTC, datetime

# Line-buffer stdout so fetch lines appear while a slow page is downloading
try:
    sys.stdout.reconfigure(line_buffering=True)  # type: ignore
except Exception:
    pass  # Captured or piped streams may not support reconfigure


def _out(line: str) -> None:
    print(line, flush=True)


def _err(line: str) -> None:
    print(line, file=sys.stderr, flush=True)


SKIP_DETAIL_CHARS = 80


class ProgressLogger:
    """
    Console logger for one hunt run.

    Every skipped seed is printed with its gate reason (tier_filter,
    us_review, low_score, not_remote, BLOCKED, ...). Debug lines such as
    invalid URLs, repeated domains and fetch retries appear with --verbose.
    """

    def __init__(self, run_id: str, verbose: bool = False):
        self.run_id = run_id
        self.verbose = verbose
        self.start_time = datetime.now(UTC)
        self.phase_times: dict[str, datetime] = {}

    def _elapsed(self, now: datetime | None = None) -> float:
        return ((now or datetime.now(UTC)) - self.start_time).total_seconds()

    def phase(self, name: str, detail: str = "") -> None:
        """Announce a hunt stage (seed loading, fetch and score, capture, export)."""
        now = datetime.now(UTC)
        self.phase_times[name] = now
        label = f"{name}: {detail}" if detail else name
        _out(f"[Phase] {label} ({self._elapsed(now):.1f}s)")

    def info(self, msg: str) -> None:
        _out(f"  {msg}")

    def debug(self, msg: str) -> None:
        if self.verbose:
            _out(f"    [Debug] {msg}")

    def fetch(self, url: str, current: int, total: int) -> None:
        """Seed URL `current` of `total` is being downloaded."""
        _out(f"  [Fetch {current}/{total}] {url}")

    def found(self, tier: str, score: int, name: str, country: str) -> None:
        """A candidate passed every capture gate."""
        _out(f"    [Found] [{tier}/{score}] {name} ({country})")

    def skip(self, reason: str, detail: str) -> None:
        """A seed or candidate was dropped; detail is usually its URL or domain."""
        if len(detail) > SKIP_DETAIL_CHARS:
            detail = detail[:SKIP_DETAIL_CHARS] + "..."
        _out(f"    [Skip] {reason}: {detail}")

    def tier_distribution(self, tiers: dict[str, int]) -> None:
        """Accepted leads per tier, in A/B/C/SKIP order."""
        _out("  [Tiers] " + ", ".join(f"{tier}={n}" for tier, n in tiers.items()))

    def finish(self, candidates: int, output_dir: str = "") -> None:
        """Close the hunt with wall time, lead count and export folder."""
        minutes, seconds = divmod(int(self._elapsed()), 60)
        _out(f"\n[LeadScout] Run complete in {minutes}m{seconds}s")
        _out(f"  Candidates: {candidates}")
        if output_dir:
            _out(f"  Output: {output_dir}")

    def error(self, msg: str) -> None:
        _err(f"[Error] {msg}")

    def warning(self, msg: str) -> None:
        """Recoverable problems: missing seed files, exhausted fetch retries."""
        _err(f"[Warning] {msg}")
