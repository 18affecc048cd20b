"""
LeadScout sources tracker - audit trail for seed selection and crawl decisions.
Produces sources.json so every skipped URL can be traced to a reason.
"""

import json
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from pathlib import Path


@dataclass
class UrlRecord:
    """What happened to one seed URL."""

    url: str
    domain: str
    outcome: str  # accepted | skipped
    reason: str = ""
    detail: str = ""
    tier: str | None = None
    score: int | None = None
    source_query: str = ""
    recorded_at: str = field(default_factory=lambda: datetime.now(UTC).isoformat())


@dataclass
class SourcesLog:
    """Complete audit log of one hunter run."""

    run_id: str
    seed_mode: str = "manual"
    started_at: str = field(default_factory=lambda: datetime.now(UTC).isoformat())
    finished_at: str | None = None

    urls: list[UrlRecord] = field(default_factory=list)
    skip_counts: dict[str, int] = field(default_factory=dict)

    # Summary stats
    total_urls: int = 0
    total_accepted: int = 0
    total_skipped: int = 0

    def add_accepted(
        self, url: str, domain: str, tier: str, score: int, source_query: str = ""
    ) -> None:
        """Record a candidate that passed every gate."""
        self.urls.append(
            UrlRecord(
                url=url,
                domain=domain,
                outcome="accepted",
                tier=tier,
                score=score,
                source_query=source_query,
            )
        )
        self.total_urls += 1
        self.total_accepted += 1

    def add_skipped(
        self,
        url: str,
        domain: str,
        reason: str,
        detail: str = "",
        tier: str | None = None,
        score: int | None = None,
    ) -> None:
        """Record a URL dropped before or after scoring."""
        self.urls.append(
            UrlRecord(
                url=url,
                domain=domain,
                outcome="skipped",
                reason=reason,
                detail=detail,
                tier=tier,
                score=score,
            )
        )
        self.skip_counts[reason] = self.skip_counts.get(reason, 0) + 1
        self.total_urls += 1
        self.total_skipped += 1

    def finish(self) -> None:
        """Mark the log as complete."""
        self.finished_at = datetime.now(UTC).isoformat()

    def save(self, path: Path) -> None:
        """Save to JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(asdict(self), f, indent=2, default=str)
