"""
LeadScout CLI - command line interface.
"""

import os
import sys
from pathlib import Path

import click
from dotenv import load_dotenv

from . import __version__

# Load environment variables
load_dotenv()

EXPORT_TARGETS = ("json", "csv", "server")


def _parse_targets(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> list[str] | None:
    """Split --to json,csv,server into a validated list."""
    if value is None:
        return None
    targets = [t.strip().lower() for t in value.split(",") if t.strip()]
    unknown = [t for t in targets if t not in EXPORT_TARGETS]
    if unknown:
        raise click.BadParameter(
            f"unknown target(s) {', '.join(unknown)}; choose from {', '.join(EXPORT_TARGETS)}"
        )
    return targets


def _mask(value: str) -> str:
    if len(value) <= 12:
        return "*" * len(value)
    return f"{value[:8]}...{value[-4:]}"


@click.group()
@click.version_option(version=__version__, prog_name="leadscout")
def main() -> None:
    """LeadScout Hunter - seed sites to ranked lead lists"""
    pass


@main.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="YAML/JSON defaults file",
)
@click.option("--urls", "seeds_urls", default=None, help="Seed URLs file (one URL per line)")
@click.option("--seeds", "seeds_queries", default=None, help="Seed queries file")
@click.option("--deny-domains", default=None, help="Deny-list file (domain substrings)")
@click.option("--out", "out_dir", default=None, help="Output directory (default: out/)")
@click.option("--max-pages", type=int, default=None, help="Max seed URLs to process (default: 50)")
@click.option(
    "--rate-limit-ms", type=int, default=None, help="Min delay between requests (default: 800)"
)
@click.option("--timeout-ms", type=int, default=None, help="Request timeout (default: 15000)")
@click.option("--remote-only", is_flag=True, help="Skip candidates with an office-only signal")
@click.option("--include-us", is_flag=True, help="Do not flag US candidates for review")
@click.option(
    "--tier",
    "tier_filter",
    type=click.Choice(["AB", "ABC"]),
    default=None,
    help="Tiers to keep (default: AB)",
)
@click.option("--allow-us-capture", is_flag=True, help="Keep US candidates flagged for review")
@click.option(
    "--to",
    "export_to",
    default=None,
    callback=_parse_targets,
    help="Comma-separated outputs: json,csv,server (default: json,csv)",
)
@click.option(
    "--scorer",
    type=click.Choice(["local", "keyword", "server"]),
    default=None,
    help="Scoring policy (default: local)",
)
@click.option("--server-url", default=None, help="LeadScout server URL for scoring/append")
@click.option("--refresh-seeds", is_flag=True, help="Run PondFinder before hunting")
@click.option(
    "--pond-mode",
    type=click.Choice(["manual", "serper"]),
    default=None,
    help="PondFinder mode (default: manual)",
)
@click.option("--ponds-config", default=None, help="PondFinder config file")
@click.option("--workers", type=int, default=None, help="Parallel fetch workers (default: 1)")
@click.option("--debug", is_flag=True, help="Verbose debug logging")
def hunt(
    config_path: str | None,
    seeds_urls: str | None,
    seeds_queries: str | None,
    deny_domains: str | None,
    out_dir: str | None,
    max_pages: int | None,
    rate_limit_ms: int | None,
    timeout_ms: int | None,
    remote_only: bool,
    include_us: bool,
    tier_filter: str | None,
    allow_us_capture: bool,
    export_to: list[str] | None,
    scorer: str | None,
    server_url: str | None,
    refresh_seeds: bool,
    pond_mode: str | None,
    ponds_config: str | None,
    workers: int | None,
    debug: bool,
) -> None:
    """Discover, score and rank leads from seed URLs."""
    from .config import load_config
    from .pipeline import Pipeline

    overrides = {
        "seeds_urls": seeds_urls,
        "seeds_queries": seeds_queries,
        "deny_domains": deny_domains,
        "out_dir": out_dir,
        "max_pages": max_pages,
        "rate_limit_ms": rate_limit_ms,
        "timeout_ms": timeout_ms,
        "remote_only": remote_only or None,
        "include_us": include_us or None,
        "tier_filter": tier_filter,
        "allow_us_capture": allow_us_capture or None,
        "export_to": export_to,
        "scorer": scorer,
        "server_url": server_url,
        "refresh_seeds": refresh_seeds or None,
        "pond_mode": pond_mode,
        "ponds_config": ponds_config,
        "workers": workers,
        "debug": debug or None,
    }

    try:
        config = load_config(Path(config_path) if config_path else None, overrides)
        click.echo("[LeadScout] Hunter starting")
        result = Pipeline(config).run()

        click.echo(f"\nAccepted {result.accepted} of {result.urls_total} seed URLs")
        if result.skip_counts:
            skipped = ", ".join(f"{k}={v}" for k, v in sorted(result.skip_counts.items()))
            click.echo(f"Skipped: {skipped}")
        if result.errors:
            click.echo(f"Warnings: {len(result.errors)}")
            for err in result.errors[:3]:
                click.echo(f"  - {err}")

    except Exception as e:
        click.echo(f"Pipeline error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None)
@click.option(
    "--pond-mode",
    type=click.Choice(["manual", "serper"]),
    default=None,
    help="PondFinder mode (default: manual)",
)
@click.option("--ponds-config", default=None, help="PondFinder config file")
@click.option("--deny-domains", default=None, help="Deny-list file (domain substrings)")
@click.option("--debug", is_flag=True, help="Verbose debug logging")
def ponds(
    config_path: str | None,
    pond_mode: str | None,
    ponds_config: str | None,
    deny_domains: str | None,
    debug: bool,
) -> None:
    """Refresh seed URLs with PondFinder, without hunting."""
    from .config import load_config
    from .pipeline import Pipeline

    overrides = {
        "pond_mode": pond_mode,
        "ponds_config": ponds_config,
        "deny_domains": deny_domains,
        "debug": debug or None,
    }

    try:
        config = load_config(Path(config_path) if config_path else None, overrides)
        pipeline = Pipeline(config)
        pipeline.load_denylist()
        result = pipeline.refresh_seeds()
    except Exception as e:
        click.echo(f"Pipeline error: {e}", err=True)
        sys.exit(1)

    if result is None:
        click.echo(f"No pond config at {config.ponds_config}", err=True)
        sys.exit(1)

    click.echo(f"\n[Ponds] Mode: {result.mode}")
    click.echo(f"  URLs: {result.count}")
    click.echo(f"  Filtered: {result.filtered_count}")


@main.command()
def check() -> None:
    """Check API keys and data files."""
    click.echo("Checking configuration...\n")

    serper_key = os.getenv("SERPER_API_KEY")

    click.echo("Optional:")
    if serper_key:
        click.echo(f"  SERPER_API_KEY: {_mask(serper_key)} (search ponds enabled)")
    else:
        click.echo("  SERPER_API_KEY: NOT SET (search ponds disabled, manual mode only)")

    click.echo("\nData files:")
    for path in (
        "data/seeds.urls.txt",
        "data/seeds.domains.txt",
        "data/seeds.ponds.yml",
        "data/deny.domains.txt",
    ):
        status = "found" if Path(path).exists() else "missing"
        click.echo(f"  {path}: {status}")


if __name__ == "__main__":
    main()
