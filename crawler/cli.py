"""
dota-tracker CLI.

    dota-tracker crawl            crawl the roster once (exit 1 if degraded)
    dota-tracker health           cache size and staleness
    dota-tracker leaderboard      cached players grouped by rank medal
    dota-tracker player ID        one cached player by account id or SteamID
    dota-tracker seed [FILE]      prefill the cache from a seed file
    dota-tracker sync FILE        apply a push-sync payload (needs --token)
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer

from crawler.errors import TrackerError, UnauthorizedPushError
from shared.config import settings

app = typer.Typer(
    name="dota-tracker",
    help="Dota 2 roster crawler and player cache.",
    add_completion=False,
)


# -------------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------------

def _setup() -> None:
    from shared.logging_config import configure_logging

    configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)


def _store():
    from crawler.runner import build_store

    return build_store(settings)


def _echo_json(data) -> None:
    typer.echo(json.dumps(data, ensure_ascii=False, indent=2, default=str))


# -------------------------------------------------------------------------
# Commands
# -------------------------------------------------------------------------

@app.command("crawl")
def crawl(
    roster: Optional[str] = typer.Option(None, "--roster", help="Roster file (default: ROSTER_PATH)."),
    delay_ms: Optional[int] = typer.Option(None, "--delay-ms", help="Override CRAWL_DELAY_MS."),
) -> None:
    """Crawl every roster entry once and update the cache."""
    from crawler.runner import run_crawl

    _setup()
    overrides = {}
    if roster:
        overrides["ROSTER_PATH"] = roster
    if delay_ms is not None:
        overrides["CRAWL_DELAY_MS"] = delay_ms
    run_settings = settings.model_copy(update=overrides)

    summary = asyncio.run(run_crawl(run_settings, _store()))
    _echo_json(summary.model_dump(mode="json", by_alias=True))

    if summary.degraded:
        typer.echo("[ERROR] Too many failures", err=True)
    raise typer.Exit(code=summary.exit_code)


@app.command("health")
def health(
    threshold: int = typer.Option(
        settings.STALE_THRESHOLD_MINUTES, "--threshold", help="Stale threshold in minutes."
    ),
) -> None:
    """Print player count, last update and staleness of the cache."""
    from crawler.services.freshness import build_health_summary

    _setup()
    summary = build_health_summary(_store(), threshold_minutes=threshold)
    _echo_json(summary.model_dump(mode="json", by_alias=True))


@app.command("leaderboard")
def leaderboard() -> None:
    """List cached players grouped by rank medal, best first."""
    from crawler.services.analytics import rank_bucket

    _setup()
    players = _store().find_all()
    if not players:
        typer.echo("No cached players. Run `dota-tracker crawl` or `dota-tracker seed` first.")
        return

    current = None
    for player in players:
        bucket = rank_bucket(player.rank_tier)
        if bucket.name != current:
            current = bucket.name
            typer.echo(f"\n== {current} ==")
        typer.echo(
            f"  {player.persona_name or player.display_name:<24} "
            f"{bucket.stars:<5} {player.win_rate:>3}%  "
            f"{player.win}W/{player.lose}L"
        )


@app.command("player")
def player(player_id: str = typer.Argument(..., help="Account id or SteamID.")) -> None:
    """Show one cached player."""
    _setup()
    record = _store().find_by_either_id(player_id)
    if record is None:
        typer.echo(f"[ERROR] Player {player_id} not found in cache", err=True)
        raise typer.Exit(code=1)
    _echo_json(record.model_dump(mode="json", by_alias=True))


@app.command("seed")
def seed(path: Optional[str] = typer.Argument(None, help="Seed file (default: SEED_PATH).")) -> None:
    """Prefill the cache from a JSON list of player records."""
    from crawler.services.seed import seed_players

    _setup()
    try:
        created, updated = seed_players(
            _store(), path or settings.SEED_PATH, settings.RECENT_MATCHES_LIMIT
        )
    except (FileNotFoundError, ValueError, TrackerError) as exc:
        typer.echo(f"[ERROR] Seed failed: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"[OK] Seeded: {created} created, {updated} updated.")


@app.command("sync")
def sync(
    path: str = typer.Argument(..., help="JSON payload: {\"players\": [...]}."),
    token: Optional[str] = typer.Option(None, "--token", envvar="PUSH_TOKEN", help="Shared push secret."),
) -> None:
    """Apply a push-sync payload, all records or none."""
    from crawler.services.sync import sync_players

    _setup()
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    try:
        result = sync_players(
            _store(), token, payload, settings.SYNC_API_KEY, settings.RECENT_MATCHES_LIMIT
        )
    except UnauthorizedPushError:
        typer.echo("[ERROR] Unauthorized", err=True)
        raise typer.Exit(code=2)
    except TrackerError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    _echo_json(result.model_dump(mode="json", by_alias=True))


if __name__ == "__main__":
    app()
