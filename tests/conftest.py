"""
Shared pytest fixtures for the roster tracker test suite.

Provides:
  - ``session_factory``: sessionmaker over a fresh in-memory SQLite database
    with the player_cache table created.
  - ``clock`` / ``store``: a PlayerCacheStore whose clock the test controls.
  - Sample roster entries, upstream payloads and player records.
"""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from crawler.db.repository import PlayerCacheStore
from crawler.db.session import create_schema, make_engine, make_session_factory
from shared.models.match import MatchResult, MatchSummary
from shared.models.opendota import ProfileData, RawMatchModel, WinLossModel
from shared.models.player import PlayerRecord, RosterEntry


# ── Database fixtures ─────────────────────────────────────────────────────────

@pytest.fixture
def session_factory():
    """Yield a sessionmaker bound to a fresh in-memory database."""
    engine = make_engine("sqlite:///:memory:")
    create_schema(engine)
    yield make_session_factory(engine)
    engine.dispose()


class FakeClock:
    """Settable naive-UTC clock."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 1, 12, 0, 0))


@pytest.fixture
def store(session_factory, clock) -> PlayerCacheStore:
    return PlayerCacheStore(session_factory, clock=clock)


# ── Sample domain objects ─────────────────────────────────────────────────────

def make_record(
    account_id: str = "149901486",
    steam_id: str | None = None,
    display_name: str = "Kirara",
    rank_tier: int | None = 75,
    win: int = 30,
    lose: int = 10,
    **kwargs,
) -> PlayerRecord:
    return PlayerRecord(
        account_id=account_id,
        steam_id=steam_id,
        display_name=display_name,
        persona_name=kwargs.pop("persona_name", display_name),
        rank_tier=rank_tier,
        win=win,
        lose=lose,
        **kwargs,
    )


def make_raw_match(
    match_id: int = 7_000_000_001,
    hero_id: int = 1,
    won: bool = True,
    radiant: bool = True,
    start_time: int = 1_767_225_600,   # 2026-01-01 00:00:00 UTC
) -> RawMatchModel:
    return RawMatchModel(
        match_id=match_id,
        player_slot=0 if radiant else 128,
        radiant_win=won if radiant else not won,
        hero_id=hero_id,
        kills=10,
        deaths=2,
        assists=7,
        start_time=start_time,
    )


@pytest.fixture
def sample_record() -> PlayerRecord:
    return make_record(
        recent_matches=[
            MatchSummary(
                match_id="7000000001",
                hero_id=1,
                hero_name="Anti-Mage",
                result=MatchResult.WIN,
                kills=10,
                deaths=2,
                assists=7,
                start_time=datetime(2026, 1, 1),
            )
        ],
    )


@pytest.fixture
def sample_roster() -> list[RosterEntry]:
    return [
        RosterEntry(name="Kirara", steamId="149901486"),
        RosterEntry(name="Ghost", steamId="76561198000000000"),
        RosterEntry(name="Teddy", steamId="141869520"),
    ]


@pytest.fixture
def sample_profile() -> ProfileData:
    return ProfileData(persona_name="persona", rank_tier=65, estimated_mmr=4800)


@pytest.fixture
def sample_win_loss() -> WinLossModel:
    return WinLossModel(win=60, lose=40)


@pytest.fixture
def record_factory():
    """The ``make_record`` builder, for tests that need several players."""
    return make_record


@pytest.fixture
def raw_match_factory():
    """The ``make_raw_match`` builder."""
    return make_raw_match
