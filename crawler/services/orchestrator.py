"""
Sequential crawl of the roster.

For each roster entry, in roster order:

  1. Resolve the account id.
  2. Fetch profile, win/loss and recent matches together.
  3. No profile -> record a failure and move on without writing.
  4. Otherwise parse matches, derive analytics and upsert the record.
  5. Sleep the inter-entry delay before the next entry.

Entries are never fetched in parallel with each other; the delay is what
keeps the crawler under OpenDota's rate limit. Per-entry failures are
counted and the loop continues. Only the aggregate (failed > success) is
reported as a failed run, through CrawlRunSummary.degraded.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from enum import Enum
from typing import Protocol

from crawler.db.repository import PlayerCacheStore
from crawler.services import analytics
from crawler.services.hero_catalog import HeroCatalog
from crawler.services.identity import to_identity
from crawler.services.match_parser import DEFAULT_RECENT_MATCHES, build_match_summaries
from shared.models.crawl import CrawlRunSummary
from shared.models.opendota import ProfileData, RawMatchModel, WinLossModel
from shared.models.player import PlayerIdentity, PlayerRecord, RosterEntry

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SECONDS = 0.5


class StatsSource(Protocol):
    async def get_profile(self, account_id: str) -> ProfileData | None: ...

    async def get_win_loss(self, account_id: str) -> WinLossModel: ...

    async def get_recent_matches(self, account_id: str, limit: int = 5) -> list[RawMatchModel]: ...

    async def get_hero_catalog(self) -> dict[int, str]: ...


class CrawlState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


class CrawlOrchestrator:
    """
    Drives one crawl run over a fixed roster. An instance runs exactly once.

    Args:
        client: Upstream stats source (OpenDotaClient in production).
        store: Cache the records are written to.
        roster: Entries to crawl, in crawl order.
        hero_catalog: Hero-name cache for this run. A fresh one backed by
            `client` is created when omitted.
        delay_seconds: Pause between consecutive entries.
        recent_matches_limit: Matches fetched and kept per player.
        sleep: Awaitable sleep, replaced in tests.
    """

    def __init__(
        self,
        client: StatsSource,
        store: PlayerCacheStore,
        roster: Sequence[RosterEntry],
        *,
        hero_catalog: HeroCatalog | None = None,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
        recent_matches_limit: int = DEFAULT_RECENT_MATCHES,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.client = client
        self.store = store
        self.roster = list(roster)
        self.hero_catalog = hero_catalog or HeroCatalog(client)
        self.delay_seconds = delay_seconds
        self.recent_matches_limit = recent_matches_limit
        self._sleep = sleep
        self.state = CrawlState.IDLE

    async def run(self) -> CrawlRunSummary:
        """
        Crawls every roster entry once.

        Raises:
            RuntimeError: If this orchestrator has already been started.
        """
        if self.state is not CrawlState.IDLE:
            raise RuntimeError(f"crawl already {self.state.value}; create a new orchestrator")
        self.state = CrawlState.RUNNING

        started = time.monotonic()
        summary = CrawlRunSummary(total=len(self.roster))
        logger.info("Starting crawl of %d players", summary.total)

        try:
            await self.hero_catalog.get()

            for index, entry in enumerate(self.roster):
                if index > 0 and self.delay_seconds > 0:
                    await self._sleep(self.delay_seconds)

                try:
                    error = await self._crawl_entry(entry)
                except Exception as exc:
                    logger.exception("Error processing %s", entry.display_name)
                    error = f"Error: {entry.display_name} - {exc}"

                if error is None:
                    summary.success += 1
                else:
                    summary.failed += 1
                    summary.errors.append(error)
        finally:
            summary.duration_ms = int((time.monotonic() - started) * 1000)
            self.state = CrawlState.COMPLETED

        logger.info(
            "Crawl finished: success=%d failed=%d duration=%.1fs",
            summary.success, summary.failed, summary.duration_ms / 1000,
        )
        if summary.degraded:
            logger.error("Crawl degraded: %d of %d entries failed", summary.failed, summary.total)
        return summary

    async def _crawl_entry(self, entry: RosterEntry) -> str | None:
        """Returns None on success, otherwise the error message for the summary."""
        identity = to_identity(entry)
        logger.info("Crawling %s (%s)", identity.display_name, identity.account_id)

        profile, win_loss, raw_matches = await asyncio.gather(
            self.client.get_profile(identity.account_id),
            self.client.get_win_loss(identity.account_id),
            self.client.get_recent_matches(identity.account_id, self.recent_matches_limit),
        )

        if profile is None:
            logger.warning("No profile for %s (%s), skipping", identity.display_name, entry.player_id)
            return f"Failed: {entry.display_name} ({entry.player_id})"

        record = await self._build_record(identity, profile, win_loss, raw_matches)
        self.store.upsert(self.store.key_for(record), record)

        logger.info(
            "%s: rank_tier=%s win_rate=%d%%",
            identity.display_name, record.rank_tier or "N/A", record.win_rate,
        )
        return None

    async def _build_record(
        self,
        identity: PlayerIdentity,
        profile: ProfileData,
        win_loss: WinLossModel,
        raw_matches: list[RawMatchModel],
    ) -> PlayerRecord:
        hero_names = await self.hero_catalog.get()
        matches = build_match_summaries(raw_matches, hero_names, self.recent_matches_limit)

        record = PlayerRecord(
            account_id=identity.account_id,
            steam_id=identity.steam_id64,
            display_name=identity.display_name,
            persona_name=profile.persona_name,
            avatar_url=profile.avatar_url,
            rank_tier=profile.rank_tier,
            competitive_rank=profile.competitive_rank,
            estimated_mmr=profile.estimated_mmr,
            win=win_loss.win,
            lose=win_loss.lose,
            recent_matches=matches,
        )
        return analytics.with_derived_stats(record, self.recent_matches_limit)
