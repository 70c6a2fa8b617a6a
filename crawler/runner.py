"""
Builds the crawler's collaborators from Settings.
Shared by the CLI and the celery task so both run the same pipeline.
"""

import logging

from crawler.db.repository import PlayerCacheStore
from crawler.db.session import create_schema, make_engine, make_session_factory
from crawler.services.opendota_client import OpenDotaClient
from crawler.services.orchestrator import CrawlOrchestrator
from crawler.services.roster import load_roster
from shared.config import Settings
from shared.models.crawl import CrawlRunSummary

logger = logging.getLogger(__name__)


def build_store(settings: Settings, ensure_schema: bool = True) -> PlayerCacheStore:
    engine = make_engine(settings.DATABASE_URL)
    if ensure_schema:
        create_schema(engine)
    return PlayerCacheStore(
        make_session_factory(engine),
        store_steam_id=settings.STORE_STEAM_ID,
    )


async def run_crawl(settings: Settings, store: PlayerCacheStore | None = None) -> CrawlRunSummary:
    """Crawls the configured roster once and returns the run summary."""
    store = store or build_store(settings)
    roster = load_roster(settings.ROSTER_PATH)

    async with OpenDotaClient.from_settings(settings) as client:
        orchestrator = CrawlOrchestrator(
            client,
            store,
            roster,
            delay_seconds=settings.CRAWL_DELAY_MS / 1000,
            recent_matches_limit=settings.RECENT_MATCHES_LIMIT,
        )
        return await orchestrator.run()
