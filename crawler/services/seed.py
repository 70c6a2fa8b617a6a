import json
import logging
from pathlib import Path

from pydantic import TypeAdapter

from crawler.db.repository import PlayerCacheStore
from crawler.services.analytics import RECENT_MATCHES_LIMIT, with_derived_stats
from shared.models.player import PlayerRecord

logger = logging.getLogger(__name__)

_RECORDS = TypeAdapter(list[PlayerRecord])


def load_seed_players(
    path: str | Path, recent_matches_limit: int = RECENT_MATCHES_LIMIT
) -> list[PlayerRecord]:
    """
    Reads a JSON list of player records (camelCase keys) used to prefill
    the cache before the first crawl. Streak and top heroes are derived
    from the capped match list, as for crawled records.
    """
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    return [with_derived_stats(r, recent_matches_limit) for r in _RECORDS.validate_python(raw)]


def seed_players(
    store: PlayerCacheStore,
    path: str | Path,
    recent_matches_limit: int = RECENT_MATCHES_LIMIT,
) -> tuple[int, int]:
    """
    Bulk-upserts the seed file in one transaction.
    Existing rows are overwritten with the seed values.

    Returns:
        (created, updated) counts.
    """
    records = load_seed_players(path, recent_matches_limit)
    created, updated = store.upsert_many(records)
    logger.info("Seeded %d players from %s (%d created, %d updated)", len(records), path, created, updated)
    return created, updated
