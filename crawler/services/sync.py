"""
Push-sync: apply a batch of precomputed player records from an external
crawler (e.g. a scheduled CI job) to the cache.

Order of checks:
  1. Shared secret. A wrong or missing token rejects the batch before the
     payload is even looked at.
  2. Payload shape. Every record must validate; one bad record rejects all.
  3. Write. All records are upserted in one transaction.
"""

import hmac
import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from crawler.db.repository import PlayerCacheStore
from crawler.errors import InvalidPayloadError, UnauthorizedPushError
from crawler.services.analytics import RECENT_MATCHES_LIMIT, with_derived_stats
from shared.models.crawl import SyncResult
from shared.models.player import PlayerRecord

logger = logging.getLogger(__name__)

_RECORDS = TypeAdapter(list[PlayerRecord])


def verify_token(token: str | None, expected: str) -> None:
    """
    Accepts either the raw secret or an "Authorization: Bearer <secret>" value.

    Raises:
        UnauthorizedPushError: If the token is missing or does not match.
    """
    if not token or not expected:
        raise UnauthorizedPushError("missing push token")
    if token.startswith("Bearer "):
        token = token[len("Bearer "):]
    if not hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8")):
        raise UnauthorizedPushError("invalid push token")


def parse_payload(payload: Any, recent_matches_limit: int = RECENT_MATCHES_LIMIT) -> list[PlayerRecord]:
    """
    Accepts {"players": [...]} or a bare list of player objects.
    Match lists are capped at `recent_matches_limit` and streak and top heroes
    are recomputed from them; pushed values for those fields are ignored.

    Raises:
        InvalidPayloadError: If the payload is not a list of valid records.
    """
    players = payload.get("players") if isinstance(payload, dict) else payload
    if not isinstance(players, list):
        raise InvalidPayloadError("expected a list of players")
    try:
        records = _RECORDS.validate_python(players)
    except ValidationError as exc:
        raise InvalidPayloadError(f"invalid player data: {exc.error_count()} error(s)") from exc
    return [with_derived_stats(record, recent_matches_limit) for record in records]


def sync_players(
    store: PlayerCacheStore,
    token: str | None,
    payload: Any,
    expected_token: str,
    recent_matches_limit: int = RECENT_MATCHES_LIMIT,
) -> SyncResult:
    """
    Authenticates and applies one push batch. Either every record is written
    or none is.
    """
    try:
        verify_token(token, expected_token)
    except UnauthorizedPushError:
        logger.warning("Rejected push-sync batch: unauthorized")
        raise

    records = parse_payload(payload, recent_matches_limit)
    created, updated = store.upsert_many(records)
    logger.info("Synced %d players (%d created, %d updated)", len(records), created, updated)
    return SyncResult(received=len(records), created=created, updated=updated)
