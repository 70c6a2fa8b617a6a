import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from sqlalchemy import ColumnElement, func, or_, select
from sqlalchemy.orm import Session, sessionmaker

from crawler.db.models import PlayerCache
from crawler.errors import AmbiguousIdentityError
from shared.models.player import PlayerRecord

logger = logging.getLogger(__name__)

_TICK = timedelta(microseconds=1)

LEADERBOARD_ORDER = (
    PlayerCache.rank_tier.desc().nulls_last(),
    PlayerCache.win_rate.desc(),
    PlayerCache.id,
)


class KeyField(str, Enum):
    """Column an upsert key is matched against."""
    ACCOUNT_ID = "account_id"
    STEAM_ID = "steam_id"   # legacy callers keyed by SteamID


def utcnow() -> datetime:
    # Timezone-naive UTC, matching the DateTime columns
    return datetime.now(timezone.utc).replace(tzinfo=None)


class PlayerCacheStore:
    """
    Keyed insert-or-replace store for PlayerRecord rows.

    Every write runs in its own transaction and replaces all mutable fields
    at once. last_updated is stamped by the store and always moves forward,
    even if the clock does not.

    Args:
        session_factory: sessionmaker bound to the cache database.
        key_field: Column upsert keys refer to. account_id is canonical.
        store_steam_id: Persist the denormalized steam_id column. When False
            the column is always written as NULL.
        clock: Returns the current naive UTC time. Injected by tests.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        key_field: KeyField = KeyField.ACCOUNT_ID,
        store_steam_id: bool = True,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if key_field is KeyField.STEAM_ID and not store_steam_id:
            raise ValueError("key_field=steam_id requires store_steam_id=True")
        self._session_factory = session_factory
        self.key_field = key_field
        self.store_steam_id = store_steam_id
        self._clock = clock

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def upsert(self, key: str, record: PlayerRecord) -> bool:
        """
        Creates the row for `key` or replaces every mutable field of it.

        Returns:
            True if a new row was created, False if an existing one was updated.

        Raises:
            ValueError: If `key` does not match the record's key field.
            AmbiguousIdentityError: If the record's ids collide with another row.
        """
        with self._session_factory.begin() as session:
            return self._write(session, key, record)

    def upsert_many(self, records: Sequence[PlayerRecord]) -> tuple[int, int]:
        """
        Upserts a batch in a single transaction. Any failure rolls back the
        whole batch.

        Returns:
            (created, updated) counts.
        """
        created = 0
        with self._session_factory.begin() as session:
            for record in records:
                if self._write(session, self.key_for(record), record):
                    created += 1
        return created, len(records) - created

    def _write(self, session: Session, key: str, record: PlayerRecord) -> bool:
        if not key:
            raise ValueError(f"record {record.account_id} has no {self.key_field.value} to key on")
        if key != self.key_for(record):
            raise ValueError(f"upsert key {key!r} does not match record {self.key_field.value}")

        key_column = getattr(PlayerCache, self.key_field.value)
        row = session.scalars(select(PlayerCache).where(key_column == key)).one_or_none()

        steam_id = record.steam_id if self.store_steam_id else None
        self._check_ambiguity(session, record.account_id, steam_id, row)

        values = {
            "account_id": record.account_id,
            "steam_id": steam_id,
            "display_name": record.display_name,
            "persona_name": record.persona_name,
            "avatar_url": record.avatar_url,
            "rank_tier": record.rank_tier,
            "competitive_rank": record.competitive_rank,
            "estimated_mmr": record.estimated_mmr,
            "win": record.win,
            "lose": record.lose,
            "total_games": record.total_games,
            "win_rate": record.win_rate,
            "streak": record.streak,
            "streak_type": record.streak_type.value,
            "recent_matches": [m.model_dump(mode="json") for m in record.recent_matches],
            "top_heroes": [h.model_dump(mode="json") for h in record.top_heroes],
            "last_updated": self._next_timestamp(row),
        }

        if row is None:
            session.add(PlayerCache(**values))
            session.flush()
            logger.debug("Created cache row for %s", record.account_id)
            return True

        for column, value in values.items():
            setattr(row, column, value)
        session.flush()
        logger.debug("Updated cache row for %s", record.account_id)
        return False

    def key_for(self, record: PlayerRecord) -> str | None:
        """The value upsert() expects as key for this record."""
        return record.account_id if self.key_field is KeyField.ACCOUNT_ID else record.steam_id

    def _check_ambiguity(
        self,
        session: Session,
        account_id: str,
        steam_id: str | None,
        row: PlayerCache | None,
    ) -> None:
        ids = [account_id] if steam_id is None else [account_id, steam_id]
        query = select(PlayerCache).where(
            or_(PlayerCache.account_id.in_(ids), PlayerCache.steam_id.in_(ids))
        )
        if row is not None:
            query = query.where(PlayerCache.id != row.id)

        clash = session.scalars(query.limit(1)).first()
        if clash is not None:
            raise AmbiguousIdentityError(account_id, clash.account_id)

    def _next_timestamp(self, row: PlayerCache | None) -> datetime:
        now = self._clock()
        if row is not None and row.last_updated is not None and now <= row.last_updated:
            return row.last_updated + _TICK
        return now

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def find_by_either_id(self, player_id: str) -> PlayerRecord | None:
        """Looks a player up by steam_id or account_id."""
        with self._session_factory() as session:
            row = session.scalars(
                select(PlayerCache)
                .where(or_(PlayerCache.steam_id == player_id, PlayerCache.account_id == player_id))
                .limit(1)
            ).first()
            return _to_record(row) if row is not None else None

    def find_all(self, order_by: Sequence[ColumnElement[Any]] | None = None) -> list[PlayerRecord]:
        """
        All players. Defaults to leaderboard order: highest rank tier first
        (no rank tier last), then highest win rate, then insertion order.

        Args:
            order_by: ORDER BY clauses over PlayerCache columns replacing the
                default, e.g. [PlayerCache.last_updated.desc()].
        """
        clauses = LEADERBOARD_ORDER if order_by is None else order_by
        with self._session_factory() as session:
            rows = session.scalars(select(PlayerCache).order_by(*clauses)).all()
            return [_to_record(row) for row in rows]

    def count(self) -> int:
        with self._session_factory() as session:
            return session.scalar(select(func.count()).select_from(PlayerCache)) or 0

    def latest_update(self) -> datetime | None:
        """Most recent last_updated across all rows, None for an empty store."""
        with self._session_factory() as session:
            return session.scalar(select(func.max(PlayerCache.last_updated)))


def _to_record(row: PlayerCache) -> PlayerRecord:
    data = {column.key: getattr(row, column.key) for column in PlayerCache.__table__.columns}
    return PlayerRecord.model_validate(data)
