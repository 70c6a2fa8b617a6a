from datetime import datetime

from sqlalchemy import JSON, DateTime, Integer, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests and local runs)
JsonColumn = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    pass


class PlayerCache(Base):
    """
    One row per tracked player, rewritten in full on every successful crawl
    or push-sync. Consumers read this table instead of calling OpenDota.

    account_id is the canonical key. steam_id is an optional denormalized
    copy of the player's SteamID64; the store guarantees that no value
    appears as one player's account_id and another player's steam_id.
    """
    __tablename__ = "player_cache"
    __table_args__ = (
        UniqueConstraint("account_id", name="uq_player_cache_account_id"),
        UniqueConstraint("steam_id", name="uq_player_cache_steam_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    steam_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    display_name: Mapped[str] = mapped_column(String, nullable=False)

    persona_name: Mapped[str | None] = mapped_column(String, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String, nullable=True)
    rank_tier: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)   # 0/NULL = uncalibrated
    competitive_rank: Mapped[int | None] = mapped_column(Integer, nullable=True)
    estimated_mmr: Mapped[int | None] = mapped_column(Integer, nullable=True)

    win: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    lose: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_games: Mapped[int] = mapped_column(Integer, nullable=False, default=0)   # win + lose
    win_rate: Mapped[int] = mapped_column(Integer, nullable=False, default=0)      # whole percent

    streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    streak_type: Mapped[str] = mapped_column(String, nullable=False, default="none")   # win | loss | none
    recent_matches: Mapped[list] = mapped_column(JsonColumn, nullable=False, default=list)
    top_heroes: Mapped[list] = mapped_column(JsonColumn, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)
    last_updated: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
