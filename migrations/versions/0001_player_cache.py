"""Initial table: player_cache

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

JsonColumn = sa.JSON().with_variant(JSONB(), "postgresql")


def upgrade() -> None:
    # -------------------------------------------------------------------------
    # player_cache
    # One row per tracked player: profile, win/loss, derived analytics and
    # the recent match list, rewritten in full on every crawl or push-sync
    # -------------------------------------------------------------------------
    op.create_table(
        "player_cache",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("account_id", sa.String(), nullable=False),
        sa.Column("steam_id", sa.String(), nullable=True),
        sa.Column("display_name", sa.String(), nullable=False),
        sa.Column("persona_name", sa.String(), nullable=True),
        sa.Column("avatar_url", sa.String(), nullable=True),
        sa.Column("rank_tier", sa.Integer(), nullable=True),
        sa.Column("competitive_rank", sa.Integer(), nullable=True),
        sa.Column("estimated_mmr", sa.Integer(), nullable=True),
        sa.Column("win", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("lose", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_games", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("win_rate", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("streak_type", sa.String(), nullable=False, server_default="none"),
        sa.Column("recent_matches", JsonColumn, nullable=False),
        sa.Column("top_heroes", JsonColumn, nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("last_updated", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("account_id", name="uq_player_cache_account_id"),
        sa.UniqueConstraint("steam_id", name="uq_player_cache_steam_id"),
    )
    op.create_index("ix_player_cache_account_id", "player_cache", ["account_id"])
    op.create_index("ix_player_cache_steam_id", "player_cache", ["steam_id"])
    op.create_index("ix_player_cache_rank_tier", "player_cache", ["rank_tier"])
    op.create_index("ix_player_cache_last_updated", "player_cache", ["last_updated"])


def downgrade() -> None:
    """Drops the cache table, reversing upgrade()."""
    op.drop_table("player_cache")
