from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from shared.models.analytics import HeroUsage, StreakType
from shared.models.analytics import win_rate as compute_win_rate
from shared.models.match import MatchSummary


class RosterEntry(BaseModel):
    """
    One tracked player as listed in the roster file.
    player_id may be a SteamID64 or an account id.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True, coerce_numbers_to_str=True)

    display_name: str = Field(alias="name")
    player_id: str = Field(alias="steamId")


class PlayerIdentity(BaseModel):
    """
    Resolved identity of a roster entry.
    account_id is the canonical key for cache lookups and upstream calls.
    steam_id64 is only set when the roster entry really was a SteamID64.
    """
    model_config = ConfigDict(frozen=True)

    display_name: str
    steam_id64: str | None = None
    account_id: str


class PlayerRecord(BaseModel):
    """
    Normalized cache row for one player.

    total_games and win_rate are derived from win/lose on every access, so a
    pushed payload can never carry an inconsistent win rate. Extra keys in
    input (including stale totalGames/winRate values) are ignored.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,   # ids arrive as JSON numbers from some pushers
    )

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------
    account_id: str
    steam_id: str | None = None
    display_name: str = Field(validation_alias=AliasChoices("displayName", "display_name", "name"))

    # -------------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------------
    persona_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("personaName", "persona_name", "personaname"),
    )
    avatar_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("avatarUrl", "avatar_url", "avatar"),
    )
    rank_tier: int | None = None            # None or 0 = uncalibrated
    competitive_rank: int | None = None
    estimated_mmr: int | None = None

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------
    win: int = 0
    lose: int = 0
    recent_matches: list[MatchSummary] = Field(default_factory=list)   # most recent first

    # Derived from recent_matches at crawl time
    streak: int = 0
    streak_type: StreakType = StreakType.NONE
    top_heroes: list[HeroUsage] = Field(default_factory=list)

    last_updated: datetime | None = None

    @computed_field
    @property
    def total_games(self) -> int:
        return self.win + self.lose

    @computed_field
    @property
    def win_rate(self) -> int:
        return compute_win_rate(self.win, self.lose)
