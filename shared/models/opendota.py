from pydantic import BaseModel


class ProfileModel(BaseModel):
    account_id: int | None = None
    personaname: str | None = None
    avatarfull: str | None = None


class MmrEstimateModel(BaseModel):
    estimate: int | None = None


class ProfileData(BaseModel):
    """
    The subset of a player response the crawler keeps.
    Falsy upstream values (0, "") are normalized to None.
    """
    persona_name: str | None = None
    avatar_url: str | None = None
    rank_tier: int | None = None
    competitive_rank: int | None = None
    estimated_mmr: int | None = None


class PlayerResponseModel(BaseModel):
    """
    Represents the response from the player endpoint.
    e.g. GET /players/{account_id}

    profile is missing for accounts that never exposed match data.
    """
    profile: ProfileModel | None = None
    rank_tier: int | None = None
    leaderboard_rank: int | None = None
    competitive_rank: int | None = None
    mmr_estimate: MmrEstimateModel | None = None

    def to_profile_data(self) -> ProfileData:
        profile = self.profile or ProfileModel()
        estimate = self.mmr_estimate.estimate if self.mmr_estimate else None
        return ProfileData(
            persona_name=profile.personaname or None,
            avatar_url=profile.avatarfull or None,
            rank_tier=self.rank_tier or None,
            competitive_rank=self.competitive_rank or None,
            estimated_mmr=estimate or None,
        )


class WinLossModel(BaseModel):
    """
    Represents the response from the win/loss endpoint.
    e.g. GET /players/{account_id}/wl
    """
    win: int = 0
    lose: int = 0


class RawMatchModel(BaseModel):
    """
    A single entry from the recent matches endpoint.
    e.g. GET /players/{account_id}/matches?limit=5

    radiant_win is null for some abandoned games; those count as a loss.
    """
    match_id: int
    player_slot: int
    radiant_win: bool | None = None
    hero_id: int
    kills: int = 0
    deaths: int = 0
    assists: int = 0
    start_time: int
    duration: int | None = None
    game_mode: int | None = None
    lobby_type: int | None = None


class HeroModel(BaseModel):
    """
    A single entry from the hero constants endpoint.
    e.g. GET /heroes
    """
    id: int
    name: str | None = None
    localized_name: str
