from shared.models.analytics import HeroUsage, RankBucket, StreakType
from shared.models.crawl import CrawlRunSummary, HealthSummary, SyncResult
from shared.models.match import MatchResult, MatchSummary
from shared.models.opendota import (
    HeroModel,
    PlayerResponseModel,
    ProfileData,
    RawMatchModel,
    WinLossModel,
)
from shared.models.player import PlayerIdentity, PlayerRecord, RosterEntry

__all__ = [
    "CrawlRunSummary",
    "HealthSummary",
    "HeroModel",
    "HeroUsage",
    "MatchResult",
    "MatchSummary",
    "PlayerIdentity",
    "PlayerRecord",
    "PlayerResponseModel",
    "ProfileData",
    "RankBucket",
    "RawMatchModel",
    "RosterEntry",
    "StreakType",
    "SyncResult",
    "WinLossModel",
]
