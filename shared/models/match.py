from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class MatchResult(str, Enum):
    WIN = "win"
    LOSS = "loss"


class MatchSummary(BaseModel):
    """
    One entry of a player's recent match list as stored in the cache.
    Built from RawMatchModel by crawler.services.match_parser.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    match_id: str
    hero_id: int
    hero_name: str
    result: MatchResult
    kills: int
    deaths: int
    assists: int
    start_time: datetime    # UTC, timezone-naive
