import math
from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def win_rate(win: int, lose: int) -> int:
    """
    Whole-number win percentage, rounded half up (so 12.5 -> 13).
    Zero games played gives 0.
    """
    total = win + lose
    if total <= 0:
        return 0
    return math.floor(win / total * 100 + 0.5)


class StreakType(str, Enum):
    WIN = "win"
    LOSS = "loss"
    NONE = "none"


class HeroUsage(BaseModel):
    """How often a hero appears in a match list and how many of those were won."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    hero_id: int
    hero_name: str
    count: int
    wins: int


class RankBucket(BaseModel):
    """
    Named medal for a rank_tier value.
    tier_base is the tens part (0, 10, ... 80); star is 1-5 or None.
    """
    model_config = ConfigDict(frozen=True)

    tier_base: int
    name: str
    star: int | None = None

    @property
    def stars(self) -> str:
        return "★" * self.star if self.star else ""

    @property
    def label(self) -> str:
        return f"{self.name} {self.stars}".rstrip()
