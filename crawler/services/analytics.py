"""
Derived statistics computed from raw player data.
Everything here is pure: no I/O, no clock, no logging.
"""

from collections.abc import Iterable, Sequence

from shared.models.analytics import HeroUsage, RankBucket, StreakType
from shared.models.analytics import win_rate  # noqa: F401  (re-exported)
from shared.models.match import MatchResult, MatchSummary
from shared.models.player import PlayerRecord

TOP_HEROES_LIMIT = 5
RECENT_MATCHES_LIMIT = 5

# Player slots 0-127 are Radiant, 128-255 Dire
DIRE_SLOT_START = 128

# tier_base -> medal name, highest first
RANK_BUCKETS: tuple[tuple[int, str], ...] = (
    (80, "Immortal"),
    (70, "Divine"),
    (60, "Ancient"),
    (50, "Legend"),
    (40, "Archon"),
    (30, "Crusader"),
    (20, "Guardian"),
    (10, "Herald"),
    (0, "Uncalibrated"),
)


def match_result(player_slot: int, radiant_win: bool | None) -> MatchResult:
    # An unknown outcome is a loss for either side
    if radiant_win is None:
        return MatchResult.LOSS
    is_radiant = player_slot < DIRE_SLOT_START
    return MatchResult.WIN if is_radiant == radiant_win else MatchResult.LOSS

def streak(results: Iterable[MatchResult]) -> tuple[int, StreakType]:
    """
    Length and type of the run of identical results at the head of the list.
    Input must be ordered most recent first.
    """
    count = 0
    current: MatchResult | None = None
    for result in results:
        if current is None:
            current = result
            count = 1
        elif result == current:
            count += 1
        else:
            break

    if current is None:
        return 0, StreakType.NONE
    return count, StreakType(current.value)


def top_heroes(matches: Sequence[MatchSummary], limit: int = TOP_HEROES_LIMIT) -> list[HeroUsage]:
    """
    Most played heroes in the given matches with their win counts.
    Ties keep the order in which each hero first appears.
    """
    usage: dict[int, HeroUsage] = {}
    for match in matches:
        entry = usage.get(match.hero_id)
        if entry is None:
            entry = HeroUsage(hero_id=match.hero_id, hero_name=match.hero_name, count=0, wins=0)
            usage[match.hero_id] = entry
        entry.count += 1
        if match.result == MatchResult.WIN:
            entry.wins += 1

    # sorted() is stable and dicts keep insertion order
    ranked = sorted(usage.values(), key=lambda h: h.count, reverse=True)
    return ranked[:limit]


def rank_bucket(rank_tier: int | None) -> RankBucket:
    """
    Maps a rank_tier (tens digit = medal, ones digit = star) to its bucket.
    None and 0 are uncalibrated. A star outside 1-5 is dropped.
    """
    if not rank_tier or rank_tier < 0:
        return RankBucket(tier_base=0, name="Uncalibrated")

    tier_base = (rank_tier // 10) * 10
    star = rank_tier % 10
    # Anything above 80 folds into the top bucket
    base, name = next((b, n) for b, n in RANK_BUCKETS if tier_base >= b)
    return RankBucket(
        tier_base=base,
        name=name,
        star=star if 1 <= star <= 5 else None,
    )


def with_derived_stats(record: PlayerRecord, limit: int = RECENT_MATCHES_LIMIT) -> PlayerRecord:
    """
    Returns a copy of `record` with recent_matches capped at `limit` and
    streak, streak_type and top_heroes recomputed from those matches.

    Every write path (crawl, push-sync, seed) stores records through this,
    so the derived fields never disagree with the stored match list.
    """
    matches = list(record.recent_matches[:limit])
    streak_count, streak_type = streak(m.result for m in matches)
    return record.model_copy(
        update={
            "recent_matches": matches,
            "streak": streak_count,
            "streak_type": streak_type,
            "top_heroes": top_heroes(matches),
        }
    )
