from collections.abc import Mapping, Sequence
from datetime import datetime, timezone

from crawler.services.analytics import RECENT_MATCHES_LIMIT, match_result
from shared.models.match import MatchSummary
from shared.models.opendota import RawMatchModel

DEFAULT_RECENT_MATCHES = RECENT_MATCHES_LIMIT


def parse_start_time(unix_seconds: int) -> datetime:
    """
    Converts an OpenDota start_time (unix seconds) to a naive UTC datetime.
    The cache stores all timestamps timezone-naive in UTC.
    """
    return datetime.fromtimestamp(unix_seconds, tz=timezone.utc).replace(tzinfo=None)


def hero_display_name(hero_id: int, hero_names: Mapping[int, str]) -> str:
    """
    Looks up a hero's localized name, falling back to "Hero {id}" when the
    catalog is empty or does not know the hero.
    """
    return hero_names.get(hero_id) or f"Hero {hero_id}"


def build_match_summaries(
    matches: Sequence[RawMatchModel],
    hero_names: Mapping[int, str],
    limit: int = DEFAULT_RECENT_MATCHES,
) -> list[MatchSummary]:
    """
    Converts raw recent matches into MatchSummary rows for the cache.

    Args:
        matches: Raw matches in provider order (most recent first).
        hero_names: hero_id -> localized name. May be empty.
        limit: Maximum number of summaries kept.

    Returns:
        At most `limit` summaries, order preserved.
    """
    summaries: list[MatchSummary] = []

    for match in matches[:limit]:
        summaries.append(
            MatchSummary(
                match_id=str(match.match_id),
                hero_id=match.hero_id,
                hero_name=hero_display_name(match.hero_id, hero_names),
                result=match_result(match.player_slot, match.radiant_win),
                kills=match.kills,
                deaths=match.deaths,
                assists=match.assists,
                start_time=parse_start_time(match.start_time),
            )
        )

    return summaries
