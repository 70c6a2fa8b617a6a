"""
Cache staleness for health reporting.

A cache is stale when its most recent write is strictly older than the
threshold: exactly 120 minutes old is still fresh, 121 is stale. An empty
cache has nothing fresh to serve and is reported stale.

Whether staleness means "degraded" or "unhealthy" is left to the caller.
"""

from datetime import datetime, timedelta

from crawler.db.repository import PlayerCacheStore, utcnow
from shared.models.crawl import HealthSummary

DEFAULT_STALE_THRESHOLD_MINUTES = 120


def is_stale(
    now: datetime,
    last_updated: datetime,
    threshold_minutes: int = DEFAULT_STALE_THRESHOLD_MINUTES,
) -> bool:
    return (now - last_updated) > timedelta(minutes=threshold_minutes)


def age_minutes(now: datetime, last_updated: datetime) -> float:
    return round((now - last_updated).total_seconds() / 60.0, 1)


def build_health_summary(
    store: PlayerCacheStore,
    now: datetime | None = None,
    threshold_minutes: int = DEFAULT_STALE_THRESHOLD_MINUTES,
) -> HealthSummary:
    """
    Summarizes cache size and freshness.

    Args:
        store: Cache to inspect.
        now: Naive UTC reference time. Defaults to the current time.
        threshold_minutes: Age above which the cache counts as stale.
    """
    now = now or utcnow()
    last_updated = store.latest_update()
    if last_updated is None:
        return HealthSummary(player_count=store.count(), is_stale=True)

    return HealthSummary(
        player_count=store.count(),
        last_updated=last_updated,
        age_minutes=age_minutes(now, last_updated),
        is_stale=is_stale(now, last_updated, threshold_minutes),
    )
