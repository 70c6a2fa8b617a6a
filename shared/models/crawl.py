from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


class CrawlRunSummary(BaseModel):
    """
    Outcome of one pass over the roster.
    A run with more failures than successes is degraded; callers turn that
    into a non-zero exit status.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total: int = 0
    success: int = 0
    failed: int = 0
    errors: list[str] = Field(default_factory=list)
    duration_ms: int = 0

    @computed_field
    @property
    def degraded(self) -> bool:
        return self.failed > self.success

    @property
    def exit_code(self) -> int:
        return 1 if self.degraded else 0


class HealthSummary(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    player_count: int
    last_updated: datetime | None = None
    age_minutes: float | None = None
    is_stale: bool


class SyncResult(BaseModel):
    """Counts returned to a push-sync caller after the batch was applied."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    received: int
    created: int
    updated: int
