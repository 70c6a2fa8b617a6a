import asyncio
import logging

from celery.exceptions import Ignore

from crawler.celery_app import app
from crawler.runner import run_crawl
from shared.config import settings

logger = logging.getLogger(__name__)

# Terminal task state for a run with more failed than successful entries
DEGRADED = "DEGRADED"


@app.task(bind=True, name="crawler.tasks.crawl.crawl_roster", max_retries=0, ignore_result=False)
def crawl_roster(self) -> dict:
    """
    Runs one full crawl of the roster.

    A healthy run finishes SUCCESS with the run summary as its result.
    A degraded run is logged as an error and finishes in the DEGRADED state,
    with the same summary as its result meta.
    """
    summary = asyncio.run(run_crawl(settings))
    result = summary.model_dump(mode="json", by_alias=True)

    if summary.degraded:
        logger.error(
            "Crawl run degraded: %d failed, %d succeeded: %s",
            summary.failed, summary.success, "; ".join(summary.errors),
        )
        self.update_state(state=DEGRADED, meta=result)
        # Ignore keeps celery from overwriting the state with SUCCESS
        raise Ignore()

    return result
