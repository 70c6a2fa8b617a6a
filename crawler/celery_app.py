from celery import Celery
from celery.signals import setup_logging

from shared.config import settings
from shared.logging_config import configure_logging

app = Celery("crawler", include=["crawler.tasks.crawl"])
app.config_from_object("crawler.celeryconfig")


@setup_logging.connect
def _configure_worker_logging(**kwargs) -> None:
    configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)
