from datetime import timedelta

from kombu import Queue

from shared.config import settings

# ---------------------------------------------------------------------------
# BROKER & BACKEND
# Redis as both the message broker and result backend
# ---------------------------------------------------------------------------
broker_url = settings.REDIS_URL
result_backend = settings.REDIS_URL

# ---------------------------------------------------------------------------
# QUEUES
# A single crawl queue; run the worker with -c 1 so crawls never overlap
# ---------------------------------------------------------------------------
task_queues = (
    Queue("crawl"),
)

task_default_queue = "crawl"

# ---------------------------------------------------------------------------
# TASK ROUTING
# ---------------------------------------------------------------------------
task_routes = {
    "crawler.tasks.crawl.crawl_roster": {"queue": "crawl"},
}

# ---------------------------------------------------------------------------
# WORKER CONCURRENCY
# The crawl paces itself against the upstream rate limit; parallel crawls
# would defeat that
# ---------------------------------------------------------------------------
worker_concurrency = 1
worker_prefetch_multiplier = 1

# ---------------------------------------------------------------------------
# RELIABILITY
# No retries: a failed entry is skipped and picked up by the next scheduled run.
# Early ack so a lost worker does not re-run a half-finished crawl.
# ---------------------------------------------------------------------------
task_acks_late = False

# ---------------------------------------------------------------------------
# SCHEDULE
# celery beat triggers a full crawl every CRAWL_INTERVAL_MINUTES
# ---------------------------------------------------------------------------
beat_schedule = {
    "crawl-roster": {
        "task": "crawler.tasks.crawl.crawl_roster",
        "schedule": timedelta(minutes=settings.CRAWL_INTERVAL_MINUTES),
        "options": {"queue": "crawl"},
    },
}

# ---------------------------------------------------------------------------
# SERIALIZATION
# JSON is human-readable and sufficient for our payloads
# ---------------------------------------------------------------------------
task_serializer = "json"
result_serializer = "json"
accept_content = ["json"]

# ---------------------------------------------------------------------------
# RESULT EXPIRY
# Run summaries are kept for a day in Redis
# ---------------------------------------------------------------------------
result_expires = 86400  # seconds

# ---------------------------------------------------------------------------
# TIMEZONE
# ---------------------------------------------------------------------------
timezone = "UTC"
enable_utc = True
