"""
Tests for settings, logging setup and the celery schedule.
"""

import json
import logging
from datetime import timedelta

import pytest

from shared.config import Settings
from shared.logging_config import JsonFormatter, configure_logging
from shared.models.crawl import CrawlRunSummary


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("CRAWL_DELAY_MS", raising=False)
        settings = Settings(_env_file=None)
        assert settings.CRAWL_DELAY_MS == 500
        assert settings.STALE_THRESHOLD_MINUTES == 120
        assert settings.RECENT_MATCHES_LIMIT == 5
        assert settings.STORE_STEAM_ID is True

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("CRAWL_DELAY_MS", "1000")
        monkeypatch.setenv("STORE_STEAM_ID", "false")
        settings = Settings(_env_file=None)
        assert settings.CRAWL_DELAY_MS == 1000
        assert settings.STORE_STEAM_ID is False


class TestJsonFormatter:
    def test_payload(self):
        record = logging.makeLogRecord(
            {"name": "crawler.test", "levelname": "INFO", "msg": "crawled %s", "args": ("Kirara",)}
        )
        record.account_id = "149901486"
        payload = json.loads(JsonFormatter().format(record))
        assert payload["msg"] == "crawled Kirara"
        assert payload["logger"] == "crawler.test"
        assert payload["level"] == "INFO"
        assert payload["account_id"] == "149901486"
        assert payload["ts"].endswith("Z")


class TestConfigureLogging:
    def test_single_stdout_handler(self):
        root = logging.getLogger()
        saved = root.handlers[:], root.level
        try:
            configure_logging("debug", json_format=True)
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JsonFormatter)
            assert root.level == logging.DEBUG
            assert logging.getLogger("httpx").level == logging.WARNING
        finally:
            root.handlers[:] = saved[0]
            root.setLevel(saved[1])

    def test_unknown_level_falls_back_to_info(self):
        root = logging.getLogger()
        saved = root.handlers[:], root.level
        try:
            configure_logging("chatty")
            assert root.level == logging.INFO
        finally:
            root.handlers[:] = saved[0]
            root.setLevel(saved[1])


class TestCelerySchedule:
    def test_beat_runs_crawl_on_interval(self):
        from crawler import celeryconfig
        from shared.config import settings

        entry = celeryconfig.beat_schedule["crawl-roster"]
        assert entry["task"] == "crawler.tasks.crawl.crawl_roster"
        assert entry["schedule"] == timedelta(minutes=settings.CRAWL_INTERVAL_MINUTES)
        assert celeryconfig.worker_concurrency == 1

    def test_task_registered(self):
        from crawler.celery_app import app
        import crawler.tasks.crawl  # noqa: F401

        assert "crawler.tasks.crawl.crawl_roster" in app.tasks


class TestCrawlTask:
    def _patch(self, monkeypatch, summary):
        import crawler.tasks.crawl as crawl_task

        async def fake_run_crawl(settings, store=None):
            return summary

        states = []
        monkeypatch.setattr(crawl_task, "run_crawl", fake_run_crawl)
        monkeypatch.setattr(
            crawl_task.crawl_roster,
            "update_state",
            lambda state=None, meta=None, **kw: states.append((state, meta)),
        )
        return crawl_task, states

    def test_healthy_run_returns_summary(self, monkeypatch):
        crawl_task, states = self._patch(monkeypatch, CrawlRunSummary(total=2, success=2))
        result = crawl_task.crawl_roster()
        assert result["success"] == 2
        assert result["degraded"] is False
        assert states == []

    def test_degraded_run_ends_in_degraded_state(self, monkeypatch):
        from celery.exceptions import Ignore

        summary = CrawlRunSummary(total=3, success=1, failed=2, errors=["Failed: a (1)", "Failed: b (2)"])
        crawl_task, states = self._patch(monkeypatch, summary)

        with pytest.raises(Ignore):
            crawl_task.crawl_roster()

        ((state, meta),) = states
        assert state == crawl_task.DEGRADED
        assert meta["failed"] == 2
        assert meta["degraded"] is True
