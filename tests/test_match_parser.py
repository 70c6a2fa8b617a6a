"""
Tests for crawler/services/match_parser.py: raw match -> MatchSummary.
"""

from datetime import datetime

from crawler.services.match_parser import (
    build_match_summaries,
    hero_display_name,
    parse_start_time,
)
from shared.models.match import MatchResult


class TestParseStartTime:
    def test_unix_seconds_to_naive_utc(self):
        parsed = parse_start_time(1_767_225_600)
        assert parsed == datetime(2026, 1, 1, 0, 0, 0)
        assert parsed.tzinfo is None


class TestHeroDisplayName:
    def test_known_hero(self):
        assert hero_display_name(1, {1: "Anti-Mage"}) == "Anti-Mage"

    def test_unknown_hero_falls_back(self):
        assert hero_display_name(999, {1: "Anti-Mage"}) == "Hero 999"

    def test_empty_catalog_falls_back(self):
        assert hero_display_name(1, {}) == "Hero 1"


class TestBuildMatchSummaries:
    def test_fields(self, raw_match_factory):
        (summary,) = build_match_summaries(
            [raw_match_factory(match_id=123, hero_id=1, won=True)], {1: "Anti-Mage"}
        )
        assert summary.match_id == "123"
        assert summary.hero_name == "Anti-Mage"
        assert summary.result is MatchResult.WIN
        assert (summary.kills, summary.deaths, summary.assists) == (10, 2, 7)
        assert summary.start_time == datetime(2026, 1, 1)

    def test_dire_side_result(self, raw_match_factory):
        (summary,) = build_match_summaries([raw_match_factory(won=False, radiant=False)], {})
        assert summary.result is MatchResult.LOSS

    def test_order_preserved_and_limited(self, raw_match_factory):
        raw = [raw_match_factory(match_id=i, hero_id=i) for i in range(1, 9)]
        summaries = build_match_summaries(raw, {}, limit=5)
        assert [s.match_id for s in summaries] == ["1", "2", "3", "4", "5"]

    def test_empty(self):
        assert build_match_summaries([], {}) == []

    def test_serializes_camel_case(self, raw_match_factory):
        (summary,) = build_match_summaries([raw_match_factory()], {})
        dumped = summary.model_dump(mode="json", by_alias=True)
        assert set(dumped) == {
            "matchId", "heroId", "heroName", "result", "kills", "deaths", "assists", "startTime",
        }
        assert dumped["result"] == "win"
