"""
Tests for crawler/services/opendota_client.py.

The client runs against httpx.MockTransport, so no network is touched.
Every failure mode must come back as an absent result, never an exception.
"""

import asyncio

import httpx
import pytest

from crawler.services.opendota_client import OpenDotaClient
from shared.config import Settings

PLAYER_BODY = {
    "profile": {
        "account_id": 149901486,
        "personaname": "Kirara",
        "avatarfull": "https://avatars.example/k.jpg",
    },
    "rank_tier": 75,
    "leaderboard_rank": None,
    "competitive_rank": 0,
    "mmr_estimate": {"estimate": 5200},
}

MATCHES_BODY = [
    {
        "match_id": 7000000002,
        "player_slot": 130,
        "radiant_win": False,
        "hero_id": 8,
        "kills": 3,
        "deaths": 4,
        "assists": 5,
        "start_time": 1767229200,
        "duration": 2400,
        "game_mode": 22,
        "lobby_type": 7,
    },
    {
        "match_id": 7000000001,
        "player_slot": 1,
        "radiant_win": False,
        "hero_id": 1,
        "kills": 1,
        "deaths": 9,
        "assists": 2,
        "start_time": 1767225600,
    },
]

HEROES_BODY = [
    {"id": 1, "name": "npc_dota_hero_antimage", "localized_name": "Anti-Mage"},
    {"id": 8, "name": "npc_dota_hero_juggernaut", "localized_name": "Juggernaut"},
]


def _run(coro):
    return asyncio.run(coro)


def _client(handler, **kwargs) -> OpenDotaClient:
    return OpenDotaClient(
        base_url="https://opendota.test/api",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


async def _call(client: OpenDotaClient, method: str, *args):
    async with client:
        return await getattr(client, method)(*args)


def _routes(requests: list[httpx.Request] | None = None):
    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        path = request.url.path
        if path == "/api/players/149901486":
            return httpx.Response(200, json=PLAYER_BODY)
        if path == "/api/players/149901486/wl":
            return httpx.Response(200, json={"win": 30, "lose": 10})
        if path == "/api/players/149901486/matches":
            return httpx.Response(200, json=MATCHES_BODY)
        if path == "/api/heroes":
            return httpx.Response(200, json=HEROES_BODY)
        return httpx.Response(404, json={"error": "not found"})

    return handler


# ── Successful reads ──────────────────────────────────────────────────────────

class TestEndpoints:
    def test_get_profile(self):
        profile = _run(_call(_client(_routes()), "get_profile", "149901486"))
        assert profile.persona_name == "Kirara"
        assert profile.avatar_url == "https://avatars.example/k.jpg"
        assert profile.rank_tier == 75
        assert profile.estimated_mmr == 5200
        # 0 from upstream means "no value"
        assert profile.competitive_rank is None

    def test_get_win_loss(self):
        wl = _run(_call(_client(_routes()), "get_win_loss", "149901486"))
        assert (wl.win, wl.lose) == (30, 10)

    def test_get_recent_matches(self):
        requests: list[httpx.Request] = []
        matches = _run(_call(_client(_routes(requests)), "get_recent_matches", "149901486", 5))
        assert [m.match_id for m in matches] == [7000000002, 7000000001]
        assert requests[0].url.params["limit"] == "5"

    def test_get_hero_catalog(self):
        heroes = _run(_call(_client(_routes()), "get_hero_catalog"))
        assert heroes == {1: "Anti-Mage", 8: "Juggernaut"}

    def test_profile_without_profile_block(self):
        def handler(request):
            return httpx.Response(200, json={"rank_tier": None})

        profile = _run(_call(_client(handler), "get_profile", "1"))
        assert profile is not None
        assert profile.persona_name is None
        assert profile.rank_tier is None


# ── Absent results ────────────────────────────────────────────────────────────

class TestFailuresAreAbsent:
    def test_not_found_profile_is_none(self):
        assert _run(_call(_client(_routes()), "get_profile", "404404")) is None

    def test_not_found_win_loss_is_zero(self):
        wl = _run(_call(_client(_routes()), "get_win_loss", "404404"))
        assert (wl.win, wl.lose) == (0, 0)

    def test_not_found_matches_is_empty(self):
        assert _run(_call(_client(_routes()), "get_recent_matches", "404404")) == []

    def test_server_error_hero_catalog_is_empty(self):
        def handler(request):
            return httpx.Response(503)

        assert _run(_call(_client(handler), "get_hero_catalog")) == {}

    def test_transport_error_is_none(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        assert _run(_call(_client(handler), "get_profile", "149901486")) is None

    def test_non_json_body_is_none(self):
        def handler(request):
            return httpx.Response(200, text="<html>rate limited</html>")

        assert _run(_call(_client(handler), "get_profile", "149901486")) is None

    def test_invalid_matches_body_is_empty(self):
        def handler(request):
            return httpx.Response(200, json=[{"match_id": "x"}])

        assert _run(_call(_client(handler), "get_recent_matches", "149901486")) == []


# ── Request shape ─────────────────────────────────────────────────────────────

class TestRequests:
    def test_api_key_added_when_configured(self):
        requests: list[httpx.Request] = []
        _run(_call(_client(_routes(requests), api_key="secret"), "get_win_loss", "149901486"))
        assert requests[0].url.params["api_key"] == "secret"

    def test_no_api_key_by_default(self):
        requests: list[httpx.Request] = []
        _run(_call(_client(_routes(requests)), "get_win_loss", "149901486"))
        assert "api_key" not in requests[0].url.params

    def test_user_agent_header(self):
        requests: list[httpx.Request] = []
        _run(_call(_client(_routes(requests), user_agent="tracker-test"), "get_hero_catalog"))
        assert requests[0].headers["User-Agent"] == "tracker-test"

    def test_from_settings(self):
        requests: list[httpx.Request] = []
        settings = Settings(
            OPENDOTA_BASE_URL="https://opendota.test/api",
            OPENDOTA_API_KEY="from-settings",
        )
        client = OpenDotaClient.from_settings(
            settings, transport=httpx.MockTransport(_routes(requests))
        )
        heroes = _run(_call(client, "get_hero_catalog"))
        assert heroes[1] == "Anti-Mage"
        assert requests[0].url.params["api_key"] == "from-settings"

    def test_concurrency_must_be_positive(self):
        with pytest.raises(ValueError):
            OpenDotaClient(concurrency=0)
