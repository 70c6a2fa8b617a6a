"""
OpenDota API client.

API:   https://api.opendota.com/api
Docs:  https://docs.opendota.com

Endpoints used:
  GET /players/{account_id}                 profile, rank tier, mmr estimate
  GET /players/{account_id}/wl              lifetime win/loss counts
  GET /players/{account_id}/matches?limit=N recent matches, most recent first
  GET /heroes                               hero id -> localized name

Every call is a single request with no retry. A non-2xx status, a transport
error or a body that does not validate is logged and turned into an absent
(None / empty / zero) result; nothing is raised to the caller.
"""

import asyncio
import logging
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from shared.config import Settings
from shared.models.opendota import (
    HeroModel,
    PlayerResponseModel,
    ProfileData,
    RawMatchModel,
    WinLossModel,
)

logger = logging.getLogger(__name__)

_RAW_MATCHES = TypeAdapter(list[RawMatchModel])
_HEROES = TypeAdapter(list[HeroModel])


class OpenDotaClient:
    """
    Async OpenDota client.

    At most `concurrency` requests are in flight at once. The crawler issues
    the three per-player reads together, so concurrency=1 makes them strictly
    sequential.

    Usage::

        async with OpenDotaClient.from_settings(settings) as client:
            profile = await client.get_profile("149901486")
    """

    def __init__(
        self,
        base_url: str = "https://api.opendota.com/api",
        api_key: str | None = None,
        timeout: float = 15.0,
        user_agent: str = "Dota2Leaderboard/1.0",
        concurrency: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        self.api_key = api_key
        self._semaphore = asyncio.Semaphore(concurrency)
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            headers={"User-Agent": user_agent},
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "OpenDotaClient":
        return cls(
            base_url=settings.OPENDOTA_BASE_URL,
            api_key=settings.OPENDOTA_API_KEY,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            user_agent=settings.USER_AGENT,
            concurrency=settings.FETCH_CONCURRENCY,
            **kwargs,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "OpenDotaClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # -------------------------------------------------------------------------
    # Endpoints
    # -------------------------------------------------------------------------

    async def get_profile(self, account_id: str) -> ProfileData | None:
        """Returns None when the player could not be fetched."""
        data = await self._get_json(f"/players/{account_id}")
        if data is None:
            return None
        try:
            return PlayerResponseModel.model_validate(data).to_profile_data()
        except ValidationError as exc:
            logger.warning("Invalid player response for %s: %s", account_id, exc)
            return None

    async def get_win_loss(self, account_id: str) -> WinLossModel:
        """Returns 0/0 when the counts could not be fetched."""
        data = await self._get_json(f"/players/{account_id}/wl")
        if data is None:
            return WinLossModel()
        try:
            return WinLossModel.model_validate(data)
        except ValidationError as exc:
            logger.warning("Invalid win/loss response for %s: %s", account_id, exc)
            return WinLossModel()

    async def get_recent_matches(self, account_id: str, limit: int = 5) -> list[RawMatchModel]:
        """Returns an empty list when matches could not be fetched."""
        data = await self._get_json(f"/players/{account_id}/matches", params={"limit": limit})
        if data is None:
            return []
        try:
            return _RAW_MATCHES.validate_python(data)
        except ValidationError as exc:
            logger.warning("Invalid matches response for %s: %s", account_id, exc)
            return []

    async def get_hero_catalog(self) -> dict[int, str]:
        """Returns an empty mapping when the hero list could not be fetched."""
        data = await self._get_json("/heroes")
        if data is None:
            return {}
        try:
            heroes = _HEROES.validate_python(data)
        except ValidationError as exc:
            logger.warning("Invalid heroes response: %s", exc)
            return {}
        return {hero.id: hero.localized_name for hero in heroes}

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any | None:
        query = dict(params or {})
        if self.api_key:
            query["api_key"] = self.api_key

        async with self._semaphore:
            try:
                resp = await self._client.get(path, params=query)
            except httpx.HTTPError as exc:
                logger.warning("GET %s failed: %s", path, exc)
                return None

        if not resp.is_success:
            logger.warning("GET %s returned HTTP %d", path, resp.status_code)
            return None

        try:
            return resp.json()
        except ValueError as exc:
            logger.warning("GET %s returned a non-JSON body: %s", path, exc)
            return None
