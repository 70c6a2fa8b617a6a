import logging
from typing import Protocol

from crawler.services.match_parser import hero_display_name

logger = logging.getLogger(__name__)


class HeroSource(Protocol):
    async def get_hero_catalog(self) -> dict[int, str]: ...


class HeroCatalog:
    """
    Read-through cache of hero names, owned by one crawl run.

    The upstream list is fetched on the first get() and memoized, including
    an empty result after a failed fetch. Two coroutines racing on the first
    get() may both fetch; the results are identical so the second write is
    harmless.
    """

    def __init__(self, source: HeroSource) -> None:
        self._source = source
        self._names: dict[int, str] | None = None

    @property
    def loaded(self) -> bool:
        return self._names is not None

    async def get(self) -> dict[int, str]:
        if self._names is None:
            names = await self._source.get_hero_catalog()
            if not names:
                logger.warning("Hero catalog unavailable, falling back to 'Hero {id}' names")
            self._names = names
        return self._names

    async def name_for(self, hero_id: int) -> str:
        return hero_display_name(hero_id, await self.get())
