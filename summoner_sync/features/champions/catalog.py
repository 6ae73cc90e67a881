"""Champion metadata catalog.

Mastery payloads only carry numeric champion ids; responses are decorated
with the champion's display name and internal key from Data Dragon. The
catalog is loaded once at startup and is read-only afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterable, Optional

import structlog

from summoner_sync.core.riot_api.errors import UPSTREAM_ERRORS

if TYPE_CHECKING:
    from summoner_sync.core.riot_api.client import RiotAPIClient
    from summoner_sync.core.riot_api.models import ChampionDataDTO

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Champion:
    """Static champion data."""

    id: int
    key: str
    name: str


class ChampionCatalog:
    """Lookup of champions by numeric id."""

    def __init__(self, champions: Iterable[Champion] = ()):
        self._by_id: Dict[int, Champion] = {c.id: c for c in champions}

    def __len__(self) -> int:
        return len(self._by_id)

    def get(self, champion_id: int) -> Optional[Champion]:
        return self._by_id.get(champion_id)

    @classmethod
    def from_data_dragon(cls, entries: Iterable["ChampionDataDTO"]) -> "ChampionCatalog":
        """Build from Data Dragon entries, where ``key`` holds the numeric id."""
        champions = []
        for entry in entries:
            try:
                champion_id = entry.champion_id
            except ValueError:
                logger.warning("Skipping champion with non-numeric key", key=entry.key)
                continue
            champions.append(Champion(id=champion_id, key=entry.id, name=entry.name))
        return cls(champions)

    @classmethod
    async def load(
        cls, riot_client: "RiotAPIClient", locale: str = "en_US"
    ) -> "ChampionCatalog":
        """Load the latest champion data; an empty catalog if it cannot be fetched."""
        try:
            entries = await riot_client.get_champion_data(locale=locale)
        except UPSTREAM_ERRORS as e:
            logger.warning(
                "Champion catalog unavailable, responses will omit champion data",
                error_type=e.__class__.__name__,
                error=str(e),
            )
            return cls()

        catalog = cls.from_data_dragon(entries)
        logger.info("Champion catalog loaded", champions=len(catalog), locale=locale)
        return catalog
