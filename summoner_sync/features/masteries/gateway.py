"""Riot API Gateway for champion masteries."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from .orm_models import ChampionMasteryORM

if TYPE_CHECKING:
    from summoner_sync.core.riot_api.client import RiotAPIClient

logger = structlog.get_logger(__name__)


class MasteryGateway:
    """Fetches champion masteries and maps them to ``ChampionMasteryORM``."""

    def __init__(self, riot_api_client: "RiotAPIClient"):
        self._client = riot_api_client

    async def fetch_masteries(self, summoner_id: str) -> list[ChampionMasteryORM]:
        """
        Fetch every champion mastery of a summoner, in upstream order.

        The returned rows belong to ``summoner_id`` regardless of what the
        upstream payload says.

        Raises:
            RiotAPIError: If the API call fails
        """
        mastery_dtos = await self._client.get_champion_masteries(summoner_id)

        masteries = [
            ChampionMasteryORM(
                summoner_id=summoner_id,
                champion_id=dto.champion_id,
                champion_points=dto.champion_points,
                champion_points_until_next_level=dto.champion_points_until_next_level,
                champion_level=dto.champion_level,
            )
            for dto in mastery_dtos
        ]

        logger.debug(
            "Champion masteries fetched", summoner_id=summoner_id, count=len(masteries)
        )

        return masteries
