"""
Riot API Gateway - Anti-Corruption Layer for the summoners feature.

Translates the upstream summoner payload (camelCase, Riot naming) into a
``SummonerORM`` so the rest of the feature never handles Riot DTOs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from .orm_models import SummonerORM

if TYPE_CHECKING:
    from summoner_sync.core.riot_api.client import RiotAPIClient

logger = structlog.get_logger(__name__)


class SummonerGateway:
    """Anti-Corruption Layer for summoner profile lookups."""

    def __init__(self, riot_api_client: "RiotAPIClient"):
        """
        Initialize gateway with Riot API client.

        :param riot_api_client: Low-level Riot API client
        """
        self._client = riot_api_client

    async def fetch_profile(self, normalized_name: str) -> SummonerORM:
        """
        Fetch a summoner profile by name and transform it to our domain model.

        Args:
            normalized_name: Lowercased name with spaces removed

        Returns:
            Transient SummonerORM carrying the upstream profile

        Raises:
            NotFoundError: If no summoner has this name upstream
            RiotAPIError: If the API call fails for any other reason
        """
        logger.debug("Fetching summoner from Riot API", name=normalized_name)

        summoner_dto = await self._client.get_summoner_by_name(normalized_name)

        summoner = SummonerORM(
            id=summoner_dto.id,
            account_id=summoner_dto.account_id,
            name=summoner_dto.name,
            summoner_level=summoner_dto.summoner_level,
            profile_icon_id=summoner_dto.profile_icon_id,
            revision_date=summoner_dto.revision_date,
        )

        logger.info(
            "Summoner profile fetched",
            summoner_id=summoner.id,
            name=summoner.name,
            revision_date=summoner.revision_date,
        )

        return summoner
