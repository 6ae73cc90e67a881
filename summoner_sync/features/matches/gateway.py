"""Riot API Gateway for match history.

Fetches the recent match list and match details. Details are requested
concurrently, each under its own timeout; a failed detail call is reported
back to the caller instead of failing the whole batch.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Dict, Iterable, List, Tuple

import structlog

from summoner_sync.core.riot_api.models import MatchDTO, MatchReferenceDTO

if TYPE_CHECKING:
    from summoner_sync.core.riot_api.client import RiotAPIClient

logger = structlog.get_logger(__name__)


class MatchGateway:
    """Gateway for match list and match detail calls."""

    def __init__(self, riot_api_client: "RiotAPIClient", detail_timeout: float = 10.0):
        self._client = riot_api_client
        self.detail_timeout = detail_timeout

    async def fetch_recent_matches(
        self, account_id: str, count: int = 20
    ) -> List[MatchReferenceDTO]:
        """Most recent match references of an account, newest first.

        Raises:
            RiotAPIError: If the API call fails
        """
        matchlist = await self._client.get_matchlist_by_account(
            account_id, end_index=count
        )

        logger.debug(
            "Match list fetched", account_id=account_id, count=len(matchlist.matches)
        )

        return list(matchlist.matches)

    async def fetch_match(self, game_id: int) -> MatchDTO:
        """Fetch one match detail, bounded by ``detail_timeout``."""
        return await asyncio.wait_for(
            self._client.get_match(game_id), timeout=self.detail_timeout
        )

    async def fetch_match_details(
        self, game_ids: Iterable[int]
    ) -> Tuple[Dict[int, MatchDTO], Dict[int, BaseException]]:
        """Fetch match details concurrently.

        Returns:
            Tuple of (details by game id, failure by game id)
        """
        ids = list(game_ids)
        results = await asyncio.gather(
            *(self.fetch_match(game_id) for game_id in ids), return_exceptions=True
        )

        details: Dict[int, MatchDTO] = {}
        failures: Dict[int, BaseException] = {}
        for game_id, result in zip(ids, results):
            if isinstance(result, BaseException):
                if isinstance(result, asyncio.CancelledError):
                    raise result
                failures[game_id] = result
                logger.warning(
                    "match_detail_fetch_error",
                    game_id=game_id,
                    error_type=result.__class__.__name__,
                    error=str(result),
                )
            else:
                details[game_id] = result

        return details, failures
