"""Match synchronization service.

Pulls a summoner's recent match list, stores every match not seen before
together with all ten participations (creating stub summoners for
co-players on first sight) and returns the summoner's full participation
history from the store.
"""

from typing import Dict, List

import structlog

from summoner_sync.core.decorators import service_error_handler
from summoner_sync.core.exceptions import ResourceNotFoundError
from summoner_sync.core.riot_api.errors import UPSTREAM_ERRORS
from summoner_sync.core.riot_api.models import MatchDTO, MatchReferenceDTO
from summoner_sync.features.summoners.orm_models import SummonerORM
from summoner_sync.features.unit_of_work import UnitOfWorkFactory
from .gateway import MatchGateway
from .orm_models import SummonerMatchORM
from .transformers import (
    match_to_participations,
    match_to_summoner_stubs,
    reference_to_match,
)

logger = structlog.get_logger(__name__)


class MatchSyncService:
    """Keeps the stored match history of summoners up to date."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        gateway: MatchGateway,
        match_count: int = 20,
    ):
        self.uow_factory = uow_factory
        self.gateway = gateway
        self.match_count = match_count

    @service_error_handler("MatchSyncService")
    async def sync_recent_matches(self, summoner: SummonerORM) -> List[SummonerMatchORM]:
        """Store the summoner's new recent matches and return all participations.

        Matches whose detail call fails or times out are skipped and not
        recorded, so a later refresh picks them up again.

        Raises:
            ResourceNotFoundError: If the match list is empty or unavailable
        """
        references = await self._fetch_references(summoner)

        # Match lists may repeat a game; keep the first reference
        references_by_id: Dict[int, MatchReferenceDTO] = {}
        for reference in references:
            references_by_id.setdefault(reference.game_id, reference)

        async with self.uow_factory() as uow:
            existing_ids = await uow.matches.find_existing_ids(list(references_by_id))

        new_ids = [gid for gid in references_by_id if gid not in existing_ids]

        if new_ids:
            details, failures = await self.gateway.fetch_match_details(new_ids)
            if failures:
                logger.warning(
                    "Skipping matches with failed details",
                    summoner_id=summoner.id,
                    game_ids=sorted(failures),
                )
            if details:
                await self._store_matches(
                    [references_by_id[gid] for gid in new_ids if gid in details],
                    [details[gid] for gid in new_ids if gid in details],
                )

        logger.info(
            "Recent matches synchronized",
            summoner_id=summoner.id,
            listed=len(references_by_id),
            already_stored=len(existing_ids),
            new=len(new_ids),
        )

        async with self.uow_factory() as uow:
            return await uow.matches.find_by_summoner(summoner.id)

    async def _fetch_references(self, summoner: SummonerORM) -> List[MatchReferenceDTO]:
        not_found = ResourceNotFoundError(
            message="No recent matches for this summoner",
            service="MatchSyncService",
            operation="sync_recent_matches",
            context={"summoner_id": summoner.id},
        )

        if not summoner.account_id:
            raise not_found

        try:
            references = await self.gateway.fetch_recent_matches(
                summoner.account_id, self.match_count
            )
        except UPSTREAM_ERRORS as e:
            logger.info(
                "Match list unavailable",
                summoner_id=summoner.id,
                error_type=e.__class__.__name__,
                error=str(e),
            )
            not_found.original_error = e
            raise not_found from e

        if not references:
            raise not_found

        return references

    async def _store_matches(
        self, references: List[MatchReferenceDTO], details: List[MatchDTO]
    ) -> None:
        """Insert matches, stub summoners and participations in one transaction."""
        matches = [reference_to_match(reference) for reference in references]

        stubs = {}
        participations = []
        for detail in details:
            for stub in match_to_summoner_stubs(detail):
                stubs.setdefault(stub.id, stub)
            participations.extend(match_to_participations(detail))

        async with self.uow_factory() as uow:
            known_ids = await uow.summoners.find_existing_ids(list(stubs))
            new_stubs = [stub for sid, stub in stubs.items() if sid not in known_ids]

            await uow.matches.create_bulk(matches)
            await uow.summoners.create_stubs(new_stubs)
            await uow.matches.create_participations_bulk(participations)

        logger.debug(
            "Matches stored",
            matches=len(matches),
            new_summoners=len(new_stubs),
            participations=len(participations),
        )
