"""Champion mastery synchronization service."""

from typing import List

import structlog

from summoner_sync.core.decorators import service_error_handler
from summoner_sync.core.exceptions import ResourceNotFoundError
from summoner_sync.core.riot_api.errors import UPSTREAM_ERRORS
from summoner_sync.features.summoners.orm_models import SummonerORM
from summoner_sync.features.unit_of_work import UnitOfWorkFactory
from .gateway import MasteryGateway
from .orm_models import ChampionMasteryORM

logger = structlog.get_logger(__name__)


class MasterySyncService:
    """Replaces a summoner's stored masteries with the current top N."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        gateway: MasteryGateway,
        top_count: int = 4,
    ):
        self.uow_factory = uow_factory
        self.gateway = gateway
        self.top_count = top_count

    @service_error_handler("MasterySyncService")
    async def sync_top_masteries(self, summoner: SummonerORM) -> List[ChampionMasteryORM]:
        """Replace stored masteries with the first ``top_count`` upstream entries.

        Upstream returns masteries highest points first; that order is kept.
        An empty upstream list leaves the summoner with no masteries.

        Raises:
            ResourceNotFoundError: If upstream masteries cannot be retrieved
        """
        try:
            masteries = await self.gateway.fetch_masteries(summoner.id)
        except UPSTREAM_ERRORS as e:
            logger.info(
                "Champion masteries unavailable",
                summoner_id=summoner.id,
                error_type=e.__class__.__name__,
                error=str(e),
            )
            raise ResourceNotFoundError(
                message="This summoner has no champion masteries",
                service="MasterySyncService",
                operation="sync_top_masteries",
                context={"summoner_id": summoner.id},
                original_error=e,
            ) from e

        top = masteries[: self.top_count]

        async with self.uow_factory() as uow:
            removed = await uow.masteries.delete_by_summoner(summoner.id)
            stored = await uow.masteries.create_bulk(top)

        logger.info(
            "Champion masteries replaced",
            summoner_id=summoner.id,
            removed=removed,
            stored=len(stored),
        )

        return stored
