"""Dependencies for the summoners feature.

Wires gateways, synchronizers and the unit of work into ``SummonerService``.
"""

from typing import Annotated

from fastapi import Depends, Request

from summoner_sync.core import get_db_manager, get_global_settings
from summoner_sync.core.dependencies import RiotClientDep, SingleFlightDep
from summoner_sync.features.champions.catalog import ChampionCatalog
from summoner_sync.features.masteries.gateway import MasteryGateway
from summoner_sync.features.masteries.service import MasterySyncService
from summoner_sync.features.matches.gateway import MatchGateway
from summoner_sync.features.matches.service import MatchSyncService
from summoner_sync.features.unit_of_work import SQLAlchemyUnitOfWork, UnitOfWorkFactory
from .gateway import SummonerGateway
from .service import SummonerService


def get_unit_of_work_factory() -> UnitOfWorkFactory:
    """Get a factory creating one unit of work per atomic store operation."""
    session_factory = get_db_manager().async_session_factory
    return lambda: SQLAlchemyUnitOfWork(session_factory)


def get_champion_catalog(request: Request) -> ChampionCatalog:
    """Get the champion catalog loaded at startup."""
    return getattr(request.app.state, "champion_catalog", None) or ChampionCatalog()


async def get_summoner_service(
    riot_client: RiotClientDep,
    single_flight: SingleFlightDep,
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_unit_of_work_factory)],
) -> SummonerService:
    """Get summoner service instance.

    :param riot_client: Shared Riot API client
    :param single_flight: Process-wide guard for concurrent lookups
    :param uow_factory: Unit of work factory
    :returns: Summoner service with injected dependencies
    """
    settings = get_global_settings()

    return SummonerService(
        uow_factory=uow_factory,
        gateway=SummonerGateway(riot_client),
        mastery_sync=MasterySyncService(
            uow_factory,
            MasteryGateway(riot_client),
            top_count=settings.top_mastery_count,
        ),
        match_sync=MatchSyncService(
            uow_factory,
            MatchGateway(riot_client, detail_timeout=settings.match_detail_timeout),
            match_count=settings.recent_match_count,
        ),
        single_flight=single_flight,
        stale_window=settings.stale_window,
        page_size=settings.summoner_page_size,
    )


# Type aliases for cleaner dependency injection
SummonerServiceDep = Annotated[SummonerService, Depends(get_summoner_service)]
ChampionCatalogDep = Annotated[ChampionCatalog, Depends(get_champion_catalog)]

__all__ = [
    "get_summoner_service",
    "get_champion_catalog",
    "get_unit_of_work_factory",
    "SummonerServiceDep",
    "ChampionCatalogDep",
]
