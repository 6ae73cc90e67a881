"""Summoner endpoints.

Every service-level failure is reported as 404 with the failure message
in ``detail``. A store failure while resolving a summoner is logged and
reported as 404 "Error retrieving summoner".
"""

from typing import List

import structlog
from fastapi import APIRouter, HTTPException, Query, Request, status
from sqlalchemy.exc import SQLAlchemyError

from summoner_sync.core.exceptions import ServiceException
from summoner_sync.core.rate_limiter import limiter
from .dependencies import ChampionCatalogDep, SummonerServiceDep
from .schemas import SummonerResponse
from .transformers import resolved_to_response, summoner_to_response

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/summoners", tags=["summoners"])


@router.get("", response_model=List[SummonerResponse])
async def list_summoners(
    service: SummonerServiceDep,
    catalog: ChampionCatalogDep,
    page: int = Query(1, ge=1, description="1-indexed page number"),
) -> List[SummonerResponse]:
    """List known summoners by level, then best mastery points."""
    try:
        summoners = await service.list_summoners(page)
    except ServiceException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    return [summoner_to_response(s, s.masteries, catalog) for s in summoners]


@router.get("/{name}", response_model=SummonerResponse)
@limiter.limit("60/minute")
async def get_summoner(
    request: Request,
    name: str,
    service: SummonerServiceDep,
    catalog: ChampionCatalogDep,
) -> SummonerResponse:
    """Get a summoner with top champion masteries and their statistics.

    Refreshes the summoner from the Riot API when the cached copy is stale.
    """
    try:
        resolved = await service.resolve_summoner(name)
    except ServiceException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except SQLAlchemyError as e:
        logger.error(
            "Store failure while resolving summoner",
            name=name,
            error_type=e.__class__.__name__,
            error=str(e),
        )
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Error retrieving summoner"
        )

    return resolved_to_response(resolved, catalog)
