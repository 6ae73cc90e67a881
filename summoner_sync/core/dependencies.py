"""Core dependencies for FastAPI application.

Process-wide collaborators are created in the application lifespan and
stored on ``app.state``; these dependencies hand them to request handlers.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from .concurrency import SingleFlight
from .riot_api import RiotAPIClient


def get_riot_client(request: Request) -> RiotAPIClient:
    """Get the shared Riot API client."""
    client = getattr(request.app.state, "riot_client", None)
    if client is None:
        raise HTTPException(status_code=503, detail="Riot API client not initialized")
    return client


def get_single_flight(request: Request) -> SingleFlight:
    """Get the process-wide single-flight guard for summoner lookups."""
    return request.app.state.summoner_single_flight


# Type aliases for cleaner dependency injection
RiotClientDep = Annotated[RiotAPIClient, Depends(get_riot_client)]
SingleFlightDep = Annotated[SingleFlight, Depends(get_single_flight)]

__all__ = ["get_riot_client", "get_single_flight", "RiotClientDep", "SingleFlightDep"]
