"""Main FastAPI application for the summoner sync service."""

from contextlib import asynccontextmanager
from typing import Any, Dict

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from summoner_sync import __version__
from summoner_sync.core import database, get_global_settings
from summoner_sync.core.concurrency import SingleFlight
from summoner_sync.core.logging import setup_logging
from summoner_sync.core.rate_limiter import limiter
from summoner_sync.core.riot_api import RiotAPIClient, TTLCache
from summoner_sync.features.champions.catalog import ChampionCatalog
from summoner_sync.features.summoners.router import router as summoners_router

settings = get_global_settings()
setup_logging(settings.log_level)
logger = structlog.get_logger(__name__)


def _validate_api_key_configuration() -> None:
    """Log whether a Riot API key is configured."""
    if not settings.riot_api_key:
        logger.warning(
            "RIOT_API_KEY not configured, summoner refreshes will fail",
            hint="Get your key from https://developer.riotgames.com",
        )
    elif settings.riot_api_key.startswith("RGAPI-"):
        logger.info("Riot API key configured (development key detected)")
    else:
        logger.info("Riot API key configured")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Builds the process-wide Riot API client (with its response cache), the
    champion catalog and the lookup single-flight guard.
    """
    logger.info("Starting up summoner sync application", version=__version__)
    _validate_api_key_configuration()

    cache = TTLCache(maxsize=settings.riot_cache_maxsize, ttl=settings.riot_cache_ttl)
    riot_client = RiotAPIClient(cache=cache)
    await riot_client.start_session()

    app.state.riot_client = riot_client
    app.state.champion_catalog = await ChampionCatalog.load(
        riot_client, locale=settings.data_dragon_locale
    )
    app.state.summoner_single_flight = SingleFlight()

    try:
        yield
    finally:
        logger.info("Shutting down summoner sync application")
        await riot_client.close()
        if database.db_manager is not None:
            await database.db_manager.close()


# OpenAPI tags metadata
tags_metadata = [
    {
        "name": "summoners",
        "description": "Summoner profiles with top champion masteries and match statistics.",
    },
    {
        "name": "health",
        "description": "Health check and system status endpoints.",
    },
]

# Create FastAPI application
app = FastAPI(
    title="Summoner Sync",
    description="""
    Cached League of Legends summoner profiles.

    * **Summoner lookup**: profile, top champion masteries and per-champion
      statistics over recent matches, refreshed from the Riot API when stale
    * **Summoner listing**: known summoners by level, ten per page
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
    debug=settings.debug,
)

# Configure rate limiter for FastAPI app
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(summoners_router)


@app.get("/health", tags=["health"])
async def health_check() -> Dict[str, Any]:
    """
    Health check endpoint.

    Used by monitoring tools and load balancers to check that the service
    is running.
    """
    return {
        "status": "healthy",
        "message": "Application is running",
        "version": __version__,
        "debug": settings.debug,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "summoner_sync.main:app",
        host="0.0.0.0",  # nosec B104
        port=8000,
        reload=settings.debug,
    )
