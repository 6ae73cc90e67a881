"""
Riot API client package for League of Legends API integration.

This package provides the HTTP client used to refresh summoner profiles,
match history and champion masteries, together with its error classes,
response models and response cache.
"""

from .client import RiotAPIClient
from .cache import TTLCache
from .errors import (
    RiotAPIError,
    RateLimitError,
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
    BadRequestError,
    ServiceUnavailableError,
    UPSTREAM_ERRORS,
)
from .models import (
    SummonerDTO,
    MatchlistDTO,
    MatchReferenceDTO,
    MatchDTO,
    ChampionMasteryDTO,
    ChampionDataDTO,
)
from .endpoints import RiotAPIEndpoints

__all__ = [
    "RiotAPIClient",
    "TTLCache",
    "RiotAPIError",
    "RateLimitError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "BadRequestError",
    "ServiceUnavailableError",
    "UPSTREAM_ERRORS",
    "SummonerDTO",
    "MatchlistDTO",
    "MatchReferenceDTO",
    "MatchDTO",
    "ChampionMasteryDTO",
    "ChampionDataDTO",
    "RiotAPIEndpoints",
]
