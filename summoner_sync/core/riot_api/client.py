"""Riot API HTTP client with response caching, retries and error mapping."""

import asyncio
from typing import Optional, Dict, Any, List, Union

import httpx
import structlog

from summoner_sync.core.config import get_global_settings
from .cache import TTLCache
from .errors import (
    RiotAPIError,
    RateLimitError,
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
    ServiceUnavailableError,
    BadRequestError,
)
from .models import (
    ChampionDataDTO,
    ChampionMasteryDTO,
    MatchDTO,
    MatchlistDTO,
    SummonerDTO,
)
from .endpoints import RiotAPIEndpoints
from .constants import Platform

logger = structlog.get_logger(__name__)


class RiotAPIClient:
    """Riot API client with caching, retry and error handling.

    Constructed explicitly (normally once in the application lifespan) and
    injected into gateways; the response cache is injected as well.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        platform: Optional[Platform] = None,
        cache: Optional[TTLCache] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Riot API client.

        Args:
            api_key: Riot API key (uses config if None)
            platform: Default platform for platform endpoints
            cache: Response cache; a disabled cache is used if None
            timeout: Per-request timeout in seconds
            max_retries: Retries for 429, 5xx and transport failures
            transport: Optional httpx transport (tests use ``httpx.MockTransport``)
        """
        settings = get_global_settings()
        self.api_key = api_key if api_key is not None else settings.riot_api_key
        self.platform = platform or Platform(settings.riot_platform)
        self.cache = cache if cache is not None else TTLCache(ttl=0)
        self.timeout = timeout if timeout is not None else settings.riot_request_timeout
        self.max_retries = (
            max_retries if max_retries is not None else settings.riot_max_retries
        )
        self.transport = transport

        self.endpoints = RiotAPIEndpoints(self.platform)

        self.session: Optional[httpx.AsyncClient] = None
        self._session_lock = asyncio.Lock()

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start_session()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    async def start_session(self) -> None:
        """Start the httpx session."""
        if self.session is None or self.session.is_closed:
            async with self._session_lock:
                if self.session is None or self.session.is_closed:
                    headers = {
                        "Content-Type": "application/json",
                        "User-Agent": "summoner-sync/1.0",
                    }
                    self.session = httpx.AsyncClient(
                        headers=headers,
                        timeout=httpx.Timeout(self.timeout),
                        limits=httpx.Limits(
                            max_keepalive_connections=20, max_connections=20
                        ),
                        transport=self.transport,
                    )

                    logger.info(
                        "Riot API client session started",
                        platform=self.platform.value,
                        api_key_prefix="[REDACTED]" if self.api_key else "None",
                    )

    async def close(self) -> None:
        """Close the httpx session."""
        if self.session and not self.session.is_closed:
            await self.session.aclose()
            logger.info("Riot API client session closed")

    def _raise_client_error_if_needed(self, response: httpx.Response) -> None:
        """Raise specific RiotAPIError subclass for client errors."""
        status = response.status_code
        if status == 400:
            raise BadRequestError("Invalid request parameters", status_code=status)
        elif status == 401:
            raise AuthenticationError("Invalid API key", status_code=status)
        elif status == 403:
            raise ForbiddenError("Access forbidden", status_code=status)
        elif status == 404:
            raise NotFoundError("Resource not found", status_code=status)

    def _retry_delay(self, response: httpx.Response, attempt: int) -> Optional[float]:
        """Seconds to wait before retrying, or None when the status is final."""
        status = response.status_code
        if status == 429:
            try:
                retry_after = float(response.headers.get("Retry-After", 1))
            except ValueError:
                retry_after = 1.0
            if attempt < self.max_retries:
                return retry_after
            raise RateLimitError(
                "Rate limit exceeded", status_code=status, retry_after=retry_after
            )
        if status >= 500:
            if attempt < self.max_retries:
                return float(2**attempt)
            if status == 503:
                raise ServiceUnavailableError("Service unavailable", status_code=status)
            raise RiotAPIError(f"Server error {status}", status_code=status)
        raise RiotAPIError(f"Unexpected status {status}", status_code=status)

    async def _make_request(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        authenticated: bool = True,
    ) -> Any:
        """
        Make a GET request with caching and retry logic.

        Args:
            url: Request URL
            params: Query parameters
            authenticated: Send the API key header (not needed for Data Dragon)

        Returns:
            Response data as dictionary or list

        Raises:
            RiotAPIError: For API errors
        """
        cache_key = f"{url}?{sorted((params or {}).items())}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        await self.start_session()
        if self.session is None:
            raise RiotAPIError("Session not initialized")

        headers = {"X-Riot-Token": self.api_key} if authenticated else {}
        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries + 1):
            try:
                response = await self.session.get(url, params=params, headers=headers)
            except (httpx.RequestError, asyncio.TimeoutError) as e:
                last_error = e
                logger.warning(
                    "Riot API request failed",
                    url=url,
                    attempt=attempt,
                    error=str(e),
                )
                if attempt < self.max_retries:
                    await asyncio.sleep(2**attempt)
                continue

            if response.status_code == 200:
                try:
                    data = response.json()
                except ValueError as e:
                    raise RiotAPIError(f"Malformed response: {e}") from e
                self.cache.set(cache_key, data)
                return data

            self._raise_client_error_if_needed(response)
            delay = self._retry_delay(response, attempt)
            logger.warning(
                "Riot API request will be retried",
                url=url,
                status_code=response.status_code,
                attempt=attempt,
                delay=delay,
            )
            await asyncio.sleep(delay)

        raise RiotAPIError(f"Request failed: {str(last_error)}")

    # Summoner endpoints
    async def get_summoner_by_name(
        self, name: str, platform: Optional[Platform] = None
    ) -> SummonerDTO:
        """Get summoner by (normalized) name."""
        url = self.endpoints.summoner_by_name(name, platform)
        response = await self._make_request(url)
        return SummonerDTO(**response)

    # Match endpoints
    async def get_matchlist_by_account(
        self,
        account_id: str,
        end_index: int = 20,
        begin_index: int = 0,
        platform: Optional[Platform] = None,
    ) -> MatchlistDTO:
        """Get the most recent match references for an account."""
        url = self.endpoints.matchlist_by_account(account_id, platform)
        response = await self._make_request(
            url, params={"beginIndex": begin_index, "endIndex": end_index}
        )
        return MatchlistDTO(**response)

    async def get_match(
        self, game_id: int, platform: Optional[Platform] = None
    ) -> MatchDTO:
        """Get match details by game id."""
        url = self.endpoints.match_by_id(game_id, platform)
        response = await self._make_request(url)
        return MatchDTO(**response)

    # Champion mastery endpoints
    async def get_champion_masteries(
        self, summoner_id: str, platform: Optional[Platform] = None
    ) -> List[ChampionMasteryDTO]:
        """Get all champion masteries of a summoner, highest points first."""
        url = self.endpoints.champion_masteries_by_summoner(summoner_id, platform)
        response = await self._make_request(url)

        if not isinstance(response, list):
            raise RiotAPIError(
                f"Expected list response for champion masteries, got {type(response)}"
            )

        return [ChampionMasteryDTO(**entry) for entry in response]

    # Static data
    async def get_champion_data(
        self, locale: str = "en_US", version: Optional[str] = None
    ) -> List[ChampionDataDTO]:
        """Get champion static data from Data Dragon (latest version by default)."""
        if version is None:
            versions: Union[List[str], Any] = await self._make_request(
                self.endpoints.data_dragon_versions(), authenticated=False
            )
            if not isinstance(versions, list) or not versions:
                raise RiotAPIError("Data Dragon returned no versions")
            version = versions[0]

        response = await self._make_request(
            self.endpoints.data_dragon_champions(version, locale),
            authenticated=False,
        )
        return [ChampionDataDTO(**entry) for entry in response.get("data", {}).values()]
