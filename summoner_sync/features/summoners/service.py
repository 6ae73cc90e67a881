"""Summoner service - resolves summoners by name with a staleness-aware cache.

A lookup is served from the store while the cached summoner is younger than
the stale window. Otherwise the profile is re-fetched upstream and upserted;
when upstream reports a revision newer than our last refresh (or the
summoner was never profiled) masteries and recent matches are synchronized
concurrently, else they are read back from the store. Per-champion
statistics are attached before returning.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

import structlog

from summoner_sync.algorithms.champion_stats import annotate
from summoner_sync.core.concurrency import SingleFlight
from summoner_sync.core.decorators import service_error_handler
from summoner_sync.core.exceptions import ResourceNotFoundError, RetrievalError
from summoner_sync.core.riot_api.errors import UPSTREAM_ERRORS, NotFoundError
from summoner_sync.features.masteries.orm_models import ChampionMasteryORM
from summoner_sync.features.masteries.service import MasterySyncService
from summoner_sync.features.matches.orm_models import SummonerMatchORM
from summoner_sync.features.matches.service import MatchSyncService
from summoner_sync.features.unit_of_work import UnitOfWorkFactory
from .gateway import SummonerGateway
from .normalization import normalize_name
from .orm_models import SummonerORM

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ResolvedSummoner:
    """A summoner with its top masteries (statistics attached) and matches."""

    summoner: SummonerORM
    masteries: List[ChampionMasteryORM] = field(default_factory=list)
    matches: List[SummonerMatchORM] = field(default_factory=list)


class SummonerService:
    """Orchestrates cache reads and upstream refreshes of summoners."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        gateway: SummonerGateway,
        mastery_sync: MasterySyncService,
        match_sync: MatchSyncService,
        single_flight: Optional[SingleFlight[ResolvedSummoner]] = None,
        stale_window: timedelta = timedelta(hours=24),
        page_size: int = 10,
        clock: Clock = utc_now,
    ):
        """
        Initialize summoner service.

        :param uow_factory: Creates a unit of work per atomic store operation
        :param gateway: Upstream summoner profile gateway
        :param mastery_sync: Champion mastery synchronizer
        :param match_sync: Recent match synchronizer
        :param single_flight: Guard coalescing concurrent lookups of one name
        :param stale_window: Age after which a cached summoner is refreshed
        :param page_size: Summoners per listing page
        :param clock: Returns the current time (timezone-aware)
        """
        self.uow_factory = uow_factory
        self.gateway = gateway
        self.mastery_sync = mastery_sync
        self.match_sync = match_sync
        self.single_flight = single_flight or SingleFlight()
        self.stale_window = stale_window
        self.page_size = page_size
        self.clock = clock

    @service_error_handler("SummonerService")
    async def resolve_summoner(self, name: str) -> ResolvedSummoner:
        """
        Resolve a summoner by display name.

        Concurrent calls for names that normalize equally share one
        resolution.

        :param name: Raw name as typed by the user
        :returns: Summoner with masteries (statistics attached) and matches
        :raises ResourceNotFoundError: Unknown summoner, or no matches/masteries upstream
        :raises RetrievalError: Upstream failed for another reason
        """
        normalized = normalize_name(name)
        if not normalized:
            raise self._summoner_not_found(name)

        return await self.single_flight.run(
            normalized, lambda: self._resolve(normalized)
        )

    async def _resolve(self, normalized: str) -> ResolvedSummoner:
        """
        Serve from cache, or refresh the profile and decide the sync depth.

        Masteries and matches are re-synchronized when upstream reports a
        revision newer than the cached ``updated_at``. They are also synced
        when there is no profiled record for the resolved summoner id: a
        cached stub (no ``revision_date``) or a cached row that belongs to a
        different summoner after a name change. Stubs are refreshed in full
        even when their ``updated_at`` is newer than the revision.
        """
        async with self.uow_factory() as uow:
            cached = await uow.summoners.find_by_normalized_name(normalized)

        if cached is not None and not cached.is_stale(self.clock(), self.stale_window):
            logger.debug("Serving cached summoner", summoner_id=cached.id)
            return self._enrich(
                cached, list(cached.masteries), list(cached.match_participations)
            )

        profile = await self._fetch_profile(normalized)

        async with self.uow_factory() as uow:
            summoner = await uow.summoners.upsert_profile(profile)

        profiled = (
            cached is not None
            and cached.id == profile.id
            and cached.revision_date is not None
        )
        if not profiled or cached.has_newer_revision(profile.revision_date):
            logger.info(
                "Refreshing summoner data",
                summoner_id=summoner.id,
                previously_profiled=profiled,
            )
            results = await asyncio.gather(
                self.mastery_sync.sync_top_masteries(summoner),
                self.match_sync.sync_recent_matches(summoner),
                return_exceptions=True,
            )
            # Both syncs have settled; report the first failure
            for result in results:
                if isinstance(result, BaseException):
                    raise result
            masteries, matches = results
        else:
            logger.debug("Summoner unchanged upstream", summoner_id=summoner.id)
            async with self.uow_factory() as uow:
                masteries = await uow.masteries.find_by_summoner(summoner.id)
                matches = await uow.matches.find_by_summoner(summoner.id)

        return self._enrich(summoner, list(masteries), list(matches))

    async def _fetch_profile(self, normalized: str) -> SummonerORM:
        try:
            return await self.gateway.fetch_profile(normalized)
        except NotFoundError as e:
            raise self._summoner_not_found(normalized, e) from e
        except UPSTREAM_ERRORS as e:
            logger.warning(
                "Summoner profile fetch failed",
                name=normalized,
                error_type=e.__class__.__name__,
                error=str(e),
            )
            raise RetrievalError(
                message="Error retrieving summoner",
                service="SummonerService",
                operation="resolve_summoner",
                context={"name": normalized},
                original_error=e,
            ) from e

    @staticmethod
    def _summoner_not_found(
        name: str, original_error: Optional[Exception] = None
    ) -> ResourceNotFoundError:
        return ResourceNotFoundError(
            message="Summoner not found",
            service="SummonerService",
            operation="resolve_summoner",
            context={"name": name},
            original_error=original_error,
        )

    @staticmethod
    def _enrich(
        summoner: SummonerORM,
        masteries: List[ChampionMasteryORM],
        matches: List[SummonerMatchORM],
    ) -> ResolvedSummoner:
        annotate(masteries, matches)
        return ResolvedSummoner(summoner=summoner, masteries=masteries, matches=matches)

    @service_error_handler("SummonerService")
    async def list_summoners(self, page: int = 1) -> List[SummonerORM]:
        """
        List profiled summoners, highest level first.

        Ties are broken by the summoner's best mastery points. Masteries are
        loaded but carry no statistics.

        :param page: 1-indexed page number
        :raises ResourceNotFoundError: If the page is empty
        """
        offset = (max(page, 1) - 1) * self.page_size

        async with self.uow_factory() as uow:
            summoners = await uow.summoners.find_page(self.page_size, offset)

        if not summoners:
            raise ResourceNotFoundError(
                message="No more summoners available.",
                service="SummonerService",
                operation="list_summoners",
                context={"page": page},
            )

        return summoners
