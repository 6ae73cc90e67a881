"""Repository pattern implementation for the summoners feature.

This module provides data access abstraction following Martin Fowler's Repository pattern,
encapsulating all database operations and providing a collection-like interface.
Repositories never commit; the surrounding unit of work owns the transaction.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from summoner_sync.features.masteries.orm_models import ChampionMasteryORM
from .orm_models import SummonerORM

logger = structlog.get_logger(__name__)

PROFILE_FIELDS = (
    "account_id",
    "name",
    "summoner_level",
    "profile_icon_id",
    "revision_date",
)
STUB_FIELDS = ("id", "account_id", "name", "profile_icon_id")


class SummonerRepositoryInterface(ABC):
    """Interface for summoner repository following Repository pattern."""

    @abstractmethod
    async def find_by_normalized_name(
        self, normalized_name: str
    ) -> Optional[SummonerORM]:
        """Find a summoner whose name normalizes to ``normalized_name``.

        Masteries (highest points first) and match participations are
        loaded with the summoner.

        Args:
            normalized_name: Output of ``normalize_name``

        Returns:
            SummonerORM if found, None otherwise
        """
        pass

    @abstractmethod
    async def upsert_profile(self, profile: SummonerORM) -> SummonerORM:
        """Insert or update a summoner keyed by id and stamp ``updated_at``.

        Args:
            profile: Summoner carrying freshly fetched profile fields

        Returns:
            The stored summoner row
        """
        pass

    @abstractmethod
    async def find_existing_ids(self, summoner_ids: Iterable[str]) -> set[str]:
        """Return the subset of ``summoner_ids`` already stored."""
        pass

    @abstractmethod
    async def create_stubs(self, stubs: list[SummonerORM]) -> None:
        """Insert identity-only summoners discovered in matches.

        Ids already present are left untouched.
        """
        pass

    @abstractmethod
    async def find_page(self, limit: int, offset: int) -> list[SummonerORM]:
        """List profiled summoners by level, then top mastery points.

        Stubs (no level) are excluded. Masteries are eager-loaded.
        """
        pass


class SQLAlchemySummonerRepository(SummonerRepositoryInterface):
    """SQLAlchemy implementation of summoner repository."""

    def __init__(self, db: AsyncSession):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy async session
        """
        self.db = db

    async def find_by_normalized_name(
        self, normalized_name: str
    ) -> Optional[SummonerORM]:
        """Find a summoner by name, ignoring case and spaces."""
        stmt = (
            select(SummonerORM)
            .where(
                func.replace(func.lower(SummonerORM.name), " ", "") == normalized_name
            )
            .options(
                selectinload(SummonerORM.masteries),
                selectinload(SummonerORM.match_participations),
            )
            # Prefer the profiled row if an outdated stub shares the name
            .order_by(
                SummonerORM.revision_date.desc().nulls_last(),
                SummonerORM.updated_at.desc(),
            )
            .limit(1)
        )

        result = await self.db.execute(stmt)
        summoner = result.scalars().first()

        if summoner:
            logger.debug(
                "summoner_retrieved", summoner_id=summoner.id, name=normalized_name
            )

        return summoner

    async def upsert_profile(self, profile: SummonerORM) -> SummonerORM:
        """Insert or update summoner profile using PostgreSQL UPSERT."""
        values = {field: getattr(profile, field) for field in PROFILE_FIELDS}
        stmt = (
            insert(SummonerORM)
            .values(id=profile.id, **values)
            .on_conflict_do_update(
                index_elements=[SummonerORM.id],
                set_=dict(values, updated_at=func.now()),
            )
            .returning(SummonerORM)
            .execution_options(populate_existing=True)
        )

        result = await self.db.execute(stmt)
        summoner = result.scalar_one()

        logger.info(
            "summoner_upserted",
            summoner_id=summoner.id,
            revision_date=summoner.revision_date,
        )

        return summoner

    async def find_existing_ids(self, summoner_ids: Iterable[str]) -> set[str]:
        """Return stored ids among ``summoner_ids``."""
        ids = list(set(summoner_ids))
        if not ids:
            return set()

        stmt = select(SummonerORM.id).where(SummonerORM.id.in_(ids))
        result = await self.db.execute(stmt)
        return set(result.scalars().all())

    async def create_stubs(self, stubs: list[SummonerORM]) -> None:
        """Bulk insert summoner stubs, skipping ids inserted concurrently."""
        if not stubs:
            return

        rows = [{field: getattr(stub, field) for field in STUB_FIELDS} for stub in stubs]
        stmt = insert(SummonerORM).values(rows).on_conflict_do_nothing(
            index_elements=[SummonerORM.id]
        )
        await self.db.execute(stmt)

        logger.debug("summoner_stubs_created", count=len(rows))

    async def find_page(self, limit: int, offset: int) -> list[SummonerORM]:
        """List profiled summoners ordered by level and top mastery points."""
        top_points = (
            select(
                ChampionMasteryORM.summoner_id,
                func.max(ChampionMasteryORM.champion_points).label("top_points"),
            )
            .group_by(ChampionMasteryORM.summoner_id)
            .subquery()
        )

        stmt = (
            select(SummonerORM)
            .outerjoin(top_points, top_points.c.summoner_id == SummonerORM.id)
            .where(SummonerORM.summoner_level.is_not(None))
            .order_by(
                SummonerORM.summoner_level.desc().nulls_last(),
                top_points.c.top_points.desc().nulls_last(),
                SummonerORM.id,
            )
            .offset(offset)
            .limit(limit)
            .options(selectinload(SummonerORM.masteries))
        )

        result = await self.db.execute(stmt)
        summoners = list(result.scalars().all())

        logger.debug(
            "summoner_page_retrieved", limit=limit, offset=offset, count=len(summoners)
        )

        return summoners
