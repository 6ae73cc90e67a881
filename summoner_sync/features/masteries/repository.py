"""Repository pattern implementation for champion masteries."""

from abc import ABC, abstractmethod

import structlog
from sqlalchemy import delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from .orm_models import ChampionMasteryORM

logger = structlog.get_logger(__name__)


class MasteryRepositoryInterface(ABC):
    """Interface for champion mastery repository."""

    @abstractmethod
    async def find_by_summoner(self, summoner_id: str) -> list[ChampionMasteryORM]:
        """Stored masteries of a summoner, highest points first."""
        pass

    @abstractmethod
    async def delete_by_summoner(self, summoner_id: str) -> int:
        """Delete every mastery of a summoner.

        Returns:
            Number of rows deleted
        """
        pass

    @abstractmethod
    async def create_bulk(
        self, masteries: list[ChampionMasteryORM]
    ) -> list[ChampionMasteryORM]:
        """Insert masteries and return them as stored."""
        pass


class SQLAlchemyMasteryRepository(MasteryRepositoryInterface):
    """SQLAlchemy implementation of champion mastery repository."""

    def __init__(self, db: AsyncSession):
        """Initialize repository with database session."""
        self.db = db

    async def find_by_summoner(self, summoner_id: str) -> list[ChampionMasteryORM]:
        """Stored masteries of a summoner, highest points first."""
        stmt = (
            select(ChampionMasteryORM)
            .where(ChampionMasteryORM.summoner_id == summoner_id)
            .order_by(desc(ChampionMasteryORM.champion_points))
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def delete_by_summoner(self, summoner_id: str) -> int:
        """Delete every mastery of a summoner."""
        stmt = delete(ChampionMasteryORM).where(
            ChampionMasteryORM.summoner_id == summoner_id
        )
        result = await self.db.execute(stmt)

        logger.debug(
            "masteries_deleted", summoner_id=summoner_id, count=result.rowcount
        )

        return result.rowcount

    async def create_bulk(
        self, masteries: list[ChampionMasteryORM]
    ) -> list[ChampionMasteryORM]:
        """Add masteries to the session and flush to assign ids."""
        if not masteries:
            return []

        self.db.add_all(masteries)
        await self.db.flush()

        logger.debug("masteries_created_bulk", count=len(masteries))

        return masteries
