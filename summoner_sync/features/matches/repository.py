"""Repository pattern implementation for matches feature.

Covers both global match metadata and per-summoner participation rows.
Bulk inserts use ``ON CONFLICT DO NOTHING`` so concurrent refreshes of
summoners who played together cannot duplicate rows.
"""

from abc import ABC, abstractmethod
from typing import Iterable

import structlog
from sqlalchemy import desc, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from .orm_models import MatchORM, SummonerMatchORM

logger = structlog.get_logger(__name__)

MATCH_FIELDS = ("id", "timestamp", "season", "queue")
PARTICIPATION_FIELDS = (
    "game_id",
    "summoner_id",
    "champion_id",
    "kills",
    "deaths",
    "assists",
    "wards_placed",
    "gold_earned",
    "win",
    "role",
)


class MatchRepositoryInterface(ABC):
    """Interface for match repository following Repository pattern."""

    @abstractmethod
    async def find_existing_ids(self, game_ids: Iterable[int]) -> set[int]:
        """Return the subset of ``game_ids`` already stored.

        Args:
            game_ids: Upstream game ids to check

        Returns:
            Game ids that have a Match row
        """
        pass

    @abstractmethod
    async def create_bulk(self, matches: list[MatchORM]) -> None:
        """Insert match metadata rows."""
        pass

    @abstractmethod
    async def create_participations_bulk(
        self, participations: list[SummonerMatchORM]
    ) -> None:
        """Insert summoner participation rows.

        Referenced matches and summoners must already exist.
        """
        pass

    @abstractmethod
    async def find_by_summoner(self, summoner_id: str) -> list[SummonerMatchORM]:
        """All participation rows of a summoner, newest first."""
        pass


class SQLAlchemyMatchRepository(MatchRepositoryInterface):
    """SQLAlchemy implementation of match repository."""

    def __init__(self, db: AsyncSession):
        """Initialize repository with database session."""
        self.db = db

    async def find_existing_ids(self, game_ids: Iterable[int]) -> set[int]:
        """Return stored ids among ``game_ids``."""
        ids = list(set(game_ids))
        if not ids:
            return set()

        stmt = select(MatchORM.id).where(MatchORM.id.in_(ids))
        result = await self.db.execute(stmt)
        existing = set(result.scalars().all())

        logger.debug(
            "filtered_existing_matches",
            total=len(ids),
            existing=len(existing),
            new=len(ids) - len(existing),
        )

        return existing

    async def create_bulk(self, matches: list[MatchORM]) -> None:
        """Bulk insert matches, skipping ids inserted concurrently."""
        if not matches:
            return

        rows = [{field: getattr(m, field) for field in MATCH_FIELDS} for m in matches]
        stmt = insert(MatchORM).values(rows).on_conflict_do_nothing(
            index_elements=[MatchORM.id]
        )
        await self.db.execute(stmt)

        logger.debug("matches_created_bulk", count=len(rows))

    async def create_participations_bulk(
        self, participations: list[SummonerMatchORM]
    ) -> None:
        """Bulk insert participations, skipping (game, summoner) pairs already stored."""
        if not participations:
            return

        rows = [
            {field: getattr(p, field) for field in PARTICIPATION_FIELDS}
            for p in participations
        ]
        stmt = insert(SummonerMatchORM).values(rows).on_conflict_do_nothing(
            index_elements=[SummonerMatchORM.game_id, SummonerMatchORM.summoner_id]
        )
        await self.db.execute(stmt)

        logger.debug("participations_created_bulk", count=len(rows))

    async def find_by_summoner(self, summoner_id: str) -> list[SummonerMatchORM]:
        """Participation rows of a summoner ordered by creation time descending."""
        stmt = (
            select(SummonerMatchORM)
            .where(SummonerMatchORM.summoner_id == summoner_id)
            .order_by(desc(SummonerMatchORM.created_at), desc(SummonerMatchORM.game_id))
        )

        result = await self.db.execute(stmt)
        participations = list(result.scalars().all())

        logger.debug(
            "participations_found_for_summoner",
            summoner_id=summoner_id,
            count=len(participations),
        )

        return participations
