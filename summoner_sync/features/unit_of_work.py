"""Unit of work grouping the feature repositories over one transaction.

Every atomic store operation (profile upsert, mastery replacement, the
multi-table match insert) runs inside ``async with uow_factory() as uow``:
the block commits when it exits normally and rolls back when it raises.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from summoner_sync.features.masteries.repository import (
    MasteryRepositoryInterface,
    SQLAlchemyMasteryRepository,
)
from summoner_sync.features.matches.repository import (
    MatchRepositoryInterface,
    SQLAlchemyMatchRepository,
)
from summoner_sync.features.summoners.repository import (
    SQLAlchemySummonerRepository,
    SummonerRepositoryInterface,
)


class AbstractUnitOfWork(ABC):
    """Transaction boundary exposing one repository per entity."""

    summoners: SummonerRepositoryInterface
    matches: MatchRepositoryInterface
    masteries: MasteryRepositoryInterface

    async def __aenter__(self) -> "AbstractUnitOfWork":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        if exc_type is None:
            await self.commit()
        else:
            await self.rollback()

    @abstractmethod
    async def commit(self) -> None:
        pass

    @abstractmethod
    async def rollback(self) -> None:
        pass


class SQLAlchemyUnitOfWork(AbstractUnitOfWork):
    """Unit of work backed by a fresh ``AsyncSession``."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory
        self.session: Optional[AsyncSession] = None

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        self.session = self.session_factory()
        self.summoners = SQLAlchemySummonerRepository(self.session)
        self.matches = SQLAlchemyMatchRepository(self.session)
        self.masteries = SQLAlchemyMasteryRepository(self.session)
        await super().__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        try:
            await super().__aexit__(exc_type, exc_val, exc_tb)
        finally:
            if self.session is not None:
                await self.session.close()
                self.session = None

    async def commit(self) -> None:
        if self.session is not None:
            await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()


UnitOfWorkFactory = Callable[[], AbstractUnitOfWork]
