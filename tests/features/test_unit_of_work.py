import pytest
from unittest.mock import AsyncMock, MagicMock

from summoner_sync.features.masteries.repository import SQLAlchemyMasteryRepository
from summoner_sync.features.unit_of_work import SQLAlchemyUnitOfWork


@pytest.fixture
def session():
    return AsyncMock()


@pytest.fixture
def session_factory(session):
    return MagicMock(return_value=session)


async def test_commits_on_success(session_factory, session):
    async with SQLAlchemyUnitOfWork(session_factory) as uow:
        assert isinstance(uow.masteries, SQLAlchemyMasteryRepository)
        assert uow.masteries.db is session

    session.commit.assert_awaited_once()
    session.rollback.assert_not_awaited()
    session.close.assert_awaited_once()


async def test_rolls_back_on_error(session_factory, session):
    with pytest.raises(RuntimeError):
        async with SQLAlchemyUnitOfWork(session_factory):
            raise RuntimeError("boom")

    session.rollback.assert_awaited_once()
    session.commit.assert_not_awaited()
    session.close.assert_awaited_once()


async def test_each_unit_gets_its_own_session(session_factory):
    async with SQLAlchemyUnitOfWork(session_factory):
        pass
    async with SQLAlchemyUnitOfWork(session_factory):
        pass

    assert session_factory.call_count == 2
