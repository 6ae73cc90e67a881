import pytest
from unittest.mock import AsyncMock, MagicMock
from sqlalchemy.dialects import postgresql

from summoner_sync.features.summoners.orm_models import SummonerORM
from summoner_sync.features.summoners.repository import (
    SQLAlchemySummonerRepository,
    SummonerRepositoryInterface,
)


def compiled(statement) -> str:
    return str(statement.compile(dialect=postgresql.dialect()))


@pytest.fixture
def mock_db():
    return AsyncMock()


@pytest.fixture
def repository(mock_db):
    return SQLAlchemySummonerRepository(mock_db)


def executed_sql(mock_db) -> str:
    statement = mock_db.execute.call_args.args[0]
    return compiled(statement)


def test_implements_interface(repository):
    assert isinstance(repository, SummonerRepositoryInterface)


async def test_find_by_normalized_name_matches_in_sql(repository, mock_db):
    expected = SummonerORM(id="s1", name="Fa Ker")
    mock_result = MagicMock()
    mock_result.scalars.return_value.first.return_value = expected
    mock_db.execute = AsyncMock(return_value=mock_result)

    result = await repository.find_by_normalized_name("faker")

    assert result is expected
    sql = executed_sql(mock_db)
    assert "replace(lower(summoners.name)" in sql
    assert "LIMIT" in sql


async def test_find_by_normalized_name_missing(repository, mock_db):
    mock_result = MagicMock()
    mock_result.scalars.return_value.first.return_value = None
    mock_db.execute = AsyncMock(return_value=mock_result)

    assert await repository.find_by_normalized_name("nobody") is None


async def test_upsert_profile_updates_on_conflict(repository, mock_db):
    stored = SummonerORM(id="s1", name="Fa Ker", summoner_level=30)
    mock_result = MagicMock()
    mock_result.scalar_one.return_value = stored
    mock_db.execute = AsyncMock(return_value=mock_result)
    profile = SummonerORM(
        id="s1",
        account_id="a1",
        name="Fa Ker",
        summoner_level=30,
        profile_icon_id=7,
        revision_date=1000,
    )

    result = await repository.upsert_profile(profile)

    assert result is stored
    sql = executed_sql(mock_db)
    assert "ON CONFLICT (id) DO UPDATE" in sql
    assert "updated_at = now()" in sql
    assert "RETURNING" in sql
    mock_db.commit.assert_not_called()


async def test_create_stubs_ignores_existing_ids(repository, mock_db):
    mock_db.execute = AsyncMock()

    await repository.create_stubs(
        [SummonerORM(id="s2", name="Bang"), SummonerORM(id="s3", name="Wolf")]
    )

    sql = executed_sql(mock_db)
    assert "ON CONFLICT (id) DO NOTHING" in sql
    assert "summoner_level" not in sql


async def test_create_stubs_empty_is_noop(repository, mock_db):
    await repository.create_stubs([])
    mock_db.execute.assert_not_called()


async def test_find_existing_ids(repository, mock_db):
    mock_result = MagicMock()
    mock_result.scalars.return_value.all.return_value = ["s1"]
    mock_db.execute = AsyncMock(return_value=mock_result)

    assert await repository.find_existing_ids(["s1", "s2"]) == {"s1"}


async def test_find_page_orders_by_level_then_top_mastery(repository, mock_db):
    mock_result = MagicMock()
    mock_result.scalars.return_value.all.return_value = []
    mock_db.execute = AsyncMock(return_value=mock_result)

    assert await repository.find_page(10, 20) == []

    sql = executed_sql(mock_db)
    assert "summoners.summoner_level IS NOT NULL" in sql
    assert "max(champion_masteries.champion_points)" in sql
    assert "summoners.summoner_level DESC NULLS LAST" in sql
    assert "top_points DESC NULLS LAST" in sql
