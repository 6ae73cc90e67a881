"""
Tests for the recent match synchronizer.
"""

import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock

from summoner_sync.core.exceptions import ResourceNotFoundError
from summoner_sync.core.riot_api.errors import NotFoundError, ServiceUnavailableError
from summoner_sync.features.matches.gateway import MatchGateway
from summoner_sync.features.matches.service import MatchSyncService


@pytest.fixture
def riot_client():
    client = MagicMock()
    client.get_matchlist_by_account = AsyncMock()
    client.get_match = AsyncMock()
    return client


@pytest.fixture
def summoner(store):
    return store.add_summoner(
        id="s1", account_id="a1", name="Faker", summoner_level=30, revision_date=1
    )


@pytest.fixture
def service(uow_factory, riot_client):
    return MatchSyncService(
        uow_factory, MatchGateway(riot_client, detail_timeout=0.5), match_count=20
    )


@pytest.fixture
def serve_matches(riot_client, make_match):
    """Serve match details from {game_id: [player, ...]}; failures given as exceptions."""

    def configure(details):
        async def get_match(game_id):
            detail = details[game_id]
            if isinstance(detail, BaseException):
                raise detail
            return make_match(game_id, detail)

        riot_client.get_match.side_effect = get_match

    return configure


async def test_stores_matches_participations_and_stubs(
    service, store, summoner, riot_client, make_matchlist, serve_matches
):
    riot_client.get_matchlist_by_account.return_value = make_matchlist(100, 101)
    serve_matches(
        {
            100: [
                {"summoner_id": "s1", "champion_id": 1, "kills": 4, "deaths": 2, "win": True},
                {"summoner_id": "s2", "champion_id": 2},
            ],
            101: [
                {"summoner_id": "s1", "champion_id": 1},
                {"summoner_id": "s3", "champion_id": 3},
            ],
        }
    )

    participations = await service.sync_recent_matches(summoner)

    assert set(store.matches) == {100, 101}
    assert set(store.summoners) == {"s1", "s2", "s3"}
    assert len(store.participations) == 4
    assert [p.game_id for p in participations] == [101, 100]
    assert all(p.summoner_id == "s1" for p in participations)
    riot_client.get_matchlist_by_account.assert_awaited_once_with("a1", end_index=20)


async def test_stub_summoners_carry_identity_only(
    service, store, summoner, riot_client, make_matchlist, serve_matches
):
    riot_client.get_matchlist_by_account.return_value = make_matchlist(100)
    serve_matches({100: [{"summoner_id": "s1"}, {"summoner_id": "s2", "name": "Bang"}]})

    await service.sync_recent_matches(summoner)

    stub = store.summoners["s2"]
    assert stub.name == "Bang"
    assert stub.account_id == "acc-s2"
    assert stub.summoner_level is None
    assert stub.revision_date is None


async def test_resync_of_unchanged_list_is_idempotent(
    service, store, summoner, riot_client, make_matchlist, serve_matches
):
    riot_client.get_matchlist_by_account.return_value = make_matchlist(100, 101)
    serve_matches(
        {
            100: [{"summoner_id": "s1"}, {"summoner_id": "s2"}],
            101: [{"summoner_id": "s1"}, {"summoner_id": "s2"}],
        }
    )

    await service.sync_recent_matches(summoner)
    counts = (len(store.matches), len(store.participations), len(store.summoners))
    riot_client.get_match.reset_mock()

    second = await service.sync_recent_matches(summoner)

    assert (len(store.matches), len(store.participations), len(store.summoners)) == counts
    assert len(second) == 2
    riot_client.get_match.assert_not_awaited()


async def test_new_participant_in_two_matches_creates_one_stub(
    service, store, summoner, riot_client, make_matchlist, serve_matches,
    uow_factory, monkeypatch,
):
    stub_batches = []
    repository_cls = type(uow_factory().summoners)
    create_stubs = repository_cls.create_stubs

    async def recording_create_stubs(self, stubs):
        stub_batches.append([stub.id for stub in stubs])
        await create_stubs(self, stubs)

    monkeypatch.setattr(repository_cls, "create_stubs", recording_create_stubs)
    riot_client.get_matchlist_by_account.return_value = make_matchlist(100, 101)
    serve_matches(
        {
            100: [{"summoner_id": "s1"}, {"summoner_id": "new"}],
            101: [{"summoner_id": "s1"}, {"summoner_id": "new"}],
        }
    )

    await service.sync_recent_matches(summoner)

    assert stub_batches == [["new"]]
    assert (100, "new") in store.participations
    assert (101, "new") in store.participations


async def test_existing_summoner_is_not_overwritten_by_stub(
    service, store, summoner, riot_client, make_matchlist, serve_matches
):
    known = store.add_summoner(id="s2", name="Known", summoner_level=99, revision_date=5)
    riot_client.get_matchlist_by_account.return_value = make_matchlist(100)
    serve_matches({100: [{"summoner_id": "s1"}, {"summoner_id": "s2", "name": "Other"}]})

    await service.sync_recent_matches(summoner)

    assert store.summoners["s2"] is known
    assert store.summoners["s2"].summoner_level == 99


async def test_duplicate_references_are_fetched_once(
    service, store, summoner, riot_client, make_matchlist, serve_matches
):
    riot_client.get_matchlist_by_account.return_value = make_matchlist(100, 100)
    serve_matches({100: [{"summoner_id": "s1"}]})

    await service.sync_recent_matches(summoner)

    riot_client.get_match.assert_awaited_once_with(100)
    assert len(store.participations) == 1


async def test_participants_without_identity_are_skipped(
    service, store, summoner, riot_client, make_matchlist, serve_matches
):
    riot_client.get_matchlist_by_account.return_value = make_matchlist(100)
    serve_matches({100: [{"summoner_id": "s1"}, {"summoner_id": None}]})

    await service.sync_recent_matches(summoner)

    assert list(store.participations) == [(100, "s1")]


async def test_failed_detail_is_skipped_and_retried_later(
    service, store, summoner, riot_client, make_matchlist, serve_matches
):
    riot_client.get_matchlist_by_account.return_value = make_matchlist(100, 101)
    serve_matches(
        {
            100: [{"summoner_id": "s1"}],
            101: ServiceUnavailableError("Service unavailable", status_code=503),
        }
    )

    participations = await service.sync_recent_matches(summoner)

    assert set(store.matches) == {100}
    assert [p.game_id for p in participations] == [100]

    serve_matches({100: [{"summoner_id": "s1"}], 101: [{"summoner_id": "s1"}]})
    riot_client.get_match.reset_mock()

    participations = await service.sync_recent_matches(summoner)

    riot_client.get_match.assert_awaited_once_with(101)
    assert set(store.matches) == {100, 101}
    assert len(participations) == 2


async def test_timed_out_detail_is_skipped(
    service, store, summoner, riot_client, make_matchlist, make_match
):
    riot_client.get_matchlist_by_account.return_value = make_matchlist(100, 101)

    async def get_match(game_id):
        if game_id == 101:
            await asyncio.sleep(10)
        return make_match(game_id, [{"summoner_id": "s1"}])

    riot_client.get_match.side_effect = get_match

    participations = await service.sync_recent_matches(summoner)

    assert set(store.matches) == {100}
    assert len(participations) == 1


async def test_empty_match_list_is_not_found(service, summoner, riot_client, make_matchlist):
    riot_client.get_matchlist_by_account.return_value = make_matchlist()

    with pytest.raises(ResourceNotFoundError) as exc_info:
        await service.sync_recent_matches(summoner)

    assert exc_info.value.message == "No recent matches for this summoner"


async def test_match_list_failure_is_not_found(service, store, summoner, riot_client):
    riot_client.get_matchlist_by_account.side_effect = NotFoundError(
        "Resource not found", status_code=404
    )

    with pytest.raises(ResourceNotFoundError) as exc_info:
        await service.sync_recent_matches(summoner)

    assert exc_info.value.message == "No recent matches for this summoner"
    assert store.matches == {}
