"""Shared fixtures: an in-memory unit of work and Riot payload builders."""

import itertools
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Tuple

import pytest
from sqlalchemy.exc import IntegrityError

from summoner_sync.core.riot_api.models import (
    MatchDTO,
    MatchlistDTO,
    MatchReferenceDTO,
)
from summoner_sync.features.masteries.orm_models import ChampionMasteryORM
from summoner_sync.features.masteries.repository import MasteryRepositoryInterface
from summoner_sync.features.matches.orm_models import MatchORM, SummonerMatchORM
from summoner_sync.features.matches.repository import MatchRepositoryInterface
from summoner_sync.features.summoners.normalization import normalize_name
from summoner_sync.features.summoners.orm_models import SummonerORM
from summoner_sync.features.summoners.repository import SummonerRepositoryInterface
from summoner_sync.features.unit_of_work import AbstractUnitOfWork

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Settable clock; ``tick`` advances it by one millisecond."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def tick(self) -> datetime:
        self.now += timedelta(milliseconds=1)
        return self.now


class InMemoryStore:
    """Tables held in dicts, with snapshot/restore for rollbacks."""

    def __init__(self, clock: FrozenClock):
        self.clock = clock
        self.summoners: Dict[str, SummonerORM] = {}
        self.matches: Dict[int, MatchORM] = {}
        self.participations: Dict[Tuple[int, str], SummonerMatchORM] = {}
        self.masteries: List[ChampionMasteryORM] = []
        self.commits = 0
        self.rollbacks = 0
        self._ids = itertools.count(1)

    def next_id(self) -> int:
        return next(self._ids)

    def snapshot(self):
        return (
            dict(self.summoners),
            dict(self.matches),
            dict(self.participations),
            list(self.masteries),
        )

    def restore(self, snapshot) -> None:
        self.summoners, self.matches, self.participations, self.masteries = snapshot

    def add_summoner(self, **fields) -> SummonerORM:
        fields.setdefault("created_at", self.clock())
        fields.setdefault("updated_at", self.clock())
        summoner = SummonerORM(**fields)
        self.summoners[summoner.id] = summoner
        return summoner

    def add_mastery(self, **fields) -> ChampionMasteryORM:
        mastery = ChampionMasteryORM(id=self.next_id(), **fields)
        self.masteries.append(mastery)
        return mastery

    def add_participation(self, **fields) -> SummonerMatchORM:
        self.matches.setdefault(
            fields["game_id"], MatchORM(id=fields["game_id"], timestamp=0)
        )
        fields.setdefault("created_at", self.clock.tick())
        for column in ("kills", "deaths", "assists", "wards_placed", "gold_earned"):
            fields.setdefault(column, 0)
        fields.setdefault("win", False)
        participation = SummonerMatchORM(id=self.next_id(), **fields)
        self.participations[(participation.game_id, participation.summoner_id)] = (
            participation
        )
        return participation

    def masteries_of(self, summoner_id: str) -> List[ChampionMasteryORM]:
        return sorted(
            (m for m in self.masteries if m.summoner_id == summoner_id),
            key=lambda m: m.champion_points,
            reverse=True,
        )

    def participations_of(self, summoner_id: str) -> List[SummonerMatchORM]:
        return sorted(
            (p for p in self.participations.values() if p.summoner_id == summoner_id),
            key=lambda p: (p.created_at, p.game_id),
            reverse=True,
        )


class FakeSummonerRepository(SummonerRepositoryInterface):
    def __init__(self, store: InMemoryStore):
        self.store = store

    def _with_relations(self, summoner: SummonerORM) -> SummonerORM:
        summoner.masteries = self.store.masteries_of(summoner.id)
        summoner.match_participations = self.store.participations_of(summoner.id)
        return summoner

    async def find_by_normalized_name(
        self, normalized_name: str
    ) -> Optional[SummonerORM]:
        candidates = [
            s
            for s in self.store.summoners.values()
            if s.name and normalize_name(s.name) == normalized_name
        ]
        if not candidates:
            return None
        candidates.sort(key=lambda s: s.revision_date is None)
        return self._with_relations(candidates[0])

    async def upsert_profile(self, profile: SummonerORM) -> SummonerORM:
        existing = self.store.summoners.get(profile.id)
        summoner = SummonerORM(
            id=profile.id,
            account_id=profile.account_id,
            name=profile.name,
            summoner_level=profile.summoner_level,
            profile_icon_id=profile.profile_icon_id,
            revision_date=profile.revision_date,
            created_at=existing.created_at if existing else self.store.clock(),
            updated_at=self.store.clock(),
        )
        self.store.summoners[summoner.id] = summoner
        return summoner

    async def find_existing_ids(self, summoner_ids: Iterable[str]) -> set:
        return {sid for sid in summoner_ids if sid in self.store.summoners}

    async def create_stubs(self, stubs: List[SummonerORM]) -> None:
        for stub in stubs:
            if stub.id not in self.store.summoners:
                stub.created_at = stub.updated_at = self.store.clock()
                self.store.summoners[stub.id] = stub

    async def find_page(self, limit: int, offset: int) -> List[SummonerORM]:
        def top_points(summoner: SummonerORM) -> int:
            masteries = self.store.masteries_of(summoner.id)
            return masteries[0].champion_points if masteries else -1

        profiled = [
            s for s in self.store.summoners.values() if s.summoner_level is not None
        ]
        profiled.sort(key=lambda s: (-s.summoner_level, -top_points(s), s.id))
        page = profiled[offset : offset + limit]
        for summoner in page:
            summoner.masteries = self.store.masteries_of(summoner.id)
        return page


class FakeMatchRepository(MatchRepositoryInterface):
    def __init__(self, store: InMemoryStore):
        self.store = store

    async def find_existing_ids(self, game_ids: Iterable[int]) -> set:
        return {gid for gid in game_ids if gid in self.store.matches}

    async def create_bulk(self, matches: List[MatchORM]) -> None:
        for match in matches:
            self.store.matches.setdefault(match.id, match)

    async def create_participations_bulk(
        self, participations: List[SummonerMatchORM]
    ) -> None:
        for p in participations:
            if p.game_id not in self.store.matches or p.summoner_id not in self.store.summoners:
                raise IntegrityError(
                    "INSERT INTO summoner_matches", {}, Exception("foreign key violation")
                )
            key = (p.game_id, p.summoner_id)
            if key not in self.store.participations:
                p.id = self.store.next_id()
                p.created_at = self.store.clock.tick()
                self.store.participations[key] = p

    async def find_by_summoner(self, summoner_id: str) -> List[SummonerMatchORM]:
        return self.store.participations_of(summoner_id)


class FakeMasteryRepository(MasteryRepositoryInterface):
    def __init__(self, store: InMemoryStore):
        self.store = store
        self.fail_on_create = False

    async def find_by_summoner(self, summoner_id: str) -> List[ChampionMasteryORM]:
        return self.store.masteries_of(summoner_id)

    async def delete_by_summoner(self, summoner_id: str) -> int:
        before = len(self.store.masteries)
        self.store.masteries = [
            m for m in self.store.masteries if m.summoner_id != summoner_id
        ]
        return before - len(self.store.masteries)

    async def create_bulk(
        self, masteries: List[ChampionMasteryORM]
    ) -> List[ChampionMasteryORM]:
        if self.fail_on_create:
            raise IntegrityError("INSERT INTO champion_masteries", {}, Exception("boom"))
        for mastery in masteries:
            mastery.id = self.store.next_id()
            self.store.masteries.append(mastery)
        return masteries


class FakeUnitOfWork(AbstractUnitOfWork):
    def __init__(self, store: InMemoryStore, fail_mastery_insert: bool = False):
        self.store = store
        self.summoners = FakeSummonerRepository(store)
        self.matches = FakeMatchRepository(store)
        self.masteries = FakeMasteryRepository(store)
        self.masteries.fail_on_create = fail_mastery_insert
        self._snapshot = None

    async def __aenter__(self) -> "FakeUnitOfWork":
        self._snapshot = self.store.snapshot()
        return self

    async def commit(self) -> None:
        self.store.commits += 1

    async def rollback(self) -> None:
        self.store.restore(self._snapshot)
        self.store.rollbacks += 1


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def store(clock) -> InMemoryStore:
    return InMemoryStore(clock)


@pytest.fixture
def uow_factory(store):
    return lambda: FakeUnitOfWork(store)


# ---------------------------------------------------------------------------
# Riot payload builders
# ---------------------------------------------------------------------------


def build_matchlist(*game_ids: int) -> MatchlistDTO:
    return MatchlistDTO(
        matches=[
            MatchReferenceDTO(game_id=gid, timestamp=1_700_000_000_000 + gid, queue=420)
            for gid in game_ids
        ],
        start_index=0,
        end_index=len(game_ids),
    )


def build_match(game_id: int, players: List[dict]) -> MatchDTO:
    """Match detail where each player dict has summoner_id plus optional stats."""
    participants = []
    identities = []
    for slot, player in enumerate(players, start=1):
        participants.append(
            {
                "participantId": slot,
                "championId": player.get("champion_id", 1),
                "teamId": 100 if slot <= 5 else 200,
                "stats": {
                    "kills": player.get("kills", 0),
                    "deaths": player.get("deaths", 0),
                    "assists": player.get("assists", 0),
                    "wardsPlaced": player.get("wards_placed", 0),
                    "goldEarned": player.get("gold_earned", 0),
                    "win": player.get("win", False),
                },
                "timeline": {"role": player.get("role", "SOLO"), "lane": "TOP"},
            }
        )
        summoner_id = player.get("summoner_id")
        identities.append(
            {
                "participantId": slot,
                "player": (
                    {
                        "summonerId": summoner_id,
                        "accountId": f"acc-{summoner_id}",
                        "summonerName": player.get("name", summoner_id),
                        "profileIcon": 7,
                    }
                    if summoner_id
                    else None
                ),
            }
        )

    return MatchDTO.model_validate(
        {
            "gameId": game_id,
            "gameCreation": 1_700_000_000_000 + game_id,
            "queueId": 420,
            "participants": participants,
            "participantIdentities": identities,
        }
    )


@pytest.fixture
def make_match():
    return build_match


@pytest.fixture
def make_matchlist():
    return build_matchlist


@pytest.fixture
def failing_mastery_uow_factory(store):
    """Unit of work whose mastery inserts raise an IntegrityError."""
    return lambda: FakeUnitOfWork(store, fail_mastery_insert=True)
