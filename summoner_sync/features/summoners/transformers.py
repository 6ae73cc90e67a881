"""Transformers from summoner domain objects to API response schemas."""

from dataclasses import asdict
from typing import Iterable, Optional

from summoner_sync.features.champions.catalog import ChampionCatalog
from summoner_sync.features.masteries.orm_models import ChampionMasteryORM
from .orm_models import SummonerORM
from .schemas import (
    ChampionMasteryEntry,
    ChampionResponse,
    ChampionStatisticsResponse,
    MasteryResponse,
    SummonerResponse,
)
from .service import ResolvedSummoner


def mastery_to_entry(
    mastery: ChampionMasteryORM, catalog: ChampionCatalog
) -> ChampionMasteryEntry:
    """Mastery with catalog champion data and statistics, when available."""
    champion = catalog.get(mastery.champion_id)
    statistics: Optional[ChampionStatisticsResponse] = None
    if mastery.statistics is not None:
        statistics = ChampionStatisticsResponse(**asdict(mastery.statistics))

    return ChampionMasteryEntry(
        mastery=MasteryResponse(
            summoner_id=mastery.summoner_id,
            champion_id=mastery.champion_id,
            champion_points=mastery.champion_points,
            champion_level=mastery.champion_level,
        ),
        statistics=statistics,
        champion=(
            ChampionResponse(name=champion.name, key=champion.key, id=champion.id)
            if champion
            else None
        ),
    )


def summoner_to_response(
    summoner: SummonerORM,
    masteries: Iterable[ChampionMasteryORM],
    catalog: ChampionCatalog,
) -> SummonerResponse:
    """Transform a summoner and its masteries to the API response."""
    return SummonerResponse(
        summoner_id=summoner.id,
        name=summoner.name,
        level=summoner.summoner_level,
        profile_icon_id=summoner.profile_icon_id,
        champion_masteries=[mastery_to_entry(m, catalog) for m in masteries],
    )


def resolved_to_response(
    resolved: ResolvedSummoner, catalog: ChampionCatalog
) -> SummonerResponse:
    return summoner_to_response(resolved.summoner, resolved.masteries, catalog)
