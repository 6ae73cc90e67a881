"""Pydantic schemas for summoner API responses.

Field names are snake_case in Python and camelCase on the wire.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ChampionResponse(BaseModel):
    """Static champion data from the champion catalog."""

    name: str
    key: str = Field(..., description="Internal champion name, e.g. 'MonkeyKing'")
    id: int = Field(..., description="Numeric champion id")


class MasteryResponse(BaseModel):
    """Stored mastery standing."""

    summoner_id: str = Field(..., alias="summonerId")
    champion_id: int = Field(..., alias="championId")
    champion_points: int = Field(..., alias="championPoints")
    champion_level: int = Field(..., alias="championLevel")

    model_config = ConfigDict(populate_by_name=True)


class ChampionStatisticsResponse(BaseModel):
    """Totals over the summoner's cached matches on one champion."""

    kills: int
    deaths: int
    assists: int
    kda: float = Field(..., description="Sum of per-game (kills + assists) / max(deaths, 1)")
    wins: int
    wards_placed: int = Field(..., alias="wardsPlaced")
    gold_earned: int = Field(..., alias="goldEarned")
    num_games: int = Field(..., alias="numGames")

    model_config = ConfigDict(populate_by_name=True)


class ChampionMasteryEntry(BaseModel):
    """A mastery with its champion metadata and match statistics."""

    mastery: MasteryResponse
    statistics: Optional[ChampionStatisticsResponse] = None
    champion: Optional[ChampionResponse] = None


class SummonerResponse(BaseModel):
    """Summoner profile with top champion masteries."""

    summoner_id: str = Field(..., alias="summonerId")
    name: Optional[str] = None
    level: Optional[int] = None
    profile_icon_id: Optional[int] = Field(None, alias="profileIconId")
    champion_masteries: List[ChampionMasteryEntry] = Field(
        default_factory=list, alias="championMasteries"
    )

    model_config = ConfigDict(populate_by_name=True)
