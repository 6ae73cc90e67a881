"""Pydantic models for Riot API response data."""

from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict


class SummonerDTO(BaseModel):
    """League of Legends Summoner information."""

    id: str
    account_id: str = Field(..., alias="accountId")
    puuid: Optional[str] = None
    name: str
    profile_icon_id: int = Field(..., alias="profileIconId")
    summoner_level: int = Field(..., alias="summonerLevel")
    revision_date: Optional[int] = Field(None, alias="revisionDate")

    model_config = ConfigDict(populate_by_name=True)


class MatchReferenceDTO(BaseModel):
    """One entry of a summoner's match list."""

    game_id: int = Field(..., alias="gameId")
    timestamp: int
    season: Optional[int] = None
    queue: Optional[int] = None
    champion: Optional[int] = None
    role: Optional[str] = None
    lane: Optional[str] = None
    platform_id: Optional[str] = Field(None, alias="platformId")

    model_config = ConfigDict(populate_by_name=True)


class MatchlistDTO(BaseModel):
    """Match list response."""

    matches: List[MatchReferenceDTO] = Field(default_factory=list)
    start_index: int = Field(0, alias="startIndex")
    end_index: int = Field(0, alias="endIndex")
    total_games: Optional[int] = Field(None, alias="totalGames")

    model_config = ConfigDict(populate_by_name=True)


class PlayerDTO(BaseModel):
    """Account identity behind a match participant."""

    summoner_id: Optional[str] = Field(None, alias="summonerId")
    account_id: Optional[str] = Field(None, alias="accountId")
    summoner_name: Optional[str] = Field(None, alias="summonerName")
    profile_icon: Optional[int] = Field(None, alias="profileIcon")

    model_config = ConfigDict(populate_by_name=True)


class ParticipantIdentityDTO(BaseModel):
    """Maps an in-match participant slot to a player."""

    participant_id: int = Field(..., alias="participantId")
    player: Optional[PlayerDTO] = None

    model_config = ConfigDict(populate_by_name=True)


class ParticipantStatsDTO(BaseModel):
    """Per-game stat block of a participant."""

    kills: int = 0
    deaths: int = 0
    assists: int = 0
    wards_placed: int = Field(0, alias="wardsPlaced")
    gold_earned: int = Field(0, alias="goldEarned")
    win: bool = False

    model_config = ConfigDict(populate_by_name=True)


class ParticipantTimelineDTO(BaseModel):
    """Participant timeline; only the role is kept."""

    role: Optional[str] = None
    lane: Optional[str] = None


class ParticipantDTO(BaseModel):
    """Match participant information."""

    participant_id: int = Field(..., alias="participantId")
    champion_id: int = Field(..., alias="championId")
    team_id: Optional[int] = Field(None, alias="teamId")
    stats: ParticipantStatsDTO = Field(default_factory=ParticipantStatsDTO)
    timeline: ParticipantTimelineDTO = Field(default_factory=ParticipantTimelineDTO)

    model_config = ConfigDict(populate_by_name=True)


class MatchDTO(BaseModel):
    """Full match detail."""

    game_id: int = Field(..., alias="gameId")
    game_creation: Optional[int] = Field(None, alias="gameCreation")
    queue_id: Optional[int] = Field(None, alias="queueId")
    season_id: Optional[int] = Field(None, alias="seasonId")
    participants: List[ParticipantDTO] = Field(default_factory=list)
    participant_identities: List[ParticipantIdentityDTO] = Field(
        default_factory=list, alias="participantIdentities"
    )

    model_config = ConfigDict(populate_by_name=True)


class ChampionMasteryDTO(BaseModel):
    """A summoner's mastery standing on one champion."""

    champion_id: int = Field(..., alias="championId")
    champion_level: int = Field(..., alias="championLevel")
    champion_points: int = Field(..., alias="championPoints")
    champion_points_until_next_level: Optional[int] = Field(
        None, alias="championPointsUntilNextLevel"
    )
    summoner_id: Optional[str] = Field(None, alias="summonerId")

    model_config = ConfigDict(populate_by_name=True)


class ChampionDataDTO(BaseModel):
    """Champion entry of Data Dragon ``champion.json``.

    Data Dragon calls the internal name ``id`` and the numeric id ``key``.
    """

    id: str
    key: str
    name: str

    @property
    def champion_id(self) -> int:
        return int(self.key)
