"""
Per-champion statistics over a summoner's cached matches.

Statistics are derived on every read and attached to mastery objects as a
transient ``statistics`` attribute; they are never persisted.

Note on ``kda``: it is the SUM of per-game ratios
``(kills + assists) / max(deaths, 1)``, not the ratio of summed totals.
Two games of 5.0 each give ``kda == 10.0``. Consumers wanting an average
divide by ``num_games``.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, Sequence, TypeVar


class ChampionMatch(Protocol):
    """Fields of a match participation used for aggregation."""

    champion_id: int
    kills: int
    deaths: int
    assists: int
    wards_placed: int
    gold_earned: int
    win: bool


class ChampionMastery(Protocol):
    champion_id: int
    statistics: Optional["ChampionStatistics"]


M = TypeVar("M", bound=ChampionMastery)


@dataclass
class ChampionStatistics:
    """Running totals of a summoner's games on one champion."""

    kills: int = 0
    deaths: int = 0
    assists: int = 0
    kda: float = 0.0
    wins: int = 0
    wards_placed: int = 0
    gold_earned: int = 0
    num_games: int = 0

    def add(self, match: ChampionMatch) -> None:
        self.num_games += 1
        self.kills += match.kills
        self.deaths += match.deaths
        self.assists += match.assists
        self.wards_placed += match.wards_placed
        self.gold_earned += match.gold_earned
        self.kda += (match.kills + match.assists) / max(match.deaths, 1)
        if match.win:
            self.wins += 1


def champion_statistics(
    champion_id: int, matches: Iterable[ChampionMatch]
) -> ChampionStatistics:
    """Aggregate the matches played on ``champion_id``."""
    statistics = ChampionStatistics()
    for match in matches:
        if match.champion_id == champion_id:
            statistics.add(match)
    return statistics


def annotate(masteries: Sequence[M], matches: Sequence[ChampionMatch]) -> Sequence[M]:
    """Attach ``ChampionStatistics`` to each mastery and return the same sequence.

    A mastery whose champion has no matches gets all-zero statistics.
    """
    for mastery in masteries:
        mastery.statistics = champion_statistics(mastery.champion_id, matches)
    return masteries
