"""
Pure computations over stored summoner data.
"""

from .champion_stats import ChampionStatistics, annotate, champion_statistics

__all__ = ["ChampionStatistics", "annotate", "champion_statistics"]
