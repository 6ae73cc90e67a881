"""
Summoner Sync Application Package.

Caches summoner profiles, recent match participation and top champion
masteries from the Riot API in a relational store, refreshing from
upstream only when the cached copy is stale.
"""

__version__ = "1.0.0"
