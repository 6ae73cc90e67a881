"""Riot API constants and enum definitions."""

from enum import Enum


class Platform(str, Enum):
    """Riot API platforms for platform routing."""

    BR1 = "br1"
    EUN1 = "eun1"
    EUW1 = "euw1"
    JP1 = "jp1"
    KR = "kr"
    LA1 = "la1"
    LA2 = "la2"
    NA1 = "na1"
    OC1 = "oc1"
    RU = "ru"
    TR1 = "tr1"


DATA_DRAGON_URL = "https://ddragon.leagueoflegends.com"
