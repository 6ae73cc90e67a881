"""Riot API endpoint definitions and routing information."""

from typing import Optional
from urllib.parse import quote

from .constants import DATA_DRAGON_URL, Platform


class RiotAPIEndpoints:
    """Riot API endpoint definitions and routing."""

    def __init__(self, platform: Platform = Platform.NA1):
        """
        Initialize endpoint configuration.

        Args:
            platform: Default platform for platform endpoints
        """
        self.platform = platform

    def get_platform_url(self, platform: Optional[Platform] = None) -> str:
        """Get base URL for platform endpoints."""
        platform = platform or self.platform
        platform_str = platform.value if isinstance(platform, Platform) else platform
        return f"https://{platform_str}.api.riotgames.com"

    # Summoner endpoints
    def summoner_by_name(self, name: str, platform: Optional[Platform] = None) -> str:
        """Get summoner by name endpoint."""
        platform_url = self.get_platform_url(platform)
        return f"{platform_url}/lol/summoner/v4/summoners/by-name/{quote(name, safe='')}"

    # Match endpoints
    def matchlist_by_account(
        self, account_id: str, platform: Optional[Platform] = None
    ) -> str:
        """Get match list by encrypted account id endpoint."""
        platform_url = self.get_platform_url(platform)
        return f"{platform_url}/lol/match/v4/matchlists/by-account/{account_id}"

    def match_by_id(self, game_id: int, platform: Optional[Platform] = None) -> str:
        """Get match detail endpoint."""
        platform_url = self.get_platform_url(platform)
        return f"{platform_url}/lol/match/v4/matches/{game_id}"

    # Champion mastery endpoints
    def champion_masteries_by_summoner(
        self, summoner_id: str, platform: Optional[Platform] = None
    ) -> str:
        """Get all champion masteries for a summoner endpoint."""
        platform_url = self.get_platform_url(platform)
        return f"{platform_url}/lol/champion-mastery/v4/champion-masteries/by-summoner/{summoner_id}"

    # Static data (Data Dragon, unauthenticated)
    @staticmethod
    def data_dragon_versions() -> str:
        """Get list of published static data versions, newest first."""
        return f"{DATA_DRAGON_URL}/api/versions.json"

    @staticmethod
    def data_dragon_champions(version: str, locale: str) -> str:
        """Get champion static data for a version and locale."""
        return f"{DATA_DRAGON_URL}/cdn/{version}/data/{locale}/champion.json"
