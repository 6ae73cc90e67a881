"""Configuration settings for the summoner sync service."""

from __future__ import annotations

from datetime import timedelta
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database Configuration
    postgres_db: str = Field(default="summoner_sync")
    postgres_user: str = Field(default="summoner_sync")
    postgres_password: str = Field(default="dev_password")
    postgres_host: str = Field(default="postgres")
    postgres_port: int = Field(default=5432)
    database_url_override: Optional[str] = Field(
        default=None,
        description="Full SQLAlchemy async URL, takes precedence over postgres_* parts",
    )

    @property
    def database_url(self) -> str:
        """Construct async database URL from components."""
        if self.database_url_override:
            return self.database_url_override
        return f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"

    # Application Configuration
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # CORS Configuration
    cors_origins: str = Field(default="http://localhost:3000,http://127.0.0.1:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list."""
        return [
            origin.strip() for origin in self.cors_origins.split(",") if origin.strip()
        ]

    # Riot API Configuration
    riot_api_key: str = Field(default="")
    riot_platform: str = Field(default="na1")
    riot_request_timeout: float = Field(default=10.0, gt=0)
    riot_max_retries: int = Field(default=3, ge=0)
    riot_cache_ttl: int = Field(
        default=120, ge=0, description="Seconds an upstream response stays cached"
    )
    riot_cache_maxsize: int = Field(default=1000, gt=0)
    data_dragon_locale: str = Field(default="en_US")

    # Synchronization policy
    stale_window_hours: float = Field(default=24.0, gt=0)
    recent_match_count: int = Field(default=20, gt=0, le=100)
    top_mastery_count: int = Field(default=4, gt=0)
    match_detail_timeout: float = Field(default=10.0, gt=0)
    summoner_page_size: int = Field(default=10, gt=0)

    @property
    def stale_window(self) -> timedelta:
        """Age after which a cached summoner is refreshed from upstream."""
        return timedelta(hours=self.stale_window_hours)

    @field_validator("riot_platform")
    @classmethod
    def normalize_platform(cls, v: str) -> str:
        """Platform routing values are lowercase (e.g. ``na1``)."""
        return v.strip().lower()

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix for environment variables
        extra="ignore",
    )


def get_settings() -> Settings:
    """Get application settings instance."""
    return Settings()


# Create a global settings instance lazily
settings: Settings | None = None


def get_global_settings() -> Settings:
    """Get or create the global settings instance."""
    global settings
    if settings is None:
        settings = get_settings()
    return settings
