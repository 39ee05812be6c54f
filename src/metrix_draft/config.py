"""
Configuration module using pydantic-settings.

Loads settings from environment variables with sensible defaults.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="METRIX_DRAFT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Configuration
    api_title: str = "Metrix Draft API"
    api_version: str = "0.1.0"
    api_description: str = "Rating-weighted draft wheel for Disc Golf Metrix competitions"
    debug: bool = False

    # Disc Golf Metrix API
    metrix_base_url: str = "https://discgolfmetrix.com"
    metrix_timeout: float = 30.0
    bagtag_list_id: int = 2

    # Wheel / spin behaviour
    base_turns: int = 5
    spin_duration_ms: float = 5000.0
    frame_interval_ms: float = 1000.0 / 60  # ~60 fps
    winner_pause_ms: float = 2000.0

    # Draft store
    max_drafts: int = 100  # oldest draft is evicted beyond this

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = True


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
