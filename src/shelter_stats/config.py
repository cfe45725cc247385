"""
Application settings.

Values come from environment variables prefixed ``SHELTER_STATS_`` (or a
local ``.env`` file), falling back to the defaults below.

Usage::

    from shelter_stats.config import get_settings

    settings = get_settings()
    settings.care_csv  # Path("data/reference/animal_care_data.csv")
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for loaders, geocoding and flows."""

    model_config = SettingsConfigDict(
        env_prefix="SHELTER_STATS_",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    app_name: str = "shelter-stats"
    app_env: str = "development"
    debug: bool = False

    # Inputs
    data_dir: Path = Path("data")
    care_csv: Path = Path("data/reference/animal_care_data.csv")
    strays_csv: Path = Path("data/reference/stray_animals_data.csv")

    # Geocoding (Nominatim)
    geocoder_url: str = "https://nominatim.openstreetmap.org/search"
    accept_language: str = "en"
    geocode_timeout: float = Field(default=10.0, gt=0)
    geocode_concurrency: int = Field(default=4, ge=1)

    # Default filter for the stray-animals map
    default_year: int = 2017


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
