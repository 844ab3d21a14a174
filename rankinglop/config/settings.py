"""Application settings using Pydantic BaseSettings."""
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite:///data/rankinglop.db"

    # Blob containers
    athletes_container: str = "athletes"
    athletes_file_pattern: str = r"^[0-9a-f-]+\.json$"
    competitions_container: str = "competitions"
    competitions_file: str = "competitions.json"

    # Ingestion
    first_season: int = 2009
    ingest_timeout_seconds: Optional[float] = None

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
