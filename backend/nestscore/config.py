"""
Configuration settings using Pydantic.

Loads settings from environment variables and .env file.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./nestscore.db"

    # Question catalogue (defaults to the one shipped with scoring_engine)
    catalogue_path: Optional[str] = None

    # Postcode lookup (postcodes.io)
    postcode_api_url: str = "https://api.postcodes.io"
    postcode_timeout: float = 10.0

    # Sharing
    share_base_url: str = "http://localhost:5173"

    # Logging
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    @property
    def async_database_url(self) -> str:
        """Convert database URL to async version if needed."""
        url = self.database_url
        if url.startswith("sqlite://"):
            return url.replace("sqlite://", "sqlite+aiosqlite://")
        if url.startswith("postgresql://"):
            return url.replace("postgresql://", "postgresql+asyncpg://")
        return url


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
