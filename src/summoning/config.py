"""Configuration management for Summoning Circle using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="SUMMONING_",
        extra="ignore",
    )

    debug: bool = Field(default=False, description="Echo SQL and enable debug output")

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/summoning.db",
        description="Database connection URL",
        alias="DATABASE_URL",
    )

    # Content
    data_root: str = Field(
        default="./data",
        description="Root directory for bundled content",
        alias="SUMMONING_DATA_ROOT",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level", alias="LOG_LEVEL")
    log_format: str = Field(
        default="console", description="Log format (console or json)", alias="LOG_FORMAT"
    )

    @property
    def data_dir(self) -> Path:
        """Get the data directory path."""
        return Path(self.data_root)

    @property
    def bestiary_dir(self) -> Path:
        """Get the directory holding bestiary YAML files."""
        return self.data_dir / "bestiary"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
