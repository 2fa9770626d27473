"""Configuration management for Neonsheet using Pydantic Settings."""

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
        env_prefix="NEONSHEET_",
        extra="ignore",
    )

    debug: bool = Field(default=False, description="Enable debug mode (echoes SQL)")

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/neonsheet.db",
        description="Database connection URL",
        alias="DATABASE_URL",
    )

    # Rules data
    classes_file: Path | None = Field(
        default=None,
        description="Override for the class catalog YAML (defaults to the bundled catalog)",
    )

    # Older characters stored ability scores as 10 + modifier. While this is on,
    # scores of 8 or more are read as legacy values and shifted down by 10.
    legacy_score_detection: bool = Field(
        default=True,
        description="Normalize legacy 10-centered ability scores on read",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level", alias="LOG_LEVEL")
    log_format: str = Field(
        default="console", description="Log format (console or json)", alias="LOG_FORMAT"
    )

    @property
    def data_dir(self) -> Path:
        """Get the bundled rules data directory path."""
        return Path(__file__).parent / "data"

    @property
    def class_catalog_path(self) -> Path:
        """Get the class catalog YAML path."""
        if self.classes_file is not None:
            return self.classes_file
        return self.data_dir / "classes.yaml"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
