"""
Configuration management for char-grid.
Uses pydantic-settings for environment variable parsing.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Editor settings loaded from CHAR_GRID_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CHAR_GRID_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Grid
    default_rows: int = Field(
        default=30,
        ge=1,
        description="Rows of a fresh grid when no session is stored"
    )
    default_cols: int = Field(
        default=50,
        ge=1,
        description="Columns of a fresh grid when no session is stored"
    )

    # Undo
    history_limit: int = Field(
        default=50,
        ge=1,
        description="Maximum number of undo entries kept"
    )

    # Playback
    playback_interval_ms: int = Field(
        default=500,
        description="Delay between frames; non-positive means the default"
    )
    playback_loop: bool = Field(
        default=False,
        description="Restart from the first snapshot after the last"
    )

    # Persistence
    store_path: Path = Field(
        default=Path("char_grid.json"),
        description="File holding the serialized session"
    )
    autosave_interval_ms: int = Field(
        default=2000,
        ge=1,
        description="Period of the background save timer"
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_file: Path | None = Field(default=None)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
