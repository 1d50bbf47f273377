# ABOUTME: Application configuration using Pydantic Settings for environment variables
# ABOUTME: Provides the store location, cache reload strategy, and logging settings

from pathlib import Path
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

CacheReloadStrategy = Literal["swap", "clear"]


class Config(BaseSettings):
    """Application configuration with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="LOREKEEPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown environment variables
    )

    # Database Configuration
    database_location: str = Field(
        default="./data/lorekeeper.db",
        description="SQLite file path, ':memory:', or a full SQLAlchemy async URL",
    )
    echo_sql: bool = Field(default=False, description="Echo SQL statements through the engine logger")
    enforce_unique_group_ids: bool = Field(
        default=False,
        description="Create a unique index on DialogueGroups.ID so duplicate inserts fail with a conflict",
    )

    # Cache Configuration
    cache_reload_strategy: CacheReloadStrategy = Field(
        default="swap",
        description="'swap' publishes a fully loaded cache atomically; 'clear' empties the cache before reloading",
    )

    # Logging Configuration
    log_mode: Literal["interactive", "production"] = Field(default="interactive", description="Logging output mode")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging verbosity level"
    )

    log_file: Path | None = Field(default=None, description="Custom log file path (overrides default)")


def load_config(**overrides: Any) -> Config:
    """Build a configuration from the environment, applying explicit overrides.

    Every call returns a fresh instance; callers hand it to the objects that need it.

    Returns:
        Config: The application configuration instance
    """
    return Config(**{key: value for key, value in overrides.items() if value is not None})
