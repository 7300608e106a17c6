"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated configuration from environment variables
with sensible defaults. Supports .env files and nested configuration.

Example:
    >>> from refetch.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.retry.max_retries
    3
    >>> settings.scheduler.batch_size
    16

    # Or with environment variables:
    # REFETCH_RETRY_MAX_RETRIES=5
    # REFETCH_RETRY_BACKOFF='[1, 5, 10]'
    # REFETCH_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, PositiveInt, StrictFloat, StrictInt, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetrySettings(BaseSettings):
    """Default retry rule.

    ``backoff`` accepts the same raw shapes as RetryOptions (JSON-encoded
    when read from the environment). Its types are strict so nothing is
    coerced on load; emptiness and sign are checked when the settings are
    turned into RetryOptions.
    """

    model_config = SettingsConfigDict(
        env_prefix="REFETCH_RETRY_",
        extra="ignore",
    )

    retry_on_status: frozenset[int] = frozenset({500, 502, 503, 504})
    max_retries: Annotated[int, Field(ge=0)] = 3
    backoff: StrictInt | list[StrictInt] | dict[str, StrictInt | StrictFloat] | None = Field(
        default=None,
        description="Seconds, list of seconds, or {initial_delay, delay_multiplier} in ms",
    )
    retry_on_connection_failure: bool = False


class SchedulerSettings(BaseSettings):
    """Driver-side scheduler configuration."""

    model_config = SettingsConfigDict(
        env_prefix="REFETCH_SCHEDULER_",
        extra="ignore",
    )

    batch_size: PositiveInt = Field(default=16, description="Max requests drained per driver step")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="REFETCH_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class RefetchSettings(BaseSettings):
    """Root settings for the re-scheduling core.

    Loads configuration from environment variables with REFETCH_ prefix.

    Example environment variables:
        REFETCH_RETRY_MAX_RETRIES=5
        REFETCH_RETRY_RETRY_ON_CONNECTION_FAILURE=true
        REFETCH_SCHEDULER_BATCH_SIZE=32
        REFETCH_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="REFETCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    retry: RetrySettings = Field(default_factory=RetrySettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> RefetchSettings:
    """Get the global settings instance (cached)."""
    return RefetchSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
