"""Environment-based configuration using pydantic-settings.

Example:
    >>> from lazyseq.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.logging.level
    'INFO'
    >>> settings.scheduler.default_limit is None
    True

    # Or with environment variables:
    # LAZYSEQ_LOG_LEVEL=DEBUG
    # LAZYSEQ_SCHEDULER_DEFAULT_LIMIT=8
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, PositiveInt, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LAZYSEQ_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"
    colors: bool | None = Field(default=None, description="Force console colors (None = detect tty)")

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class SchedulerSettings(BaseSettings):
    """Defaults for the bounded-concurrency scheduler."""

    model_config = SettingsConfigDict(
        env_prefix="LAZYSEQ_SCHEDULER_",
        extra="ignore",
    )

    default_limit: PositiveInt | None = Field(
        default=None,
        description="Concurrency cap used when map_async() gets no explicit limit (None = unlimited)",
    )
    return_exceptions: bool = Field(
        default=False,
        description="Collect task exceptions into results instead of raising the first one",
    )

    @computed_field
    @property
    def is_bounded(self) -> bool:
        """Whether a default concurrency cap is configured."""
        return self.default_limit is not None


class LazyseqSettings(BaseSettings):
    """Root settings for lazyseq.

    Loads configuration from environment variables with the LAZYSEQ_ prefix.

    Example environment variables:
        LAZYSEQ_DEBUG=true
        LAZYSEQ_LOG_FORMAT=json
        LAZYSEQ_SCHEDULER_DEFAULT_LIMIT=16
    """

    model_config = SettingsConfigDict(
        env_prefix="LAZYSEQ_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    debug: bool = Field(default=False, description="Force DEBUG logging regardless of LAZYSEQ_LOG_LEVEL")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)

    @computed_field
    @property
    def log_level(self) -> str:
        """Effective log level after applying the debug switch."""
        return "DEBUG" if self.debug else self.logging.level


@lru_cache(maxsize=1)
def get_settings() -> LazyseqSettings:
    """Get the global settings instance (cached)."""
    return LazyseqSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
