"""Configuration management using pydantic-settings."""

from .settings import (
    LazyseqSettings,
    LoggingSettings,
    SchedulerSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "LazyseqSettings",
    "LoggingSettings",
    "SchedulerSettings",
    "clear_settings_cache",
    "get_settings",
]
