"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the process.

Usage:
    from dynamic_search.core.settings.loader import get_search_settings

    settings = get_search_settings()  # First call: loads and validates
    settings = get_search_settings()  # Subsequent calls: returns cached instance

Testing:
    In tests, clear the cache to force reload:
    get_search_settings.cache_clear()
"""

from __future__ import annotations

from functools import lru_cache

from .logs import LoggingSettings
from .postgres import PostgresSettings
from .search import SearchSettings


@lru_cache(maxsize=1)
def get_search_settings() -> SearchSettings:
    """Get cached search settings."""
    return SearchSettings()


@lru_cache(maxsize=1)
def get_db_settings() -> PostgresSettings:
    """Get cached PostgreSQL settings.

    Returns:
        Validated and frozen PostgresSettings instance.
    """
    return PostgresSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings."""
    return LoggingSettings()


def clear_all_caches() -> None:
    """Clear every cached settings instance (useful in tests)."""
    get_search_settings.cache_clear()
    get_db_settings.cache_clear()
    get_logging_settings.cache_clear()


__all__ = [
    "clear_all_caches",
    "get_db_settings",
    "get_logging_settings",
    "get_search_settings",
]
