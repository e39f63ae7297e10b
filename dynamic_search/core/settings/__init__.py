"""Modular Pydantic Settings v2 configuration.

Settings are split by domain and read from environment variables:
- SEARCH_*: query composition defaults
- DB_*: PostgreSQL connection
- LOG_*: logging

Import settings via cached loaders:
    from dynamic_search.core.settings import get_search_settings
"""

from __future__ import annotations

from .loader import (
    clear_all_caches,
    get_db_settings,
    get_logging_settings,
    get_search_settings,
)
from .logs import LoggingSettings
from .postgres import PostgresSettings
from .search import SearchSettings

__all__ = [
    "LoggingSettings",
    "PostgresSettings",
    "SearchSettings",
    "clear_all_caches",
    "get_db_settings",
    "get_logging_settings",
    "get_search_settings",
]
