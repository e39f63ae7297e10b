"""Pytest configuration and shared fixtures.

Organization:
    - Environment: settings are read from the environment, so tests pin a
      known baseline and clear the cached loaders around every test.
    - Database Fixtures: mocked async sessions/connections. Nothing here
      opens a real database connection.
"""

from __future__ import annotations

import os
from unittest.mock import AsyncMock, MagicMock

import pytest

from dynamic_search.core.settings import SearchSettings, clear_all_caches

# Ensure tests run without external infrastructure
os.environ.setdefault("DB_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "INFO")
os.environ.setdefault("SEARCH_DEFAULT_LANGUAGE", "english")


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    """Drop cached settings so monkeypatched env vars take effect."""
    clear_all_caches()
    yield
    clear_all_caches()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def mock_connection():
    """Async connection/session double whose execute() reports no affected rows."""
    connection = AsyncMock()
    connection.execute.return_value = MagicMock(rowcount=-1)
    return connection


@pytest.fixture
def mock_session():
    """Async session double with a scalars() result holding no rows."""
    session = AsyncMock()
    session.execute.return_value = MagicMock(rowcount=-1)
    session.scalars.return_value = MagicMock(all=MagicMock(return_value=[]))
    return session


@pytest.fixture
def search_settings():
    """Search settings with library defaults, independent of the environment."""
    return SearchSettings(
        default_language="english",
        max_keyword_length=500,
        search_vector_column="search_vector",
        log_queries=False,
    )

