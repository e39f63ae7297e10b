"""Async engine management with the psycopg3 async driver.

The engine is created lazily on first use from ``DB_*`` settings, so
importing this module never opens a connection.
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from dynamic_search.core.settings import get_db_settings

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None


def get_engine() -> AsyncEngine:
    """Return the process-wide async engine, creating it on first call.

    Raises:
        RuntimeError: If the database is disabled or not configured.
    """
    global _engine

    if _engine is None:
        db_settings = get_db_settings()
        if not db_settings.is_configured:
            msg = "Database is not configured (set DB_* or DATABASE_URL)"
            raise RuntimeError(msg)
        _engine = create_async_engine(
            db_settings.get_sqlalchemy_url(),
            **db_settings.sqlalchemy_engine_kwargs(),
        )
        logger.info(
            "Created database engine for %s:%s/%s",
            db_settings.host,
            db_settings.port,
            db_settings.name,
        )
    return _engine


async def dispose_engine() -> None:
    """Dispose the engine so the next get_engine() call creates a new one."""
    global _engine

    if _engine is not None:
        await _engine.dispose()
        logger.info("Database engine disposed")
    _engine = None


__all__ = ["dispose_engine", "get_engine"]
