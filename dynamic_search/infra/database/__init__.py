"""Lazily created async engine."""

from dynamic_search.infra.database.session import dispose_engine, get_engine

__all__ = ["dispose_engine", "get_engine"]
