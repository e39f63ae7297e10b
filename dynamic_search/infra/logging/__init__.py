"""Logging setup: dictConfig-based configuration and JSON Lines formatter."""

from dynamic_search.infra.logging.config import (
    build_logging_config,
    configure_logging,
    setup_logging,
)
from dynamic_search.infra.logging.formatters import JSONFormatter

__all__ = [
    "JSONFormatter",
    "build_logging_config",
    "configure_logging",
    "setup_logging",
]
