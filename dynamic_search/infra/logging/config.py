"""Logging configuration setup.

Configures the root logger through ``logging.config.dictConfig``; library
modules only ever call ``logging.getLogger(__name__)`` and propagate.

Usage:
    from dynamic_search.infra.logging import setup_logging

    setup_logging()  # reads LOG_* settings once
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import TYPE_CHECKING, Any

logger = logging.getLogger(__name__)
_LOGGING_INITIALIZED = False

if TYPE_CHECKING:
    from dynamic_search.core.settings.logs import LoggingSettings

TEXT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Ensure logging is configured once across entrypoints.

    Args:
        log_settings: Optional logging settings instance. If omitted, settings
            are loaded via get_logging_settings().
        force: Reconfigure logging even if it was already initialized.
        **configure_kwargs: Explicit overrides for configure_logging().
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    settings_obj = log_settings
    if settings_obj is None:
        from dynamic_search.core.settings import get_logging_settings

        settings_obj = get_logging_settings()

    log_config = {**settings_obj.to_logging_kwargs(), **configure_kwargs}
    configure_logging(**log_config)
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = False,
    console_enabled: bool = True,
    file_path: str | Path | None = None,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
    capture_warnings: bool = True,
    service_name: str = "dynamic-search",
    **kwargs: Any,
) -> None:
    """Configure logging with dictConfig.

    All handlers are attached to the root logger; application loggers
    propagate up.

    Args:
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_logs: Enable JSONL (JSON Lines) structured logging.
        console_enabled: Enable console/stderr logging.
        file_path: Path to log file. None disables file logging.
        file_max_bytes: Maximum log file size before rotation.
        file_backup_count: Number of rotated log files to keep.
        capture_warnings: Forward Python warnings to logging system.
        service_name: Static "service" field of JSON records.
        **kwargs: Unused settings, logged at DEBUG.
    """
    if kwargs:
        logger.debug("Unused logging kwargs supplied: %s", ", ".join(sorted(kwargs.keys())))

    logging.config.dictConfig(
        build_logging_config(
            log_level=log_level,
            json_logs=json_logs,
            console_enabled=console_enabled,
            file_path=Path(file_path) if file_path else None,
            file_max_bytes=file_max_bytes,
            file_backup_count=file_backup_count,
            service_name=service_name,
        )
    )
    logging.captureWarnings(capture_warnings)


def build_logging_config(
    *,
    log_level: str,
    json_logs: bool,
    console_enabled: bool,
    file_path: Path | None,
    file_max_bytes: int,
    file_backup_count: int,
    service_name: str,
) -> dict[str, Any]:
    """Build the dictConfig dictionary.

    Returns:
        Logging configuration dict (version 1 schema).
    """
    formatter = "json" if json_logs else "text"
    formatters: dict[str, Any] = {
        "text": {"format": TEXT_FORMAT, "datefmt": DATE_FORMAT},
        "json": {
            "()": "dynamic_search.infra.logging.formatters.JSONFormatter",
            "fmt_keys": {"level": "levelname", "logger": "name", "message": "message"},
            "static": {"service": service_name},
        },
    }

    handlers: dict[str, Any] = {}
    if console_enabled:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "formatter": formatter,
            "stream": "ext://sys.stderr",
        }
    if file_path:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": formatter,
            "filename": str(file_path),
            "maxBytes": file_max_bytes,
            "backupCount": file_backup_count,
            "encoding": "utf-8",
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": handlers,
        "root": {
            "level": log_level.upper(),
            "handlers": list(handlers),
        },
    }


__all__ = ["build_logging_config", "configure_logging", "setup_logging"]
