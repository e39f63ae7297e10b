"""CLI utilities for running search commands and printing their results."""

from dynamic_search.cli.utils.output import (
    error,
    info,
    show_plan,
    show_query,
    show_report,
    success,
    warning,
)
from dynamic_search.cli.utils.runner import coro, exits_on_search_error

__all__ = [
    "coro",
    "error",
    "exits_on_search_error",
    "info",
    "show_plan",
    "show_query",
    "show_report",
    "success",
    "warning",
]
