"""Search exceptions.

Custom exceptions for search composition, provisioning and execution that
provide better error messages and typing than raw SQLAlchemy exceptions.

Hierarchy:
    SearchError
    ├── InvalidInput
    │   ├── EmptyKeyword
    │   ├── InvalidKeyword
    │   ├── NoAttributes
    │   ├── InvalidSelector
    │   └── InvalidLanguage
    ├── UnresolvedMetadata
    │   └── UnresolvedTable
    ├── ProvisioningFailed
    └── ExecutionFailed

Database failures are chained with ``raise ... from`` so the original
driver error stays reachable through ``__cause__``.
"""

from __future__ import annotations

from typing import Any


class SearchError(Exception):
    """Base exception for search operations."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize search error.

        Args:
            message: Error description
            details: Additional context about the error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Format error message with details."""
        if self.details:
            details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class InvalidInput(SearchError):
    """Request rejected before any database interaction."""


class EmptyKeyword(InvalidInput):
    """Keyword is empty or whitespace only."""

    def __init__(self, message: str = "Search keyword cannot be empty or whitespace"):
        super().__init__(message)


class InvalidKeyword(InvalidInput):
    """Keyword is too long or has no searchable characters."""

    def __init__(self, message: str, keyword: str | None = None):
        details = {"keyword": keyword} if keyword is not None else {}
        super().__init__(message, details=details)


class NoAttributes(InvalidInput):
    """No attribute to search was provided."""

    def __init__(self, message: str = "At least one attribute must be provided"):
        super().__init__(message)


class InvalidSelector(InvalidInput):
    """Attribute selector does not resolve to a single mapped column.

    Attributes:
        selector: repr of the rejected selector
    """

    def __init__(self, message: str, selector: Any = None):
        self.selector = repr(selector) if selector is not None else None
        details = {"selector": self.selector} if self.selector else {}
        super().__init__(message, details=details)


class InvalidLanguage(InvalidInput):
    """Text search configuration name is malformed."""

    def __init__(self, language: str):
        self.language = language
        super().__init__("Invalid text search configuration", details={"language": language})


class UnresolvedMetadata(SearchError):
    """Entity metadata could not be resolved."""


class UnresolvedTable(UnresolvedMetadata):
    """Entity type is not mapped to a usable table name."""

    def __init__(self, entity: Any, reason: str | None = None):
        self.entity = entity
        entity_name = getattr(entity, "__name__", repr(entity))
        details: dict[str, Any] = {"entity": entity_name}
        if reason:
            details["reason"] = reason
        super().__init__(f"Cannot resolve table for {entity_name}", details=details)


class ProvisioningFailed(SearchError):
    """A provisioning stage failed.

    Earlier stages may already have been applied; provisioning is idempotent,
    so re-running it is the recovery path.

    Attributes:
        stage: Name of the failed stage ("trigger", "backfill", "index", ...)
        table_name: Table being provisioned
    """

    def __init__(self, stage: str, table_name: str, cause: BaseException | None = None):
        self.stage = stage
        self.table_name = table_name
        details: dict[str, Any] = {"stage": stage, "table": table_name}
        if cause is not None:
            details["cause"] = f"{type(cause).__name__}: {cause}"
        super().__init__("Search vector provisioning failed", details=details)


class ExecutionFailed(SearchError):
    """Executing a composed search query failed."""

    def __init__(self, table_name: str, cause: BaseException | None = None):
        self.table_name = table_name
        details: dict[str, Any] = {"table": table_name}
        if cause is not None:
            details["cause"] = f"{type(cause).__name__}: {cause}"
        super().__init__("Search query execution failed", details=details)


__all__ = [
    "EmptyKeyword",
    "ExecutionFailed",
    "InvalidInput",
    "InvalidKeyword",
    "InvalidLanguage",
    "InvalidSelector",
    "NoAttributes",
    "ProvisioningFailed",
    "SearchError",
    "UnresolvedMetadata",
    "UnresolvedTable",
]
