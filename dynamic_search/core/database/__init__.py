"""Database layer: identifier validation and full-text search."""

from dynamic_search.core.database.validation import (
    IdentifierValidationError,
    quote_identifier,
    validate_identifier,
    validate_language,
)

__all__ = [
    "IdentifierValidationError",
    "quote_identifier",
    "validate_identifier",
    "validate_language",
]
