"""SQL identifier validation utilities.

Table names, column names and text search configurations cannot be bound as
query parameters, so they are interpolated into SQL text. Everything that is
interpolated must pass through this module first.

Example:
    from dynamic_search.core.database.validation import (
        quote_identifier,
        validate_identifier,
        validate_language,
    )

    table = validate_identifier(name_from_metadata, identifier_type="table")
    ref = quote_identifier("articles")  # '"articles"'
    config = validate_language("pg_catalog.english")
"""

from __future__ import annotations

import re

# PostgreSQL identifier rules:
# - Max 63 characters
# - Start with letter or underscore
# - Contain letters, digits, underscores, dollar signs
VALID_IDENTIFIER = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_$]*$")
MAX_IDENTIFIER_LENGTH = 63

# regconfig names, optionally schema-qualified (e.g. "pg_catalog.english")
VALID_LANGUAGE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*(\.[a-zA-Z_][a-zA-Z0-9_]*)?$")

# SQL reserved keywords that should not be used as unquoted identifiers
# This is a subset of the most dangerous ones
RESERVED_KEYWORDS = frozenset(
    {
        "select",
        "insert",
        "update",
        "delete",
        "drop",
        "truncate",
        "create",
        "alter",
        "grant",
        "revoke",
        "union",
        "join",
        "where",
        "from",
        "table",
        "index",
        "database",
        "schema",
        "execute",
        "exec",
    },
)


class IdentifierValidationError(ValueError):
    """Invalid SQL identifier."""


def validate_identifier(
    name: str,
    *,
    identifier_type: str = "identifier",
    allow_reserved: bool = False,
) -> str:
    """Validate a SQL identifier against injection attacks.

    Args:
        name: The identifier to validate
        identifier_type: Type description for error messages (e.g., "table", "column")
        allow_reserved: If True, allow SQL reserved keywords. Safe only when
            the identifier is always emitted double-quoted.

    Returns:
        The validated identifier (unchanged if valid)

    Raises:
        IdentifierValidationError: If the identifier is invalid

    Example:
        >>> validate_identifier("users")
        'users'
        >>> validate_identifier("; DROP TABLE users; --")  # Raises
        IdentifierValidationError: Invalid identifier characters
    """
    if not isinstance(name, str) or not name:
        msg = f"Empty {identifier_type} name not allowed"
        raise IdentifierValidationError(msg)

    if len(name) > MAX_IDENTIFIER_LENGTH:
        msg = f"{identifier_type} name exceeds maximum length of {MAX_IDENTIFIER_LENGTH}"
        raise IdentifierValidationError(msg)

    if not VALID_IDENTIFIER.match(name):
        msg = (
            f"Invalid {identifier_type} name: must start with letter or underscore, "
            "contain only letters, digits, underscores, or dollar signs"
        )
        raise IdentifierValidationError(msg)

    if not allow_reserved and name.lower() in RESERVED_KEYWORDS:
        msg = f"'{name}' is a SQL reserved keyword and cannot be used as {identifier_type}"
        raise IdentifierValidationError(msg)

    return name


def quote_identifier(name: str, *, identifier_type: str = "identifier") -> str:
    """Validate and double-quote an identifier.

    Quoting preserves case, so ``"Articles"`` and ``articles`` refer to
    different tables, matching how ORM metadata reports names.

    Example:
        >>> quote_identifier("Articles")
        '"Articles"'
    """
    validated = validate_identifier(name, identifier_type=identifier_type, allow_reserved=True)
    return f'"{validated}"'


def validate_language(language: str) -> str:
    """Validate a text search configuration name.

    The configuration ends up inside a single-quoted SQL literal
    (``to_tsvector('english', ...)``), so only plain regconfig names are
    accepted.

    Raises:
        IdentifierValidationError: If the name is empty or malformed
    """
    if not isinstance(language, str) or not language:
        msg = "Empty text search configuration not allowed"
        raise IdentifierValidationError(msg)

    if len(language) > MAX_IDENTIFIER_LENGTH * 2 + 1 or not VALID_LANGUAGE.match(language):
        msg = f"Invalid text search configuration: {language!r}"
        raise IdentifierValidationError(msg)

    return language


__all__ = [
    "IdentifierValidationError",
    "quote_identifier",
    "validate_identifier",
    "validate_language",
]
