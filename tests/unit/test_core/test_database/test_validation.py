"""Tests for SQL identifier validation."""

from __future__ import annotations

import pytest

from dynamic_search.core.database.validation import (
    IdentifierValidationError,
    quote_identifier,
    validate_identifier,
    validate_language,
)


@pytest.mark.unit
class TestValidateIdentifier:
    """Test suite for validate_identifier."""

    @pytest.mark.parametrize("name", ["users", "_private", "Articles", "col$1", "a" * 63])
    def test_valid_identifiers(self, name):
        assert validate_identifier(name) == name

    @pytest.mark.parametrize(
        "name",
        [
            "",
            "1users",
            "users; DROP TABLE users; --",
            'users"',
            "my table",
            "a" * 64,
            "schema.table",
        ],
    )
    def test_invalid_identifiers(self, name):
        with pytest.raises(IdentifierValidationError):
            validate_identifier(name)

    def test_non_string_rejected(self):
        with pytest.raises(IdentifierValidationError):
            validate_identifier(None)

    def test_reserved_keyword_rejected(self):
        with pytest.raises(IdentifierValidationError, match="reserved keyword"):
            validate_identifier("SELECT", identifier_type="index")

    def test_reserved_keyword_allowed_when_requested(self):
        assert validate_identifier("select", allow_reserved=True) == "select"

    def test_error_mentions_identifier_type(self):
        with pytest.raises(IdentifierValidationError, match="Empty trigger name"):
            validate_identifier("", identifier_type="trigger")

    def test_is_value_error(self):
        assert issubclass(IdentifierValidationError, ValueError)


@pytest.mark.unit
class TestQuoteIdentifier:
    """Test suite for quote_identifier."""

    def test_quotes_and_preserves_case(self):
        assert quote_identifier("Articles") == '"Articles"'

    def test_reserved_word_quoted(self):
        assert quote_identifier("user") == '"user"'
        assert quote_identifier("table") == '"table"'

    def test_embedded_quote_rejected(self):
        with pytest.raises(IdentifierValidationError):
            quote_identifier('a"b')


@pytest.mark.unit
class TestValidateLanguage:
    """Test suite for validate_language."""

    @pytest.mark.parametrize("language", ["english", "turkish", "simple", "pg_catalog.english"])
    def test_valid_configurations(self, language):
        assert validate_language(language) == language

    @pytest.mark.parametrize(
        "language",
        ["", "english'", "eng lish", "a.b.c", "english); --", ".english", None],
    )
    def test_invalid_configurations(self, language):
        with pytest.raises(IdentifierValidationError):
            validate_language(language)
