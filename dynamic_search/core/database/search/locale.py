"""Locale-aware character folding for literal (regex) matching.

Some alphabets carry letters with diacritics that users routinely type
without them ("cicek" for "Çiçek"). The literal branch of a search matches
against a folded, lower-cased keyword so both spellings behave the same.

Folding is never applied to the value handed to ``to_tsvector`` /
``plainto_tsquery``: PostgreSQL's text search configuration does its own
language-aware normalization there.

Folding tables are kept in a registry keyed by locale tag (case-insensitive),
so new locales can be added without touching the folding algorithm:

    from dynamic_search.core.database.search.locale import fold, register_folding

    register_folding("german", {"ä": "ae", "ö": "oe", "ü": "ue", "ß": "ss"})
    fold("Straße", "german")  # "Strasse"
"""

from __future__ import annotations

from collections.abc import Mapping

TURKISH_FOLDING: dict[str, str] = {
    "ı": "i",
    "İ": "I",
    "ş": "s",
    "Ş": "S",
    "ğ": "g",
    "Ğ": "G",
    "ü": "u",
    "Ü": "U",
    "ö": "o",
    "Ö": "O",
    "ç": "c",
    "Ç": "C",
}

_FOLDING_TABLES: dict[str, dict[int, str]] = {}


def _normalize_locale(locale: str) -> str:
    return locale.strip().lower()


def register_folding(locale: str, table: Mapping[str, str]) -> None:
    """Register (or replace) the folding table for a locale.

    Args:
        locale: Locale tag, usually a PostgreSQL text search configuration
            name such as "turkish". Matching is case-insensitive.
        table: Mapping of single characters to their replacement text.

    Raises:
        ValueError: If the locale is blank, a key is not a single character,
            or a replacement would itself be folded again (folding must be
            idempotent).
    """
    key = _normalize_locale(locale)
    if not key:
        msg = "Locale tag cannot be empty"
        raise ValueError(msg)

    for source, replacement in table.items():
        if not isinstance(source, str) or len(source) != 1:
            msg = f"Folding keys must be single characters, got {source!r}"
            raise ValueError(msg)
        if any(char in table for char in replacement):
            msg = f"Replacement {replacement!r} for {source!r} contains a folded character"
            raise ValueError(msg)

    _FOLDING_TABLES[key] = str.maketrans(dict(table))


def unregister_folding(locale: str) -> None:
    """Remove a locale's folding table. Unknown locales are ignored."""
    _FOLDING_TABLES.pop(_normalize_locale(locale), None)


def is_folding_locale(locale: str) -> bool:
    """Return True if ``locale`` has a registered folding table."""
    return _normalize_locale(locale) in _FOLDING_TABLES


def folding_locales() -> list[str]:
    """Registered locale tags, sorted."""
    return sorted(_FOLDING_TABLES)


def fold(text: str, locale: str) -> str:
    """Fold ``text`` to plain ASCII letters using the locale's table.

    Characters outside the table, and all text for locales without a
    table, pass through unchanged.

    Example:
        >>> fold("Çiçek", "turkish")
        'Cicek'
        >>> fold("Çiçek", "english")
        'Çiçek'
    """
    table = _FOLDING_TABLES.get(_normalize_locale(locale))
    if not table or not text:
        return text
    return text.translate(table)


register_folding("turkish", TURKISH_FOLDING)


__all__ = [
    "TURKISH_FOLDING",
    "fold",
    "folding_locales",
    "is_folding_locale",
    "register_folding",
    "unregister_folding",
]
