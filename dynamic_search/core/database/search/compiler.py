"""Keyword compilation for prefix full-text search.

A raw keyword is turned into two values that travel as bound parameters:

- a tsquery expression where every whitespace-delimited token becomes a
  prefix lexeme and all tokens are AND-ed ("quick fox" -> "quick:* & fox:*");
- a normalized keyword for the literal regex branch, lower-cased and folded
  for folding locales ("Çiçek" under "turkish" -> "cicek").

Characters with meaning in tsquery syntax (``& | ! ( ) : * < > ' \\``) are
stripped from tokens so user input cannot change the query structure.
"""

from __future__ import annotations

from dataclasses import dataclass
import re

from dynamic_search.core.database.search.exceptions import EmptyKeyword, InvalidKeyword
from dynamic_search.core.database.search.locale import fold

TSQUERY_OPERATORS = re.compile(r"[&|!():*<>'\\]")


@dataclass(frozen=True, slots=True)
class CompiledSearch:
    """Keyword values bound into a composed search query.

    Attributes:
        ts_query_expression: Prefix tsquery expression, bound as the first parameter.
        normalized_keyword: Lower-cased, folded keyword, bound as the second parameter.
    """

    ts_query_expression: str
    normalized_keyword: str


def compile_ts_query(keyword: str) -> str:
    """Compile a keyword into a prefix tsquery expression.

    Args:
        keyword: Raw user keyword.

    Returns:
        Tokens rewritten as ``token:*`` and joined with `` & ``. Blank input
        gives an empty string.

    Example:
        >>> compile_ts_query("quick fox")
        'quick:* & fox:*'
        >>> compile_ts_query("   ")
        ''
    """
    if not keyword:
        return ""

    tokens = (TSQUERY_OPERATORS.sub("", token) for token in keyword.split())
    return " & ".join(f"{token}:*" for token in tokens if token)


def compile_search(
    keyword: str,
    language: str = "english",
    *,
    max_length: int | None = None,
) -> CompiledSearch:
    """Compile a keyword for both search branches.

    Args:
        keyword: Raw user keyword.
        language: Text search configuration; selects the folding table.
        max_length: Optional upper bound on the trimmed keyword length.

    Returns:
        CompiledSearch with both parameter values.

    Raises:
        EmptyKeyword: Keyword is blank after trimming.
        InvalidKeyword: Keyword is too long, or consists only of tsquery
            operator characters.
    """
    trimmed = (keyword or "").strip()
    if not trimmed:
        raise EmptyKeyword

    if max_length is not None and len(trimmed) > max_length:
        msg = f"Search keyword exceeds maximum length of {max_length}"
        raise InvalidKeyword(msg)

    ts_query_expression = compile_ts_query(trimmed)
    if not ts_query_expression:
        msg = "Search keyword has no searchable characters"
        raise InvalidKeyword(msg, keyword=trimmed)

    return CompiledSearch(
        ts_query_expression=ts_query_expression,
        normalized_keyword=fold(trimmed, language).lower(),
    )


__all__ = [
    "TSQUERY_OPERATORS",
    "CompiledSearch",
    "compile_search",
    "compile_ts_query",
]
