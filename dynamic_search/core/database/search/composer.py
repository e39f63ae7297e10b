"""Compose parameterized full-text + regex search queries.

For every searched column the composer emits a predicate pair:

    (to_tsvector('<lang>', "<col>") @@ plainto_tsquery('<lang>', $1) OR "<col>" ~* $2)

and OR-joins the pairs, so a row matches when any column matches either
linguistically or literally. The whole statement binds exactly two
parameters regardless of the number of columns:

    $1 = compiled tsquery expression ("quick:* & fox:*")
    $2 = normalized keyword ("quick fox")

Trust tiers:
    Values (the keyword) are always bound, never interpolated.
    Identifiers (table, columns) and the text search configuration cannot be
    bound, so they are interpolated. They must come from schema metadata
    (resolve_table_name / resolve_column), never from end users. They are
    still checked against the identifier rules in
    dynamic_search.core.database.validation before reaching SQL text.

Usage:
    from dynamic_search.core.database.search import SearchRequest, build_query

    query = build_query(SearchRequest(Article, "quick fox", attributes=(Article.title,)))
    articles = (await session.scalars(query.for_entity(Article))).all()
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
import logging
from typing import Any

from sqlalchemy import Executable, Text, bindparam, select, text
from sqlalchemy.sql.elements import TextClause

from dynamic_search.core.database.search.compiler import CompiledSearch, compile_search
from dynamic_search.core.database.search.exceptions import (
    EmptyKeyword,
    InvalidLanguage,
    NoAttributes,
    UnresolvedTable,
)
from dynamic_search.core.database.search.resolver import (
    ColumnIdentifier,
    resolve_columns,
    resolve_table_name,
)
from dynamic_search.core.database.validation import (
    IdentifierValidationError,
    quote_identifier,
    validate_language,
)

logger = logging.getLogger(__name__)

TS_QUERY_PARAM = "ts_query"
PATTERN_PARAM = "pattern"

_PREDICATE = (
    "(to_tsvector('{language}', {column}) @@ plainto_tsquery('{language}', {ts_query})"
    " OR {column} ~* {pattern})"
)


@dataclass(frozen=True)
class SearchRequest:
    """One search call: which entity, which keyword, which attributes.

    Attributes:
        entity: Mapped model class to search.
        raw_keyword: Keyword as typed by the user.
        language: PostgreSQL text search configuration.
        attributes: Column selectors, in predicate order.
    """

    entity: Any
    raw_keyword: str
    language: str = "english"
    attributes: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", tuple(self.attributes))
        if not (self.raw_keyword or "").strip():
            raise EmptyKeyword
        if not self.attributes:
            raise NoAttributes


@dataclass(frozen=True)
class ComposedQuery:
    """A composed search statement and its two positional parameters.

    Attributes:
        sql: SQL text with ``$1``/``$2`` positional placeholders.
        parameters: ``(ts_query_expression, normalized_keyword)``.
        table_name: Searched table.
        language: Text search configuration used in the predicates.
        columns: Searched columns, in predicate order.
        named_sql: Same statement with ``:ts_query``/``:pattern`` placeholders,
            used by statement().
    """

    sql: str
    parameters: tuple[str, str]
    table_name: str
    language: str
    columns: tuple[ColumnIdentifier, ...]
    named_sql: str = field(repr=False)

    def statement(self) -> TextClause:
        """Render as a SQLAlchemy text clause with both values bound as TEXT."""
        ts_query, pattern = self.parameters
        return text(self.named_sql).bindparams(
            bindparam(TS_QUERY_PARAM, ts_query, type_=Text),
            bindparam(PATTERN_PARAM, pattern, type_=Text),
        )

    def for_entity(self, entity: Any) -> Executable:
        """Wrap the statement so rows load as ``entity`` instances."""
        return select(entity).from_statement(self.statement())


def _render(
    quoted_table: str,
    language: str,
    quoted_columns: Sequence[str],
    ts_query: str,
    pattern: str,
) -> str:
    predicates = " OR ".join(
        _PREDICATE.format(language=language, column=column, ts_query=ts_query, pattern=pattern)
        for column in quoted_columns
    )
    return f"SELECT * FROM {quoted_table} WHERE {predicates}"


def compose(
    table_name: str,
    language: str,
    columns: Sequence[ColumnIdentifier | str],
    compiled: CompiledSearch,
    *,
    log_sql: bool = False,
) -> ComposedQuery:
    """Build the search statement for one table.

    Precondition: ``table_name`` and ``columns`` originate from validated
    schema metadata. They are interpolated (quoted), not bound.

    Args:
        table_name: Table to search.
        language: Text search configuration for both tsvector and tsquery.
        columns: Columns to search; strings are validated as identifiers.
        compiled: Keyword values to bind.
        log_sql: Log the composed SQL text at DEBUG level.

    Returns:
        ComposedQuery with exactly two parameters.

    Raises:
        NoAttributes: No column given.
        EmptyKeyword: Compiled tsquery expression is blank.
        UnresolvedTable: Table name is blank or not a valid identifier.
        InvalidLanguage: Language is not a valid configuration name.
        InvalidSelector: A column string is not a valid identifier.
    """
    if not columns:
        raise NoAttributes
    if not compiled.ts_query_expression.strip():
        raise EmptyKeyword

    try:
        quoted_table = quote_identifier(table_name, identifier_type="table")
    except IdentifierValidationError as exc:
        raise UnresolvedTable(table_name, reason=str(exc)) from exc

    try:
        validate_language(language)
    except IdentifierValidationError as exc:
        raise InvalidLanguage(language) from exc

    identifiers = tuple(
        column if isinstance(column, ColumnIdentifier) else ColumnIdentifier(column)
        for column in columns
    )
    quoted_columns = [identifier.quoted for identifier in identifiers]

    sql = _render(quoted_table, language, quoted_columns, "$1", "$2")
    named_sql = _render(
        quoted_table, language, quoted_columns, f":{TS_QUERY_PARAM}", f":{PATTERN_PARAM}"
    )

    logger.debug(
        "Composed search query on %s (%d columns, language=%s)",
        table_name,
        len(identifiers),
        language,
    )
    if log_sql:
        logger.debug("Search SQL: %s", sql)

    return ComposedQuery(
        sql=sql,
        parameters=(compiled.ts_query_expression, compiled.normalized_keyword),
        table_name=table_name,
        language=language,
        columns=identifiers,
        named_sql=named_sql,
    )


def build_query(
    request: SearchRequest,
    *,
    max_keyword_length: int | None = None,
    log_sql: bool = False,
) -> ComposedQuery:
    """Resolve, compile and compose a search request.

    All validation happens here, before any database interaction.
    """
    table_name = resolve_table_name(request.entity)
    columns = resolve_columns(request.entity, request.attributes)
    compiled = compile_search(
        request.raw_keyword,
        request.language,
        max_length=max_keyword_length,
    )
    return compose(table_name, request.language, columns, compiled, log_sql=log_sql)


__all__ = [
    "PATTERN_PARAM",
    "TS_QUERY_PARAM",
    "ComposedQuery",
    "SearchRequest",
    "build_query",
    "compose",
]
