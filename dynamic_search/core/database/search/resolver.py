"""Resolve typed attribute selectors into validated column identifiers.

Selectors are ORM attributes checked by Python at the call site
(``Article.title``) instead of free-form strings. The resolver accepts:

- direct member access: an instrumented attribute mapped to exactly one
  table column, or a ``Column`` object;
- member access behind a representation conversion: ``cast(...)``,
  ``type_coerce(...)`` or ``.label(...)`` wrapping a direct member access;
- an attribute name string, only when the entity is given and the name is
  one of its mapped column attributes.

Anything else (hybrid or computed properties, SQL functions, relationships,
nested paths) raises InvalidSelector. Only one level of member access is
supported.

Table names come from SQLAlchemy's mapper metadata via resolve_table_name().
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Column, Table, inspect
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.orm import ColumnProperty, Mapper, QueryableAttribute
from sqlalchemy.sql.elements import Cast, Label, TypeCoerce

from dynamic_search.core.database.search.exceptions import (
    InvalidSelector,
    NoAttributes,
    UnresolvedTable,
)
from dynamic_search.core.database.validation import (
    IdentifierValidationError,
    quote_identifier,
    validate_identifier,
)

_CONVERSIONS = (Cast, TypeCoerce, Label)


@dataclass(frozen=True, slots=True)
class ColumnIdentifier:
    """A validated column name, safe to interpolate once quoted."""

    name: str

    def __post_init__(self) -> None:
        try:
            validate_identifier(self.name, identifier_type="column", allow_reserved=True)
        except IdentifierValidationError as exc:
            raise InvalidSelector(str(exc), selector=self.name) from exc

    @property
    def quoted(self) -> str:
        """Double-quoted form for SQL text."""
        return quote_identifier(self.name, identifier_type="column")

    def __str__(self) -> str:
        return self.name


def _mapper_for(entity: Any) -> Mapper[Any]:
    try:
        mapper = inspect(entity)
    except NoInspectionAvailable as exc:
        raise UnresolvedTable(entity, reason="not a mapped class") from exc
    if not isinstance(mapper, Mapper):
        raise UnresolvedTable(entity, reason="not a mapped class")
    return mapper


def resolve_table_name(entity: Any) -> str:
    """Return the table name an entity is mapped to.

    Args:
        entity: Declarative model class or ``Table``.

    Raises:
        UnresolvedTable: If the entity is not mapped to a named table.
    """
    if isinstance(entity, Table):
        name = entity.name
    else:
        local_table = getattr(_mapper_for(entity), "local_table", None)
        name = getattr(local_table, "name", None)

    if not name:
        raise UnresolvedTable(entity, reason="mapped selectable has no table name")
    return name


def _single_column(prop: Any, selector: Any) -> Column[Any]:
    if not isinstance(prop, ColumnProperty):
        msg = "Selector must refer to a column attribute"
        raise InvalidSelector(msg, selector=selector)
    if len(prop.columns) != 1 or not isinstance(prop.columns[0], Column):
        msg = "Selector must map to exactly one table column"
        raise InvalidSelector(msg, selector=selector)
    return prop.columns[0]


def _check_owner(column: Column[Any], entity: Any, selector: Any) -> None:
    mapper = _mapper_for(entity)
    table_name = getattr(getattr(column, "table", None), "name", None)
    mapped_names = {
        prop.columns[0].name
        for prop in mapper.column_attrs
        if len(prop.columns) == 1 and isinstance(prop.columns[0], Column)
    }
    if table_name != resolve_table_name(entity) or column.name not in mapped_names:
        msg = f"Selector is not a column of {mapper.class_.__name__}"
        raise InvalidSelector(msg, selector=selector)


def resolve_column(selector: Any, entity: Any = None) -> ColumnIdentifier:
    """Resolve a selector to the column it reads.

    Args:
        selector: ORM attribute, ``Column``, conversion wrapping one of those,
            or an attribute name (requires ``entity``).
        entity: Optional mapped class; when given, the selector must belong to it.

    Returns:
        ColumnIdentifier with the database column name.

    Raises:
        InvalidSelector: If the selector is not a single direct member access.
        UnresolvedTable: If ``entity`` is given but not mapped.

    Example:
        >>> resolve_column(Article.title).name
        'title'
        >>> resolve_column(cast(Article.views, Text)).name
        'views'
        >>> resolve_column(func.lower(Article.title))  # Raises InvalidSelector
    """
    if isinstance(selector, str):
        if entity is None:
            msg = "Attribute names need an entity to validate against"
            raise InvalidSelector(msg, selector=selector)
        mapper = _mapper_for(entity)
        if selector not in mapper.column_attrs:
            msg = f"{mapper.class_.__name__} has no mapped column attribute {selector!r}"
            raise InvalidSelector(msg, selector=selector)
        return ColumnIdentifier(_single_column(mapper.column_attrs[selector], selector).name)

    element = selector
    while isinstance(element, _CONVERSIONS):
        element = element.clause if isinstance(element, (Cast, TypeCoerce)) else element.element

    if isinstance(element, QueryableAttribute):
        column = _single_column(getattr(element, "property", None), selector)
    elif isinstance(element, Column):
        column = element
    else:
        msg = "Selector must be a direct attribute access"
        raise InvalidSelector(msg, selector=selector)

    if entity is not None:
        _check_owner(column, entity, selector)

    return ColumnIdentifier(column.name)


def resolve_columns(entity: Any, selectors: Iterable[Any]) -> list[ColumnIdentifier]:
    """Resolve selectors in order, one identifier per selector.

    Raises:
        NoAttributes: If no selector is given.
        InvalidSelector: If any selector fails to resolve.
    """
    columns = [resolve_column(selector, entity) for selector in selectors]
    if not columns:
        raise NoAttributes
    return columns


__all__ = [
    "ColumnIdentifier",
    "resolve_column",
    "resolve_columns",
    "resolve_table_name",
]
