"""PostgreSQL TSVECTOR column type for SQLAlchemy models.

Tables searched through the provisioner must carry a ``search_vector``
column of this type; the provisioner fills it, it never creates it.

Usage:
    class Article(Base):
        __tablename__ = "articles"

        title: Mapped[str] = mapped_column(Text)
        search_vector: Mapped[str | None] = mapped_column(TSVECTOR, nullable=True)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import Text
from sqlalchemy.dialects.postgresql import TSVECTOR as PG_TSVECTOR
from sqlalchemy.types import TypeDecorator, TypeEngine

if TYPE_CHECKING:
    from sqlalchemy.engine import Dialect


class TSVECTOR(TypeDecorator):
    """SQLAlchemy type for PostgreSQL TSVECTOR columns.

    Uses the native type on PostgreSQL and falls back to TEXT elsewhere
    (e.g. SQLite in tests).
    """

    impl = PG_TSVECTOR
    cache_ok = True

    def load_dialect_impl(self, dialect: Dialect) -> TypeEngine[Any]:
        if dialect.name == "postgresql":
            return dialect.type_descriptor(PG_TSVECTOR())
        return dialect.type_descriptor(Text())


__all__ = ["TSVECTOR"]
