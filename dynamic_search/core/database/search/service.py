"""Session-bound entry point for dynamic search and provisioning.

DynamicSearchService ties the pure pieces (resolver, compiler, composer)
to an AsyncSession:

    service = DynamicSearchService(session)

    # Search any mapped model on any of its text columns
    articles = await service.search(Article, "quick fox", Article.title, Article.body)

    # Turkish keyword: tsquery keeps "Çiçek:*", regex uses "cicek"
    shops = await service.search(Shop, "Çiçek", Shop.name, language="turkish")

    # One-time setup per table (caller commits)
    await service.provision_table(Article, [Article.title, Article.body])
    await session.commit()

Query composition finishes before the first await, so cancelling a search
only ever interrupts the database round trip.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import Table
from sqlalchemy.exc import SQLAlchemyError

from dynamic_search.core.database.search.composer import (
    ComposedQuery,
    SearchRequest,
    build_query,
)
from dynamic_search.core.database.search.exceptions import ExecutionFailed, NoAttributes
from dynamic_search.core.database.search.provisioning import (
    ProvisioningReport,
    ProvisioningSpec,
    SchemaProvisioner,
    infrastructure_spec,
)
from dynamic_search.core.database.search.resolver import resolve_column, resolve_table_name
from dynamic_search.core.settings import get_search_settings

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from dynamic_search.core.settings import SearchSettings

logger = logging.getLogger(__name__)


class DynamicSearchService:
    """Full-text + regex search over arbitrary mapped models.

    Args:
        session: Session used for queries and provisioning statements.
        settings: Search settings; loaded from the environment when omitted.
    """

    def __init__(self, session: AsyncSession, settings: SearchSettings | None = None) -> None:
        self._session = session
        self._settings = settings or get_search_settings()

    @property
    def settings(self) -> SearchSettings:
        return self._settings

    def build_query(
        self,
        entity: Any,
        keyword: str,
        *attributes: Any,
        language: str | None = None,
    ) -> ComposedQuery:
        """Compose the search statement without executing it.

        Raises:
            InvalidInput: Blank keyword, no attributes, bad selector or language.
            UnresolvedTable: Entity is not mapped.
        """
        request = SearchRequest(
            entity=entity,
            raw_keyword=keyword,
            language=language or self._settings.default_language,
            attributes=attributes,
        )
        return build_query(
            request,
            max_keyword_length=self._settings.max_keyword_length,
            log_sql=self._settings.log_queries,
        )

    async def search(
        self,
        entity: Any,
        keyword: str,
        *attributes: Any,
        language: str | None = None,
    ) -> list[Any]:
        """Return every ``entity`` row where any attribute matches ``keyword``.

        A row matches when, for at least one attribute, either the text
        search vector matches the prefix query or the column matches the
        normalized keyword as a case-insensitive regex.

        Raises:
            InvalidInput: Raised before any database interaction.
            UnresolvedTable: Entity is not mapped.
            ExecutionFailed: The database rejected or failed the query.
        """
        query = self.build_query(entity, keyword, *attributes, language=language)

        try:
            result = await self._session.scalars(query.for_entity(entity))
            rows = list(result.all())
        except SQLAlchemyError as exc:
            logger.exception("Search on %s failed", query.table_name)
            raise ExecutionFailed(query.table_name, cause=exc) from exc

        logger.debug("Search on %s returned %d rows", query.table_name, len(rows))
        return rows

    def _provisioning_spec(
        self,
        target: Any,
        source_columns: Sequence[Any],
        language: str | None,
        scoped: bool,
    ) -> ProvisioningSpec:
        if not source_columns:
            raise NoAttributes("At least one source column must be provided")

        table_name = target if isinstance(target, str) else resolve_table_name(target)
        entity = None if isinstance(target, (str, Table)) else target
        columns = [
            column
            if isinstance(column, str) and entity is None
            else resolve_column(column, entity).name
            for column in source_columns
        ]
        factory = ProvisioningSpec.scoped if scoped else ProvisioningSpec
        return factory(
            table_name,
            language or self._settings.default_language,
            tuple(columns),
            vector_column=self._settings.search_vector_column,
        )

    async def provision_table(
        self,
        target: Any,
        source_columns: Sequence[Any],
        *,
        language: str | None = None,
        scoped: bool = False,
        create_index: bool = True,
    ) -> ProvisioningReport:
        """Install trigger, backfill and index for a table.

        Args:
            target: Mapped class, ``Table`` or table name.
            source_columns: Selectors (for mapped classes) or column names.
            language: Text search configuration; defaults to settings.
            scoped: Use per-table function/trigger/index names.
            create_index: Run the index stage as well.

        The session's transaction is not committed here.

        Raises:
            ProvisioningFailed: A stage failed; earlier stages may have applied.
        """
        spec = self._provisioning_spec(target, source_columns, language, scoped)
        return await SchemaProvisioner(self._session).provision(spec, create_index=create_index)

    async def create_search_vector_index(
        self,
        target: Any,
        *,
        index_name: str | None = None,
    ) -> None:
        """Create the GIN index on the search vector column if missing.

        Raises:
            ProvisioningFailed: The index statement failed.
        """
        table_name = target if isinstance(target, str) else resolve_table_name(target)
        spec = infrastructure_spec(
            table_name,
            vector_column=self._settings.search_vector_column,
            index_name=index_name,
        )
        await SchemaProvisioner(self._session).create_index(spec)


__all__ = ["DynamicSearchService"]
