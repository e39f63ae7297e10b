"""Provision the database side of full-text search for a table.

Keeps a derived ``search_vector`` column in sync with a set of source columns:

    Stage A (trigger):  CREATE OR REPLACE the trigger function, then drop and
                        recreate the BEFORE INSERT OR UPDATE trigger.
    Stage B (backfill): compute the vector for rows where it is still NULL.
    Stage C (index):    CREATE INDEX IF NOT EXISTS ... USING GIN.

Every stage is idempotent, so provisioning can be re-run with the same
spec (or a new language / column set) at any time. Stages run strictly in
order and a failing stage stops the sequence; there is no cross-stage
rollback because DDL is not reversible on every engine. Re-running
``provision`` is the recovery path.

The ``search_vector`` column itself must already exist (see
dynamic_search.core.database.search.types.TSVECTOR).

Runtime usage:
    async with engine.connect() as conn:
        provisioner = SchemaProvisioner(conn, commit_stages=True)
        await provisioner.provision(
            ProvisioningSpec("articles", "english", ("title", "body")),
        )

Alembic usage:
    spec = ProvisioningSpec.scoped("articles", "english", ("title", "body"))

    def upgrade():
        for statement in spec.statements():
            op.execute(statement)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from enum import StrEnum
import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from dynamic_search.core.database.search.exceptions import (
    InvalidInput,
    InvalidLanguage,
    NoAttributes,
    ProvisioningFailed,
)
from dynamic_search.core.database.validation import (
    IdentifierValidationError,
    quote_identifier,
    validate_identifier,
    validate_language,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncConnection, AsyncSession

logger = logging.getLogger(__name__)


class ProvisioningStage(StrEnum):
    """Provisioning stages, in execution order."""

    TRIGGER = "trigger"
    BACKFILL = "backfill"
    INDEX = "index"
    TEARDOWN = "teardown"


def _dollar_quote(body: str) -> str:
    """Dollar-quote delimiter that does not occur in ``body``.

    Column names may contain ``$``, so ``$$`` is only used when the body
    does not already contain it.
    """
    tag = ""
    while f"${tag}$" in body:
        tag = f"{tag}_" if tag else "body"
    return f"${tag}$"


@dataclass(frozen=True)
class ProvisioningSpec:
    """Table-level wiring of the derived search vector column.

    The default object names are shared across tables. Use ``scoped()``
    when more than one table is provisioned in the same schema.

    Attributes:
        table_name: Table carrying the search vector column.
        language: Text search configuration used by ``to_tsvector``.
        source_columns: Columns concatenated into the vector, in order.
        function_name: Trigger function name.
        trigger_name: Trigger name.
        index_name: GIN index name.
        vector_column: Derived tsvector column.
    """

    table_name: str
    language: str = "english"
    source_columns: tuple[str, ...] = ()
    function_name: str = "update_search_vector"
    trigger_name: str = "trigger_update_search_vector"
    index_name: str = "idx_search_vector"
    vector_column: str = "search_vector"

    def __post_init__(self) -> None:
        object.__setattr__(self, "source_columns", tuple(self.source_columns))
        if not self.source_columns:
            raise NoAttributes("At least one source column must be provided")

        try:
            validate_language(self.language)
        except IdentifierValidationError as exc:
            raise InvalidLanguage(self.language) from exc

        names = [
            (self.table_name, "table"),
            *((column, "column") for column in self.source_columns),
            (self.function_name, "function"),
            (self.trigger_name, "trigger"),
            (self.index_name, "index"),
            (self.vector_column, "search vector column"),
        ]
        for name, kind in names:
            try:
                # tables and columns are always emitted quoted
                validate_identifier(
                    name,
                    identifier_type=kind,
                    allow_reserved=kind in {"table", "column"},
                )
            except IdentifierValidationError as exc:
                raise InvalidInput(str(exc), details={kind: name}) from exc

    @classmethod
    def scoped(
        cls,
        table_name: str,
        language: str,
        source_columns: Sequence[str],
        *,
        vector_column: str = "search_vector",
    ) -> ProvisioningSpec:
        """Spec whose function, trigger and index names include the table name."""
        return cls(
            table_name=table_name,
            language=language,
            source_columns=tuple(source_columns),
            function_name=f"update_{table_name}_search_vector",
            trigger_name=f"trigger_update_{table_name}_search_vector",
            index_name=f"idx_{table_name}_search_vector",
            vector_column=vector_column,
        )

    @property
    def quoted_table(self) -> str:
        return quote_identifier(self.table_name, identifier_type="table")

    @property
    def quoted_vector(self) -> str:
        return quote_identifier(self.vector_column, identifier_type="search vector column")

    def _concatenation(self, prefix: str = "") -> str:
        return " || ' ' || ".join(
            f"COALESCE({prefix}{quote_identifier(column)}, '')" for column in self.source_columns
        )

    def trigger_function_sql(self) -> str:
        """CREATE OR REPLACE FUNCTION statement for the trigger function."""
        body = f"""
BEGIN
    NEW.{self.quoted_vector} := to_tsvector('{self.language}', {self._concatenation("NEW.")});
    RETURN NEW;
END;
"""
        quote = _dollar_quote(body)
        return (
            f"\nCREATE OR REPLACE FUNCTION {self.function_name}() RETURNS trigger AS {quote}"
            f"{body}{quote} LANGUAGE plpgsql;\n"
        )

    def drop_trigger_sql(self) -> str:
        return f"DROP TRIGGER IF EXISTS {self.trigger_name} ON {self.quoted_table};"

    def create_trigger_sql(self) -> str:
        """CREATE TRIGGER statement; run after drop_trigger_sql() for idempotence."""
        return f"""
CREATE TRIGGER {self.trigger_name}
    BEFORE INSERT OR UPDATE ON {self.quoted_table}
    FOR EACH ROW EXECUTE FUNCTION {self.function_name}();
"""

    def backfill_sql(self) -> str:
        """UPDATE statement filling the vector only where it is still NULL."""
        vector = self.quoted_vector
        return f"""
UPDATE {self.quoted_table}
SET {vector} = to_tsvector('{self.language}', {self._concatenation()})
WHERE {vector} IS NULL;
"""

    def index_sql(self) -> str:
        return (
            f"CREATE INDEX IF NOT EXISTS {self.index_name} "
            f"ON {self.quoted_table} USING GIN ({self.quoted_vector});"
        )

    def drop_function_sql(self) -> str:
        return f"DROP FUNCTION IF EXISTS {self.function_name}();"

    def drop_index_sql(self) -> str:
        return f"DROP INDEX IF EXISTS {self.index_name};"

    def statements(self, *, include_index: bool = True) -> list[str]:
        """All provisioning statements in execution order (for migrations)."""
        statements = [
            self.trigger_function_sql(),
            self.drop_trigger_sql(),
            self.create_trigger_sql(),
            self.backfill_sql(),
        ]
        if include_index:
            statements.append(self.index_sql())
        return statements

    def teardown_statements(self) -> list[str]:
        """Statements removing trigger, function and index (for downgrades)."""
        return [self.drop_trigger_sql(), self.drop_function_sql(), self.drop_index_sql()]


def infrastructure_spec(
    table_name: str,
    *,
    scoped: bool = False,
    vector_column: str = "search_vector",
    index_name: str | None = None,
) -> ProvisioningSpec:
    """Spec for stages that read no source column (index, teardown).

    The vector column stands in as the single source column.
    """
    factory = ProvisioningSpec.scoped if scoped else ProvisioningSpec
    spec = factory(table_name, "english", (vector_column,), vector_column=vector_column)
    if index_name:
        spec = replace(spec, index_name=index_name)
    return spec


@dataclass
class ProvisioningReport:
    """Outcome of a provisioning run."""

    table_name: str
    completed: list[ProvisioningStage] = field(default_factory=list)
    backfilled_rows: int = 0

    @property
    def indexed(self) -> bool:
        return ProvisioningStage.INDEX in self.completed


class SchemaProvisioner:
    """Runs provisioning statements over an async connection or session.

    Example:
        async with engine.begin() as conn:
            report = await SchemaProvisioner(conn).provision(spec)

    Args:
        connection: AsyncConnection or AsyncSession used for every statement.
        commit_stages: Commit after each successful stage so completed stages
            persist even if a later one fails. Leave False to let the caller
            own the transaction.
    """

    def __init__(
        self,
        connection: AsyncConnection | AsyncSession,
        *,
        commit_stages: bool = False,
    ) -> None:
        self._connection = connection
        self._commit_stages = commit_stages

    async def _run(
        self,
        stage: ProvisioningStage,
        spec: ProvisioningSpec,
        statements: Sequence[str],
    ) -> int:
        affected = 0
        try:
            for statement in statements:
                result: Any = await self._connection.execute(text(statement))
                rowcount = getattr(result, "rowcount", None)
                if isinstance(rowcount, int) and rowcount > 0:
                    affected += rowcount
            if self._commit_stages:
                await self._connection.commit()
        except SQLAlchemyError as exc:
            logger.exception(
                "Provisioning stage %s failed for %s",
                stage.value,
                spec.table_name,
                extra={"stage": stage.value, "table": spec.table_name},
            )
            raise ProvisioningFailed(stage.value, spec.table_name, cause=exc) from exc

        logger.info("Provisioning stage %s completed for %s", stage.value, spec.table_name)
        return affected

    async def install_trigger(self, spec: ProvisioningSpec) -> None:
        """Stage A: replace the trigger function and (re)create the trigger."""
        await self._run(
            ProvisioningStage.TRIGGER,
            spec,
            [spec.trigger_function_sql(), spec.drop_trigger_sql(), spec.create_trigger_sql()],
        )

    async def backfill(self, spec: ProvisioningSpec) -> int:
        """Stage B: populate the vector for rows where it is NULL.

        Returns:
            Number of rows updated.
        """
        return await self._run(ProvisioningStage.BACKFILL, spec, [spec.backfill_sql()])

    async def create_index(self, spec: ProvisioningSpec) -> None:
        """Stage C: create the GIN index if it does not exist."""
        await self._run(ProvisioningStage.INDEX, spec, [spec.index_sql()])

    async def provision(
        self,
        spec: ProvisioningSpec,
        *,
        create_index: bool = True,
    ) -> ProvisioningReport:
        """Run stages A, B and (optionally) C in order.

        Raises:
            ProvisioningFailed: On the first failing stage. Later stages are
                not attempted.
        """
        logger.info(
            "Provisioning search vector for %s (language=%s, columns=%s)",
            spec.table_name,
            spec.language,
            ", ".join(spec.source_columns),
        )
        report = ProvisioningReport(table_name=spec.table_name)

        await self.install_trigger(spec)
        report.completed.append(ProvisioningStage.TRIGGER)

        report.backfilled_rows = await self.backfill(spec)
        report.completed.append(ProvisioningStage.BACKFILL)

        if create_index:
            await self.create_index(spec)
            report.completed.append(ProvisioningStage.INDEX)

        return report

    async def deprovision(self, spec: ProvisioningSpec) -> None:
        """Drop trigger, trigger function and index. The vector column is kept."""
        await self._run(ProvisioningStage.TEARDOWN, spec, spec.teardown_statements())


__all__ = [
    "ProvisioningReport",
    "ProvisioningSpec",
    "ProvisioningStage",
    "SchemaProvisioner",
    "infrastructure_spec",
]
