"""Search management CLI commands.

Commands for provisioning and inspecting full-text search:
- search provision: Install trigger, backfill and GIN index for a table
- search index: Create the GIN index only
- search deprovision: Drop trigger, trigger function and index
- search preview: Print the composed search SQL without touching the database
"""

import click

from dynamic_search.cli.utils import (
    coro,
    exits_on_search_error,
    info,
    show_plan,
    show_query,
    show_report,
    success,
    warning,
)
from dynamic_search.core.database.search import (
    ProvisioningSpec,
    SchemaProvisioner,
    compile_search,
    compose,
    infrastructure_spec,
)
from dynamic_search.core.settings import get_search_settings
from dynamic_search.infra.database import dispose_engine, get_engine


@click.group(name="search")
def search() -> None:
    """Search management commands.

    Provision PostgreSQL full-text search infrastructure for tables and
    preview the SQL used to search them.
    """


@search.command()
@click.argument("table")
@click.option(
    "--column",
    "-c",
    "columns",
    multiple=True,
    required=True,
    help="Source column included in the search vector (repeatable, in order)",
)
@click.option("--language", "-l", default=None, help="Text search configuration")
@click.option(
    "--scoped",
    is_flag=True,
    help="Use per-table function, trigger and index names",
)
@click.option("--skip-index", is_flag=True, help="Do not create the GIN index")
@click.option("--force", is_flag=True, help="Skip confirmation prompt")
@coro
async def provision(
    table: str,
    columns: tuple[str, ...],
    language: str | None,
    scoped: bool,
    skip_index: bool,
    force: bool,
) -> None:
    """Install the search vector trigger, backfill rows and create the index.

    Safe to re-run: the trigger function is replaced, the trigger is
    recreated, only rows with a NULL vector are backfilled and the index
    is created only if missing.
    """
    settings = get_search_settings()
    language = language or settings.default_language

    factory = ProvisioningSpec.scoped if scoped else ProvisioningSpec
    spec = factory(
        table,
        language,
        columns,
        vector_column=settings.search_vector_column,
    )

    show_plan(spec)

    if not force:
        warning("This replaces the trigger function and updates rows with a NULL vector.")
        if not click.confirm("Continue?"):
            info("Provisioning cancelled")
            return

    try:
        async with get_engine().connect() as conn:
            provisioner = SchemaProvisioner(conn, commit_stages=True)
            report = await provisioner.provision(spec, create_index=not skip_index)
    finally:
        await dispose_engine()

    show_report(report)


@search.command()
@click.argument("table")
@click.option("--scoped", is_flag=True, help="Use the per-table index name")
@click.option("--index-name", default=None, help="Explicit index name")
@coro
async def index(table: str, scoped: bool, index_name: str | None) -> None:
    """Create the GIN index on the search vector column if it is missing."""
    settings = get_search_settings()

    spec = infrastructure_spec(
        table,
        scoped=scoped,
        vector_column=settings.search_vector_column,
        index_name=index_name,
    )

    try:
        async with get_engine().connect() as conn:
            await SchemaProvisioner(conn, commit_stages=True).create_index(spec)
    finally:
        await dispose_engine()

    success(f"Index {spec.index_name} present on {spec.table_name}")


@search.command()
@click.argument("table")
@click.option("--scoped", is_flag=True, help="Use per-table object names")
@click.option("--force", is_flag=True, help="Skip confirmation prompt")
@coro
async def deprovision(table: str, scoped: bool, force: bool) -> None:
    """Drop the trigger, trigger function and index. The vector column is kept."""
    settings = get_search_settings()

    spec = infrastructure_spec(table, scoped=scoped, vector_column=settings.search_vector_column)

    if not force and not click.confirm(
        f"Drop {spec.trigger_name}, {spec.function_name}() and {spec.index_name}?"
    ):
        info("Deprovisioning cancelled")
        return

    try:
        async with get_engine().connect() as conn:
            await SchemaProvisioner(conn, commit_stages=True).deprovision(spec)
    finally:
        await dispose_engine()

    success(f"Search infrastructure removed from {spec.table_name}")


@search.command()
@click.argument("table")
@click.argument("keyword")
@click.option(
    "--column",
    "-c",
    "columns",
    multiple=True,
    required=True,
    help="Column to search (repeatable, in order)",
)
@click.option("--language", "-l", default=None, help="Text search configuration")
@exits_on_search_error()
def preview(table: str, keyword: str, columns: tuple[str, ...], language: str | None) -> None:
    """Print the search SQL and its two bound parameters."""
    settings = get_search_settings()
    language = language or settings.default_language

    compiled = compile_search(keyword, language, max_length=settings.max_keyword_length)
    show_query(compose(table, language, columns, compiled))
