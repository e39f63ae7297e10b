"""Output helpers for search commands."""

import click

from dynamic_search.core.database.search import (
    ComposedQuery,
    ProvisioningReport,
    ProvisioningSpec,
)

_RULE = "=" * 60


def success(message: str) -> None:
    click.secho(f"✓ {message}", fg="green")


def error(message: str) -> None:
    click.secho(f"✗ {message}", fg="red", err=True)


def warning(message: str) -> None:
    click.secho(f"⚠ {message}", fg="yellow")


def info(message: str) -> None:
    click.secho(f"ℹ {message}", fg="blue")


def _heading(title: str) -> None:
    click.secho(f"\n{_RULE}", dim=True)
    click.secho(title, bold=True)
    click.secho(_RULE, dim=True)


def show_plan(spec: ProvisioningSpec) -> None:
    """Print the table, language, source columns and object names of a spec."""
    click.secho("\nSearch Vector Provisioning", fg="cyan", bold=True)
    info(f"Table: {spec.table_name}")
    info(f"Language: {spec.language}")
    info(f"Columns: {', '.join(spec.source_columns)}")
    info(f"Vector column: {spec.vector_column}")
    info(f"Objects: {spec.function_name}(), {spec.trigger_name}, {spec.index_name}")


def show_report(report: ProvisioningReport) -> None:
    """Print completed stages and the backfill count."""
    for stage in report.completed:
        success(f"Stage completed: {stage}")
    info(f"Backfilled rows: {report.backfilled_rows}")
    success(f"Search vector provisioned for {report.table_name}")


def show_query(query: ComposedQuery) -> None:
    """Print the positional SQL followed by ``$n = value`` lines."""
    _heading("SQL")
    click.echo(query.sql)
    _heading("Parameters")
    for position, value in enumerate(query.parameters, start=1):
        click.echo(f"${position} = {value!r}")
