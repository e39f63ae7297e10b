"""Main CLI entry point for dynamic-search management commands."""

import click

from dynamic_search import __version__
from dynamic_search.cli.commands import search
from dynamic_search.infra.logging import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="dynamic-search")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Dynamic Search CLI - PostgreSQL full-text search management.

    \b
    Command Groups:
      search     Provision and preview full-text search

    \b
    Quick Start:
      dynamic-search search preview articles "quick fox" -c title -c body
      dynamic-search search provision articles -c title -c body --scoped
    """
    ctx.ensure_object(dict)
    setup_logging()


cli.add_command(search.search)


def main() -> None:
    """Main entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
