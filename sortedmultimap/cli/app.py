"""Main Typer application — imports and registers all CLI commands.

Entry point: ``sortedmultimap`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import logging

import typer

from sortedmultimap.cli.commands.group import group_cmd
from sortedmultimap.cli.commands.show import show_cmd
from sortedmultimap.cli.commands.verify import verify_cmd
from sortedmultimap.config import settings

app = typer.Typer(
    name="sortedmultimap",
    help="sortedmultimap: comparator-ordered multimaps and their encoding.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="group", help="Group JSON-lines records into an encoded multimap.")(group_cmd)
app.command(name="show", help="Display an encoded multimap.")(show_cmd)
app.command(name="verify", help="Verify an encoded multimap.")(verify_cmd)


@app.callback()
def configure(
    verbose: bool = typer.Option(False, "--verbose", help="Log at DEBUG level."),
) -> None:
    """Configure logging before any subcommand runs."""
    level = "DEBUG" if verbose or settings.debug else settings.log_level
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
