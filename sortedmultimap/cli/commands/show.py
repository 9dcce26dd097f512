"""``sortedmultimap show PATH`` — display an encoded multimap as a table."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sortedmultimap.core.codec import load
from sortedmultimap.errors import CorruptDataError

console = Console()


def show_cmd(
    path: Path = typer.Argument(
        ...,
        help="Encoded multimap file.",
    ),
    limit: int = typer.Option(
        50,
        "--limit",
        "-n",
        help="Maximum number of keys to display.",
    ),
) -> None:
    """Decode an encoded multimap and print one row per key."""
    if not path.exists():
        console.print(f"[bold red]File not found:[/bold red] {escape(str(path))}")
        raise typer.Exit(code=1)

    try:
        multimap = load(path)
    except CorruptDataError as e:
        console.print(f"[bold red]Corrupt multimap:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1)

    if multimap.is_empty():
        console.print("[dim]Multimap is empty.[/dim]")
        return

    table = Table(title=escape(path.name))
    table.add_column("Key", style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("Values")

    keys = multimap.key_set()
    for index, (key, values) in enumerate(multimap.as_map().items()):
        if index >= limit:
            break
        table.add_row(
            escape(repr(key)),
            str(len(values)),
            escape(", ".join(repr(v) for v in values)),
        )

    console.print(table)
    if len(keys) > limit:
        console.print(f"[dim]... and {len(keys) - limit} more keys[/dim]")
