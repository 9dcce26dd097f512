"""``sortedmultimap verify PATH`` — check that an encoding decodes cleanly.

Runs the full decode path (JSON, wire model, payload hash, comparator
lookup, re-insertion) and reports key and entry counts.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from sortedmultimap.core.codec import from_document, parse_document
from sortedmultimap.errors import CorruptDataError

console = Console()


def verify_cmd(
    path: Path = typer.Argument(
        ...,
        help="Encoded multimap file.",
    ),
    skip_hash: bool = typer.Option(
        False,
        "--skip-hash",
        help="Do not check the payload hash.",
    ),
) -> None:
    """Verify an encoded multimap."""
    if not path.exists():
        console.print(f"[bold red]File not found:[/bold red] {escape(str(path))}")
        raise typer.Exit(code=1)

    try:
        document = parse_document(path.read_bytes(), verify_hash=not skip_hash)
        multimap = from_document(document)
    except CorruptDataError as e:
        console.print(f"[bold red]CORRUPT[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1)

    collapsed = document.entry_count - multimap.size()
    console.print(
        f"[bold green]OK[/bold green] {len(multimap.key_set())} keys, "
        f"{multimap.size()} entries "
        f"([cyan]{escape(document.key_comparator)}[/cyan] / "
        f"[cyan]{escape(document.value_comparator)}[/cyan])"
    )
    if collapsed:
        console.print(f"[yellow]{collapsed} duplicate values collapsed.[/yellow]")
