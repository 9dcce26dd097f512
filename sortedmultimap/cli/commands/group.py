"""``sortedmultimap group SOURCE`` — build an index from JSON-lines records.

Reads one JSON object per line, groups ``record[--value]`` under
``record[--key]`` and writes the encoded multimap to ``--output``.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from sortedmultimap.config import settings
from sortedmultimap.core.codec import dump
from sortedmultimap.core.comparators import default_registry
from sortedmultimap.core.multimap import SortedMultimap
from sortedmultimap.errors import InvalidArgumentError

console = Console()


def group_cmd(
    source: Path = typer.Argument(
        ...,
        help="JSON-lines file, one object per line.",
    ),
    key_field: str = typer.Option(
        ...,
        "--key",
        "-k",
        help="Record field to group by.",
    ),
    value_field: str = typer.Option(
        ...,
        "--value",
        "-v",
        help="Record field to collect under each key.",
    ),
    output: Path = typer.Option(
        Path("multimap.json"),
        "--output",
        "-o",
        help="Where to write the encoded multimap.",
    ),
    key_order: str = typer.Option(
        None,
        "--key-order",
        help="Registered comparator name for keys (default from settings).",
    ),
    value_order: str = typer.Option(
        None,
        "--value-order",
        help="Registered comparator name for values (default from settings).",
    ),
) -> None:
    """Group JSON-lines records by one field and encode the result."""
    if not source.exists():
        console.print(f"[bold red]Source not found:[/bold red] {escape(str(source))}")
        raise typer.Exit(code=1)

    try:
        multimap = SortedMultimap.create(
            default_registry.resolve(key_order or settings.default_key_comparator),
            default_registry.resolve(value_order or settings.default_value_comparator),
        )
    except InvalidArgumentError as e:
        console.print(f"[bold red]Invalid ordering:[/bold red] {escape(str(e))}")
        console.print(f"[dim]Known: {', '.join(default_registry.names())}[/dim]")
        raise typer.Exit(code=1)

    records = 0
    with source.open("rb") as fh:
        for line_no, line in enumerate(fh, start=1):
            if not line.strip():
                continue
            try:
                record = json.loads(line.decode("utf-8"))
                multimap.put(record[key_field], record[value_field])
            except (
                UnicodeDecodeError,
                json.JSONDecodeError,
                KeyError,
                TypeError,
                InvalidArgumentError,
            ) as e:
                console.print(
                    f"[bold red]Line {line_no}:[/bold red] {escape(type(e).__name__)}: "
                    f"{escape(str(e))}"
                )
                raise typer.Exit(code=1)
            records += 1

    try:
        dump(multimap, output, default_registry)
    except InvalidArgumentError as e:
        console.print(f"[bold red]Cannot encode:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1)

    console.print(
        Panel(
            "\n".join([
                f"[bold]Records read:[/bold]  {records}",
                f"[bold]Keys:[/bold]          {len(multimap.key_set())}",
                f"[bold]Entries:[/bold]       {multimap.size()}",
                f"[bold]Output:[/bold]        {escape(str(output))}",
            ]),
            title="[bold]Grouped[/bold]",
            border_style="green",
        )
    )
