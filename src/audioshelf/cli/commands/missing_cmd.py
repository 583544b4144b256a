# ABOUTME: The `audioshelf missing` command listing books absent from owned series.
# ABOUTME: Shows every placeholder synthesized by series gap detection.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from audioshelf.cli.options import db_option
from audioshelf.db.catalog import AudiobookCatalog
from audioshelf.db.connection import library_connection

console = Console()


@click.command("missing")
@db_option
def missing(db_path: Path | None) -> None:
    """List books missing from series you own."""
    with library_connection(db_path) as conn:
        records = AudiobookCatalog(conn).list_missing()

    if not records:
        console.print("[green]No missing books.[/green]")
        return

    table = Table()
    table.add_column("Series", style="bold")
    table.add_column("#", justify="right")
    table.add_column("Author")

    for stored in records:
        position = stored.record.series_position
        table.add_row(
            stored.record.series_name or "",
            "" if position is None else f"{position:g}",
            stored.record.author or "[dim]unknown[/dim]",
        )

    console.print(table)
    console.print(f"\n[dim]{len(records)} missing book(s)[/dim]")
