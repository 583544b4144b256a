# ABOUTME: The `audioshelf ls` command for listing cataloged audiobooks.
# ABOUTME: Displays a Rich table of owned books and, optionally, missing placeholders.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from audioshelf.cli.options import db_option
from audioshelf.db.catalog import AudiobookCatalog
from audioshelf.db.connection import library_connection

console = Console()


@click.command("ls")
@db_option
@click.option(
    "--all",
    "include_missing",
    is_flag=True,
    default=False,
    help="Include missing-book placeholders.",
)
def ls(db_path: Path | None, include_missing: bool) -> None:
    """List audiobooks in the library catalog."""
    with library_connection(db_path) as conn:
        records = AudiobookCatalog(conn).list_all()

    if not include_missing:
        records = [r for r in records if r.record.owned]

    if not records:
        console.print("[yellow]No audiobooks in the library.[/yellow]")
        return

    table = Table()
    table.add_column("ID", style="dim", width=4)
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("Series")
    table.add_column("Status")

    for stored in records:
        book = stored.record
        series_display = ""
        if book.series_name:
            if book.series_position is not None:
                series_display = f"{book.series_name} #{book.series_position:g}"
            else:
                series_display = book.series_name

        table.add_row(
            str(stored.id),
            book.title,
            book.author or "[dim]unknown[/dim]",
            series_display,
            stored.status,
        )

    console.print(table)
    console.print(f"\n[dim]{len(records)} audiobook(s)[/dim]")
