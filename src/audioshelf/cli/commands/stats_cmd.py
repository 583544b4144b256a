# ABOUTME: The `audioshelf stats` command for library-wide listening statistics.
# ABOUTME: Reports totals for owned, completed, and missing books and listening hours.

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from audioshelf.cli.options import db_option, json_option
from audioshelf.db.catalog import AudiobookCatalog
from audioshelf.db.connection import library_connection

console = Console()


@click.command("stats")
@db_option
@json_option
def stats(db_path: Path | None, json_output: bool) -> None:
    """Show listening statistics for the whole library."""
    with library_connection(db_path) as conn:
        result = AudiobookCatalog(conn).listening_stats()

    if json_output:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold", width=16)
    table.add_column("Value")

    table.add_row("Books", str(result.total_books))
    table.add_row("Owned", str(result.owned_books))
    table.add_row("Completed", f"{result.completed_books} ({result.completion_rate}%)")
    table.add_row("Missing", str(result.missing_books))
    table.add_row("Series", str(result.total_series))
    table.add_row("Hours", str(result.total_hours))
    if result.avg_rating is not None:
        table.add_row("Average rating", f"{result.avg_rating:g}")

    console.print(table)
