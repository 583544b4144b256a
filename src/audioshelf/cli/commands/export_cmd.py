# ABOUTME: The `audioshelf export` command for snapshotting the whole catalog.
# ABOUTME: Prints every row as JSON, or writes it to a .csv/.xlsx file.

import json
from pathlib import Path

import click
from rich.console import Console

from audioshelf.cli.options import db_option
from audioshelf.db.catalog import AudiobookCatalog
from audioshelf.db.connection import library_connection
from audioshelf.formats.spreadsheet import SpreadsheetWriteError, write_rows

console = Console()


@click.command("export")
@click.argument(
    "output",
    required=False,
    type=click.Path(dir_okay=False, path_type=Path),
)
@db_option
def export(output: Path | None, db_path: Path | None) -> None:
    """Export every cataloged audiobook, placeholders included.

    Without OUTPUT the rows are printed as JSON.
    """
    with library_connection(db_path) as conn:
        rows = [stored.to_dict() for stored in AudiobookCatalog(conn).list_all()]

    if output is None:
        click.echo(json.dumps(rows, indent=2))
        return

    try:
        write_rows(rows, output)
    except SpreadsheetWriteError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc

    console.print(f"Exported [bold]{len(rows)}[/bold] audiobook(s) to {output}")
