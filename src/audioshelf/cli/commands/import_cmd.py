# ABOUTME: The `audioshelf import` command for ingesting a Libation/Audible export.
# ABOUTME: Upserts every book, synthesizes missing series entries, and prints a summary.

import json
from pathlib import Path

import click
from rich.console import Console

from audioshelf.cli.options import db_option, json_option
from audioshelf.core.importer import ingest_export
from audioshelf.db.catalog import AudiobookCatalog
from audioshelf.db.connection import library_connection
from audioshelf.formats.spreadsheet import SpreadsheetReadError

console = Console()


@click.command("import")
@click.argument(
    "export_path",
    envvar="AUDIOSHELF_EXPORT",
    type=click.Path(dir_okay=False, path_type=Path),
)
@db_option
@json_option
def import_export(export_path: Path, db_path: Path | None, json_output: bool) -> None:
    """Import a library export (.xlsx or .csv) into the catalog."""
    with library_connection(db_path) as conn:
        catalog = AudiobookCatalog(conn)
        try:
            result = ingest_export(export_path, catalog)
        except SpreadsheetReadError as exc:
            console.print(f"[red]Error:[/red] {exc}")
            raise SystemExit(1) from exc

    if json_output:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    console.print(
        f"Processed [bold]{result.processed_count}[/bold] book(s) "
        f"in [bold]{result.series_count}[/bold] series"
    )
    if result.missing_books_found:
        console.print(
            f"[yellow]{result.missing_books_found} missing book(s) in the library[/yellow]"
        )
    else:
        console.print("[green]No missing books.[/green]")

    if result.error_details:
        console.print(f"\n[yellow]{result.errors} record(s) could not be stored:[/yellow]")
        for title, msg in result.error_details:
            console.print(f"  [dim]{title}:[/dim] {msg}")
