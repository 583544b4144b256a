# ABOUTME: The `audioshelf info` command for displaying one audiobook in detail.
# ABOUTME: Shows every stored field for a cataloged audiobook by ID.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from audioshelf.cli.options import db_option
from audioshelf.db.catalog import AudiobookCatalog, AudiobookNotFoundError
from audioshelf.db.connection import library_connection

console = Console()


@click.command("info")
@click.argument("audiobook_id", type=int)
@db_option
def info(audiobook_id: int, db_path: Path | None) -> None:
    """Show detailed information for an audiobook by ID."""
    with library_connection(db_path) as conn:
        try:
            stored = AudiobookCatalog(conn).require(audiobook_id)
        except AudiobookNotFoundError as exc:
            console.print(f"[red]Audiobook {audiobook_id} not found.[/red]")
            raise SystemExit(1) from exc

    book = stored.record
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold", width=14)
    table.add_column("Value")

    table.add_row("ID", str(stored.id))
    table.add_row("Title", book.title)
    table.add_row("Author", book.author or "unknown")
    if book.narrator:
        table.add_row("Narrator", book.narrator)
    if book.series_name:
        position = book.series_position
        series_str = f"{book.series_name} #{position:g}" if position is not None else book.series_name
        table.add_row("Series", series_str)
    table.add_row("Status", stored.status)
    if book.external_id:
        table.add_row("ASIN", book.external_id)
    if book.release_date:
        table.add_row("Released", book.release_date)
    if book.purchase_date:
        table.add_row("Purchased", book.purchase_date)
    if book.length_minutes is not None:
        hours, minutes = divmod(book.length_minutes, 60)
        table.add_row("Length", f"{hours}h {minutes:02d}m")
    if book.categories:
        table.add_row("Categories", book.categories)
    if book.rating is not None:
        table.add_row("Rating", f"{book.rating:g}")
    table.add_row("Added", stored.created_at)
    table.add_row("Modified", stored.updated_at)

    console.print(table)
