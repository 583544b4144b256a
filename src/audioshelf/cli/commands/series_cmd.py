# ABOUTME: The `audioshelf series` command for series progress and per-series detail.
# ABOUTME: Without a name, summarizes every series; with one, lists its books in order.

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from audioshelf.cli.options import db_option, json_option
from audioshelf.db.catalog import AudiobookCatalog
from audioshelf.db.connection import library_connection
from audioshelf.db.mapping import SeriesProgress, StoredAudiobook

console = Console()

_STATUS_STYLES = {"completed": "green", "owned": "cyan", "missing": "red"}


def _format_position(position: float | None) -> str:
    return "" if position is None else f"{position:g}"


def _print_progress(progress: list[SeriesProgress]) -> None:
    table = Table(title="Series Progress")
    table.add_column("Series", style="bold")
    table.add_column("Owned", justify="right")
    table.add_column("Missing", justify="right")
    table.add_column("Listened", justify="right")
    table.add_column("Done", justify="right")
    table.add_column("Next", justify="right")

    for entry in progress:
        table.add_row(
            entry.series_name,
            f"{entry.owned_books}/{entry.total_books}",
            str(entry.missing_books),
            str(entry.listened_books),
            f"{entry.completion_percentage}%",
            _format_position(entry.next_book_position),
        )

    console.print(table)


def _print_detail(series_name: str, books: list[StoredAudiobook]) -> None:
    table = Table(title=series_name)
    table.add_column("ID", style="dim", width=4)
    table.add_column("#", justify="right")
    table.add_column("Title", style="bold")
    table.add_column("Status")

    for book in books:
        style = _STATUS_STYLES[book.status]
        table.add_row(
            str(book.id),
            _format_position(book.record.series_position),
            book.record.title,
            f"[{style}]{book.status}[/{style}]",
        )

    console.print(table)


def _detail_dict(book: StoredAudiobook) -> dict:
    return {
        "id": book.id,
        "title": book.record.title,
        "display_title": book.display_title,
        "series_position": book.record.series_position,
        "author": book.record.author,
        "status": book.status,
        "owned": book.record.owned,
        "listened": book.record.listened,
    }


@click.command("series")
@click.argument("name", required=False)
@db_option
@json_option
def series(name: str | None, db_path: Path | None, json_output: bool) -> None:
    """Show progress for every series, or the books of series NAME."""
    with library_connection(db_path) as conn:
        catalog = AudiobookCatalog(conn)
        if name is None:
            progress = catalog.series_progress()
            books = []
        else:
            progress = []
            books = catalog.list_by_series(name)

    if name is None:
        if json_output:
            click.echo(json.dumps([p.to_dict() for p in progress], indent=2))
        elif progress:
            _print_progress(progress)
        else:
            console.print("[yellow]No series in the library.[/yellow]")
        return

    if not books:
        console.print(f"[red]Series '{name}' not found.[/red]")
        raise SystemExit(1)

    if json_output:
        click.echo(json.dumps([_detail_dict(b) for b in books], indent=2))
    else:
        _print_detail(name, books)
