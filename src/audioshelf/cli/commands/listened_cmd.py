# ABOUTME: The `audioshelf listened` command for marking books as listened.
# ABOUTME: Sets (or with --undo clears) the listened flag on a cataloged audiobook.

from pathlib import Path

import click
from rich.console import Console

from audioshelf.cli.options import db_option
from audioshelf.db.catalog import AudiobookCatalog
from audioshelf.db.connection import library_connection

console = Console()


@click.command("listened")
@click.argument("audiobook_id", type=int)
@db_option
@click.option("--undo", is_flag=True, default=False, help="Mark as not listened instead.")
def listened(audiobook_id: int, db_path: Path | None, undo: bool) -> None:
    """Mark audiobook AUDIOBOOK_ID as listened."""
    with library_connection(db_path) as conn:
        updated = AudiobookCatalog(conn).mark_listened(audiobook_id, listened=not undo)

    if not updated:
        console.print(f"[red]Audiobook {audiobook_id} not found.[/red]")
        raise SystemExit(1)

    state = "not listened" if undo else "listened"
    console.print(f"[green]Marked {audiobook_id} as {state}.[/green]")
