# ABOUTME: Shared Click options for audioshelf CLI commands.
# ABOUTME: Provides reusable decorators for common flags like --db and --json.

from pathlib import Path

import click

from audioshelf.db.connection import DEFAULT_DB_PATH

db_option = click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="AUDIOSHELF_DB",
    show_envvar=True,
    default=None,
    help=f"Path to library database (default: {DEFAULT_DB_PATH})",
)

json_option = click.option(
    "--json",
    "json_output",
    is_flag=True,
    default=False,
    help="Output results as JSON.",
)
