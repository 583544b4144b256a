# ABOUTME: CLI package for audioshelf, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click
from rich.logging import RichHandler

from audioshelf.cli.commands import (
    export_cmd,
    import_cmd,
    info_cmd,
    listened_cmd,
    ls_cmd,
    missing_cmd,
    series_cmd,
    stats_cmd,
)


def _configure_logging(verbose: int) -> None:
    """Route log records through Rich; -v shows INFO, -vv shows DEBUG."""
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False, rich_tracebacks=True)],
        force=True,
    )


@click.group()
@click.version_option(package_name="audioshelf")
@click.option("-v", "--verbose", count=True, help="Increase log output (-v, -vv).")
def cli(verbose: int) -> None:
    """audioshelf - track an audiobook library and the gaps in its series."""
    _configure_logging(verbose)


cli.add_command(export_cmd.export)
cli.add_command(import_cmd.import_export)
cli.add_command(info_cmd.info)
cli.add_command(listened_cmd.listened)
cli.add_command(ls_cmd.ls)
cli.add_command(missing_cmd.missing)
cli.add_command(series_cmd.series)
cli.add_command(stats_cmd.stats)
