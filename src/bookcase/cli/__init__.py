# ABOUTME: CLI package for Bookcase, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from bookcase.cli.commands import (
    edit_cmd,
    export_cmd,
    import_cmd,
    info_cmd,
    ls_cmd,
    restore_cmd,
    search_cmd,
    stats_cmd,
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@click.group()
@click.version_option(package_name="bookcase")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show debug logging.")
def cli(verbose: bool) -> None:
    """Bookcase - a personal book catalog."""
    _configure_logging(verbose)


cli.add_command(import_cmd.import_command)
cli.add_command(export_cmd.export)
cli.add_command(export_cmd.backup)
cli.add_command(restore_cmd.restore)
cli.add_command(ls_cmd.ls)
cli.add_command(info_cmd.info)
cli.add_command(edit_cmd.add)
cli.add_command(edit_cmd.edit)
cli.add_command(edit_cmd.bulk_edit)
cli.add_command(edit_cmd.rm)
cli.add_command(search_cmd.search)
cli.add_command(stats_cmd.stats)
