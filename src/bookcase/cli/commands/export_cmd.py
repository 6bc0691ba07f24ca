# ABOUTME: The `bookcase export` and `bookcase backup` commands.
# ABOUTME: Writes a BOM-prefixed CSV export or a full JSON backup with embedded covers.

from pathlib import Path

import click
from rich.console import Console

from bookcase.cli.options import covers_option, db_option, open_session
from bookcase.core.exporter import (
    default_backup_name,
    default_export_name,
    export_csv,
    write_backup,
)

console = Console()


@click.command("export")
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="CSV file to write (default: ./library-export-<timestamp>.csv).",
)
@db_option
def export(output: Path | None, db_path: Path | None) -> None:
    """Export every book to a CSV file that spreadsheets open as UTF-8."""
    dest = output or Path(default_export_name())
    with open_session(db_path, None) as (catalog, _covers):
        try:
            count = export_csv(catalog, dest)
        except OSError as exc:
            console.print(f"[red]Failed to export data: {exc}[/red]")
            raise SystemExit(1) from exc

    console.print(f"Exported [bold]{count}[/bold] book(s) to {dest}")


@click.command("backup")
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="JSON file to write (default: ./backup-<date>.json).",
)
@db_option
@covers_option
def backup(output: Path | None, db_path: Path | None, covers_dir: Path | None) -> None:
    """Write a full backup: every book plus its cover image."""
    dest = output or Path(default_backup_name())
    with open_session(db_path, covers_dir) as (catalog, covers):
        try:
            counts = write_backup(catalog, covers, dest)
        except OSError as exc:
            console.print(f"[red]Backup creation failed: {exc}[/red]")
            raise SystemExit(1) from exc

    console.print(
        f"Backed up [bold]{counts['books']}[/bold] book(s) and "
        f"[bold]{counts['images']}[/bold] cover(s) to {dest}"
    )
