# ABOUTME: The `bookcase restore` command for loading a full JSON backup.
# ABOUTME: Restores covers and books; existing books are kept, so overlaps duplicate.

from pathlib import Path

import click
from rich.console import Console

from bookcase.cli.options import covers_option, db_option, open_session
from bookcase.core.restore import RestoreError, restore_file

console = Console()


@click.command("restore")
@click.argument(
    "backup_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@db_option
@covers_option
def restore(backup_file: Path, db_path: Path | None, covers_dir: Path | None) -> None:
    """Restore books and covers from a backup made with `bookcase backup`."""
    with open_session(db_path, covers_dir) as (catalog, covers):
        if catalog.count():
            console.print(
                "[yellow]The library is not empty; restored books are added "
                "alongside existing ones.[/yellow]"
            )
        try:
            result = restore_file(backup_file, catalog, covers)
        except RestoreError as exc:
            console.print(f"[red]{exc}[/red]")
            raise SystemExit(1) from exc

    console.print(
        f"Restored [bold]{result.books_restored}[/bold] book(s) and "
        f"[bold]{result.images_restored}[/bold] cover(s)."
    )
