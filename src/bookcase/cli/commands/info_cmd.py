# ABOUTME: The `bookcase info` command for displaying every field of one book.
# ABOUTME: Shows all non-empty fields for a single cataloged book by ID.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from bookcase.cli.options import db_option, open_session

console = Console()


def _display(value: object) -> str:
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


@click.command("info")
@click.argument("book_id", type=int)
@db_option
def info(book_id: int, db_path: Path | None) -> None:
    """Show detailed fields for a book by ID."""
    with open_session(db_path, None) as (catalog, _covers):
        record = catalog.get_by_id(book_id)

    if record is None:
        console.print(f"[red]Book {book_id} not found.[/red]")
        raise SystemExit(1)

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold", width=22)
    table.add_column("Value")

    for name, value in record.to_row().items():
        if value is None or value == "":
            continue
        table.add_row(name, _display(value))

    console.print(table)
