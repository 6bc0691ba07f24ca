# ABOUTME: The `bookcase ls` command for listing cataloged books.
# ABOUTME: Displays a Rich table of the library or the wishlist.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from bookcase.cli.options import db_option, open_session

console = Console()


def format_rating(rating: float | None) -> str:
    return f"{rating:g}" if rating is not None else ""


@click.command("ls")
@db_option
@click.option(
    "--wishlist",
    is_flag=True,
    default=False,
    help="List wishlist books instead of the library.",
)
def ls(db_path: Path | None, wishlist: bool) -> None:
    """List the books in the library (or on the wishlist)."""
    with open_session(db_path, None) as (catalog, _covers):
        records = catalog.list_by_wishlist(wishlist)

    if not records:
        where = "wishlist" if wishlist else "library"
        console.print(f"[yellow]No books in the {where}.[/yellow]")
        return

    table = Table()
    table.add_column("ID", style="dim", width=4)
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("Shelf")
    table.add_column("Rating", width=6)
    table.add_column("Read", width=4)

    for record in records:
        table.add_row(
            str(record.id),
            record.title,
            record.author,
            record.bookshelf or "",
            format_rating(record.rating),
            "yes" if record.read else "",
        )

    console.print(table)
    console.print(f"\n[dim]{len(records)} book(s)[/dim]")
