# ABOUTME: The `bookcase import` command for cataloging books from a CSV file.
# ABOUTME: Runs the all-or-nothing import pipeline and prints added/skipped counts.

import json
from pathlib import Path

import click
from rich.console import Console

from bookcase.cli.options import covers_option, db_option, open_session
from bookcase.core.importer import ImportFailedError, NoValidRowsError, import_csv
from bookcase.core.normalizer import ImportOptions

console = Console()


@click.command("import")
@click.argument(
    "csv_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@db_option
@covers_option
@click.option(
    "--yes-token",
    default=ImportOptions.affirmative_token,
    show_default=True,
    help="Localized 'yes' accepted in the Read and Favorite columns.",
)
@click.option(
    "--wishlist-shelf",
    default=ImportOptions.wishlist_label,
    show_default=True,
    help="BookShelf value that marks a book as wishlist.",
)
@click.option(
    "--json", "as_json",
    is_flag=True,
    default=False,
    help="Print the import summary as JSON.",
)
def import_command(
    csv_file: Path,
    db_path: Path | None,
    covers_dir: Path | None,
    yes_token: str,
    wishlist_shelf: str,
    as_json: bool,
) -> None:
    """Import books from a CSV file whose header row names the book fields."""
    options = ImportOptions(affirmative_token=yes_token, wishlist_label=wishlist_shelf)

    with open_session(db_path, covers_dir) as (catalog, covers):
        try:
            with console.status("Importing..."):
                result = import_csv(csv_file, catalog, covers, options=options)
        except NoValidRowsError as exc:
            console.print(f"[yellow]{exc}[/yellow]")
            raise SystemExit(1) from exc
        except ImportFailedError as exc:
            console.print(f"[red]{exc}[/red]")
            raise SystemExit(1) from exc

    if as_json:
        click.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return

    parts = [f"[green]{result.added} added[/green]"]
    if result.skipped:
        parts.append(f"[yellow]{result.skipped} skipped[/yellow]")
    console.print(", ".join(parts))

    if result.skipped_books:
        console.print("\n[yellow]Already in your library:[/yellow]")
        for book in result.skipped_books:
            console.print(f"  [dim]{book.title or '?'}[/dim] by {book.author or '?'}")
