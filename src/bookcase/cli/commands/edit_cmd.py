# ABOUTME: The `bookcase add`, `edit`, `bulk-edit`, and `rm` commands for manual editing.
# ABOUTME: Covers can come from a URL (downloaded) or a local image file (uploaded).

from pathlib import Path

import click
from rich.console import Console

from bookcase.cli.options import covers_option, db_option, open_session, set_option
from bookcase.core import editor
from bookcase.covers import CoverStore
from bookcase.db.catalog import BookNotFoundError
from bookcase.db.mapping import IMAGE_URL

console = Console()

image_url_option = click.option(
    "--image-url",
    default=None,
    help="Cover image URL to download.",
)

cover_file_option = click.option(
    "--cover",
    "cover_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Local cover image file to store.",
)


def _upload(covers: CoverStore, cover_file: Path) -> str:
    return covers.store(cover_file.read_bytes(), cover_file.suffix)


@click.command("add")
@click.option("--title", required=True, help="Book title.")
@click.option("--author", required=True, help="Book author.")
@click.option("--isbn", default=None, help="ISBN, hyphens allowed.")
@click.option("--wishlist", is_flag=True, default=False, help="Add to the wishlist.")
@set_option
@image_url_option
@cover_file_option
@db_option
@covers_option
def add(
    title: str,
    author: str,
    isbn: str | None,
    wishlist: bool,
    assignments: dict[str, str],
    image_url: str | None,
    cover_file: Path | None,
    db_path: Path | None,
    covers_dir: Path | None,
) -> None:
    """Add a book by hand."""
    fields: dict[str, object] = {**assignments, "Title": title, "Author": author}
    if isbn:
        fields["ISBN"] = isbn
    if wishlist:
        fields["is_wishlist"] = True

    with open_session(db_path, covers_dir) as (catalog, covers):
        if cover_file is not None:
            fields[IMAGE_URL] = _upload(covers, cover_file)
        elif image_url:
            fields[IMAGE_URL] = image_url
        try:
            book_id = editor.add_book(catalog, covers, fields)
        except ValueError as exc:
            if cover_file is not None:
                covers.delete(str(fields[IMAGE_URL]))
            console.print(f"[red]{exc}[/red]")
            raise SystemExit(1) from exc

    console.print(f"Added [bold]{title}[/bold] as book {book_id}.")


@click.command("edit")
@click.argument("book_id", type=int)
@set_option
@image_url_option
@cover_file_option
@click.option("--clear-cover", is_flag=True, default=False, help="Remove the cover image.")
@db_option
@covers_option
def edit(
    book_id: int,
    assignments: dict[str, str],
    image_url: str | None,
    cover_file: Path | None,
    clear_cover: bool,
    db_path: Path | None,
    covers_dir: Path | None,
) -> None:
    """Change fields or the cover of a book."""
    fields: dict[str, object] = dict(assignments)

    with open_session(db_path, covers_dir) as (catalog, covers):
        if catalog.get_by_id(book_id) is None:
            console.print(f"[red]Book {book_id} not found.[/red]")
            raise SystemExit(1)
        if clear_cover:
            fields[IMAGE_URL] = ""
        elif cover_file is not None:
            fields[IMAGE_URL] = _upload(covers, cover_file)
        elif image_url:
            fields[IMAGE_URL] = image_url
        try:
            record = editor.update_book(catalog, covers, book_id, fields)
        except ValueError as exc:
            if cover_file is not None:
                covers.delete(str(fields[IMAGE_URL]))
            console.print(f"[red]{exc}[/red]")
            raise SystemExit(1) from exc

    console.print(f"Updated [bold]{record.title}[/bold].")


@click.command("bulk-edit")
@click.argument("book_ids", type=int, nargs=-1, required=True)
@set_option
@db_option
def bulk_edit(book_ids: tuple[int, ...], assignments: dict[str, str], db_path: Path | None) -> None:
    """Set the same fields on several books."""
    with open_session(db_path, None) as (catalog, _covers):
        try:
            count = editor.bulk_update(catalog, list(book_ids), assignments)
        except ValueError as exc:
            console.print(f"[red]{exc}[/red]")
            raise SystemExit(1) from exc

    console.print(f"Updated {count} book(s).")


@click.command("rm")
@click.argument("book_ids", type=int, nargs=-1, required=True)
@db_option
@covers_option
def rm(book_ids: tuple[int, ...], db_path: Path | None, covers_dir: Path | None) -> None:
    """Delete books and their covers."""
    with open_session(db_path, covers_dir) as (catalog, covers):
        try:
            count = editor.delete_books(catalog, covers, list(book_ids))
        except BookNotFoundError as exc:
            console.print(f"[yellow]{exc}.[/yellow]")
            raise SystemExit(1) from exc

    console.print(f"{count} book(s) deleted successfully.")
