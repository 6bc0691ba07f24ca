# ABOUTME: The `bookcase search` command for online metadata lookup.
# ABOUTME: Queries Google Books and Open Library; --add catalogs a chosen result.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from bookcase.cli.options import covers_option, db_option, open_session
from bookcase.core import editor
from bookcase.http import BookcaseHttpClient
from bookcase.metadata import default_providers, search_all

console = Console()


@click.command("search")
@click.argument("query")
@click.option(
    "--add",
    "add_index",
    type=click.IntRange(min=1),
    default=None,
    help="Add the Nth result to the library (cover included).",
)
@click.option("--wishlist", is_flag=True, default=False, help="Add to the wishlist.")
@click.option(
    "--google-api-key",
    envvar="BOOKCASE_GOOGLE_API_KEY",
    default=None,
    help="Google Books API key (env: BOOKCASE_GOOGLE_API_KEY).",
)
@db_option
@covers_option
def search(
    query: str,
    add_index: int | None,
    wishlist: bool,
    google_api_key: str | None,
    db_path: Path | None,
    covers_dir: Path | None,
) -> None:
    """Search online book databases by title, author, or ISBN."""
    http_client = BookcaseHttpClient()
    try:
        providers = default_providers(http_client, google_api_key=google_api_key)
        with console.status("Searching..."):
            results = search_all(query, providers)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise SystemExit(1) from exc
    finally:
        http_client.close()

    if not results:
        console.print("[yellow]No results found.[/yellow]")
        return

    if add_index is not None:
        if add_index > len(results):
            console.print(f"[red]Only {len(results)} result(s) found.[/red]")
            raise SystemExit(1)
        row = results[add_index - 1].to_row()
        if wishlist:
            row["is_wishlist"] = True
        with open_session(db_path, covers_dir) as (catalog, covers):
            try:
                book_id = editor.add_book(catalog, covers, row)
            except ValueError as exc:
                console.print(f"[red]{exc}[/red]")
                raise SystemExit(1) from exc
        console.print(f"Added [bold]{row['Title']}[/bold] as book {book_id}.")
        return

    table = Table()
    table.add_column("#", style="dim", width=3)
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("Published")
    table.add_column("ISBN")
    table.add_column("Source", style="dim")

    for number, result in enumerate(results, start=1):
        table.add_row(
            str(number),
            result.title,
            result.author or "[dim]unknown[/dim]",
            result.published_date or "",
            result.isbn or "",
            result.source,
        )

    console.print(table)
    console.print(f"\n[dim]{len(results)} result(s); use --add N to catalog one[/dim]")
