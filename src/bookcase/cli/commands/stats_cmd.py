# ABOUTME: The `bookcase stats` command for library statistics.
# ABOUTME: Prints totals, top authors and genres, ratings, and reading-goal progress.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from bookcase.cli.options import db_option, open_session
from bookcase.core.stats import library_stats

console = Console()


def _top_table(title: str, rows: list[tuple[str, int]]) -> Table:
    table = Table(title=title, show_header=False)
    table.add_column("#", style="dim", width=2)
    table.add_column("Name")
    table.add_column("Books", justify="right")
    for rank, (name, count) in enumerate(rows, start=1):
        table.add_row(str(rank), name, str(count))
    return table


@click.command("stats")
@click.option(
    "--goal",
    type=click.IntRange(min=1),
    default=None,
    help="Reading goal: books to finish this year.",
)
@click.option("--year", type=int, default=None, help="Year for the reading goal (default: current).")
@db_option
def stats(goal: int | None, year: int | None, db_path: Path | None) -> None:
    """Show library statistics (wishlist excluded)."""
    with open_session(db_path, None) as (catalog, _covers):
        result = library_stats(catalog.list_all(), reading_goal=goal, year=year)

    console.print(f"Total books:    [bold]{result.total_books}[/bold]")
    console.print(f"Books read:     [bold]{result.books_read}[/bold]")
    console.print(f"Favorites:      [bold]{result.favorite_books}[/bold]")
    console.print(f"On wishlist:    [bold]{result.wishlist_books}[/bold]")

    if result.reading_goal is not None:
        status = "[green]Goal complete![/green]" if result.goal_achieved else ""
        console.print(
            f"Reading goal {result.year}: "
            f"[bold]{result.finished_this_year}/{result.reading_goal}[/bold] {status}"
        )

    if result.top_authors:
        console.print(_top_table("Top authors", result.top_authors))
    if result.top_genres:
        console.print(_top_table("Top genres", result.top_genres))

    if result.rating_distribution:
        console.print("\n[bold]Ratings[/bold]")
        for rating, count in result.rating_distribution.items():
            console.print(f"  {rating:g} ★  {'#' * count} {count}")
