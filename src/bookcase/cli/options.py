# ABOUTME: Shared Click options and session setup for Bookcase CLI commands.
# ABOUTME: Provides --db/--covers decorators and a context manager that opens the library.

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import click

from bookcase.covers import DEFAULT_COVERS_DIR, CoverStore
from bookcase.db.catalog import LibraryCatalog
from bookcase.db.connection import DEFAULT_DB_PATH, open_library
from bookcase.db.mapping import FIELDS_BY_DISPLAY

db_option = click.option(
    "--db",
    "db_path",
    type=click.Path(path_type=Path, dir_okay=False),
    envvar="BOOKCASE_DB",
    default=None,
    help=f"Path to library database (default: {DEFAULT_DB_PATH}, env: BOOKCASE_DB)",
)

covers_option = click.option(
    "--covers",
    "covers_dir",
    type=click.Path(path_type=Path, file_okay=False),
    envvar="BOOKCASE_COVERS",
    default=None,
    help="Directory for cover images (default: 'covers' next to the database, env: BOOKCASE_COVERS)",
)

# Fields set through -s/--set; ID and Icon Path are managed by the library itself.
_SETTABLE = {
    name.lower(): name for name in FIELDS_BY_DISPLAY if name not in ("ID", "Icon Path")
}


def resolve_covers_dir(db_path: Path | None, covers_dir: Path | None) -> Path:
    if covers_dir is not None:
        return covers_dir
    if db_path is not None:
        return db_path.parent / "covers"
    return DEFAULT_COVERS_DIR


@contextmanager
def open_session(
    db_path: Path | None, covers_dir: Path | None
) -> Iterator[tuple[LibraryCatalog, CoverStore]]:
    """Open the catalog and cover store; the connection is closed on exit."""
    conn = open_library(db_path or DEFAULT_DB_PATH)
    covers = CoverStore(resolve_covers_dir(db_path, covers_dir))
    try:
        yield LibraryCatalog(conn), covers
    finally:
        covers.close()
        conn.close()


def parse_assignments(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> dict[str, str]:
    """Click callback turning repeated FIELD=VALUE options into a display-name dict."""
    fields: dict[str, str] = {}
    for item in values:
        name, sep, value = item.partition("=")
        if not sep:
            raise click.BadParameter(f"expected FIELD=VALUE, got {item!r}", ctx=ctx, param=param)
        display = _SETTABLE.get(name.strip().lower())
        if display is None:
            raise click.BadParameter(f"unknown field {name.strip()!r}", ctx=ctx, param=param)
        fields[display] = value
    return fields


set_option = click.option(
    "-s",
    "--set",
    "assignments",
    multiple=True,
    metavar="FIELD=VALUE",
    callback=parse_assignments,
    help='Set a field, e.g. -s "Published Date=1980" -s Rating=4.5. Repeatable.',
)
