# ABOUTME: Shared pytest fixtures for Bookcase tests.
# ABOUTME: Provides a temporary catalog, a cover store with faked downloads, and CSV writers.

import csv
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from bookcase.covers import CoverStore
from bookcase.db.catalog import LibraryCatalog
from bookcase.db.connection import open_library
from tests.fixtures.fakes import FakeHttpClient

CsvWriter = Callable[[list[dict[str, str]]], Path]


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    """Path of a temporary library database."""
    return tmp_path / "library.db"


@pytest.fixture()
def catalog(db_path: Path) -> Iterator[LibraryCatalog]:
    """Provide a LibraryCatalog backed by a temporary database."""
    conn = open_library(db_path)
    yield LibraryCatalog(conn)
    conn.close()


@pytest.fixture()
def http_client() -> FakeHttpClient:
    """Fake HTTP client; tests register image bytes per URL on it."""
    return FakeHttpClient()


@pytest.fixture()
def covers(tmp_path: Path, http_client: FakeHttpClient) -> CoverStore:
    """Cover store in a temporary directory using the fake HTTP client."""
    return CoverStore(tmp_path / "covers", http_client=http_client)


@pytest.fixture()
def write_csv(tmp_path: Path) -> CsvWriter:
    """Write rows to a UTF-8 CSV file (header from the first row's keys)."""
    counter = {"n": 0}

    def _write(rows: list[dict[str, str]], *, bom: bool = False) -> Path:
        counter["n"] += 1
        path = tmp_path / f"import_{counter['n']}.csv"
        header: list[str] = []
        for row in rows:
            for key in row:
                if key not in header:
                    header.append(key)
        encoding = "utf-8-sig" if bom else "utf-8"
        with path.open("w", encoding=encoding, newline="") as f:
            writer = csv.DictWriter(f, fieldnames=header)
            writer.writeheader()
            writer.writerows(rows)
        return path

    return _write
