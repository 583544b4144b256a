# ABOUTME: Shared pytest fixtures for audioshelf tests.
# ABOUTME: Builds Libation-style Excel exports and temporary library catalogs.

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from openpyxl import Workbook

from audioshelf.db.catalog import AudiobookCatalog
from audioshelf.db.connection import open_library

ExportWriter = Callable[..., Path]


@pytest.fixture
def write_export(tmp_path: Path) -> ExportWriter:
    """Factory that writes row dicts to an .xlsx export and returns its path.

    Headers are the union of row keys in first-seen order; missing keys are
    left as blank cells.
    """

    def _write(rows: list[dict[str, Any]], name: str = "library.xlsx") -> Path:
        headers = list(dict.fromkeys(key for row in rows for key in row))
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = "Library"
        sheet.append(headers)
        for row in rows:
            sheet.append([row.get(header) for header in headers])

        path = tmp_path / name
        workbook.save(path)
        return path

    return _write


@pytest.fixture
def foo_rows() -> list[dict[str, Any]]:
    """Three owned books of series 'Foo' at positions 1, 2, and 4."""
    return [
        {
            "ASIN": "B000FOO001",
            "Title": "Foo: The Beginning",
            "Author": "Ann Author",
            "Narrator": "Ned Narrator",
            "Series": "Foo, Book 1",
            "Series Position": 1,
            "Length": "10 hrs 5 mins",
            "Rating": "4.5",
            "Release Date": "2019-05-01",
        },
        {
            "ASIN": "B000FOO002",
            "Title": "Foo: The Middle",
            "Author": "Ann Author",
            "Narrator": "Ned Narrator",
            "Series": "Foo, Book 2",
            "Series Position": 2,
            "Length": "9 hrs 55 mins",
            "Rating": "4",
            "Release Date": "2020-05-01",
        },
        {
            "ASIN": "B000FOO004",
            "Title": "Foo: The End",
            "Author": "Ann Author",
            "Narrator": "Ned Narrator",
            "Series": "Foo, Book 4",
            "Series Position": 4,
            "Length": "12 hrs 0 mins",
            "Rating": "5 stars",
            "Release Date": "2022-05-01",
        },
    ]


@pytest.fixture
def foo_export(write_export: ExportWriter, foo_rows: list[dict[str, Any]]) -> Path:
    """An .xlsx export holding the three 'Foo' books."""
    return write_export(foo_rows)


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Path for a temporary library database."""
    return tmp_path / "library.db"


@pytest.fixture
def catalog(db_path: Path) -> Iterator[AudiobookCatalog]:
    """Provide an AudiobookCatalog backed by a temporary database."""
    conn = open_library(db_path)
    yield AudiobookCatalog(conn)
    conn.close()
