# ABOUTME: Unit tests for reading library exports from Excel and CSV files.
# ABOUTME: Validates header handling, first-sheet selection, read failures, and snapshot writes.

from collections.abc import Callable
from pathlib import Path

import pytest
from openpyxl import Workbook

from audioshelf.formats.spreadsheet import (
    SpreadsheetReadError,
    SpreadsheetWriteError,
    read_export_rows,
    write_rows,
)


class TestReadExcel:
    """Tests for .xlsx exports."""

    def test_rows_keyed_by_header(self, write_export: Callable[..., Path]) -> None:
        """Each data row becomes a dict keyed by the header row."""
        path = write_export([
            {"Title": "One", "Author": "Ann"},
            {"Title": "Two", "Author": "Bob"},
        ])

        rows = read_export_rows(path)

        assert len(rows) == 2
        assert rows[0]["Title"] == "One"
        assert rows[1]["Author"] == "Bob"

    def test_only_first_sheet_read(self, tmp_path: Path) -> None:
        """Later sheets are ignored."""
        workbook = Workbook()
        first = workbook.active
        first.append(["Title"])
        first.append(["From first sheet"])
        second = workbook.create_sheet("Other")
        second.append(["Title"])
        second.append(["From second sheet"])
        path = tmp_path / "two_sheets.xlsx"
        workbook.save(path)

        rows = read_export_rows(path)

        assert [r["Title"] for r in rows] == ["From first sheet"]

    def test_header_only_sheet_yields_no_rows(self, tmp_path: Path) -> None:
        """A sheet with only a header row has no data rows."""
        workbook = Workbook()
        workbook.active.append(["Title", "Author"])
        path = tmp_path / "empty.xlsx"
        workbook.save(path)

        assert read_export_rows(path) == []


class TestReadCsv:
    """Tests for .csv exports."""

    def test_csv_cells_are_text(self, tmp_path: Path) -> None:
        """CSV cells are read as strings; blanks stay blank."""
        path = tmp_path / "library.csv"
        path.write_text("ASIN,Title,Series Position\nB001,One,1\nB002,Two,\n")

        rows = read_export_rows(path)

        assert rows[0] == {"ASIN": "B001", "Title": "One", "Series Position": "1"}
        assert rows[1]["Series Position"] == ""


class TestReadFailures:
    """Tests for batch-fatal read errors."""

    def test_missing_file(self, tmp_path: Path) -> None:
        """A nonexistent path raises SpreadsheetReadError."""
        with pytest.raises(SpreadsheetReadError, match="not found"):
            read_export_rows(tmp_path / "nope.xlsx")

    def test_corrupt_workbook(self, tmp_path: Path) -> None:
        """A file that is not a workbook raises SpreadsheetReadError."""
        path = tmp_path / "broken.xlsx"
        path.write_text("this is not a spreadsheet")

        with pytest.raises(SpreadsheetReadError):
            read_export_rows(path)

    def test_unsupported_suffix(self, tmp_path: Path) -> None:
        """Unknown file types are rejected."""
        path = tmp_path / "library.json"
        path.write_text("[]")

        with pytest.raises(SpreadsheetReadError, match="Unsupported"):
            read_export_rows(path)

    def test_legacy_xls_rejected(self, tmp_path: Path) -> None:
        """Legacy .xls workbooks are reported as unsupported, not as read failures."""
        path = tmp_path / "library.xls"
        path.write_bytes(b"\xd0\xcf\x11\xe0")

        with pytest.raises(SpreadsheetReadError, match="Unsupported"):
            read_export_rows(path)


class TestWriteRows:
    """Tests for writing catalog snapshots."""

    def test_csv_snapshot_reads_back(self, tmp_path: Path) -> None:
        """Rows written to CSV come back with the same headers and values."""
        path = tmp_path / "snapshot.csv"
        write_rows([{"asin": "A1", "title": "One"}, {"asin": None, "title": "Two"}], path)

        rows = read_export_rows(path)

        assert [r["title"] for r in rows] == ["One", "Two"]
        assert rows[1]["asin"] == ""

    def test_xlsx_snapshot(self, tmp_path: Path) -> None:
        """Excel snapshots land on a 'Library' sheet."""
        path = tmp_path / "snapshot.xlsx"
        write_rows([{"title": "One"}], path)

        assert read_export_rows(path) == [{"title": "One"}]

    def test_unsupported_suffix(self, tmp_path: Path) -> None:
        """Only CSV and .xlsx snapshots are written."""
        with pytest.raises(SpreadsheetWriteError, match="Unsupported"):
            write_rows([{"title": "One"}], tmp_path / "snapshot.json")
