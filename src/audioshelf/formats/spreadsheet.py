# ABOUTME: Reads Libation/Audible library exports (Excel or CSV) into raw row mappings.
# ABOUTME: Also writes catalog snapshots back out as CSV or Excel.

import logging
from pathlib import Path
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)

CSV_SUFFIXES = frozenset({".csv"})
EXCEL_SUFFIXES = frozenset({".xlsx", ".xlsm"})


class SpreadsheetReadError(Exception):
    """Raised when an export file cannot be read or parsed."""


class SpreadsheetWriteError(Exception):
    """Raised when a snapshot cannot be written to the requested path."""


def _read_frame(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix in CSV_SUFFIXES:
        return pd.read_csv(path, dtype=str, keep_default_na=False)
    if suffix in EXCEL_SUFFIXES:
        return pd.read_excel(path, sheet_name=0, keep_default_na=False)
    raise SpreadsheetReadError(f"Unsupported export format: {path.suffix or path.name}")


def read_export_rows(path: Path) -> list[dict[str, Any]]:
    """Read every data row of an export's first sheet.

    Args:
        path: Path to an .xlsx workbook or a .csv file.

    Returns:
        One dict per row, keyed by header text. Blank cells are '' or NaN.

    Raises:
        SpreadsheetReadError: If the file is missing, unsupported, or unreadable.
    """
    if not path.exists():
        raise SpreadsheetReadError(f"File not found: {path}")

    try:
        frame = _read_frame(path)
    except SpreadsheetReadError:
        raise
    except Exception as exc:
        raise SpreadsheetReadError(f"Failed to read export: {path}: {exc}") from exc

    frame.columns = [str(column) for column in frame.columns]
    rows = frame.to_dict(orient="records")
    logger.info("Read %d row(s) from %s", len(rows), path.name)
    return rows


def write_rows(rows: list[dict[str, Any]], path: Path) -> None:
    """Write row dicts to a .csv file or the first sheet of an .xlsx workbook.

    Raises:
        SpreadsheetWriteError: If the suffix is unsupported or the file cannot be written.
    """
    suffix = path.suffix.lower()
    if suffix not in CSV_SUFFIXES and suffix != ".xlsx":
        raise SpreadsheetWriteError(f"Unsupported export format: {path.suffix or path.name}")

    frame = pd.DataFrame(rows)
    try:
        if suffix in CSV_SUFFIXES:
            frame.to_csv(path, index=False)
        else:
            frame.to_excel(path, index=False, sheet_name="Library")
    except OSError as exc:
        raise SpreadsheetWriteError(f"Failed to write {path}: {exc}") from exc
    logger.info("Wrote %d row(s) to %s", len(rows), path.name)
