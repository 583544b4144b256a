# ABOUTME: Import pipeline for cataloging a Libation/Audible library export.
# ABOUTME: Reads the export, normalizes and upserts each book, then fills series gaps.

import logging
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path

from audioshelf.core.reconciler import group_by_series, reconcile_series
from audioshelf.db.catalog import AudiobookCatalog
from audioshelf.formats.spreadsheet import read_export_rows
from audioshelf.library.normalizer import normalize_rows

logger = logging.getLogger(__name__)


@dataclass
class IngestResult:
    """Summary of an export import.

    missing_books_found is the catalog-wide count of unowned books after the
    import, not only those synthesized by this run.
    """

    processed_count: int = 0
    series_count: int = 0
    missing_books_found: int = 0
    placeholders_upserted: int = 0
    errors: int = 0
    error_details: list[tuple[str, str]] = field(default_factory=list)

    def to_dict(self) -> dict[str, int]:
        return {
            "processedCount": self.processed_count,
            "seriesCount": self.series_count,
            "missingBooksFound": self.missing_books_found,
        }


def ingest_export(path: Path, catalog: AudiobookCatalog) -> IngestResult:
    """Import a library export into the catalog.

    Every row becomes an owned audiobook (upserted on its natural key), then
    series groups from this export are checked for missing positions and
    placeholders are upserted for them. Running the same export twice leaves
    the catalog unchanged.

    Args:
        path: Export file (.xlsx or .csv).
        catalog: The catalog to write into.

    Returns:
        IngestResult with processed, series, and missing-book counts.

    Raises:
        SpreadsheetReadError: If the export cannot be read. Nothing is written.
    """
    rows = read_export_rows(path)
    records = normalize_rows(rows)
    result = IngestResult(processed_count=len(records))

    for record in records:
        try:
            catalog.upsert(record)
        except sqlite3.Error as exc:
            logger.error("Could not store %r: %s", record.title, exc)
            result.errors += 1
            result.error_details.append((record.title, str(exc)))

    groups = group_by_series(records)
    result.series_count = len(groups)

    reconciled = reconcile_series(groups, catalog)
    result.placeholders_upserted = reconciled.placeholders_upserted
    result.errors += reconciled.failures
    result.error_details.extend(
        (f"{series} Book {position}", message)
        for series, position, message in reconciled.failure_details
    )

    result.missing_books_found = catalog.count_unowned()
    logger.info(
        "Imported %d book(s) across %d series; %d missing",
        result.processed_count, result.series_count, result.missing_books_found,
    )
    return result
