# ABOUTME: Detects gaps in numbered series and records placeholders for the missing books.
# ABOUTME: Runs once per import batch over the freshly normalized records, grouped by series.

import logging
import math
import sqlite3
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from audioshelf.db.catalog import AudiobookCatalog
from audioshelf.library.types import AudiobookRecord

logger = logging.getLogger(__name__)

# Gap analysis needs at least two known positions.
_MIN_SERIES_SIZE = 2


@dataclass
class ReconcileResult:
    """Summary of one reconciliation pass.

    series_checked counts the groups with enough known positions to analyse.
    """

    series_checked: int = 0
    placeholders_upserted: int = 0
    failures: int = 0
    failure_details: list[tuple[str, int, str]] = field(default_factory=list)


def group_by_series(records: Iterable[AudiobookRecord]) -> dict[str, list[AudiobookRecord]]:
    """Group records by series name, keeping input order within each group.

    Records without a series are left out.
    """
    groups: dict[str, list[AudiobookRecord]] = {}
    for record in records:
        if record.series_name:
            groups.setdefault(record.series_name, []).append(record)
    return groups


def _integers_between(low: float, high: float) -> range:
    """Integers strictly greater than low and strictly less than high."""
    return range(math.floor(low) + 1, math.ceil(high))


def find_missing_positions(positions: Sequence[float]) -> list[int]:
    """Return the integer series positions absent from a set of known positions.

    Two kinds of gap are reported:

    - interior: for neighbours more than 1 apart, every integer strictly
      between them. Fractional entries (e.g. a 1.5 novella) do not fill an
      integer slot, so {1, 1.5, 3} is missing 2.
    - leading: every integer from 1 up to, but excluding, the lowest position.

    Fewer than two positions yields no gaps.

    >>> find_missing_positions([1, 3, 5])
    [2, 4]
    >>> find_missing_positions([3, 4])
    [1, 2]
    """
    if len(positions) < _MIN_SERIES_SIZE:
        return []

    ordered = sorted(positions)
    missing: list[int] = []

    for current, following in zip(ordered, ordered[1:]):
        if following - current > 1:
            missing.extend(_integers_between(current, following))

    first = ordered[0]
    if first > 1:
        missing.extend(range(1, math.ceil(first)))

    return sorted(set(missing))


def _known_positions(books: Sequence[AudiobookRecord]) -> list[float]:
    return [b.series_position for b in books if b.series_position is not None]


def reconcile_series(
    groups: dict[str, list[AudiobookRecord]],
    catalog: AudiobookCatalog,
) -> ReconcileResult:
    """Upsert a placeholder for every missing position in each series group.

    Placeholders take the author of the group's first record. A storage
    failure on one placeholder is logged and counted; the pass carries on
    with the remaining gaps and series.

    Args:
        groups: Series name -> records from the current import batch.
        catalog: Catalog that receives the placeholders.

    Returns:
        ReconcileResult with counts of series checked, placeholders written,
        and failures.
    """
    result = ReconcileResult()

    for series_name, books in groups.items():
        positions = _known_positions(books)
        if len(positions) < _MIN_SERIES_SIZE:
            continue

        result.series_checked += 1
        missing = find_missing_positions(positions)
        if not missing:
            continue

        author = books[0].author
        logger.info("Series %r is missing position(s) %s", series_name, missing)

        for position in missing:
            placeholder = AudiobookRecord.placeholder(series_name, position, author)
            try:
                catalog.upsert(placeholder)
            except sqlite3.Error as exc:
                logger.error("Could not record placeholder %r: %s", placeholder.title, exc)
                result.failures += 1
                result.failure_details.append((series_name, position, str(exc)))
                continue

            logger.debug("Added missing book placeholder: %s", placeholder.title)
            result.placeholders_upserted += 1

    return result
