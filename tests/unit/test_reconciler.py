# ABOUTME: Unit tests for series gap detection and placeholder synthesis.
# ABOUTME: Uses an in-memory recording catalog to observe upserted placeholders.

import logging
import sqlite3

import pytest

from audioshelf.core.reconciler import (
    find_missing_positions,
    group_by_series,
    reconcile_series,
)
from audioshelf.library.types import AudiobookRecord


class RecordingCatalog:
    """Catalog stand-in that remembers upserts and can fail on chosen titles."""

    def __init__(self, fail_titles: frozenset[str] = frozenset()) -> None:
        self.upserted: list[AudiobookRecord] = []
        self._fail_titles = fail_titles

    def upsert(self, record: AudiobookRecord) -> int:
        if record.title in self._fail_titles:
            raise sqlite3.OperationalError("database is locked")
        self.upserted.append(record)
        return len(self.upserted)


def _book(series: str, position: float | None, author: str = "Ann Author") -> AudiobookRecord:
    return AudiobookRecord(
        title=f"{series} real {position}",
        external_id=f"ASIN-{series}-{position}",
        series_name=series,
        series_position=position,
        author=author,
        owned=True,
    )


class TestFindMissingPositions:
    """Tests for the pure gap-finding algorithm."""

    def test_interior_gaps(self) -> None:
        """{1, 3, 5} is missing 2 and 4."""
        assert find_missing_positions([1, 3, 5]) == [2, 4]

    def test_leading_gap(self) -> None:
        """{3, 4} is missing 1 and 2."""
        assert find_missing_positions([3, 4]) == [1, 2]

    def test_leading_and_interior(self) -> None:
        """Both gap kinds are reported together, ascending."""
        assert find_missing_positions([2, 5]) == [1, 3, 4]

    def test_contiguous_series(self) -> None:
        """A complete run has no gaps."""
        assert find_missing_positions([1, 2, 3]) == []

    def test_unsorted_input(self) -> None:
        """Input order does not matter."""
        assert find_missing_positions([5, 1, 3]) == [2, 4]

    def test_single_position(self) -> None:
        """One position is not enough to detect gaps."""
        assert find_missing_positions([2]) == []
        assert find_missing_positions([]) == []

    def test_fractional_entry_does_not_fill_integer_slot(self) -> None:
        """{1, 1.5, 3} is still missing 2."""
        assert find_missing_positions([1, 1.5, 3]) == [2]

    def test_fractional_lowest_position(self) -> None:
        """Leading gap below 2.5 covers 1 and 2; 3 lies between 2.5 and 4."""
        assert find_missing_positions([2.5, 4]) == [1, 2, 3]

    def test_close_fractional_neighbours(self) -> None:
        """Neighbours at most 1 apart never produce a gap."""
        assert find_missing_positions([1, 1.5, 2.5]) == []

    def test_zero_based_series(self) -> None:
        """A prequel at 0 starts the run; no leading gap."""
        assert find_missing_positions([0, 2]) == [1]

    def test_duplicate_positions(self) -> None:
        """Duplicate positions are harmless."""
        assert find_missing_positions([1, 1, 3]) == [2]


class TestGroupBySeries:
    """Tests for grouping records by series name."""

    def test_groups_in_input_order(self) -> None:
        """Records keep their order within each group."""
        records = [_book("A", 2), _book("B", 1), _book("A", 1)]
        groups = group_by_series(records)

        assert list(groups) == ["A", "B"]
        assert [r.series_position for r in groups["A"]] == [2, 1]

    def test_records_without_series_skipped(self) -> None:
        """Standalone books are not grouped."""
        standalone = AudiobookRecord(title="Standalone", owned=True)
        assert group_by_series([standalone]) == {}


class TestReconcileSeries:
    """Tests for reconcile_series."""

    def test_creates_placeholders_for_interior_gaps(self) -> None:
        """Positions {1, 3, 5} produce unowned placeholders at 2 and 4."""
        catalog = RecordingCatalog()
        groups = {"Foo": [_book("Foo", 1), _book("Foo", 3), _book("Foo", 5)]}

        result = reconcile_series(groups, catalog)

        assert [r.series_position for r in catalog.upserted] == [2.0, 4.0]
        assert all(not r.owned and not r.listened for r in catalog.upserted)
        assert result.placeholders_upserted == 2
        assert result.failures == 0

    def test_placeholder_shape(self) -> None:
        """Placeholders carry only series, position, title, and author."""
        catalog = RecordingCatalog()
        reconcile_series({"Foo": [_book("Foo", 1), _book("Foo", 3)]}, catalog)

        (placeholder,) = catalog.upserted
        assert placeholder.title == "Foo Book 2"
        assert placeholder.series_name == "Foo"
        assert placeholder.author == "Ann Author"
        assert placeholder.external_id is None
        assert placeholder.release_date is None
        assert placeholder.purchase_date is None
        assert placeholder.rating is None
        assert placeholder.length_minutes is None

    def test_leading_gap_placeholders(self) -> None:
        """Positions {3, 4} produce placeholders at 1 and 2."""
        catalog = RecordingCatalog()
        reconcile_series({"Foo": [_book("Foo", 3), _book("Foo", 4)]}, catalog)

        assert [r.title for r in catalog.upserted] == ["Foo Book 1", "Foo Book 2"]

    def test_single_book_series_skipped(self) -> None:
        """A lone book at position 2 yields no placeholders."""
        catalog = RecordingCatalog()
        result = reconcile_series({"Foo": [_book("Foo", 2)]}, catalog)

        assert catalog.upserted == []
        assert result.placeholders_upserted == 0

    def test_one_positioned_book_skipped(self) -> None:
        """Two books with only one position are not enough to find gaps."""
        catalog = RecordingCatalog()
        reconcile_series({"Foo": [_book("Foo", 3), _book("Foo", None)]}, catalog)

        assert catalog.upserted == []

    def test_author_taken_from_first_record(self) -> None:
        """The first record in input order supplies the author."""
        catalog = RecordingCatalog()
        books = [_book("Foo", 3, author="First"), _book("Foo", 1, author="Second")]
        reconcile_series({"Foo": books}, catalog)

        assert catalog.upserted[0].author == "First"

    def test_storage_failure_isolated(self, caplog: pytest.LogCaptureFixture) -> None:
        """A failing placeholder is logged and skipped; the rest still land."""
        catalog = RecordingCatalog(fail_titles=frozenset({"Foo Book 2"}))
        groups = {
            "Foo": [_book("Foo", 1), _book("Foo", 3), _book("Foo", 5)],
            "Bar": [_book("Bar", 1), _book("Bar", 3)],
        }

        with caplog.at_level(logging.ERROR, logger="audioshelf.core.reconciler"):
            result = reconcile_series(groups, catalog)

        assert [r.title for r in catalog.upserted] == ["Foo Book 4", "Bar Book 2"]
        assert result.failures == 1
        assert result.failure_details[0][:2] == ("Foo", 2)
        assert "Foo Book 2" in caplog.text

    def test_counts_only_analysable_series(self) -> None:
        """Groups with fewer than two known positions are not counted as checked."""
        catalog = RecordingCatalog()
        groups = {
            "Foo": [_book("Foo", 1), _book("Foo", 2)],
            "Bar": [_book("Bar", 1)],
            "Baz": [_book("Baz", 4), _book("Baz", None)],
        }
        result = reconcile_series(groups, catalog)

        assert result.series_checked == 1
        assert catalog.upserted == []
