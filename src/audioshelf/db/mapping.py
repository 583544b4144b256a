# ABOUTME: Converts between AudiobookRecord and SQLite rows, and defines read-side models.
# ABOUTME: StoredAudiobook, SeriesProgress, and ListeningStats are built from query rows here.

import math
from dataclasses import dataclass
from typing import Any

from audioshelf.library.types import AudiobookRecord


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _percentage(part: int, whole: int) -> int:
    if not whole:
        return 0
    return _round_half_up(part / whole * 100)


@dataclass
class StoredAudiobook:
    """A cataloged audiobook: AudiobookRecord plus database-specific fields."""

    id: int
    record: AudiobookRecord
    created_at: str
    updated_at: str

    @property
    def status(self) -> str:
        """'completed', 'owned', or 'missing'."""
        if not self.record.owned:
            return "missing"
        return "completed" if self.record.listened else "owned"

    @property
    def display_title(self) -> str:
        position = self.record.series_position
        if position is None:
            return self.record.title
        return f"Book {position:g}: {self.record.title}"

    def to_dict(self) -> dict[str, Any]:
        """Flat column view of the stored row, as used by `audioshelf export`."""
        return {
            "id": self.id,
            **record_to_row(self.record),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class SeriesProgress:
    """Per-series ownership and listening summary."""

    series_name: str
    total_books: int
    owned_books: int
    listened_books: int
    missing_books: int
    first_position: float | None
    latest_position: float | None
    avg_rating: float | None
    total_listening_minutes: int

    @property
    def completion_percentage(self) -> int:
        """Share of owned books already listened to."""
        return _percentage(self.listened_books, self.owned_books)

    @property
    def ownership_percentage(self) -> int:
        return _percentage(self.owned_books, self.total_books)

    @property
    def total_hours(self) -> int:
        return _round_half_up(self.total_listening_minutes / 60)

    @property
    def next_book_position(self) -> float | None:
        if self.latest_position is None:
            return None
        return self.latest_position + 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "series_name": self.series_name,
            "total_books": self.total_books,
            "owned_books": self.owned_books,
            "listened_books": self.listened_books,
            "missing_books": self.missing_books,
            "first_position": self.first_position,
            "latest_position": self.latest_position,
            "avg_rating": self.avg_rating,
            "total_hours": self.total_hours,
            "completion_percentage": self.completion_percentage,
            "ownership_percentage": self.ownership_percentage,
            "next_book_position": self.next_book_position,
        }


@dataclass
class ListeningStats:
    """Library-wide listening totals."""

    total_books: int
    owned_books: int
    completed_books: int
    missing_books: int
    total_series: int
    avg_rating: float | None
    total_listening_minutes: int

    @property
    def total_hours(self) -> int:
        return _round_half_up(self.total_listening_minutes / 60)

    @property
    def completion_rate(self) -> int:
        return _percentage(self.completed_books, self.owned_books)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_books": self.total_books,
            "owned_books": self.owned_books,
            "completed_books": self.completed_books,
            "missing_books": self.missing_books,
            "total_series": self.total_series,
            "avg_rating": self.avg_rating,
            "total_hours": self.total_hours,
            "completion_rate": self.completion_rate,
        }


def record_to_row(record: AudiobookRecord) -> dict[str, Any]:
    """Convert an AudiobookRecord to column values for INSERT or UPDATE.

    Booleans are stored as 0/1 integers.
    """
    return {
        "asin": record.external_id,
        "title": record.title,
        "series_name": record.series_name,
        "series_position": record.series_position,
        "author": record.author,
        "narrator": record.narrator,
        "owned": int(record.owned),
        "listened": int(record.listened),
        "release_date": record.release_date,
        "purchase_date": record.purchase_date,
        "rating": record.rating,
        "length_minutes": record.length_minutes,
        "categories": record.categories,
    }


def row_to_audiobook(row: Any) -> AudiobookRecord:
    """Convert a database row (dict-like) back to an AudiobookRecord."""
    return AudiobookRecord(
        external_id=row["asin"],
        title=row["title"],
        series_name=row["series_name"],
        series_position=row["series_position"],
        author=row["author"],
        narrator=row["narrator"],
        owned=bool(row["owned"]),
        listened=bool(row["listened"]),
        release_date=row["release_date"],
        purchase_date=row["purchase_date"],
        length_minutes=row["length_minutes"],
        rating=row["rating"],
        categories=row["categories"],
    )


def row_to_stored(row: Any) -> StoredAudiobook:
    """Convert a full audiobooks row to a StoredAudiobook."""
    return StoredAudiobook(
        id=row["id"],
        record=row_to_audiobook(row),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def row_to_series_progress(row: Any) -> SeriesProgress:
    return SeriesProgress(
        series_name=row["series_name"],
        total_books=row["total_books"],
        owned_books=row["owned_books"] or 0,
        listened_books=row["listened_books"] or 0,
        missing_books=row["missing_books"] or 0,
        first_position=row["first_position"],
        latest_position=row["latest_position"],
        avg_rating=row["avg_rating"],
        total_listening_minutes=row["total_listening_time"] or 0,
    )


def row_to_listening_stats(row: Any) -> ListeningStats:
    """Build ListeningStats; the average rating is rounded to one decimal."""
    avg = row["avg_rating"]
    return ListeningStats(
        total_books=row["total_books"],
        owned_books=row["owned_books"] or 0,
        completed_books=row["completed_books"] or 0,
        missing_books=row["missing_books"] or 0,
        total_series=row["total_series"],
        avg_rating=round(avg, 1) if avg is not None else None,
        total_listening_minutes=row["total_listening_time"] or 0,
    )
