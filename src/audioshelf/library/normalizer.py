# ABOUTME: Maps raw spreadsheet rows with varying headers onto AudiobookRecord fields.
# ABOUTME: Parses series names, positions, dates, durations, and ratings out of free text.

import math
import re
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any

import pandas as pd

from audioshelf.library.types import AudiobookRecord

UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_AUTHOR = "Unknown Author"

# Canonical field -> header aliases, tried in order. First non-empty cell wins.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "external_id": ("ASIN", "asin", "Asin"),
    "title": ("Title", "title", "BookTitle", "Product Name"),
    "author": ("Author", "author", "Authors", "By"),
    "narrator": ("Narrator", "narrator", "Narrated By"),
    "series_name": ("Series", "series", "Series Name"),
    "series_position": ("Series Position", "Book #", "Book", "#"),
    "release_date": ("Release Date", "Publication Date", "Date Added"),
    "purchase_date": ("Purchase Date", "Date Purchased", "Added"),
    "length_minutes": ("Length", "Duration", "Runtime"),
    "rating": ("Rating", "My Rating", "Overall Rating"),
    "categories": ("Categories", "Genre", "Genres"),
}

# Trailing series annotations, stripped in this order.
_SERIES_SUFFIX_RES = (
    re.compile(r",?\s*Book\s+\d+.*$", re.IGNORECASE),
    re.compile(r",?\s*#\d+.*$", re.IGNORECASE),
    re.compile(r",?\s*Volume\s+\d+.*$", re.IGNORECASE),
    re.compile(r",?\s*Part\s+\d+.*$", re.IGNORECASE),
)

_POSITION_RE = re.compile(r"\d+(?:\.\d+)?")

# Duration formats, in priority order.
_HOURS_MINUTES_RE = re.compile(r"(\d+)\s*hrs?.*?(\d+)\s*mins?")
_CLOCK_RE = re.compile(r"(\d+):(\d+)(?::(\d+))?")
_MINUTES_RE = re.compile(r"(\d+)\s*mins?")
_HOURS_RE = re.compile(r"(\d+)\s*hrs?")

_RATING_STRIP_RE = re.compile(r"[^\d.]")
_LEADING_NUMBER_RE = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def _is_empty(value: Any) -> bool:
    """True for None, NaN, and blank strings."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return value is pd.NaT


def _cell_text(value: Any) -> str:
    """Render a cell as text. Whole floats lose their '.0' (ASINs read as numbers)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def pick_field(row: Mapping[str, Any], field: str) -> Any:
    """Return the first non-empty cell among the field's aliases, or None."""
    for name in FIELD_ALIASES[field]:
        value = row.get(name)
        if not _is_empty(value):
            return value
    return None


def clean_series_name(value: Any) -> str | None:
    """Strip trailing 'Book N', '#N', 'Volume N', 'Part N' annotations.

    >>> clean_series_name("Mistborn, Book 3")
    'Mistborn'
    """
    if _is_empty(value):
        return None

    name = _cell_text(value)
    for pattern in _SERIES_SUFFIX_RES:
        name = pattern.sub("", name, count=1)
    name = name.strip()
    return name or None


def parse_series_position(value: Any) -> float | None:
    """Extract the first number (optionally fractional) from the cell."""
    if _is_empty(value):
        return None
    match = _POSITION_RE.search(_cell_text(value))
    return float(match.group(0)) if match else None


def parse_date(value: Any) -> str | None:
    """Parse a permissive date and return its calendar date as YYYY-MM-DD."""
    if _is_empty(value):
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    try:
        parsed = pd.to_datetime(_cell_text(value), errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if parsed is None or pd.isna(parsed):
        return None
    return parsed.date().isoformat()


def parse_duration(value: Any) -> int | None:
    """Convert a duration cell to whole minutes.

    Accepts '5 hrs 30 mins', '1:45' / '1:45:00', '42 mins', and '3 hrs'.
    A bare number has no unit and is rejected.
    """
    if _is_empty(value):
        return None

    text = _cell_text(value).lower()

    match = _HOURS_MINUTES_RE.search(text)
    if match:
        return int(match.group(1)) * 60 + int(match.group(2))

    # Seconds are ignored
    match = _CLOCK_RE.search(text)
    if match:
        return int(match.group(1)) * 60 + int(match.group(2))

    match = _MINUTES_RE.search(text)
    if match:
        return int(match.group(1))

    match = _HOURS_RE.search(text)
    if match:
        return int(match.group(1)) * 60

    return None


def parse_rating(value: Any) -> float | None:
    """Drop everything but digits and dots, then read the leading number."""
    if _is_empty(value):
        return None
    cleaned = _RATING_STRIP_RE.sub("", _cell_text(value))
    match = _LEADING_NUMBER_RE.match(cleaned)
    return float(match.group(0)) if match else None


def _optional_text(value: Any) -> str | None:
    return None if value is None else _cell_text(value)


def normalize_row(row: Mapping[str, Any]) -> AudiobookRecord:
    """Build an owned AudiobookRecord from one export row.

    Unknown columns are ignored. A field that fails to parse is left unset;
    this function does not raise on malformed cells.
    """
    title = pick_field(row, "title")
    author = pick_field(row, "author")

    return AudiobookRecord(
        external_id=_optional_text(pick_field(row, "external_id")),
        title=_cell_text(title) if title is not None else UNKNOWN_TITLE,
        author=_cell_text(author) if author is not None else UNKNOWN_AUTHOR,
        narrator=_optional_text(pick_field(row, "narrator")),
        series_name=clean_series_name(pick_field(row, "series_name")),
        series_position=parse_series_position(pick_field(row, "series_position")),
        release_date=parse_date(pick_field(row, "release_date")),
        purchase_date=parse_date(pick_field(row, "purchase_date")),
        length_minutes=parse_duration(pick_field(row, "length_minutes")),
        rating=parse_rating(pick_field(row, "rating")),
        categories=_optional_text(pick_field(row, "categories")),
        # Presence in the export implies ownership
        owned=True,
        listened=False,
    )


def normalize_rows(rows: Iterable[Mapping[str, Any]]) -> list[AudiobookRecord]:
    """Normalize every row of an export, preserving order."""
    return [normalize_row(row) for row in rows]
