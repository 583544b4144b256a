# ABOUTME: Library package for audiobook records and export normalization.
# ABOUTME: Exports the AudiobookRecord dataclass and the row normalizer.

from audioshelf.library.normalizer import normalize_row, normalize_rows
from audioshelf.library.types import AudiobookRecord

__all__ = [
    "AudiobookRecord",
    "normalize_row",
    "normalize_rows",
]
