# ABOUTME: Public API for the audioshelf library database layer.
# ABOUTME: Exports connection management, catalog operations, and read-side models.

from audioshelf.db.catalog import AudiobookCatalog, AudiobookNotFoundError
from audioshelf.db.connection import DEFAULT_DB_PATH, library_connection, open_library
from audioshelf.db.mapping import ListeningStats, SeriesProgress, StoredAudiobook

__all__ = [
    "DEFAULT_DB_PATH",
    "AudiobookCatalog",
    "AudiobookNotFoundError",
    "ListeningStats",
    "SeriesProgress",
    "StoredAudiobook",
    "library_connection",
    "open_library",
]
