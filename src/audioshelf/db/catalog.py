# ABOUTME: Persistence and read operations for the audiobook catalog.
# ABOUTME: Natural-key upserts for imported books and placeholders, plus series statistics.

import logging
import sqlite3

from audioshelf.db.mapping import (
    ListeningStats,
    SeriesProgress,
    StoredAudiobook,
    record_to_row,
    row_to_listening_stats,
    row_to_series_progress,
    row_to_stored,
)
from audioshelf.library.types import AudiobookRecord

logger = logging.getLogger(__name__)

_NOW = "strftime('%Y-%m-%dT%H:%M:%S', 'now')"


class AudiobookNotFoundError(Exception):
    """Raised when an audiobook ID does not exist in the catalog."""


class AudiobookCatalog:
    """Wraps a sqlite3 connection and provides typed access to the audiobooks table.

    The catalog is the single writer for its connection; every write commits
    before returning.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    # --- Writes ---

    def upsert(self, record: AudiobookRecord) -> int:
        """Insert a record or overwrite the one sharing its natural key.

        The natural key is the ASIN when present. Without an ASIN, the
        (series_name, series_position) slot identifies the record, and as a
        last resort (title, author). An owned record takes over, or removes, a
        placeholder occupying its series slot, including when it is matched by
        ASIN from elsewhere; a placeholder never replaces an owned record.
        The row ID and the listened flag survive an overwrite.

        Returns:
            The row ID of the inserted or updated audiobook.
        """
        existing = self._find_existing(record)

        if existing is None:
            return self._insert(record)

        if record.is_placeholder and existing["owned"]:
            logger.debug(
                "Keeping owned book %r in slot %s #%g",
                existing["title"], record.series_name, record.series_position,
            )
            return existing["id"]

        if not record.is_placeholder and record.series_key is not None:
            self._drop_placeholder(record.series_key, keep_id=existing["id"])
        self._update(existing["id"], record)
        return existing["id"]

    def _drop_placeholder(self, series_key: tuple[str, float], keep_id: int) -> None:
        """Delete the placeholder in a slot an owned record is moving into.

        Left uncommitted; the caller's update commits both changes together.
        """
        cursor = self._conn.execute(
            "DELETE FROM audiobooks "
            "WHERE asin IS NULL AND owned = 0 "
            "AND series_name = ? AND series_position = ? AND id != ?",
            (*series_key, keep_id),
        )
        if cursor.rowcount:
            logger.debug("Superseded placeholder %s #%g", *series_key)

    def _find_existing(self, record: AudiobookRecord) -> sqlite3.Row | None:
        if record.external_id is not None:
            row = self._fetch_one(
                "SELECT * FROM audiobooks WHERE asin = ?", (record.external_id,),
            )
            if row is not None:
                return row
            if record.series_key is None:
                return None
            # A newly imported book replaces the placeholder holding its slot
            return self._fetch_one(
                "SELECT * FROM audiobooks "
                "WHERE asin IS NULL AND owned = 0 "
                "AND series_name = ? AND series_position = ?",
                record.series_key,
            )

        if record.series_key is not None:
            if record.is_placeholder:
                # Any book, with or without ASIN, fills the slot
                return self._fetch_one(
                    "SELECT * FROM audiobooks "
                    "WHERE series_name = ? AND series_position = ? "
                    "ORDER BY owned DESC, id LIMIT 1",
                    record.series_key,
                )
            return self._fetch_one(
                "SELECT * FROM audiobooks "
                "WHERE asin IS NULL AND series_name = ? AND series_position = ?",
                record.series_key,
            )

        return self._fetch_one(
            "SELECT * FROM audiobooks "
            "WHERE asin IS NULL AND series_position IS NULL "
            "AND title = ? AND author IS ? AND series_name IS ? "
            "ORDER BY id LIMIT 1",
            (record.title, record.author, record.series_name),
        )

    def _insert(self, record: AudiobookRecord) -> int:
        row = record_to_row(record)
        columns = ", ".join(row.keys())
        placeholders = ", ".join("?" for _ in row)

        cursor = self._conn.execute(
            f"INSERT INTO audiobooks ({columns}) VALUES ({placeholders})",
            list(row.values()),
        )
        self._conn.commit()
        return cursor.lastrowid  # type: ignore[return-value]

    def _update(self, audiobook_id: int, record: AudiobookRecord) -> None:
        row = record_to_row(record)
        listened = row.pop("listened")

        set_clause = ", ".join(f"{k} = ?" for k in row)
        # Listened is user-controlled; an import never clears it
        set_clause += f", listened = MAX(listened, ?), updated_at = {_NOW}"

        self._conn.execute(
            f"UPDATE audiobooks SET {set_clause} WHERE id = ?",
            [*row.values(), listened, audiobook_id],
        )
        self._conn.commit()

    def mark_listened(self, audiobook_id: int, listened: bool = True) -> bool:
        """Set the listened flag. Returns False if the ID does not exist."""
        cursor = self._conn.execute(
            f"UPDATE audiobooks SET listened = ?, updated_at = {_NOW} WHERE id = ?",
            (int(listened), audiobook_id),
        )
        self._conn.commit()
        return cursor.rowcount > 0

    # --- Reads ---

    def _fetch_one(self, sql: str, params: tuple) -> sqlite3.Row | None:
        return self._conn.execute(sql, params).fetchone()

    def get_by_id(self, audiobook_id: int) -> StoredAudiobook | None:
        row = self._fetch_one("SELECT * FROM audiobooks WHERE id = ?", (audiobook_id,))
        return row_to_stored(row) if row else None

    def get_by_external_id(self, external_id: str) -> StoredAudiobook | None:
        """Retrieve an audiobook by its ASIN."""
        row = self._fetch_one("SELECT * FROM audiobooks WHERE asin = ?", (external_id,))
        return row_to_stored(row) if row else None

    def require(self, audiobook_id: int) -> StoredAudiobook:
        """Like get_by_id, but raises AudiobookNotFoundError when absent."""
        stored = self.get_by_id(audiobook_id)
        if stored is None:
            raise AudiobookNotFoundError(f"Audiobook with id {audiobook_id} not found")
        return stored

    def list_all(self) -> list[StoredAudiobook]:
        """Every audiobook, grouped by series and ordered by position, then title."""
        cursor = self._conn.execute(
            "SELECT * FROM audiobooks ORDER BY series_name, series_position, title"
        )
        return [row_to_stored(row) for row in cursor.fetchall()]

    def list_by_series(self, series_name: str) -> list[StoredAudiobook]:
        """Books in a series by position ascending; unpositioned books sort last."""
        cursor = self._conn.execute(
            "SELECT * FROM audiobooks WHERE series_name = ? "
            "ORDER BY series_position IS NULL, series_position, title",
            (series_name,),
        )
        return [row_to_stored(row) for row in cursor.fetchall()]

    def list_missing(self) -> list[StoredAudiobook]:
        """All unowned (placeholder) audiobooks."""
        cursor = self._conn.execute(
            "SELECT * FROM audiobooks WHERE owned = 0 "
            "ORDER BY series_name, series_position, title"
        )
        return [row_to_stored(row) for row in cursor.fetchall()]

    def count_unowned(self) -> int:
        cursor = self._conn.execute("SELECT COUNT(*) FROM audiobooks WHERE owned = 0")
        return cursor.fetchone()[0]

    def series_progress(self) -> list[SeriesProgress]:
        """Summaries for every series with more than one cataloged book.

        Placeholders count toward total and missing books but not owned books.
        Listening time only includes owned books.
        """
        cursor = self._conn.execute(
            "SELECT series_name, "
            "COUNT(*) AS total_books, "
            "SUM(CASE WHEN owned = 1 THEN 1 ELSE 0 END) AS owned_books, "
            "SUM(CASE WHEN listened = 1 THEN 1 ELSE 0 END) AS listened_books, "
            "SUM(CASE WHEN owned = 0 THEN 1 ELSE 0 END) AS missing_books, "
            "MIN(series_position) AS first_position, "
            "MAX(series_position) AS latest_position, "
            "AVG(rating) AS avg_rating, "
            "SUM(CASE WHEN owned = 1 THEN COALESCE(length_minutes, 0) ELSE 0 END) "
            "AS total_listening_time "
            "FROM audiobooks "
            "WHERE series_name IS NOT NULL "
            "GROUP BY series_name "
            "HAVING COUNT(*) > 1 "
            "ORDER BY owned_books DESC, total_books DESC, series_name"
        )
        return [row_to_series_progress(row) for row in cursor.fetchall()]

    def listening_stats(self) -> ListeningStats:
        """Library-wide totals across all audiobooks, placeholders included."""
        cursor = self._conn.execute(
            "SELECT COUNT(*) AS total_books, "
            "SUM(CASE WHEN owned = 1 THEN 1 ELSE 0 END) AS owned_books, "
            "SUM(CASE WHEN listened = 1 THEN 1 ELSE 0 END) AS completed_books, "
            "SUM(CASE WHEN owned = 0 THEN 1 ELSE 0 END) AS missing_books, "
            "SUM(CASE WHEN owned = 1 THEN COALESCE(length_minutes, 0) ELSE 0 END) "
            "AS total_listening_time, "
            "COUNT(DISTINCT series_name) AS total_series, "
            "AVG(rating) AS avg_rating "
            "FROM audiobooks"
        )
        return row_to_listening_stats(cursor.fetchone())
