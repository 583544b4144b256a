# ABOUTME: SQLite connection management for the audioshelf library database.
# ABOUTME: Creates the database on first use, runs pending migrations, and scopes connections.

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from audioshelf.db.schema import MIGRATIONS, SCHEMA_V1

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".audioshelf" / "library.db"


def _schema_exists(conn: sqlite3.Connection) -> bool:
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_version'"
    )
    return cursor.fetchone() is not None


def _get_schema_version(conn: sqlite3.Connection) -> int:
    """Read the highest applied schema version (0 for an empty database)."""
    cursor = conn.execute("SELECT MAX(version) FROM schema_version")
    row = cursor.fetchone()
    return row[0] if row and row[0] is not None else 0


def _apply_migrations(conn: sqlite3.Connection) -> None:
    """Apply every migration newer than the stored schema version, in order."""
    current = _get_schema_version(conn)
    for version, sql in MIGRATIONS:
        if version > current:
            logger.debug("Applying schema migration v%d", version)
            conn.executescript(sql)


def open_library(path: Path | None = None) -> sqlite3.Connection:
    """Open or create the audiobook library database.

    Parent directories are created as needed. The base schema is applied to a
    new file, then any pending migrations run. Rows come back as sqlite3.Row.

    Args:
        path: Database file. Defaults to ~/.audioshelf/library.db.

    Returns:
        A configured sqlite3.Connection.
    """
    db_path = path or DEFAULT_DB_PATH
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")

    if not _schema_exists(conn):
        logger.info("Creating library database at %s", db_path)
        conn.executescript(SCHEMA_V1)

    _apply_migrations(conn)
    return conn


@contextmanager
def library_connection(path: Path | None = None) -> Iterator[sqlite3.Connection]:
    """Yield an open library connection and close it on exit."""
    conn = open_library(path)
    try:
        yield conn
    finally:
        conn.close()
