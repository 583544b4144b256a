# ABOUTME: SQL DDL statements for the audioshelf library database schema.
# ABOUTME: Defines the audiobooks table, its natural-key indexes, and schema migrations.

SCHEMA_V1 = """
-- Audiobook catalog: imported books and synthesized missing-book placeholders
CREATE TABLE audiobooks (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    asin            TEXT,
    title           TEXT NOT NULL,
    series_name     TEXT,
    series_position REAL CHECK (series_position IS NULL OR series_position >= 0),
    author          TEXT,
    narrator        TEXT,
    owned           INTEGER NOT NULL DEFAULT 0,
    listened        INTEGER NOT NULL DEFAULT 0,
    release_date    TEXT,
    purchase_date   TEXT,
    rating          REAL,
    length_minutes  INTEGER,
    created_at      TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    updated_at      TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

CREATE UNIQUE INDEX idx_audiobooks_asin ON audiobooks(asin) WHERE asin IS NOT NULL;
CREATE INDEX idx_audiobooks_series ON audiobooks(series_name, series_position)
    WHERE series_name IS NOT NULL;
CREATE INDEX idx_audiobooks_owned ON audiobooks(owned);

-- Schema versioning for future migrations
CREATE TABLE schema_version (
    version    INTEGER NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

INSERT INTO schema_version (version) VALUES (1);
"""

# Rows without an ASIN are identified by their series slot, so at most one
# such row may occupy a given (series_name, series_position).
MIGRATION_V2 = """
CREATE UNIQUE INDEX idx_audiobooks_series_slot
    ON audiobooks(series_name, series_position)
    WHERE asin IS NULL AND series_name IS NOT NULL AND series_position IS NOT NULL;

INSERT INTO schema_version (version) VALUES (2);
"""

MIGRATION_V3 = """
ALTER TABLE audiobooks ADD COLUMN categories TEXT;

INSERT INTO schema_version (version) VALUES (3);
"""

MIGRATIONS: list[tuple[int, str]] = [
    (2, MIGRATION_V2),
    (3, MIGRATION_V3),
]
