"""
Centralized SQL queries for zik database operations.

This module contains all SQL queries used throughout the application
to ensure consistency and maintainability.
"""

# Table Creation Queries
CREATE_CONFIG_TABLE = """
CREATE TABLE IF NOT EXISTS config (
    key TEXT UNIQUE,
    value ANY
)
"""

CREATE_ARTIST_TABLE = """
CREATE TABLE IF NOT EXISTS artist (
    id INTEGER PRIMARY KEY,
    name TEXT
){strict}
"""

CREATE_ARTIST_NAME_INDEX = "CREATE INDEX IF NOT EXISTS artist_name ON artist (name)"

CREATE_ARTIST_NAME_UNIQUE_INDEX = (
    "CREATE UNIQUE INDEX IF NOT EXISTS artist_name_unique ON artist (name)"
)

CREATE_ALBUM_TABLE = """
CREATE TABLE IF NOT EXISTS album (
    id INTEGER PRIMARY KEY,
    name TEXT,
    artist_id INTEGER,
    album_artist_id INTEGER,
    year TEXT,
    FOREIGN KEY (artist_id) REFERENCES artist (id) ON DELETE CASCADE,
    FOREIGN KEY (album_artist_id) REFERENCES artist (id) ON DELETE SET NULL
){strict}
"""

CREATE_ALBUM_NAME_INDEX = "CREATE INDEX IF NOT EXISTS album_name ON album (name)"

CREATE_TRACK_TABLE = """
CREATE TABLE IF NOT EXISTS track (
    id INTEGER PRIMARY KEY,
    name TEXT UNIQUE,
    artist_id INTEGER,
    album_id INTEGER,
    year TEXT,
    number INTEGER,
    FOREIGN KEY (artist_id) REFERENCES artist (id) ON DELETE CASCADE,
    FOREIGN KEY (album_id) REFERENCES album (id) ON DELETE CASCADE
){strict}
"""

# Config queries
GET_CONFIG_VALUE = "SELECT value FROM config WHERE key = ?"

GET_ALL_CONFIG = "SELECT key, value FROM config ORDER BY rowid"

UPSERT_CONFIG_VALUE = """
INSERT INTO config (key, value) VALUES (?, ?)
ON CONFLICT (key) DO UPDATE SET value = excluded.value
"""

# Catalogue queries
DELETE_ALL_ARTISTS = "DELETE FROM artist"

GET_ARTIST_ID_BY_NAME = "SELECT id FROM artist WHERE name = ?"

INSERT_ARTIST = "INSERT INTO artist (name) VALUES (?)"

GET_ALBUM_ID_BY_NAME = "SELECT id FROM album WHERE name = ?"

INSERT_ALBUM = """
INSERT INTO album (name, artist_id, album_artist_id, year)
VALUES (?, ?, ?, ?)
"""

UPSERT_TRACK = """
INSERT INTO track (name, artist_id, album_id, year, number)
VALUES (?, ?, ?, ?, ?)
ON CONFLICT (name) DO UPDATE SET
    artist_id = excluded.artist_id,
    album_id = excluded.album_id,
    year = excluded.year,
    number = excluded.number
"""

GET_TRACK_ID_BY_NAME = "SELECT id FROM track WHERE name = ?"

# Catalogue statistics
GET_CATALOGUE_COUNTS = {
    "artists": "SELECT COUNT(*) FROM artist",
    "albums": "SELECT COUNT(*) FROM album",
    "tracks": "SELECT COUNT(*) FROM track",
}
