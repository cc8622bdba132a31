"""
Database utilities for zik.

This package contains centralized database queries, the schema manager,
the connection manager and the catalogue upserts.
"""

from .database_manager import DatabaseManager, default_data_dir, default_db_path
from .queries import *
from .repository import save_album, save_artist, save_track
from .schema import get_schema_statements, init_database

__all__ = [
    # Queries
    "CREATE_CONFIG_TABLE",
    "CREATE_ARTIST_TABLE",
    "CREATE_ALBUM_TABLE",
    "CREATE_TRACK_TABLE",
    "GET_CONFIG_VALUE",
    "GET_ALL_CONFIG",
    "UPSERT_CONFIG_VALUE",
    "DELETE_ALL_ARTISTS",
    "GET_CATALOGUE_COUNTS",
    # Schema
    "get_schema_statements",
    "init_database",
    # Connection
    "DatabaseManager",
    "default_data_dir",
    "default_db_path",
    # Upserts
    "save_artist",
    "save_album",
    "save_track",
]
