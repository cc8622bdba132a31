"""
Upserts for the artist/album/track catalogue.

Every function takes a connection with an open transaction (see
DatabaseManager.transaction) and leaves commit and rollback to the caller.
"""

import sqlite3
from typing import Optional

from zik.core.database.queries import (
    GET_ALBUM_ID_BY_NAME,
    GET_ARTIST_ID_BY_NAME,
    GET_TRACK_ID_BY_NAME,
    INSERT_ALBUM,
    INSERT_ARTIST,
    UPSERT_TRACK,
)
from zik.core.models import Metadata


def _last_id(cursor: sqlite3.Cursor) -> int:
    row_id = cursor.lastrowid
    if row_id is None:
        raise sqlite3.DatabaseError("insert did not produce a row id")
    return row_id


def save_artist(tx: sqlite3.Connection, name: str) -> int:
    """
    Get the id of the artist named exactly ``name``, inserting it if needed.
    """
    row = tx.execute(GET_ARTIST_ID_BY_NAME, (name,)).fetchone()
    if row is not None:
        return int(row[0])
    return _last_id(tx.execute(INSERT_ARTIST, (name,)))


def save_album(
    tx: sqlite3.Connection,
    artist_id: int,
    name: str,
    year: Optional[str],
    album_artist_id: Optional[int] = None,
) -> int:
    """
    Get the id of the album named exactly ``name``, inserting it if needed.

    Albums are keyed on name alone: an album that already exists keeps the
    artist, album artist and year it was first inserted with.
    """
    row = tx.execute(GET_ALBUM_ID_BY_NAME, (name,)).fetchone()
    if row is not None:
        return int(row[0])
    return _last_id(
        tx.execute(INSERT_ALBUM, (name, artist_id, album_artist_id, year))
    )


def save_track(
    tx: sqlite3.Connection, artist_id: int, album_id: int, metadata: Metadata
) -> int:
    """
    Insert the track, or update artist, album, year and number of the track
    with the same name.

    Raises:
        ValueError: if the record has no track name
    """
    if metadata.track_name is None:
        raise ValueError("cannot save a track without a name")

    tx.execute(
        UPSERT_TRACK,
        (
            metadata.track_name,
            artist_id,
            album_id,
            metadata.year,
            metadata.track_number,
        ),
    )
    # lastrowid is not reliable after the DO UPDATE branch
    row = tx.execute(GET_TRACK_ID_BY_NAME, (metadata.track_name,)).fetchone()
    return int(row[0])
