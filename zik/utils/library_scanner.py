#!/usr/bin/env python3
"""
Library scanner for directories of audio files.
Walks the configured library and rebuilds the artist/album/track catalogue.
"""

import os
import sqlite3
import stat
from pathlib import Path
from typing import Callable, Iterator, Optional, Set, Tuple

from loguru import logger

from zik.core.config import ConfigStore
from zik.core.database import DELETE_ALL_ARTISTS, DatabaseManager
from zik.core.database.repository import save_album, save_artist, save_track
from zik.core.errors import (
    LibraryNotConfiguredError,
    LibraryWalkError,
    PersistenceError,
)
from zik.core.models import Metadata, ScanResult
from zik.utils.metadata_reader import MetadataReader

FileCallback = Callable[[Path, Optional[Metadata]], None]


def _raise_walk_error(error: OSError) -> None:
    raise LibraryWalkError(error) from error


def walk_library(root: Path) -> Iterator[Path]:
    """
    Yield every regular file below ``root``, following symlinks.

    Directories reached a second time through a symlink are not descended
    again, and a file reachable under several names is yielded once. Any
    error reading a directory aborts the walk.
    """
    visited: Set[Tuple[int, int]] = set()
    seen_files: Set[Tuple[int, int]] = set()
    for dirpath, dirnames, filenames in os.walk(
        root, onerror=_raise_walk_error, followlinks=True
    ):
        try:
            st = os.stat(dirpath)
        except OSError as e:
            raise LibraryWalkError(e) from e
        key = (st.st_dev, st.st_ino)
        if key in visited:
            logger.debug(f"already visited {dirpath}, not descending")
            dirnames[:] = []
            continue
        visited.add(key)

        for filename in filenames:
            path = Path(dirpath) / filename
            try:
                st = os.stat(path)
            except OSError as e:
                if path.is_symlink():
                    logger.debug(f"skipping {path}: broken symlink ({e})")
                    continue
                raise LibraryWalkError(e) from e
            if not stat.S_ISREG(st.st_mode):
                logger.debug(f"skipping {path}: not a regular file")
                continue
            key = (st.st_dev, st.st_ino)
            if key in seen_files:
                logger.debug(f"skipping {path}: already seen under another name")
                continue
            seen_files.add(key)
            yield path


class LibraryScanner:
    """Rebuilds the catalogue from the configured library root"""

    def __init__(
        self,
        db: DatabaseManager,
        metadata_reader: Optional[MetadataReader] = None,
        on_file: Optional[FileCallback] = None,
    ):
        self.db = db
        self.config = ConfigStore(db)
        self.metadata_reader = metadata_reader or MetadataReader()
        self.on_file = on_file

    def scan(self) -> ScanResult:
        """
        Scan the library inside one transaction.

        The existing catalogue is deleted first; if anything fails the
        transaction is rolled back and the previous catalogue survives.

        Returns:
            Counters describing the scan
        """
        library = self.config.library_path()
        if library is None:
            raise LibraryNotConfiguredError()

        logger.info(f'scanning library "{library}"')
        result = ScanResult(library=library)

        try:
            with self.db.transaction() as tx:
                tx.execute(DELETE_ALL_ARTISTS)
                for path in walk_library(library):
                    self._scan_file(tx, path, result)
        except sqlite3.Error as e:
            raise PersistenceError(e) from e

        logger.info(
            f"✅ Scan complete: {result.tracks_saved} tracks from "
            f"{result.files_seen} files ({result.unsupported} unsupported)"
        )
        if self.config.scan_parallelism() > 1:
            logger.debug("scan_parallelism is set but the scan runs serially")
        return result

    def _scan_file(self, tx: sqlite3.Connection, path: Path, result: ScanResult) -> None:
        result.files_seen += 1
        metadata = self.metadata_reader.read_from_path(path)
        if self.on_file is not None:
            self.on_file(path, metadata)

        if metadata is None:
            logger.info(f"{path}: not a supported audio file")
            result.unsupported += 1
            return

        logger.debug(f"{path}: {metadata.to_dict()}")

        if metadata.track_name is None:
            logger.warning(f"{path}: no track title, skipping")
            result.untitled += 1
            return

        self.save_metadata(tx, metadata)
        result.tracks_saved += 1

    def save_metadata(self, tx: sqlite3.Connection, metadata: Metadata) -> int:
        """Upsert artist, album artist, album and track; returns the track id"""
        artist_id = save_artist(tx, metadata.artist_or_unknown())

        album_artist_id = None
        if metadata.album_artist is not None:
            album_artist_id = save_artist(tx, metadata.album_artist)

        album_id = save_album(
            tx,
            artist_id,
            metadata.album_or_unknown(),
            metadata.year,
            album_artist_id=album_artist_id,
        )
        return save_track(tx, artist_id, album_id, metadata)
