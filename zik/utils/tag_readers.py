#!/usr/bin/env python3
"""
Tag readers for the supported audio containers.

Each reader inspects a seekable binary stream and answers with a Metadata
record or NOT_THIS_FORMAT. Wrong magic, parser errors and empty tag sets
all mean NOT_THIS_FORMAT, never an exception; errors raised by the stream
itself (read/seek failures) propagate as OSError.
"""

import enum
from typing import Any, BinaryIO, Optional, Union

from loguru import logger
from mutagen import MutagenError
from mutagen.flac import FLAC
from mutagen.id3 import ID3
from mutagen.mp4 import MP4, AtomError, Atoms, MP4StreamInfoError, MP4Tags

from zik.core.models import Metadata


class ReadOutcome(enum.Enum):
    NOT_THIS_FORMAT = "not_this_format"


NOT_THIS_FORMAT = ReadOutcome.NOT_THIS_FORMAT

ReadResult = Union[Metadata, ReadOutcome]

# Errors the mutagen parsers raise on foreign or damaged data
PARSE_ERRORS = (MutagenError, ValueError)


def wrapped_io_error(error: Exception) -> Optional[OSError]:
    """
    Get the OSError a mutagen error was converted from, if any.

    mutagen re-raises stream failures as its own error types with the
    original OSError as first argument.
    """
    origin = error.args[0] if error.args else None
    for candidate in (origin, error.__cause__):
        if isinstance(candidate, OSError):
            return candidate
    return None


def first_text(value: Any) -> Optional[str]:
    """
    Reduce a mutagen tag value to its first text item.

    Mutagen hands back lists for Vorbis comments and MP4 atoms, and frames
    with a ``.text`` list for ID3.
    """
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return first_text(value[0]) if value else None
    text = getattr(value, "text", None)
    if text is not None:
        return first_text(text)
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return None
    return str(value)


def parse_track_number(value: Optional[str], allow_total: bool = False) -> int:
    """
    Parse an unsigned decimal track number, 0 on any failure.

    With ``allow_total`` the ``3/12`` form (track/total) yields 3.
    """
    if value is None:
        return 0
    if allow_total and "/" in value:
        value = value.split("/", 1)[0]
    if not value.isascii() or not value.isdigit():
        return 0
    return int(value)


class TagReader:
    """Base class: rewinds the stream, parses, and maps parser errors."""

    name = "base"

    def try_read(self, stream: BinaryIO) -> ReadResult:
        stream.seek(0)
        try:
            return self._read(stream)
        except PARSE_ERRORS as e:
            io_error = wrapped_io_error(e)
            if io_error is not None:
                raise io_error from e
            logger.debug(f"{self.name} reader rejected stream: {e}")
            return NOT_THIS_FORMAT

    def _read(self, stream: BinaryIO) -> ReadResult:
        raise NotImplementedError


class FlacReader(TagReader):
    """FLAC streams with Vorbis comments."""

    name = "flac"

    def _read(self, stream: BinaryIO) -> ReadResult:
        tags = FLAC(stream).tags
        if tags is None:
            # Valid container without a comment block
            return Metadata()

        def get(key: str) -> Optional[str]:
            return first_text(tags.get(key))

        track_number = get("TRACK_NUMBER")
        if track_number is None:
            track_number = get("TRACKNUMBER")

        return Metadata(
            artist=get("ARTIST"),
            album=get("ALBUM"),
            album_artist=get("ALBUMARTIST"),
            year=get("DATE"),
            track_name=get("TITLE"),
            track_number=parse_track_number(track_number),
        )


class ID3Reader(TagReader):
    """ID3v2 tags, with ID3v1 as fallback, as found in MP3 files."""

    name = "id3"

    def _read(self, stream: BinaryIO) -> ReadResult:
        tags = ID3(stream)
        if not tags:
            return NOT_THIS_FORMAT

        def get(*frame_ids: str) -> Optional[str]:
            for frame_id in frame_ids:
                frame = tags.get(frame_id)
                if frame is not None:
                    # ID3TimeStamp and numeric frames serialize as text
                    return first_text(frame)
            return None

        return Metadata(
            artist=get("TPE1"),
            album=get("TALB"),
            album_artist=get("TPE2"),
            year=get("TDRC", "TYER"),
            track_name=get("TIT2"),
            track_number=parse_track_number(get("TRCK"), allow_total=True),
        )


class MP4Reader(TagReader):
    """iTunes-style metadata atoms inside moov.udta.meta.ilst."""

    name = "mp4"

    TEXT_ATOMS = {
        "artist": "\xa9ART",
        "album": "\xa9alb",
        "album_artist": "aART",
        "year": "\xa9day",
        "track_name": "\xa9nam",
    }

    def _read(self, stream: BinaryIO) -> ReadResult:
        try:
            tags = MP4(stream).tags
        except MP4StreamInfoError as e:
            # Stream info (duration, codec) says nothing about the ilst
            logger.debug(f"mp4 stream info unreadable, loading tags only: {e}")
            stream.seek(0)
            try:
                atoms = Atoms(stream)
            except AtomError:
                return NOT_THIS_FORMAT
            tags = MP4Tags(atoms, stream)

        if not tags:
            return NOT_THIS_FORMAT

        track_number = 0
        trkn = tags.get("trkn")
        if trkn:
            number = trkn[0][0] if isinstance(trkn[0], tuple) else trkn[0]
            if isinstance(number, int) and number >= 0:
                track_number = number

        values = {
            field: first_text(tags.get(atom))
            for field, atom in self.TEXT_ATOMS.items()
        }
        return Metadata(track_number=track_number, **values)


# Reader order: FLAC has the most specific signature; ID3 frames can be
# embedded in other containers so it must not run before FLAC.
READERS = (FlacReader(), ID3Reader(), MP4Reader())
