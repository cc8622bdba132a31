#!/usr/bin/env python3
"""
Metadata reader for music files using the mutagen library.
Supports FLAC, MP3 (ID3) and MP4/M4A files.
"""

from pathlib import Path
from typing import Optional, Sequence, Union

from loguru import logger

from zik.core.errors import MetadataReadError
from zik.core.models import Metadata
from zik.utils.tag_readers import READERS, TagReader

SUPPORTED_FORMATS = [reader.name for reader in READERS]


class MetadataReader:
    """Read the canonical metadata record from a single audio file"""

    def __init__(self, readers: Sequence[TagReader] = READERS):
        """Initialize the metadata reader with readers in the order they are tried"""
        self.readers = tuple(readers)

    def read_from_path(self, file_path: Union[str, Path]) -> Optional[Metadata]:
        """
        Read metadata from a music file

        Args:
            file_path: Path to the music file

        Returns:
            The canonical record from the first reader that recognizes the
            file, or None if the file is not a supported audio file

        Raises:
            MetadataReadError: if the file cannot be opened or read
        """
        path = Path(file_path)
        try:
            with open(path, "rb") as stream:
                for reader in self.readers:
                    result = reader.try_read(stream)
                    if isinstance(result, Metadata):
                        logger.debug(f"{path}: read as {reader.name}")
                        return result
        except OSError as e:
            raise MetadataReadError(path, e) from e

        logger.debug(f"{path}: not a supported audio file")
        return None
