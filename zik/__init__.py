#!/usr/bin/env python3
"""
zik - Create a database of your music library

Walks a directory of FLAC, MP3 and MP4 files, reads their tags and stores
a normalized artist/album/track catalogue in a local SQLite database.
"""

__version__ = "1.0.0"
__author__ = "Vincent Rischmann"
__email__ = "vincent@rischmann.fr"

from .core.models import Metadata
from .utils.metadata_reader import MetadataReader

__all__ = [
    "Metadata",
    "MetadataReader",
]
