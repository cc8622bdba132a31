#!/usr/bin/env python3
"""
Data models for zik.

This module contains the dataclasses shared by the tag readers, the
scan driver and the persistence layer.
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

UNKNOWN = "Unknown"


@dataclass(frozen=True)
class Metadata:
    """Canonical tag record produced by the extractor, whatever the format."""

    artist: Optional[str] = None
    album: Optional[str] = None
    album_artist: Optional[str] = None
    year: Optional[str] = None
    track_name: Optional[str] = None
    track_number: int = 0  # 0 when absent or unparseable

    def __post_init__(self) -> None:
        # Empty strings coming out of a tag mean the field is absent
        for f in fields(self):
            if f.name != "track_number" and getattr(self, f.name) == "":
                object.__setattr__(self, f.name, None)
        if self.track_number < 0:
            object.__setattr__(self, "track_number", 0)

    def artist_or_unknown(self) -> str:
        return self.artist if self.artist is not None else UNKNOWN

    def album_or_unknown(self) -> str:
        return self.album if self.album is not None else UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary, used for log lines."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class ScanResult:
    """Summary of a completed scan."""

    library: Path
    files_seen: int = 0
    tracks_saved: int = 0
    unsupported: int = 0
    untitled: int = 0
