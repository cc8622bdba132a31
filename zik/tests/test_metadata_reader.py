#!/usr/bin/env python3
"""
Tests for zik.utils.metadata_reader
"""

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import Mock

import pytest
from audio_fixtures import write_flac, write_id3, write_mp4

from zik.core.errors import MetadataReadError
from zik.core.models import Metadata
from zik.utils.metadata_reader import SUPPORTED_FORMATS, MetadataReader
from zik.utils.tag_readers import NOT_THIS_FORMAT


class TestMetadataReader(unittest.TestCase):
    """Test MetadataReader"""

    def setUp(self) -> None:
        """Set up test fixtures"""
        self.temp_dir = tempfile.TemporaryDirectory()
        self.dir = Path(self.temp_dir.name)
        self.reader = MetadataReader()

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_supported_formats(self) -> None:
        self.assertEqual(SUPPORTED_FORMATS, ["flac", "id3", "mp4"])

    def test_read_flac(self) -> None:
        path = write_flac(
            self.dir / "song.flac", [("ARTIST", "Boards of Canada"), ("TITLE", "Dawn Chorus")]
        )
        metadata = self.reader.read_from_path(path)
        self.assertEqual(metadata.artist, "Boards of Canada")
        self.assertEqual(metadata.track_name, "Dawn Chorus")

    def test_read_mp3(self) -> None:
        path = write_id3(self.dir / "song.mp3", artist="Aphex Twin", title="Xtal")
        metadata = self.reader.read_from_path(path)
        self.assertEqual(metadata.track_name, "Xtal")

    def test_read_mp4(self) -> None:
        path = write_mp4(self.dir / "song.m4a", artist="Caribou", title="Silver")
        metadata = self.reader.read_from_path(str(path))
        self.assertEqual(metadata.artist, "Caribou")

    def test_extension_is_ignored(self) -> None:
        path = write_flac(self.dir / "song.mp3", [("TITLE", "Actually FLAC")])
        self.assertEqual(self.reader.read_from_path(path).track_name, "Actually FLAC")

    def test_unsupported_files(self) -> None:
        text = self.dir / "notes.txt"
        text.write_text("not music\n" * 50)
        empty = self.dir / "empty.flac"
        empty.touch()

        self.assertIsNone(self.reader.read_from_path(text))
        self.assertIsNone(self.reader.read_from_path(empty))

    def test_missing_file(self) -> None:
        with self.assertRaises(MetadataReadError) as ctx:
            self.reader.read_from_path(self.dir / "missing.flac")
        self.assertIn("missing.flac", str(ctx.exception))
        self.assertIsInstance(ctx.exception.reason, FileNotFoundError)

    def test_first_matching_reader_wins(self) -> None:
        """Readers are tried in order and later ones are skipped"""
        first = Mock(name="first")
        first.name = "first"
        first.try_read.return_value = NOT_THIS_FORMAT
        second = Mock(name="second")
        second.name = "second"
        second.try_read.return_value = Metadata(track_name="Hit")
        third = Mock(name="third")
        third.name = "third"

        path = self.dir / "anything.bin"
        path.write_bytes(b"\x00" * 16)

        reader = MetadataReader(readers=[first, second, third])
        self.assertEqual(reader.read_from_path(path), Metadata(track_name="Hit"))
        first.try_read.assert_called_once()
        second.try_read.assert_called_once()
        third.try_read.assert_not_called()

    def test_read_error_aborts_detection(self) -> None:
        """A reader hitting an I/O error aborts the read instead of skipping"""
        failing = Mock(name="failing")
        failing.name = "failing"
        failing.try_read.side_effect = OSError(5, "Input/output error")
        never = Mock(name="never")
        never.name = "never"

        path = self.dir / "song.flac"
        path.write_bytes(b"\x00" * 16)

        with self.assertRaises(MetadataReadError) as ctx:
            MetadataReader(readers=[failing, never]).read_from_path(path)
        self.assertEqual(ctx.exception.reason.errno, 5)
        never.try_read.assert_not_called()


@pytest.mark.skipif(
    not hasattr(os, "geteuid") or os.geteuid() == 0,
    reason="permission bits are not enforced for root",
)
def test_unreadable_file(tmp_path: Path) -> None:
    path = write_flac(tmp_path / "locked.flac", [("TITLE", "T")])
    path.chmod(0)
    try:
        with pytest.raises(MetadataReadError):
            MetadataReader().read_from_path(path)
    finally:
        path.chmod(0o644)


if __name__ == "__main__":
    unittest.main()
