#!/usr/bin/env python3
"""
Tests for zik.utils.tag_readers
"""

import io
import tempfile
import unittest
from pathlib import Path

from audio_fixtures import flac_bytes, mp4_bytes, write_id3, write_id3v1
from mutagen.id3 import TRCK

from zik.core.models import Metadata
from zik.utils.tag_readers import (
    NOT_THIS_FORMAT,
    READERS,
    FlacReader,
    ID3Reader,
    MP4Reader,
    first_text,
    parse_track_number,
)


class TestHelpers(unittest.TestCase):
    """Test the value normalization helpers"""

    def test_first_text_list(self) -> None:
        self.assertEqual(first_text(["a", "b"]), "a")
        self.assertIsNone(first_text([]))
        self.assertIsNone(first_text(None))

    def test_first_text_frame(self) -> None:
        frame = TRCK(encoding=3, text=["4/10"])
        self.assertEqual(first_text(frame), "4/10")

    def test_first_text_bytes(self) -> None:
        self.assertEqual(first_text(b"caf\xc3\xa9"), "café")
        self.assertIsNone(first_text(b"\xff\xfe"))

    def test_parse_track_number(self) -> None:
        self.assertEqual(parse_track_number("5"), 5)
        self.assertEqual(parse_track_number("05"), 5)
        self.assertEqual(parse_track_number(None), 0)
        self.assertEqual(parse_track_number(""), 0)
        self.assertEqual(parse_track_number("-3"), 0)
        self.assertEqual(parse_track_number("five"), 0)
        self.assertEqual(parse_track_number("٣"), 0)

    def test_parse_track_number_with_total(self) -> None:
        self.assertEqual(parse_track_number("3/12", allow_total=True), 3)
        self.assertEqual(parse_track_number("3/12"), 0)
        self.assertEqual(parse_track_number("/12", allow_total=True), 0)


class TestFlacReader(unittest.TestCase):
    """Test FlacReader"""

    def setUp(self) -> None:
        self.reader = FlacReader()

    def read(self, data: bytes):
        return self.reader.try_read(io.BytesIO(data))

    def test_full_tags(self) -> None:
        result = self.read(
            flac_bytes(
                [
                    ("ARTIST", "Boards of Canada"),
                    ("ALBUM", "Geogaddi"),
                    ("ALBUMARTIST", "BoC"),
                    ("DATE", "2002"),
                    ("TITLE", "Music is Math"),
                    ("TRACK_NUMBER", "5"),
                ]
            )
        )
        self.assertEqual(
            result,
            Metadata(
                artist="Boards of Canada",
                album="Geogaddi",
                album_artist="BoC",
                year="2002",
                track_name="Music is Math",
                track_number=5,
            ),
        )

    def test_first_value_wins(self) -> None:
        result = self.read(
            flac_bytes([("ARTIST", "First"), ("ARTIST", "Second"), ("TITLE", "T")])
        )
        self.assertEqual(result.artist, "First")

    def test_tracknumber_fallback(self) -> None:
        result = self.read(flac_bytes([("TITLE", "T"), ("TRACKNUMBER", "7")]))
        self.assertEqual(result.track_number, 7)

    def test_track_number_key_preferred(self) -> None:
        result = self.read(
            flac_bytes([("TRACK_NUMBER", "2"), ("TRACKNUMBER", "7")])
        )
        self.assertEqual(result.track_number, 2)

    def test_unparseable_track_number(self) -> None:
        result = self.read(flac_bytes([("TITLE", "T"), ("TRACK_NUMBER", "A1")]))
        self.assertEqual(result.track_number, 0)
        self.assertEqual(result.track_name, "T")

    def test_no_comment_block(self) -> None:
        result = self.read(flac_bytes())
        self.assertEqual(result, Metadata())

    def test_not_flac(self) -> None:
        self.assertIs(self.read(b"just some text\n" * 10), NOT_THIS_FORMAT)
        self.assertIs(self.read(b""), NOT_THIS_FORMAT)
        self.assertIs(self.read(mp4_bytes(title="x")), NOT_THIS_FORMAT)

    def test_rewinds_stream(self) -> None:
        stream = io.BytesIO(flac_bytes([("TITLE", "T")]))
        stream.seek(0, io.SEEK_END)
        self.assertEqual(self.reader.try_read(stream).track_name, "T")


class TestID3Reader(unittest.TestCase):
    """Test ID3Reader"""

    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.dir = Path(self.temp_dir.name)
        self.reader = ID3Reader()

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def read_file(self, path: Path):
        with open(path, "rb") as stream:
            return self.reader.try_read(stream)

    def test_v2_tags(self) -> None:
        path = write_id3(
            self.dir / "a.mp3",
            artist="Aphex Twin",
            album="Selected Ambient Works 85-92",
            album_artist="Aphex Twin",
            year="1992",
            title="Xtal",
            track="1",
        )
        self.assertEqual(
            self.read_file(path),
            Metadata(
                artist="Aphex Twin",
                album="Selected Ambient Works 85-92",
                album_artist="Aphex Twin",
                year="1992",
                track_name="Xtal",
                track_number=1,
            ),
        )

    def test_partial_tags(self) -> None:
        path = write_id3(self.dir / "a.mp3", artist="Aphex Twin", title="Xtal")
        result = self.read_file(path)
        self.assertEqual(result.artist, "Aphex Twin")
        self.assertEqual(result.track_name, "Xtal")
        self.assertIsNone(result.album)
        self.assertEqual(result.track_number, 0)

    def test_track_with_total(self) -> None:
        path = write_id3(self.dir / "a.mp3", title="T", track="3/12")
        self.assertEqual(self.read_file(path).track_number, 3)

    def test_v1_fallback(self) -> None:
        path = write_id3v1(
            self.dir / "old.mp3",
            title="Windowlicker",
            artist="Aphex Twin",
            album="Windowlicker",
            year="1999",
            track=1,
        )
        result = self.read_file(path)
        self.assertEqual(result.track_name, "Windowlicker")
        self.assertEqual(result.artist, "Aphex Twin")
        self.assertEqual(result.year, "1999")
        self.assertEqual(result.track_number, 1)

    def test_not_id3(self) -> None:
        self.assertIs(
            self.reader.try_read(io.BytesIO(b"no tags here\n" * 20)), NOT_THIS_FORMAT
        )
        self.assertIs(self.reader.try_read(io.BytesIO(b"")), NOT_THIS_FORMAT)


class TestMP4Reader(unittest.TestCase):
    """Test MP4Reader"""

    def setUp(self) -> None:
        self.reader = MP4Reader()

    def read(self, data: bytes):
        return self.reader.try_read(io.BytesIO(data))

    def test_ilst_tags(self) -> None:
        result = self.read(
            mp4_bytes(
                artist="Caribou",
                album="Our Love",
                album_artist="Caribou",
                year="2014",
                title="Silver",
                track_number=3,
            )
        )
        self.assertEqual(
            result,
            Metadata(
                artist="Caribou",
                album="Our Love",
                album_artist="Caribou",
                year="2014",
                track_name="Silver",
                track_number=3,
            ),
        )

    def test_missing_track_number(self) -> None:
        result = self.read(mp4_bytes(title="Silver"))
        self.assertEqual(result.track_number, 0)
        self.assertIsNone(result.artist)

    def test_invalid_utf8_drops_only_that_field(self) -> None:
        result = self.read(
            mp4_bytes(
                artist="Caribou",
                title="Silver",
                track_number=3,
                raw_text={"album": b"\xff\xfe\xfd"},
            )
        )
        self.assertIsInstance(result, Metadata)
        self.assertEqual(result.artist, "Caribou")
        self.assertEqual(result.track_name, "Silver")
        self.assertEqual(result.track_number, 3)
        self.assertIsNone(result.album)

    def test_unreadable_stream_info(self) -> None:
        """A movie header with a zero timescale does not hide the tags"""
        result = self.read(mp4_bytes(timescale=0, title="Silver", track_number=3))
        self.assertEqual(result, Metadata(track_name="Silver", track_number=3))

    def test_no_metadata(self) -> None:
        self.assertIs(self.read(mp4_bytes(with_metadata=False)), NOT_THIS_FORMAT)

    def test_not_mp4(self) -> None:
        self.assertIs(self.read(b"plain text, nothing else\n"), NOT_THIS_FORMAT)
        self.assertIs(self.read(b""), NOT_THIS_FORMAT)


class TestReaderContract(unittest.TestCase):
    """Behavior shared by all readers"""

    def test_reader_order(self) -> None:
        self.assertEqual([r.name for r in READERS], ["flac", "id3", "mp4"])

    def test_stream_errors_propagate(self) -> None:
        class BrokenStream(io.BytesIO):
            def seek(self, *args, **kwargs):
                raise OSError("device went away")

        for reader in READERS:
            with self.subTest(reader=reader.name):
                with self.assertRaises(OSError):
                    reader.try_read(BrokenStream(b"fLaC"))

    def test_read_errors_inside_parser_propagate(self) -> None:
        """An OSError raised while mutagen reads is not reported as another format"""

        class FailingRead(io.BytesIO):
            def read(self, *args, **kwargs):
                if self.tell() > 0:
                    raise OSError(5, "Input/output error")
                return super().read(*args, **kwargs)

        with tempfile.TemporaryDirectory() as temp_dir:
            id3_data = write_id3(Path(temp_dir) / "a.mp3", title="T").read_bytes()

        streams = {
            "flac": flac_bytes([("TITLE", "T")]),
            "id3": id3_data,
            "mp4": mp4_bytes(title="T"),
        }
        for reader in READERS:
            with self.subTest(reader=reader.name):
                with self.assertRaises(OSError) as ctx:
                    reader.try_read(FailingRead(streams[reader.name]))
                self.assertEqual(ctx.exception.errno, 5)


if __name__ == "__main__":
    unittest.main()
