"""Tests for tag formats and local track files."""

from datetime import timedelta
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from mutagen import MutagenError

from music_reconciler.domain.models import Release, Track
from music_reconciler.exceptions import DecodeError, PreconditionError
from music_reconciler.tags import Format, MutagenTag
from music_reconciler.tags.file import TrackFile

from conftest import DictTag


class TestFormat:
    """Test format detection."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("song.flac", Format.FLAC),
            ("song.FLAC", Format.FLAC),
            ("song.m4a", Format.MP4),
            ("song.mp4", Format.MP4),
            ("song.mp3", Format.ID3),
            ("song.ape", Format.APE),
            ("song.wav", None),
            ("song", None),
        ],
    )
    def test_from_path(self, name, expected):
        assert Format.from_path(Path("/music") / name) is expected

    def test_from_ext_accepts_dot(self):
        assert Format.from_ext(".mp3") is Format.ID3
        assert Format.from_ext("mp3") is Format.ID3

    def test_ext(self):
        assert Format.FLAC.ext == "flac"
        assert Format.MP4.ext == "m4a"
        assert str(Format.ID3) == "mp3"


class TestTag:
    """Test the shared tag helpers."""

    def test_get_str_skips_empty_values(self):
        tag = DictTag({"title": ["", "So What"]})
        assert tag.get_str("title") == "So What"
        assert tag.get_str("album") is None


class TestMutagenTag:
    """Test the mutagen backend over a stand-in file object."""

    def _audio(self, tags=None, length=125.5):
        audio = MagicMock()
        audio.tags = {} if tags is None else tags
        audio.info.length = length
        return audio

    def test_get_all(self):
        tag = MutagenTag(self._audio({"artist": ["A", "B"]}), Format.FLAC)
        assert tag.get_all("artist") == ["A", "B"]
        assert tag.get_all("album") == []

    def test_ape_multi_values(self):
        tag = MutagenTag(self._audio({"artist": "A\0B"}), Format.APE)
        assert tag.get_all("artist") == ["A", "B"]

    def test_set_and_write(self):
        audio = self._audio()
        tag = MutagenTag(audio, Format.ID3, Path("/music/a.mp3"))
        tag.set_str("title", "New")
        tag.write()
        assert audio.tags["title"] == ["New"]
        audio.save.assert_called_once()

    def test_missing_tags_are_added(self):
        audio = self._audio()
        audio.tags = None

        def add_tags():
            audio.tags = {}

        audio.add_tags.side_effect = add_tags
        tag = MutagenTag(audio, Format.MP4)
        assert tag.get_all("title") == []

    def test_length(self):
        assert MutagenTag(self._audio(length=125.5), Format.FLAC).length == timedelta(seconds=125.5)
        assert MutagenTag(self._audio(length=0), Format.FLAC).length is None

    def test_load_unreadable_file(self, tmp_path):
        path = tmp_path / "broken.flac"
        path.write_bytes(b"not a flac file")
        with pytest.raises(DecodeError):
            MutagenTag.load(path, Format.FLAC)

    def test_load_uses_format_backend(self, tmp_path):
        backend = MagicMock(return_value=self._audio())
        with patch.dict("music_reconciler.tags.mutagen_tag._BACKENDS", {Format.FLAC: backend}):
            tag = MutagenTag.load(tmp_path / "a.flac", Format.FLAC)
        backend.assert_called_once_with(str(tmp_path / "a.flac"))
        assert tag.format is Format.FLAC

    def test_load_wraps_mutagen_errors(self, tmp_path):
        backend = MagicMock(side_effect=MutagenError("bad header"))
        with patch.dict("music_reconciler.tags.mutagen_tag._BACKENDS", {Format.ID3: backend}):
            with pytest.raises(DecodeError):
                MutagenTag.load(tmp_path / "a.mp3", Format.ID3)


class TestTrackFile:
    """Test local track files."""

    def _file(self, values, length=timedelta(seconds=562)):
        return TrackFile(path=Path("/music/so_what.flac"), format=Format.FLAC, tag=DictTag(values, length))

    def test_open_unsupported_extension(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        with pytest.raises(PreconditionError):
            TrackFile.open(path)

    def test_open_detects_format(self, tmp_path):
        with patch("music_reconciler.tags.file.MutagenTag.load", return_value=DictTag({})) as load:
            track_file = TrackFile.open(tmp_path / "song.m4a")
        load.assert_called_once_with(tmp_path / "song.m4a", Format.MP4)
        assert track_file.format is Format.MP4

    def test_accessors(self):
        track_file = self._file({
            "title": ["So What"],
            "album": ["Kind of Blue"],
            "artist": ["Miles Davis"],
            "musicbrainz_artistid": ["art-miles"],
            "albumartist": ["Miles Davis", "John Coltrane"],
        })
        assert track_file.title() == "So What"
        assert track_file.album_title() == "Kind of Blue"
        assert [(a.name, a.mbid) for a in track_file.artists()] == [("Miles Davis", "art-miles")]
        # Identifier count does not line up with names
        assert [(a.name, a.mbid) for a in track_file.album_artists()] == [
            ("Miles Davis", None),
            ("John Coltrane", None),
        ]

    def test_to_track(self):
        track_file = self._file({
            "title": ["So What"],
            "album": ["Kind of Blue"],
            "artist": ["Miles Davis"],
            "tracknumber": ["1/5"],
            "discnumber": ["1"],
            "genre": ["Jazz"],
            "musicbrainz_trackid": ["trk-1"],
            "musicbrainz_albumid": ["rel-1"],
        })
        track = track_file.to_track()

        assert track.title == "So What"
        assert track.mbid == "trk-1"
        assert track.number == 1
        assert track.disc == 1
        assert track.length == timedelta(seconds=562)
        assert track.genres == ["Jazz"]
        assert track.format is Format.FLAC
        assert track.path == Path("/music/so_what.flac")
        assert track.release.title == "Kind of Blue"
        assert track.release.mbid == "rel-1"
        # Album artists fall back to track artists
        assert track.release.artist_names() == ["Miles Davis"]

    def test_to_track_shares_given_release(self):
        first = self._file({"title": ["One"], "album": ["X"]})
        second = self._file({"title": ["Two"], "album": ["X"]})
        release = first.to_release()
        assert first.to_track(release).release is second.to_track(release).release

    def test_write_ids(self):
        track_file = self._file({"title": ["So What"], "musicbrainz_trackid": ["old"]})
        release = Release(title="Kind of Blue", mbid="rel-1")

        track_file.write_ids(Track(title="So What", mbid="trk-1", release=release))

        assert track_file.tag.values["musicbrainz_trackid"] == ["trk-1"]
        assert track_file.tag.values["musicbrainz_albumid"] == ["rel-1"]
        assert track_file.tag.written
        assert track_file.to_track().mbid == "trk-1"

    def test_untagged_file(self):
        track = self._file({}, length=None).to_track()
        assert track.title == "(unknown title)"
        assert track.number is None
        assert track.length is None
        assert track.release.title == "(unknown title)"
