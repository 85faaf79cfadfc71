"""Tests for the MusicBrainz wire schema and its conversion."""

from datetime import date, timedelta

import pytest

from music_reconciler.domain.shared import Shared
from music_reconciler.exceptions import DecodeError, OwnershipError
from music_reconciler.sources.musicbrainz.structures import (
    Release,
    ReleaseSearch,
    Track,
    group_tracks,
    parse_partial_date,
    to_release,
    to_track,
)


class TestFromJson:
    """Test decoding of wire payloads."""

    def test_release_lookup(self, release_json):
        release = Release.from_json(release_json)
        assert release.id == "rel-1"
        assert release.mbid == "rel-1"
        assert release.artist_names() == ["Miles Davis", "John Coltrane"]
        assert release.release_group.primary_type == "Album"
        assert len(release.media) == 2
        assert release.media[1].track_offset == 2
        assert release.media[0].tracks[1].recording.title == "Freddie Freeloader"

    def test_search(self, search_json):
        search = ReleaseSearch.from_json(search_json)
        assert search.count == 2
        assert [r.id for r in search.releases] == ["rel-1", "rel-2"]
        assert search.releases[0].score == 100
        assert search.releases[1].media == []

    def test_missing_required_field(self, release_json):
        del release_json["title"]
        with pytest.raises(DecodeError):
            Release.from_json(release_json)

    def test_missing_nested_required_field(self, release_json):
        del release_json["media"][0]["tracks"][0]["recording"]["id"]
        with pytest.raises(DecodeError):
            Release.from_json(release_json)

    def test_search_not_an_object(self):
        with pytest.raises(DecodeError):
            ReleaseSearch.from_json(["not", "an", "object"])

    def test_optional_fields_tolerated(self):
        release = Release.from_json({"id": "x", "title": "Bare"})
        assert release.artist_credit == []
        assert release.release_group is None
        assert release.track_count is None


@pytest.mark.parametrize(
    "value,expected",
    [
        ("1959", date(1959, 1, 1)),
        ("1959-08", date(1959, 8, 1)),
        ("1959-08-17", date(1959, 8, 17)),
        ("", None),
        (None, None),
        ("unknown", None),
    ],
)
def test_parse_partial_date(value, expected):
    assert parse_partial_date(value) == expected


class TestToRelease:
    """Test conversion of a wire release."""

    def test_fields(self, release_json):
        release = to_release(Release.from_json(release_json))
        assert release.mbid == "rel-1"
        assert release.release_group_mbid == "rg-1"
        assert release.asin == "B000002ADT"
        assert release.title == "Kind of Blue"
        assert release.discs == 2
        assert release.media == "CD + Vinyl"
        assert release.tracks == 3
        assert release.country == "US"
        assert release.label == "Columbia"
        assert release.catalog_no == "CL 1355"
        assert release.status == "Official"
        assert release.release_type == "Album"
        assert release.date == date(1959, 8, 1)
        assert release.original_date == date(1959, 1, 1)
        assert release.script == "Latn"

    def test_artist_credits(self, release_json):
        release = to_release(Release.from_json(release_json))
        first, second = release.artists
        assert first.name == "Miles Davis"
        assert first.mbid == "art-miles"
        assert first.join_phrase == " & "
        assert first.sort_name == "Davis, Miles"
        assert second.name == "John Coltrane"

    def test_track_total_from_media(self, release_json):
        del release_json["track-count"]
        assert to_release(Release.from_json(release_json)).tracks == 3


class TestToTrack:
    """Test conversion of a wire track."""

    def test_detached_track(self, release_json):
        wire = Release.from_json(release_json).media[0].tracks[0]
        track = to_track(wire)
        assert track.mbid == "trk-1"
        assert track.title == "So What"
        assert track.length == timedelta(milliseconds=562000)
        assert track.number == 1
        assert track.abs_number == 1
        assert track.disc is None
        assert track.release is None

    def test_length_falls_back_to_recording(self, release_json):
        wire = Release.from_json(release_json).media[0].tracks[1]
        track = to_track(wire)
        assert track.length == timedelta(milliseconds=586000)
        assert track.title == "Freddie Freeloader"

    def test_attached_medium_sets_disc_and_offset(self, release_json):
        release = Release.from_json(release_json)
        medium = release.media[1]
        wire = medium.tracks[0]
        wire.medium = medium
        track = to_track(wire)
        assert track.disc == 2
        assert track.number == 1
        assert track.abs_number == 3

    def test_track_credits(self, release_json):
        wire = Release.from_json(release_json).media[1].tracks[0]
        track = to_track(wire)
        assert [a.name for a in track.artists] == ["Bill Evans"]

    def test_no_length_anywhere(self):
        wire = Track.from_json({"id": "t", "position": 4, "recording": {"id": "r"}})
        track = to_track(wire)
        assert track.length is None
        assert track.title == "(unknown title)"


class TestGroupTracks:
    """Test flattening of a shared release aggregate."""

    def test_flatten(self, release_json):
        shared = Shared(Release.from_json(release_json))
        release, tracks = group_tracks(shared)

        assert release.title == "Kind of Blue"
        assert [t.mbid for t in tracks] == ["trk-1", "trk-2", "trk-3"]
        assert [t.disc for t in tracks] == [1, 1, 2]
        assert [t.abs_number for t in tracks] == [1, 2, 3]
        assert all(t.release is release for t in tracks)
        assert not shared.alive

    def test_genres(self, release_json):
        _, tracks = group_tracks(Shared(Release.from_json(release_json)))
        assert tracks[0].genres == ["jazz"]
        assert tracks[1].genres == ["hard bop"]

    def test_wire_tracks_are_detached_afterwards(self, release_json):
        wire = Release.from_json(release_json)
        group_tracks(Shared(wire))
        for medium in wire.media:
            for track in medium.tracks:
                assert track.medium is None
                assert track.release is None

    def test_second_holder_blocks_reclaim(self, release_json):
        shared = Shared(Release.from_json(release_json))
        other = shared.share()
        with pytest.raises(OwnershipError):
            group_tracks(shared)
        other.drop()

    def test_medium_without_tracks(self):
        wire = Release.from_json({"id": "x", "title": "Empty", "media": [{"position": 1}]})
        release, tracks = group_tracks(Shared(wire))
        assert tracks == []
        assert release.discs == 1
