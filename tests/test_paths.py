"""Tests for library path rendering."""

from pathlib import Path

import pytest

from music_reconciler.config import Settings
from music_reconciler.domain.models import Artist, Release, Track
from music_reconciler.exceptions import ConfigurationError, PreconditionError
from music_reconciler.paths import other_release_paths, release_path, release_paths, track_path
from music_reconciler.tags.format import Format


@pytest.fixture
def library_settings():
    return Settings(library=Path("/music"), database=Path("/music/library.db"))


@pytest.fixture
def release():
    return Release(
        title="Bridge over Troubled Water",
        mbid="rel-1",
        artists=[
            Artist(name="Simon", mbid="a1", join_phrase=" & "),
            Artist(name="Garfunkel", mbid="a2"),
        ],
    )


def test_release_paths_one_per_artist(release, library_settings):
    assert release_paths(release, library_settings) == [
        Path("/music/Simon/Bridge over Troubled Water"),
        Path("/music/Garfunkel/Bridge over Troubled Water"),
    ]
    assert release_path(release, library_settings) == Path("/music/Simon/Bridge over Troubled Water")
    assert other_release_paths(release, library_settings) == [
        Path("/music/Garfunkel/Bridge over Troubled Water"),
    ]


def test_release_without_artists(library_settings):
    path = release_path(Release(title="Untitled"), library_settings)
    assert path == Path("/music/(unknown artist)/Untitled")


def test_values_cannot_create_directories(library_settings):
    release = Release(title="AC/DC: Live?", artists=[Artist(name="AC/DC")])
    assert release_path(release, library_settings) == Path("/music/AC_DC/AC_DC Live")


def test_track_path(release, library_settings):
    track = Track(title="The Boxer", disc=1, number=5, release=release, format=Format.ID3)
    assert track_path(track, library_settings) == Path(
        "/music/Simon/Bridge over Troubled Water/1 - 5 - The Boxer.mp3"
    )


def test_track_path_with_format_spec(release, tmp_path):
    settings = Settings(
        library=tmp_path,
        database=tmp_path / "db",
        release_name="{release.artists} - {release.title}",
        track_name="{track.number:02} {track.title}",
    )
    track = Track(title="Cecilia", disc=1, number=7, release=release, format=Format.FLAC)
    assert track_path(track, settings) == (
        tmp_path / "Simon & Garfunkel - Bridge over Troubled Water" / "07 Cecilia.flac"
    )


@pytest.mark.parametrize(
    "changes",
    [
        {"release": None},
        {"format": None},
        {"disc": None},
        {"number": None},
    ],
)
def test_track_path_requires_fields(release, library_settings, changes):
    fields = dict(title="The Boxer", disc=1, number=5, release=release, format=Format.ID3)
    fields.update(changes)
    with pytest.raises(PreconditionError):
        track_path(Track(**fields), library_settings)


def test_unknown_template_field(release, tmp_path):
    settings = Settings(library=tmp_path, database=tmp_path / "db", release_name="{release.nope}")
    with pytest.raises(ConfigurationError):
        release_path(release, settings)
