"""Shared fixtures for music reconciler tests."""

import copy
from datetime import timedelta
from pathlib import Path
from typing import Dict, List

import pytest

from music_reconciler.config import Settings
from music_reconciler.domain.models import Artist, Release, Track
from music_reconciler.tags.base import Tag


class MockAsyncContextManager:
    """Helper class for mocking async context managers."""
    def __init__(self, return_value):
        self.return_value = return_value

    async def __aenter__(self):
        return self.return_value

    async def __aexit__(self, *args):
        pass


class DictTag(Tag):
    """In-memory tag store."""

    def __init__(self, values: Dict[str, List[str]], length=None):
        self.values = values
        self._length = length
        self.written = False

    def get_all(self, key: str) -> List[str]:
        return list(self.values.get(key, []))

    def set_str(self, key: str, value: str) -> None:
        self.values[key] = [value]

    def write(self) -> None:
        self.written = True

    @property
    def length(self):
        return self._length


RELEASE_JSON = {
    "id": "rel-1",
    "title": "Kind of Blue",
    "status": "Official",
    "asin": "B000002ADT",
    "date": "1959-08",
    "country": "US",
    "track-count": 3,
    "artist-credit": [
        {
            "name": "Miles Davis",
            "joinphrase": " & ",
            "artist": {"id": "art-miles", "name": "Miles Davis", "sort-name": "Davis, Miles"},
        },
        {
            "name": "John Coltrane",
            "joinphrase": "",
            "artist": {"id": "art-trane", "name": "John Coltrane", "sort-name": "Coltrane, John"},
        },
    ],
    "release-group": {
        "id": "rg-1",
        "title": "Kind of Blue",
        "primary-type": "Album",
        "first-release-date": "1959",
    },
    "label-info": [
        {"catalog-number": "CL 1355", "label": {"id": "lbl-1", "name": "Columbia"}},
    ],
    "text-representation": {"language": "eng", "script": "Latn"},
    "tags": [{"name": "jazz", "count": 5}],
    "media": [
        {
            "position": 1,
            "format": "CD",
            "track-offset": 0,
            "track-count": 2,
            "tracks": [
                {
                    "id": "trk-1",
                    "position": 1,
                    "number": "1",
                    "title": "So What",
                    "length": 562000,
                    "recording": {"id": "rec-1", "title": "So What", "length": 561000},
                },
                {
                    "id": "trk-2",
                    "position": 2,
                    "number": "2",
                    "title": "",
                    "recording": {
                        "id": "rec-2",
                        "title": "Freddie Freeloader",
                        "length": 586000,
                        "tags": [{"name": "hard bop", "count": 1}],
                    },
                },
            ],
        },
        {
            "position": 2,
            "format": "Vinyl",
            "track-offset": 2,
            "track-count": 1,
            "tracks": [
                {
                    "id": "trk-3",
                    "position": 1,
                    "number": "A1",
                    "title": "Blue in Green",
                    "length": 337000,
                    "recording": {"id": "rec-3", "title": "Blue in Green"},
                    "artist-credit": [
                        {
                            "name": "Bill Evans",
                            "artist": {"id": "art-bill", "name": "Bill Evans", "sort-name": "Evans, Bill"},
                        }
                    ],
                },
            ],
        },
    ],
}

SEARCH_JSON = {
    "created": "2024-01-01T00:00:00.000Z",
    "count": 2,
    "offset": 0,
    "releases": [
        {
            "id": "rel-1",
            "score": 100,
            "title": "Kind of Blue",
            "country": "US",
            "date": "1959-08-17",
            "track-count": 5,
            "artist-credit": [
                {"name": "Miles Davis", "artist": {"id": "art-miles", "name": "Miles Davis"}},
            ],
        },
        {
            "id": "rel-2",
            "score": 87,
            "title": "Kind of Blue (Legacy Edition)",
            "artist-credit": [
                {"name": "Miles Davis", "artist": {"id": "art-miles", "name": "Miles Davis"}},
            ],
        },
    ],
}


@pytest.fixture
def release_json():
    """A full release lookup payload."""
    return copy.deepcopy(RELEASE_JSON)


@pytest.fixture
def search_json():
    """A release search payload."""
    return copy.deepcopy(SEARCH_JSON)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway library."""
    return Settings(library=tmp_path / "Music", database=tmp_path / "library.db")


@pytest.fixture
def sample_release() -> Release:
    return Release(
        title="Kind of Blue",
        mbid="rel-1",
        artists=[
            Artist(name="Miles Davis", mbid="art-miles", join_phrase=" & ", sort_name="Davis, Miles"),
            Artist(name="John Coltrane", mbid="art-trane", sort_name="Coltrane, John"),
        ],
        discs=1,
        tracks=2,
        country="US",
    )


def make_track(title: str, number: int, seconds: int = 300, release: Release = None, **kwargs) -> Track:
    """Build a track with the fields the matcher looks at."""
    return Track(
        title=title,
        number=number,
        disc=kwargs.pop("disc", 1),
        length=timedelta(seconds=seconds),
        release=release,
        **kwargs,
    )
