"""Local audio files seen through their tags."""

import re
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import List, Optional, Union

from ..domain.models import UNKNOWN_TITLE, Artist, Release, Track
from ..exceptions import PreconditionError
from .base import Tag
from .format import Format
from .mutagen_tag import MutagenTag


def _parse_number(value: Optional[str]) -> Optional[int]:
    """Parse ``"3"`` or ``"3/12"`` into ``3``."""
    if not value:
        return None
    match = re.match(r"\s*(\d+)", value)
    return int(match.group(1)) if match else None


def _credits(names: List[str], ids: List[str]) -> List[Artist]:
    # Identifiers are only trusted when they line up one-to-one with names
    if len(ids) != len(names):
        ids = []
    return [
        Artist(name=name, mbid=ids[i] if ids else None)
        for i, name in enumerate(names)
    ]


@dataclass
class TrackFile:
    """An audio file on disk together with its tags."""

    path: Path
    format: Format
    tag: Tag

    @classmethod
    def open(cls, path: Union[str, Path]) -> "TrackFile":
        """Detect the format of ``path`` and load its tags.

        Raises:
            PreconditionError: the extension is not a supported format.
            DecodeError: the file cannot be read.
        """
        path = Path(path)
        format = Format.from_path(path)
        if format is None:
            raise PreconditionError(f"Unsupported audio format: {path}")
        return cls(path=path, format=format, tag=MutagenTag.load(path, format))

    def artists(self) -> List[Artist]:
        return _credits(self.tag.get_all("artist"), self.tag.get_all("musicbrainz_artistid"))

    def album_artists(self) -> List[Artist]:
        return _credits(
            self.tag.get_all("albumartist"), self.tag.get_all("musicbrainz_albumartistid")
        )

    def title(self) -> Optional[str]:
        return self.tag.get_str("title")

    def album_title(self) -> Optional[str]:
        return self.tag.get_str("album")

    @property
    def length(self) -> Optional[timedelta]:
        return self.tag.length

    def to_release(self) -> Release:
        """The release this file claims to belong to."""
        return Release(
            title=self.album_title() or UNKNOWN_TITLE,
            mbid=self.tag.get_str("musicbrainz_albumid"),
            artists=self.album_artists() or self.artists(),
        )

    def to_track(self, release: Optional[Release] = None) -> Track:
        """Build a local :class:`Track` suitable for matching.

        Pass ``release`` to make sibling files share one Release instance.
        """
        return Track(
            title=self.title() or UNKNOWN_TITLE,
            mbid=self.tag.get_str("musicbrainz_trackid"),
            artists=self.artists(),
            length=self.length,
            disc=_parse_number(self.tag.get_str("discnumber")),
            number=_parse_number(self.tag.get_str("tracknumber")),
            genres=self.tag.get_all("genre"),
            release=release if release is not None else self.to_release(),
            format=self.format,
            path=self.path,
        )

    def write_ids(self, track: Track) -> None:
        """Save the catalog identifiers of ``track`` into this file's tags."""
        if track.mbid:
            self.tag.set_str("musicbrainz_trackid", track.mbid)
        if track.release is not None and track.release.mbid:
            self.tag.set_str("musicbrainz_albumid", track.release.mbid)
        self.tag.write()
