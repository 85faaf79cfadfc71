"""MusicBrainz catalog source."""

from .client import MusicBrainz
from .structures import (
    Release,
    ReleaseSearch,
    group_tracks,
    parse_partial_date,
    to_release,
    to_track,
)

__all__ = [
    "MusicBrainz",
    "Release",
    "ReleaseSearch",
    "group_tracks",
    "parse_partial_date",
    "to_release",
    "to_track",
]
