"""Domain Model.

This module defines the core entities handled by the reconciler: artists,
tracks and releases. A Track may point at its owning Release; several Tracks
usually share the same Release instance. A Release never points back at its
Tracks.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import date, timedelta
from pathlib import Path
from typing import List, Optional, Sequence

from ..tags.format import Format

UNKNOWN_ARTIST = "(unknown artist)"
UNKNOWN_TITLE = "(unknown title)"

DEFAULT_JOIN_PHRASE = ", "


@dataclass
class Artist:
    """A credited artist.

    Artists are value-like: the same person is copied into every credit list
    that mentions them and reconciled by ``mbid`` when persisted.
    """

    name: str
    mbid: Optional[str] = None
    join_phrase: Optional[str] = None
    sort_name: Optional[str] = None
    instruments: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return self.name


@dataclass
class Release:
    """A release (album, single, ...) as the catalog describes it."""

    title: str
    mbid: Optional[str] = None
    release_group_mbid: Optional[str] = None
    asin: Optional[str] = None
    artists: List[Artist] = field(default_factory=list)
    discs: Optional[int] = None
    media: Optional[str] = None
    tracks: Optional[int] = None
    country: Optional[str] = None
    label: Optional[str] = None
    catalog_no: Optional[str] = None
    status: Optional[str] = None
    release_type: Optional[str] = None
    date: Optional[date] = None
    original_date: Optional[date] = None
    script: Optional[str] = None

    @property
    def year(self) -> Optional[int]:
        return self.date.year if self.date else None

    @property
    def original_year(self) -> Optional[int]:
        return self.original_date.year if self.original_date else None

    def artist_names(self) -> List[str]:
        return names(self.artists)

    def clone(self) -> Release:
        """Return an independent copy safe to mutate.

        Releases reachable through a Track are shared with every sibling
        Track, so changes must be made on a clone.
        """
        return copy.deepcopy(self)


@dataclass
class Track:
    """A single track, optionally attached to the Release it belongs to."""

    title: str
    mbid: Optional[str] = None
    artists: List[Artist] = field(default_factory=list)
    length: Optional[timedelta] = None
    disc: Optional[int] = None
    disc_mbid: Optional[str] = None
    number: Optional[int] = None
    # Position across all media; derived from the source medium, not stored.
    abs_number: Optional[int] = field(default=None, compare=False)
    genres: List[str] = field(default_factory=list)
    release: Optional[Release] = None

    performers: List[Artist] = field(default_factory=list)
    engineers: List[Artist] = field(default_factory=list)
    mixers: List[Artist] = field(default_factory=list)
    producers: List[Artist] = field(default_factory=list)
    lyricists: List[Artist] = field(default_factory=list)
    writers: List[Artist] = field(default_factory=list)
    composers: List[Artist] = field(default_factory=list)

    format: Optional[Format] = None
    path: Optional[Path] = None

    @property
    def length_seconds(self) -> Optional[int]:
        """Length truncated to whole seconds."""
        if self.length is None:
            return None
        return int(self.length.total_seconds())

    def artist_names(self) -> List[str]:
        return names(self.artists)

    def get_display_name(self) -> str:
        """Get human-readable display name."""
        if self.artists:
            return f"{joined(self.artists)} - {self.title}"
        return self.title or UNKNOWN_TITLE


# Credit list helpers


def names(artists: Sequence[Artist]) -> List[str]:
    """Names of every artist in the credit list."""
    return [a.name for a in artists]


def ids(artists: Sequence[Artist]) -> List[str]:
    """Identifiers of the artists that have one."""
    return [a.mbid for a in artists if a.mbid]


def sort_order(artists: Sequence[Artist]) -> List[str]:
    """Sort names of the artists that have one."""
    return [a.sort_name for a in artists if a.sort_name]


def _join(artists: Sequence[Artist], values: Sequence[str]) -> str:
    parts: List[str] = []
    last = len(values) - 1
    for i, (artist, value) in enumerate(zip(artists, values)):
        parts.append(value)
        if i < last:
            parts.append(artist.join_phrase if artist.join_phrase is not None else DEFAULT_JOIN_PHRASE)
    return "".join(parts)


def joined(artists: Sequence[Artist]) -> str:
    """Render a credit list the way it is printed, e.g. ``"A feat. B"``.

    Each artist's join phrase glues it to the next one. The last artist's
    phrase is never emitted.
    """
    return _join(artists, names(artists))


def sort_order_joined(artists: Sequence[Artist]) -> str:
    """Like :func:`joined`, over the sort names of artists that have one."""
    with_sort = [a for a in artists if a.sort_name]
    return _join(with_sort, [a.sort_name for a in with_sort])


def instruments(artists: Sequence[Artist]) -> List[str]:
    """One entry per instrument annotation, e.g. ``"Miles Davis (trumpet)"``."""
    result: List[str] = []
    for artist in artists:
        if artist.instruments:
            result.extend(f"{artist.name} ({instrument})" for instrument in artist.instruments)
        else:
            result.append(artist.name)
    return result
