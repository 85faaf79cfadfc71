"""
MusicBrainz wire schema and its conversion into the domain model.

This module mirrors the JSON the web service returns for release searches
and release lookups (release -> media -> tracks -> recording) and isolates
the rest of the project from it: everything leaving this module is a
domain :class:`~music_reconciler.domain.models.Release` or
:class:`~music_reconciler.domain.models.Track`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

from ... import domain
from ...domain.shared import Shared
from ...exceptions import DecodeError

logger = logging.getLogger(__name__)

MEDIA_SEPARATOR = " + "


def _require(data: Dict[str, Any], key: str, kind: str) -> Any:
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a JSON object for {kind}, got {type(data).__name__}")
    value = data.get(key)
    if value is None:
        raise DecodeError(f"Missing required field {key!r} in {kind}")
    return value


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _list(data: Dict[str, Any], key: str) -> List[Any]:
    value = data.get(key)
    return value if isinstance(value, list) else []


def parse_partial_date(value: Optional[str]) -> Optional[date]:
    """Parse ``YYYY``, ``YYYY-MM`` or ``YYYY-MM-DD``; missing parts become 1."""
    if not value:
        return None
    parts = value.strip().split("-")
    try:
        numbers = [int(p) for p in parts[:3]]
        while len(numbers) < 3:
            numbers.append(1)
        return date(numbers[0], numbers[1], numbers[2])
    except ValueError:
        logger.debug(f"Ignoring unparsable date {value!r}")
        return None


@dataclass
class Artist:
    id: str
    name: str
    sort_name: Optional[str] = None
    disambiguation: Optional[str] = None
    type_field: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> Artist:
        return cls(
            id=_require(data, "id", "artist"),
            name=_require(data, "name", "artist"),
            sort_name=data.get("sort-name"),
            disambiguation=data.get("disambiguation") or None,
            type_field=data.get("type"),
        )


@dataclass
class ArtistCredit:
    name: str
    artist: Artist
    joinphrase: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> ArtistCredit:
        artist = Artist.from_json(_require(data, "artist", "artist credit"))
        return cls(
            name=data.get("name") or artist.name,
            artist=artist,
            joinphrase=data.get("joinphrase"),
        )

    def to_artist(self) -> domain.Artist:
        return domain.Artist(
            mbid=self.artist.id,
            name=self.name,
            join_phrase=self.joinphrase,
            sort_name=self.artist.sort_name,
        )


@dataclass
class Tag:
    name: str
    count: int = 0

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> Tag:
        return cls(name=_require(data, "name", "tag"), count=_optional_int(data.get("count")) or 0)


@dataclass
class Label:
    id: Optional[str]
    name: str

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> Label:
        return cls(id=data.get("id"), name=_require(data, "name", "label"))


@dataclass
class LabelInfo:
    catalog_number: Optional[str] = None
    label: Optional[Label] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> LabelInfo:
        label = data.get("label")
        return cls(
            catalog_number=data.get("catalog-number"),
            label=Label.from_json(label) if label else None,
        )


@dataclass
class ReleaseGroup:
    id: str
    title: Optional[str] = None
    primary_type: Optional[str] = None
    first_release_date: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> ReleaseGroup:
        return cls(
            id=_require(data, "id", "release group"),
            title=data.get("title"),
            primary_type=data.get("primary-type"),
            first_release_date=data.get("first-release-date"),
        )


@dataclass
class TextRepresentation:
    language: Optional[str] = None
    script: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> TextRepresentation:
        return cls(language=data.get("language"), script=data.get("script"))


@dataclass
class Recording:
    id: str
    title: Optional[str] = None
    length: Optional[int] = None
    disambiguation: Optional[str] = None
    first_release_date: Optional[str] = None
    tags: List[Tag] = field(default_factory=list)
    artist_credit: List[ArtistCredit] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> Recording:
        return cls(
            id=_require(data, "id", "recording"),
            title=data.get("title"),
            length=_optional_int(data.get("length")),
            disambiguation=data.get("disambiguation") or None,
            first_release_date=data.get("first-release-date"),
            tags=[Tag.from_json(t) for t in _list(data, "tags")],
            artist_credit=[ArtistCredit.from_json(a) for a in _list(data, "artist-credit")],
        )


@dataclass
class Track:
    id: str
    position: int
    recording: Recording
    title: str = ""
    number: Optional[str] = None
    length: Optional[int] = None
    artist_credit: List[ArtistCredit] = field(default_factory=list)

    # Attached while flattening a release; never part of the wire payload.
    medium: Optional[Medium] = field(default=None, repr=False, compare=False)
    release: Optional[Shared[Release]] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> Track:
        position = _optional_int(_require(data, "position", "track"))
        if position is None:
            raise DecodeError(f"Track position is not a number: {data.get('position')!r}")
        return cls(
            id=_require(data, "id", "track"),
            position=position,
            recording=Recording.from_json(_require(data, "recording", "track")),
            title=data.get("title") or "",
            number=data.get("number"),
            length=_optional_int(data.get("length")),
            artist_credit=[ArtistCredit.from_json(a) for a in _list(data, "artist-credit")],
        )


@dataclass
class Medium:
    position: Optional[int] = None
    format: Optional[str] = None
    track_offset: Optional[int] = None
    track_count: Optional[int] = None
    tracks: Optional[List[Track]] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> Medium:
        tracks = data.get("tracks")
        return cls(
            position=_optional_int(data.get("position")),
            format=data.get("format"),
            track_offset=_optional_int(data.get("track-offset")),
            track_count=_optional_int(data.get("track-count")),
            tracks=[Track.from_json(t) for t in tracks] if isinstance(tracks, list) else None,
        )


@dataclass
class Release:
    """A release as returned by ``/release`` searches and lookups."""

    id: str
    title: str
    artist_credit: List[ArtistCredit] = field(default_factory=list)
    status: Optional[str] = None
    asin: Optional[str] = None
    barcode: Optional[str] = None
    date: Optional[str] = None
    country: Optional[str] = None
    disambiguation: Optional[str] = None
    release_group: Optional[ReleaseGroup] = None
    label_info: List[LabelInfo] = field(default_factory=list)
    media: List[Medium] = field(default_factory=list)
    text_representation: Optional[TextRepresentation] = None
    tags: List[Tag] = field(default_factory=list)
    track_count: Optional[int] = None
    score: Optional[int] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> Release:
        release_group = data.get("release-group")
        text_representation = data.get("text-representation")
        return cls(
            id=_require(data, "id", "release"),
            title=_require(data, "title", "release"),
            artist_credit=[ArtistCredit.from_json(a) for a in _list(data, "artist-credit")],
            status=data.get("status"),
            asin=data.get("asin"),
            barcode=data.get("barcode"),
            date=data.get("date"),
            country=data.get("country"),
            disambiguation=data.get("disambiguation") or None,
            release_group=ReleaseGroup.from_json(release_group) if release_group else None,
            label_info=[LabelInfo.from_json(li) for li in _list(data, "label-info")],
            media=[Medium.from_json(m) for m in _list(data, "media")],
            text_representation=(
                TextRepresentation.from_json(text_representation) if text_representation else None
            ),
            tags=[Tag.from_json(t) for t in _list(data, "tags")],
            track_count=_optional_int(data.get("track-count")),
            score=_optional_int(data.get("score")),
        )

    # ReleaseLike

    @property
    def mbid(self) -> Optional[str]:
        return self.id

    def artist_names(self) -> List[str]:
        return [credit.name for credit in self.artist_credit]


@dataclass
class ReleaseSearch:
    created: Optional[str] = None
    count: int = 0
    offset: int = 0
    releases: List[Release] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> ReleaseSearch:
        if not isinstance(data, dict):
            raise DecodeError(f"Expected a JSON object for release search, got {type(data).__name__}")
        return cls(
            created=data.get("created"),
            count=_optional_int(data.get("count")) or 0,
            offset=_optional_int(data.get("offset")) or 0,
            releases=[Release.from_json(r) for r in _list(data, "releases")],
        )


# Conversion into the domain model


def _media_description(media: List[Medium]) -> Optional[str]:
    formats: List[str] = []
    for medium in media:
        if medium.format and medium.format not in formats:
            formats.append(medium.format)
    return MEDIA_SEPARATOR.join(formats) if formats else None


def _track_total(release: Release) -> Optional[int]:
    if release.track_count is not None:
        return release.track_count
    counts = [
        m.track_count if m.track_count is not None else len(m.tracks or [])
        for m in release.media
    ]
    return sum(counts) if counts else None


def to_release(release: Release) -> domain.Release:
    """Convert a wire release into a flat domain Release."""
    label = next((li for li in release.label_info if li.label or li.catalog_number), None)
    group = release.release_group
    return domain.Release(
        mbid=release.id,
        release_group_mbid=group.id if group else None,
        asin=release.asin,
        title=release.title,
        artists=[credit.to_artist() for credit in release.artist_credit],
        discs=len(release.media) if release.media else None,
        media=_media_description(release.media),
        tracks=_track_total(release),
        country=release.country,
        label=label.label.name if label and label.label else None,
        catalog_no=label.catalog_number if label else None,
        status=release.status,
        release_type=group.primary_type if group else None,
        date=parse_partial_date(release.date),
        original_date=parse_partial_date(group.first_release_date) if group else None,
        script=release.text_representation.script if release.text_representation else None,
    )


def to_track(track: Track, release: Optional[domain.Release] = None) -> domain.Track:
    """Convert a wire track into a domain Track.

    ``disc`` and ``abs_number`` come from the medium attached to the track,
    so the track must be attached before conversion for them to be set.
    """
    length_ms = track.length if track.length is not None else track.recording.length
    offset = (track.medium.track_offset or 0) if track.medium else 0
    tags = track.recording.tags
    if not tags and track.release is not None:
        tags = track.release.value.tags
    credits = track.artist_credit or track.recording.artist_credit
    return domain.Track(
        mbid=track.id,
        title=track.title or track.recording.title or domain.UNKNOWN_TITLE,
        artists=[credit.to_artist() for credit in credits],
        length=timedelta(milliseconds=length_ms) if length_ms is not None else None,
        disc=track.medium.position if track.medium else None,
        number=track.position,
        abs_number=offset + track.position,
        genres=[tag.name for tag in tags],
        release=release,
    )


def group_tracks(shared: Shared[Release]) -> Tuple[domain.Release, List[domain.Track]]:
    """Flatten a shared release aggregate into a Release and its Tracks.

    The aggregate is consumed: every track is attached to its medium and to
    a share of the release, converted, and detached again; finally the
    aggregate itself is reclaimed. All returned Tracks point at the returned
    Release instance.

    Raises:
        OwnershipError: If anything else still holds the aggregate.
    """
    wire = shared.value
    release = to_release(wire)
    tracks: List[domain.Track] = []
    for medium in wire.media:
        for track in medium.tracks or []:
            track.medium = medium
            track.release = shared.share()
            try:
                tracks.append(to_track(track, release))
            finally:
                track.release.drop()
                track.release = None
                track.medium = None
    shared.take()
    logger.debug(f"Flattened release {wire.id} into {len(tracks)} tracks")
    return release, tracks
