"""Where releases and tracks live inside the library.

Paths come from the ``release_name`` and ``track_name`` templates of
:class:`~music_reconciler.config.Settings`. Templates use ``str.format``
attribute syntax, e.g. ``"{release.artist}/{release.title}"`` or
``"{track.disc} - {track.number:02} - {track.title}"``.
"""

from pathlib import Path
from types import SimpleNamespace
from typing import List

from .config import Settings
from .domain.models import UNKNOWN_ARTIST, Release, Track, joined
from .exceptions import ConfigurationError, PreconditionError

_INVALID_CHARS = '<>:"|?*'


def _clean_path_component(component: str) -> str:
    """Clean up a value before it is placed in a path."""
    for char in _INVALID_CHARS:
        component = component.replace(char, "")
    # Values never introduce directories on their own
    component = component.replace("/", "_")
    return component.strip().rstrip(".")


def _render(template: str, **values) -> str:
    try:
        return template.format(**values)
    except (AttributeError, KeyError, IndexError, ValueError) as e:
        raise ConfigurationError(f"Invalid path template {template!r}: {e}") from e


def _release_view(release: Release, artist: str) -> SimpleNamespace:
    return SimpleNamespace(
        artist=_clean_path_component(artist),
        artists=_clean_path_component(joined(release.artists) or UNKNOWN_ARTIST),
        title=_clean_path_component(release.title),
        year=release.year or "",
        original_year=release.original_year or "",
        media=_clean_path_component(release.media or ""),
        country=release.country or "",
        label=_clean_path_component(release.label or ""),
        catalog_no=_clean_path_component(release.catalog_no or ""),
        release_type=release.release_type or "",
        mbid=release.mbid or "",
    )


def release_paths(release: Release, settings: Settings) -> List[Path]:
    """One directory per credited release artist, first artist first."""
    artists = [a.name for a in release.artists] or [UNKNOWN_ARTIST]
    return [
        settings.library / _render(settings.release_name, release=_release_view(release, artist))
        for artist in artists
    ]


def release_path(release: Release, settings: Settings) -> Path:
    """The directory that holds the release's files."""
    return release_paths(release, settings)[0]


def other_release_paths(release: Release, settings: Settings) -> List[Path]:
    """Directories of the remaining release artists, usually symlinked."""
    return release_paths(release, settings)[1:]


def track_path(track: Track, settings: Settings) -> Path:
    """Full destination path of a track file, extension included.

    Raises:
        PreconditionError: the track has no release, format, disc or number.
    """
    if track.release is None:
        raise PreconditionError(f"Track {track.title!r} has no release")
    if track.format is None:
        raise PreconditionError(f"Track {track.title!r} has no format")
    if track.disc is None or track.number is None:
        raise PreconditionError(f"Track {track.title!r} has no disc or track number")

    view = SimpleNamespace(
        title=_clean_path_component(track.title),
        artist=_clean_path_component(joined(track.artists) or UNKNOWN_ARTIST),
        disc=track.disc,
        number=track.number,
        mbid=track.mbid or "",
    )
    name = _render(
        settings.track_name,
        track=view,
        release=_release_view(track.release, (track.release.artist_names() or [UNKNOWN_ARTIST])[0]),
    )
    return release_path(track.release, settings) / f"{name}.{track.format.ext}"
