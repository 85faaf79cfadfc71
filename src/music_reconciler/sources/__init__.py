"""Remote catalog sources."""

from ..config import CatalogSettings
from .base import ReleaseLike, Source, SourceKind, join_artists
from .musicbrainz import MusicBrainz


def create_source(kind: SourceKind, settings: CatalogSettings) -> Source:
    """Build the source for a backend kind."""
    if kind is SourceKind.MUSICBRAINZ:
        return MusicBrainz.from_settings(settings)
    raise ValueError(f"Unsupported source: {kind}")


__all__ = [
    "ReleaseLike",
    "Source",
    "SourceKind",
    "MusicBrainz",
    "create_source",
    "join_artists",
]
