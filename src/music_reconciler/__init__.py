"""Music Reconciler

Matches local music files against the MusicBrainz catalog and keeps the
reconciled metadata in a SQLite library.
"""

__version__ = "0.1.0"

from .config import CatalogSettings, Settings, load_settings, save_settings
from .context import LibraryContext, open_context
from .domain import Artist, Release, Shared, Track
from .exceptions import (
    AmbiguousError,
    CatalogError,
    ConfigurationError,
    DecodeError,
    MusicReconcilerError,
    NetworkError,
    NotFoundError,
    OwnershipError,
    PreconditionError,
    RecordLookupError,
)
from .paths import release_path, release_paths, track_path
from .persistence import Database, Library
from .ranking import match_tracks
from .reconcile import Match, apply_match, find_match
from .sources import MusicBrainz, Source, SourceKind, create_source

__all__ = [
    "__version__",
    # Configuration
    "CatalogSettings",
    "Settings",
    "load_settings",
    "save_settings",
    "LibraryContext",
    "open_context",
    # Domain
    "Artist",
    "Release",
    "Track",
    "Shared",
    # Errors
    "MusicReconcilerError",
    "NetworkError",
    "CatalogError",
    "DecodeError",
    "PreconditionError",
    "OwnershipError",
    "ConfigurationError",
    "RecordLookupError",
    "NotFoundError",
    "AmbiguousError",
    # Services
    "Database",
    "Library",
    "release_path",
    "release_paths",
    "track_path",
    "match_tracks",
    "Match",
    "find_match",
    "apply_match",
    "MusicBrainz",
    "Source",
    "SourceKind",
    "create_source",
]
