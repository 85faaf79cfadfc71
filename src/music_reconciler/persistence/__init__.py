"""Relational persistence for releases, tracks and their artist credits."""

from .database import ARTIST_LINK_TABLES, Database
from .library import Library
from .query import QueryBuilder
from .tables import (
    ARTISTS,
    RELEASES,
    TRACKS,
    ArtistTable,
    ReleaseTable,
    Table,
    TrackTable,
    fetch,
    filter_by,
    link,
    resolve,
    store,
)

__all__ = [
    "ARTIST_LINK_TABLES",
    "Database",
    "Library",
    "QueryBuilder",
    "Table",
    "ArtistTable",
    "ReleaseTable",
    "TrackTable",
    "ARTISTS",
    "RELEASES",
    "TRACKS",
    "fetch",
    "filter_by",
    "link",
    "resolve",
    "store",
]
