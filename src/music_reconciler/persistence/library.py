"""
Library repository.

A thin facade over the generic table operations, bound to one
:class:`~music_reconciler.context.LibraryContext`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, List, Optional

from ..domain.models import Artist, Release, Track
from .tables import ARTISTS, RELEASES, TRACKS, fetch, filter_by, store

if TYPE_CHECKING:
    from ..context import LibraryContext


def _filters(fields: dict) -> List[tuple]:
    return list(fields.items())


def _limit(limit: Optional[int]) -> List[str]:
    return [f"LIMIT {int(limit)}"] if limit is not None else []


class Library:
    """Stored releases, tracks and artists."""

    def __init__(self, ctx: LibraryContext):
        self.ctx = ctx

    async def store_release(self, release: Release) -> None:
        await store(self.ctx, RELEASES, release)

    async def store_track(self, track: Track) -> None:
        await store(self.ctx, TRACKS, track)

    async def store_tracks(self, tracks: Iterable[Track]) -> None:
        """Store tracks one after the other; the first failure stops the rest."""
        for track in tracks:
            await self.store_track(track)

    async def fetch_release(self, mbid: str) -> Release:
        return await fetch(self.ctx, RELEASES, mbid)

    async def fetch_track(self, mbid: str) -> Track:
        return await fetch(self.ctx, TRACKS, mbid)

    async def releases(self, limit: Optional[int] = None, **fields: Any) -> List[Release]:
        """Releases whose columns equal the given keyword values."""
        return await filter_by(self.ctx, RELEASES, _filters(fields), _limit(limit))

    async def tracks(self, limit: Optional[int] = None, **fields: Any) -> List[Track]:
        """Tracks whose columns equal the given keyword values.

        ``release=<mbid>`` lists the tracks of one release in disc and
        position order.
        """
        extra = ["ORDER BY disc, number"] + _limit(limit)
        return await filter_by(self.ctx, TRACKS, _filters(fields), extra)

    async def artists(self, limit: Optional[int] = None, **fields: Any) -> List[Artist]:
        return await filter_by(self.ctx, ARTISTS, _filters(fields), _limit(limit))
