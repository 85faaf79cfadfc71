"""Catalog source contract.

A source answers two questions about a release-like object: which catalog
releases could it be (:meth:`Source.search`) and what is the full record of
one of them (:meth:`Source.get`).
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional, Protocol, Sequence, Union, runtime_checkable

from ..domain.models import Artist


@runtime_checkable
class ReleaseLike(Protocol):
    """Anything with a title, credited artists and maybe an identifier."""

    title: str

    @property
    def mbid(self) -> Optional[str]:
        ...

    def artist_names(self) -> List[str]:
        ...


class SourceKind(Enum):
    """Known catalog backends."""
    MUSICBRAINZ = "musicbrainz"


class Source(ABC):
    """A remote catalog of releases."""

    kind: SourceKind

    @abstractmethod
    async def search(self, original: ReleaseLike) -> List[ReleaseLike]:
        """Candidate releases for ``original`` in the catalog's relevance order."""
        pass

    @abstractmethod
    async def get(self, release: ReleaseLike) -> ReleaseLike:
        """Full record (media, tracks, labels, credits) of an identified release."""
        pass

    async def close(self) -> None:
        """Release any network resources held by the source."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


def join_artists(artists: Sequence[Union[str, Artist]]) -> str:
    """Artist names as one search term, e.g. ``"A, B"``."""
    return ", ".join(a.name if isinstance(a, Artist) else str(a) for a in artists)
