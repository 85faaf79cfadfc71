"""
Reconciliation workflow.

Ties a catalog :class:`~music_reconciler.sources.base.Source` to the ranking
engine: search candidates for a local release, fetch each one in full,
flatten it into tracks and keep the alignment with the lowest cost.
"""

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence

from .domain.models import Release, Track
from .domain.shared import Shared
from .ranking.matcher import match_tracks, unmatched
from .sources.base import Source
from .sources.musicbrainz.structures import group_tracks

logger = logging.getLogger(__name__)

DEFAULT_CANDIDATES = 3


@dataclass
class Match:
    """Best candidate release and how the local tracks map onto it."""

    release: Release
    tracks: List[Track]
    cost: int
    assignment: List[int]

    def pairs(self, originals: Sequence[Track]) -> List[tuple]:
        """``(original, candidate or None)`` for every original track.

        Originals without an assigned catalog track pair with ``None``.
        """
        result = []
        for i, original in enumerate(originals):
            index = self.assignment[i] if i < len(self.assignment) else None
            if index is None or index >= len(self.tracks):
                result.append((original, None))
            else:
                result.append((original, self.tracks[index]))
        return result

    def unmatched(self) -> List[int]:
        return unmatched(self.assignment, len(self.tracks))


async def find_match(
    source: Source,
    originals: Sequence[Track],
    release: Release,
    candidates: int = DEFAULT_CANDIDATES,
) -> Optional[Match]:
    """Pick the catalog release whose track list fits ``originals`` best.

    Only the first ``candidates`` search results are fetched in full. Returns
    ``None`` when no candidate has any tracks.
    """
    found = await source.search(release)
    logger.info(f"Found {len(found)} candidates for {release.title!r}")

    best: Optional[Match] = None
    for candidate in found[:candidates]:
        full = await source.get(candidate)
        candidate_release, candidate_tracks = group_tracks(Shared(full))
        if not candidate_tracks:
            logger.debug(f"Skipping candidate {candidate_release.mbid}: no tracks")
            continue
        cost, assignment = match_tracks(originals, candidate_tracks)
        logger.debug(f"Candidate {candidate_release.mbid} costs {cost}")

        if best is None or cost < best.cost:
            best = Match(candidate_release, candidate_tracks, cost, assignment)

    if best is not None:
        logger.info(f"Best candidate {best.release.mbid} with cost {best.cost}")
    return best


def apply_match(originals: Sequence[Track], match: Match) -> List[Track]:
    """Catalog tracks for every matched original, carrying the local file.

    Unmatched originals are left out.
    """
    result: List[Track] = []
    for original, candidate in match.pairs(originals):
        if candidate is None:
            logger.warning(f"No catalog track for {original.get_display_name()}")
            continue
        result.append(replace(candidate, format=original.format, path=original.path))
    return result
