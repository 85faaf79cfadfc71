"""Track list alignment.

Scores every (original, candidate) track pair with a weighted distance and
solves the minimum-cost assignment between the two lists. Missing metadata
is never penalized: an attribute only contributes when both sides have it.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

import numpy as np
from scipy.optimize import linear_sum_assignment

from ..domain.models import Release, Track
from .distance import levenshtein_distance

logger = logging.getLogger(__name__)

TRACK_TITLE_FACTOR = 1000
RELEASE_TITLE_FACTOR = 10000
RELEASE_TRACKS_FACTOR = 100

V = TypeVar("V")


def _if_both(a: Optional[V], b: Optional[V], then: Callable[[V, V], int]) -> int:
    if a is None or b is None:
        return 0
    return then(a, b)


def _str_distance(a: Optional[str], b: Optional[str]) -> int:
    return _if_both(a, b, levenshtein_distance)


def _int_distance(a: Optional[int], b: Optional[int]) -> int:
    return _if_both(a, b, lambda x, y: abs(x - y))


def _seconds_distance(a: Optional[timedelta], b: Optional[timedelta]) -> int:
    return _if_both(a, b, lambda x, y: abs(int(x.total_seconds()) - int(y.total_seconds())))


def _days_distance(a: Optional[date], b: Optional[date]) -> int:
    return _if_both(a, b, lambda x, y: abs((x - y).days))


def release_distance(original: Release, candidate: Release) -> int:
    """Distance between two releases; 0 means no disagreement."""
    return (
        levenshtein_distance(original.title, candidate.title) * RELEASE_TITLE_FACTOR
        + _str_distance(original.mbid, candidate.mbid)
        + _str_distance(original.asin, candidate.asin)
        + _int_distance(original.discs, candidate.discs)
        + _str_distance(original.media, candidate.media)
        + _int_distance(original.tracks, candidate.tracks) * RELEASE_TRACKS_FACTOR
        + _str_distance(original.country, candidate.country)
        + _str_distance(original.status, candidate.status)
        + _days_distance(original.date, candidate.date)
        + _days_distance(original.original_date, candidate.original_date)
        + _str_distance(original.script, candidate.script)
    )


def track_distance(original: Track, candidate: Track) -> int:
    """Distance between two tracks, including their owning releases."""
    distance = (
        levenshtein_distance(original.title, candidate.title) * TRACK_TITLE_FACTOR
        + _seconds_distance(original.length, candidate.length)
        + _str_distance(original.mbid, candidate.mbid)
        + _int_distance(original.disc, candidate.disc)
        + _str_distance(original.disc_mbid, candidate.disc_mbid)
        + _int_distance(original.number, candidate.number)
    )
    if original.release is not None and candidate.release is not None:
        distance += release_distance(original.release, candidate.release)
    return distance


def cost_matrix(original: Sequence[Track], candidate: Sequence[Track]) -> np.ndarray:
    """Build the rows=original x columns=candidate distance matrix."""
    matrix = np.zeros((len(original), len(candidate)), dtype=np.int64)
    for i, original_track in enumerate(original):
        for j, candidate_track in enumerate(candidate):
            matrix[i, j] = track_distance(original_track, candidate_track)
            logger.debug(
                "Rated track compatibility %d: %r -- %r",
                matrix[i, j], original_track.title, candidate_track.title
            )
    return matrix


def match_tracks(original: Sequence[Track], candidate: Sequence[Track]) -> Tuple[int, List[int]]:
    """Align ``candidate`` against ``original``.

    Returns ``(total_cost, assignment)`` where ``assignment[i]`` is the
    candidate index paired with ``original[i]``. When there are more
    originals than candidates the matrix is padded with dummy columns, each
    costing one more than the worst real pair; an index ``>= len(candidate)``
    therefore means "no candidate matched" and the dummy cost is included
    in ``total_cost``.
    """
    rows, columns = len(original), len(candidate)
    if rows == 0 or columns == 0:
        return 0, []

    matrix = cost_matrix(original, candidate)
    logger.debug("Assignment matrix is %dx%d", rows, columns)

    if rows > columns:
        dummy = int(matrix.max()) + 1
        padding = np.full((rows, rows - columns), dummy, dtype=np.int64)
        matrix = np.hstack([matrix, padding])

    row_index, col_index = linear_sum_assignment(matrix)
    assignment = [0] * rows
    for r, c in zip(row_index, col_index):
        assignment[int(r)] = int(c)
    total = int(matrix[row_index, col_index].sum())
    return total, assignment


def unmatched(assignment: Sequence[int], candidates: int) -> List[int]:
    """Indices of originals that were paired with a dummy column."""
    return [i for i, c in enumerate(assignment) if c >= candidates]


__all__ = [
    "TRACK_TITLE_FACTOR",
    "RELEASE_TITLE_FACTOR",
    "RELEASE_TRACKS_FACTOR",
    "release_distance",
    "track_distance",
    "cost_matrix",
    "match_tracks",
    "unmatched",
]
