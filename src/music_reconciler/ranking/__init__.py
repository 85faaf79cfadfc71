"""Candidate ranking: distances and track list alignment."""

from .distance import levenshtein_distance, levenshtein_similarity
from .matcher import (
    cost_matrix,
    match_tracks,
    release_distance,
    track_distance,
    unmatched,
)

__all__ = [
    "levenshtein_distance",
    "levenshtein_similarity",
    "cost_matrix",
    "match_tracks",
    "release_distance",
    "track_distance",
    "unmatched",
]
