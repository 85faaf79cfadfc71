"""String distance utilities for metadata matching.

Only the classic edit distance is needed by the ranking engine; it is kept
here as a pure Python implementation so the matcher has no native
dependency for it.
"""

from __future__ import annotations


def levenshtein_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein distance between two strings.

    Returns the minimum number of single-character edits (insertions,
    deletions, or substitutions) required to change one string into another.

    Args:
        s1: First string
        s2: Second string

    Returns:
        The edit distance as an integer
    """
    if s1 == s2:
        return 0
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)

    if len(s1) < len(s2):
        s1, s2 = s2, s1

    previous = list(range(len(s2) + 1))
    current = [0] * (len(s2) + 1)

    for i, c1 in enumerate(s1):
        current[0] = i + 1
        for j, c2 in enumerate(s2):
            cost = 0 if c1 == c2 else 1
            current[j + 1] = min(current[j] + 1, previous[j + 1] + 1, previous[j] + cost)
        previous, current = current, previous

    return previous[len(s2)]


def levenshtein_similarity(s1: str, s2: str) -> float:
    """Calculate normalized Levenshtein similarity (0.0 to 1.0).

    Returns 1.0 for identical strings and 0.0 for completely different strings.
    """
    if s1 == s2:
        return 1.0
    max_len = max(len(s1), len(s2))
    return 1.0 - (levenshtein_distance(s1, s2) / max_len)


__all__ = [
    "levenshtein_distance",
    "levenshtein_similarity",
]
