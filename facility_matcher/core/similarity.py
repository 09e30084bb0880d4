"""
Edit-distance based string similarity.

All functions are pure and total: they accept any pair of strings,
including empty ones, and never raise.
"""

from __future__ import annotations

import math
from typing import List


def levenshtein_distance(a: str, b: str) -> int:
    """
    Minimum number of single-character insertions, deletions and
    substitutions turning ``a`` into ``b``.

    Characters are compared case-insensitively, one source character at a
    time, so the result is measured in characters of the original strings.

    Examples:
        levenshtein_distance("kitten", "sitting") → 3
        levenshtein_distance("ABC", "abc") → 0
    """
    left = [ch.lower() for ch in a]
    right = [ch.lower() for ch in b]
    if not left:
        return len(right)
    if not right:
        return len(left)

    previous: List[int] = list(range(len(right) + 1))
    for i, lch in enumerate(left, start=1):
        current = [i] + [0] * len(right)
        for j, rch in enumerate(right, start=1):
            cost = 0 if lch == rch else 1
            current[j] = min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + cost,
            )
        previous = current
    return previous[-1]


def similarity_score(a: str, b: str) -> float:
    """
    Normalized similarity in ``[0, 1]``: ``1 - distance / max(len(a), len(b))``.

    Two empty strings are identical by definition and score ``1.0``.
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein_distance(a, b) / longest


def as_percent(value: float) -> int:
    """
    Scale a ``[0, 1]`` fraction to a whole percentage, rounding halves up.

    Examples:
        as_percent(0.125) → 13
        as_percent(0.5) → 50
    """
    return math.floor(value * 100 + 0.5)
