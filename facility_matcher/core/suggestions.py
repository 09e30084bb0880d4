from __future__ import annotations

from typing import Iterable, Sequence

from .similarity import similarity_score

SUGGESTION_LIMIT = 20
SUGGESTION_MIN_SCORE = 0.3
# Size of the alphabetical listing shown when no term is active; independent of SUGGESTION_LIMIT.
BROWSE_PAGE_SIZE = 50
SUBSTRING_FLOOR = 0.8


def rank_clean_names(
    clean_names: Iterable[str],
    term: str,
    limit: int = SUGGESTION_LIMIT,
    min_score: float = SUGGESTION_MIN_SCORE,
) -> list[tuple[str, float]]:
    """
    Score clean names against a non-empty term and return the best ``limit``.

    A name containing the term (case-insensitively) scores at least
    ``SUBSTRING_FLOOR``; otherwise its plain similarity is used. Only names
    scoring strictly above ``min_score`` survive. Ties keep input order.
    """
    needle = term.lower()
    scored: list[tuple[str, float]] = []
    for name in clean_names:
        floor = SUBSTRING_FLOOR if needle in name.lower() else 0.0
        score = max(similarity_score(term, name), floor)
        if score > min_score:
            scored.append((name, score))
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return scored[:limit]


def suggest_clean_names(
    clean_names: Sequence[str],
    term: str,
    limit: int = SUGGESTION_LIMIT,
    min_score: float = SUGGESTION_MIN_SCORE,
    browse_limit: int = BROWSE_PAGE_SIZE,
) -> list[str]:
    """Candidate clean names for ``term``; the sorted master list when the term is empty."""
    if not term:
        return sorted(clean_names)[:browse_limit]
    return [name for name, _score in rank_clean_names(clean_names, term, limit, min_score)]
