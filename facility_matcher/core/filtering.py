"""
Selection and ranking of raw inputs against a search term.

A raw input is kept when the term occurs in it (a keyword match) or when
its similarity to the term reaches the threshold. The function is
stateless: callers re-run it whenever the term or threshold settles.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .models import RawInput
from .similarity import similarity_score

DEFAULT_THRESHOLD = 0.65


@dataclass(frozen=True, slots=True)
class FilterResult:
    raw_input: RawInput
    score: Optional[float]
    """Similarity to the term, or None when no term was given"""

    is_keyword_match: bool = False

    @property
    def id(self) -> int:
        return self.raw_input.id

    @property
    def text(self) -> str:
        return self.raw_input.text

    @property
    def show_score(self) -> bool:
        """Whether the score is worth displaying (fuzzy-only hits)."""
        return self.score is not None and not self.is_keyword_match


def filter_raw_inputs(
    raw_inputs: Sequence[RawInput],
    term: str,
    threshold: float = DEFAULT_THRESHOLD,
) -> list[FilterResult]:
    """
    Return the raw inputs visible for ``term``, best score first.

    With an empty term every input is returned in its original order and
    nothing is scored. Otherwise each input is scored, kept when it is a
    keyword match or ``score >= threshold``, and sorted descending by score.
    The sort is stable so equal scores keep their import order.

    Raises:
        ValueError: if ``threshold`` lies outside ``[0, 1]``
    """
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"threshold must be within [0, 1], got {threshold!r}")
    if not term:
        return [FilterResult(raw_input=item, score=None) for item in raw_inputs]

    needle = term.lower()
    results: list[FilterResult] = []
    for item in raw_inputs:
        is_keyword_match = needle in item.text.lower()
        # Scored even for keyword matches; callers display it either way.
        score = similarity_score(term, item.text)
        if is_keyword_match or score >= threshold:
            results.append(FilterResult(raw_input=item, score=score, is_keyword_match=is_keyword_match))
    results.sort(key=lambda result: result.score, reverse=True)
    return results
