"""
Core matching layer for facility_matcher.

This package contains the pure scoring, filtering and ranking logic.
Nothing here performs I/O or keeps state between calls.
"""

from __future__ import annotations

from .filtering import FilterResult, filter_raw_inputs
from .models import RawInput, Session
from .similarity import as_percent, levenshtein_distance, similarity_score
from .suggestions import BROWSE_PAGE_SIZE, SUGGESTION_LIMIT, rank_clean_names, suggest_clean_names

__all__ = [
    "BROWSE_PAGE_SIZE",
    "FilterResult",
    "RawInput",
    "SUGGESTION_LIMIT",
    "Session",
    "as_percent",
    "filter_raw_inputs",
    "levenshtein_distance",
    "rank_clean_names",
    "similarity_score",
    "suggest_clean_names",
]
