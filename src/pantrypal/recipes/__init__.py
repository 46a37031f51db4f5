"""Recipe matching, ranking and provider integrations."""

from __future__ import annotations

from .matcher import match_recipes, merge_sources, rank_results
from .suggestions import EMPTY_PANTRY_MESSAGE, SuggestionService

__all__ = [
    "EMPTY_PANTRY_MESSAGE",
    "SuggestionService",
    "match_recipes",
    "merge_sources",
    "rank_results",
]
