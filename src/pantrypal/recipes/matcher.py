"""Pantry-to-recipe matching, ranking and source merging.

Matching is a deliberately loose heuristic: an ingredient counts as available
when a pantry name is a substring of it or it is a substring of a pantry name,
after lower-casing both sides. "tomato" therefore matches "cherry tomatoes",
and "egg" matches "eggplant".
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable, Iterable, List, Optional, Sequence, Union

from pydantic import ValidationError

from pantrypal.models.recipes import Ingredient, MatchResult, Recipe

logger = logging.getLogger(__name__)

DEFAULT_RESULT_LIMIT = 12

RecipeSourceInput = Union[Sequence[Recipe], Callable[[], Sequence[Recipe]]]


def normalize_pantry_names(pantry_names: Iterable[str]) -> List[str]:
    """Lower-case pantry names, dropping blanks (which would match everything)."""

    return [name.lower() for name in pantry_names if isinstance(name, str) and name.strip()]


def is_in_pantry(ingredient_name: str, normalized_pantry: Sequence[str]) -> bool:
    ingredient = ingredient_name.lower()
    return any(
        pantry_name in ingredient or ingredient in pantry_name
        for pantry_name in normalized_pantry
    )


def _coerce_recipe(entry: Any) -> Optional[Recipe]:
    if isinstance(entry, Recipe):
        return entry
    if isinstance(entry, Mapping):
        try:
            return Recipe.model_validate(entry)
        except ValidationError as exc:
            logger.warning("Skipping malformed recipe id=%s: %s", entry.get("id"), exc.errors())
            return None
    logger.warning("Skipping unsupported recipe entry of type %s", type(entry).__name__)
    return None


def match_recipe(recipe: Recipe, normalized_pantry: Sequence[str]) -> MatchResult:
    """Partition one recipe's ingredients against already-normalized pantry names."""

    used: List[Ingredient] = []
    missed: List[Ingredient] = []
    for ingredient in recipe.ingredients:
        if is_in_pantry(ingredient.name, normalized_pantry):
            used.append(ingredient)
        else:
            missed.append(ingredient)

    payload = dict(recipe)
    payload.update(
        used_ingredients=used,
        missed_ingredients=missed,
        used_ingredient_count=len(used),
        missed_ingredient_count=len(missed),
    )
    return MatchResult(**payload)


def match_recipes(
    recipes: Iterable[Union[Recipe, Mapping[str, Any]]],
    pantry_names: Iterable[str],
) -> List[MatchResult]:
    """Annotate each recipe with the ingredients present in and missing from the pantry."""

    normalized = normalize_pantry_names(pantry_names)
    results: List[MatchResult] = []
    for entry in recipes:
        recipe = _coerce_recipe(entry)
        if recipe is None:
            continue
        results.append(match_recipe(recipe, normalized))
    return results


def rank_results(results: Iterable[MatchResult]) -> List[MatchResult]:
    """Order results by used ingredient count, highest first, keeping input order on ties."""

    return sorted(results, key=lambda result: -result.used_ingredient_count)


def _resolve_source(source: RecipeSourceInput, index: int) -> Sequence[Recipe]:
    if not callable(source):
        return source
    try:
        return source() or []
    except Exception as exc:
        name = getattr(source, "__name__", None) or type(source).__name__
        logger.warning("Recipe source #%s (%s) failed; skipping: %s", index, name, exc)
        return []


def merge_sources(
    sources: Sequence[RecipeSourceInput],
    *,
    limit: Optional[int] = DEFAULT_RESULT_LIMIT,
) -> List[Recipe]:
    """Concatenate recipe sources in priority order, dropping repeated ids.

    Each source is either a sequence of recipes or a zero-argument callable
    returning one; a callable that raises contributes nothing. The first
    occurrence of an id wins, and ``limit`` caps the merged list (``None``
    disables the cap).
    """

    if limit is not None and limit <= 0:
        return []

    merged: List[Recipe] = []
    seen: set[str] = set()
    for index, source in enumerate(sources):
        for recipe in _resolve_source(source, index):
            key = str(recipe.id)
            if key in seen:
                continue
            seen.add(key)
            merged.append(recipe)
            if limit is not None and len(merged) >= limit:
                return merged
    return merged


__all__ = [
    "DEFAULT_RESULT_LIMIT",
    "is_in_pantry",
    "match_recipe",
    "match_recipes",
    "merge_sources",
    "normalize_pantry_names",
    "rank_results",
]
