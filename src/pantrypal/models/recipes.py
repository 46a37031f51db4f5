"""Recipe and match result models."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

RecipeSource = Literal["spoonacular", "mealdb", "catalog"]
RecipeId = Union[int, str]


class Ingredient(BaseModel):
    """Ingredient entry referenced by a recipe."""

    name: str

    model_config = ConfigDict(frozen=True)


class ExtendedIngredient(BaseModel):
    """Human readable ingredient line including the measure."""

    original: str

    model_config = ConfigDict(frozen=True)


def _coerce_ingredient(entry: Any) -> Optional[Any]:
    if isinstance(entry, Ingredient):
        return entry
    if isinstance(entry, str):
        return {"name": entry} if entry.strip() else None
    if isinstance(entry, Mapping):
        name = entry.get("name")
        if isinstance(name, str) and name.strip():
            return {"name": name}
    return None


class Recipe(BaseModel):
    """Recipe from the static catalog or an external provider."""

    id: RecipeId
    title: str
    source: RecipeSource = "catalog"
    ingredients: list[Ingredient] = Field(default_factory=list)
    image: Optional[str] = None
    ready_in_minutes: Optional[int] = Field(default=None, alias="readyInMinutes")
    servings: Optional[int] = None
    instructions: Optional[str] = None
    extended_ingredients: list[ExtendedIngredient] = Field(
        default_factory=list, alias="extendedIngredients"
    )
    source_url: Optional[str] = Field(default=None, alias="sourceUrl")
    category: Optional[str] = None
    area: Optional[str] = None

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("ingredients", mode="before")
    @classmethod
    def coerce_ingredients(cls, value: Any) -> Any:
        """Treat missing or malformed ingredient lists as empty and drop unnamed entries."""
        if not isinstance(value, (list, tuple)):
            return []
        coerced = (_coerce_ingredient(entry) for entry in value)
        return [entry for entry in coerced if entry is not None]

    @field_validator("extended_ingredients", mode="before")
    @classmethod
    def coerce_extended_ingredients(cls, value: Any) -> Any:
        if not isinstance(value, (list, tuple)):
            return []
        lines: list[Any] = []
        for entry in value:
            if isinstance(entry, (ExtendedIngredient, Mapping)):
                lines.append(entry)
            elif isinstance(entry, str) and entry.strip():
                lines.append({"original": entry})
        return lines


class MatchResult(Recipe):
    """Recipe annotated with the ingredients found in (and missing from) the pantry."""

    used_ingredients: list[Ingredient] = Field(default_factory=list, alias="usedIngredients")
    missed_ingredients: list[Ingredient] = Field(default_factory=list, alias="missedIngredients")
    used_ingredient_count: int = Field(default=0, alias="usedIngredientCount")
    missed_ingredient_count: int = Field(default=0, alias="missedIngredientCount")


class SuggestionResponse(BaseModel):
    """Ranked recipe suggestions plus an optional status message."""

    recipes: list[MatchResult] = Field(default_factory=list)
    message: Optional[str] = None


class RecipeListResponse(BaseModel):
    recipes: list[Recipe] = Field(default_factory=list)


class SavedRecipe(BaseModel):
    """Recipe bookmarked by a user."""

    id: int
    recipe_api_id: str
    title: str
    image_url: Optional[str] = None
    source: Optional[RecipeSource] = None
    saved_at: datetime

    model_config = ConfigDict(frozen=True)


__all__ = [
    "ExtendedIngredient",
    "Ingredient",
    "MatchResult",
    "Recipe",
    "RecipeId",
    "RecipeListResponse",
    "RecipeSource",
    "SavedRecipe",
    "SuggestionResponse",
]
