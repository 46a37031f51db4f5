"""Pydantic models defining shared data contracts."""

from pantrypal.models.pantry import AlertType, Category, PantryAlert, PantryItem
from pantrypal.models.recipes import (
    ExtendedIngredient,
    Ingredient,
    MatchResult,
    Recipe,
    RecipeListResponse,
    SavedRecipe,
    SuggestionResponse,
)
from pantrypal.models.shopping import ShoppingListItem, ShoppingSuggestions
from pantrypal.models.users import AuthResponse, User

__all__ = [
    "AlertType",
    "AuthResponse",
    "Category",
    "ExtendedIngredient",
    "Ingredient",
    "MatchResult",
    "PantryAlert",
    "PantryItem",
    "Recipe",
    "RecipeListResponse",
    "SavedRecipe",
    "ShoppingListItem",
    "ShoppingSuggestions",
    "SuggestionResponse",
    "User",
]
