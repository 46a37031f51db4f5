"""Dependency definitions for the PantryPal API server."""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from fastapi import Depends, HTTPException, Request, status

from pantrypal.config import Settings, get_settings
from pantrypal.db.categories import list_categories
from pantrypal.db.pantry import (
    create_pantry_item,
    delete_pantry_item,
    list_expiring_items,
    list_pantry_items,
    list_pantry_names,
    update_pantry_item,
)
from pantrypal.db.saved_recipes import delete_saved_recipe, list_saved_recipes, save_recipe
from pantrypal.db.shopping_list import (
    clear_checked_items,
    create_shopping_item,
    delete_shopping_item,
    list_shopping_items,
    move_to_pantry,
    reset_shopping_list,
    update_shopping_item,
)
from pantrypal.db.users import get_user_for_token
from pantrypal.models.pantry import Category, PantryItem
from pantrypal.models.recipes import SavedRecipe
from pantrypal.models.shopping import ShoppingListItem
from pantrypal.models.users import User
from pantrypal.recipes.suggestions import SuggestionService

CategoryProvider = Callable[[], List[Category]]
PantryProvider = Callable[[int], List[PantryItem]]
PantryNamesProvider = Callable[[int], List[str]]
ExpiringPantryProvider = Callable[[int], List[PantryItem]]
PantryCreator = Callable[[int, dict], PantryItem]
PantryUpdater = Callable[[int, int, dict], PantryItem]
PantryDeleter = Callable[[int, int], None]
SavedRecipeProvider = Callable[[int], List[SavedRecipe]]
SavedRecipeStorer = Callable[[int, dict], Tuple[SavedRecipe, bool]]
SavedRecipeDeleter = Callable[[int, int], None]
ShoppingListProvider = Callable[[int], List[ShoppingListItem]]
ShoppingListCreator = Callable[[int, dict], ShoppingListItem]
ShoppingListUpdater = Callable[[int, int, dict], ShoppingListItem]
ShoppingListDeleter = Callable[[int, int], None]
ShoppingListResetter = Callable[[int], None]
ShoppingListCheckedClearer = Callable[[int], int]
ShoppingListMover = Callable[[int, int, dict], PantryItem]


def get_suggestion_service() -> SuggestionService:
    """Return the recipe suggestion service wired to the configured providers."""

    return SuggestionService.from_settings(get_settings())


def get_category_provider() -> CategoryProvider:
    return list_categories


def get_pantry_provider() -> PantryProvider:
    return lambda user_id: list_pantry_items(user_id=user_id)


def get_pantry_names_provider() -> PantryNamesProvider:
    return lambda user_id: list_pantry_names(user_id=user_id)


def get_expiring_pantry_provider() -> ExpiringPantryProvider:
    settings = get_settings()
    return lambda user_id: list_expiring_items(
        user_id=user_id, within_days=settings.expiring_window_days
    )


def get_pantry_creator() -> PantryCreator:
    return lambda user_id, payload: create_pantry_item(user_id=user_id, **payload)


def get_pantry_updater() -> PantryUpdater:
    return lambda user_id, item_id, payload: update_pantry_item(item_id, user_id=user_id, **payload)


def get_pantry_deleter() -> PantryDeleter:
    return lambda user_id, item_id: delete_pantry_item(item_id, user_id=user_id)


def get_saved_recipe_provider() -> SavedRecipeProvider:
    return lambda user_id: list_saved_recipes(user_id=user_id)


def get_saved_recipe_storer() -> SavedRecipeStorer:
    return lambda user_id, payload: save_recipe(user_id=user_id, **payload)


def get_saved_recipe_deleter() -> SavedRecipeDeleter:
    return lambda user_id, saved_id: delete_saved_recipe(saved_id, user_id=user_id)


def get_shopping_list_provider() -> ShoppingListProvider:
    return lambda user_id: list_shopping_items(user_id=user_id)


def get_shopping_list_creator() -> ShoppingListCreator:
    return lambda user_id, payload: create_shopping_item(user_id=user_id, **payload)


def get_shopping_list_updater() -> ShoppingListUpdater:
    return lambda user_id, item_id, payload: update_shopping_item(
        item_id, user_id=user_id, **payload
    )


def get_shopping_list_deleter() -> ShoppingListDeleter:
    return lambda user_id, item_id: delete_shopping_item(item_id, user_id=user_id)


def get_shopping_list_resetter() -> ShoppingListResetter:
    return lambda user_id: reset_shopping_list(user_id=user_id)


def get_shopping_list_checked_clearer() -> ShoppingListCheckedClearer:
    return lambda user_id: clear_checked_items(user_id=user_id)


def get_shopping_list_mover() -> ShoppingListMover:
    return lambda user_id, item_id, payload: move_to_pantry(item_id, user_id=user_id, **payload)


def _bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    scheme, _, credentials = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not credentials.strip():
        return None
    return credentials.strip()


def get_bearer_token(request: Request) -> str:
    """Return the bearer token presented with the request or fail with 401."""

    token = _bearer_token(request)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token


def get_current_user(token: str = Depends(get_bearer_token)) -> User:
    """Resolve the authenticated user for protected routes."""

    user = get_user_for_token(token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_app_settings() -> Settings:
    return get_settings()
