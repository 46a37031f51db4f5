"""HTTP clients for the external recipe providers (Spoonacular and TheMealDB)."""
# mypy: ignore-errors

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence

import httpx

from pantrypal import metrics
from pantrypal.config import Settings, get_settings
from pantrypal.models.recipes import Recipe

logger = logging.getLogger(__name__)

MEALDB_MAX_INGREDIENT_SLOTS = 20
DEFAULT_SERVINGS = 4
DEFAULT_READY_IN_MINUTES = 30


class RecipeProvider(Protocol):
    """Protocol for external recipe sources."""

    name: str

    def find_by_ingredients(self, pantry_names: Sequence[str]) -> List[Recipe]:
        """Return recipes that use some of the supplied pantry items."""

    def lookup(self, recipe_id: str) -> Optional[Recipe]:
        """Return full recipe details or ``None`` when the provider does not know the id."""


class _HttpProvider:
    name = "http"

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def _get_json(self, path: str, params: Dict[str, Any] | None = None) -> Any:
        try:
            with httpx.Client(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = client.get(path, params=params)
                response.raise_for_status()
                payload = response.json()
        except Exception:
            metrics.PROVIDER_CALLS.labels(provider=self.name, result="error").inc()
            raise
        metrics.PROVIDER_CALLS.labels(provider=self.name, result="ok").inc()
        return payload


class MealDBClient(_HttpProvider):
    """Client for the free TheMealDB API (no key required)."""

    name = "mealdb"

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 8.0,
        lookup_items: int = 3,
        results_per_ingredient: int = 6,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        super().__init__(base_url=base_url, timeout=timeout, transport=transport)
        self._lookup_items = max(0, lookup_items)
        self._results_per_ingredient = max(0, results_per_ingredient)

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, transport: httpx.BaseTransport | None = None
    ) -> "MealDBClient":
        settings = settings or get_settings()
        return cls(
            base_url=settings.mealdb_base_url,
            timeout=settings.provider_timeout,
            lookup_items=settings.mealdb_lookup_items,
            results_per_ingredient=settings.mealdb_results_per_ingredient,
            transport=transport,
        )

    def filter_by_ingredient(self, ingredient: str) -> List[Recipe]:
        """Return summary recipes listing ``ingredient``; each records it as an ingredient."""

        payload = self._get_json("/filter.php", params={"i": ingredient})
        meals = (payload or {}).get("meals") or []
        recipes: List[Recipe] = []
        for meal in meals[: self._results_per_ingredient]:
            recipe = _mealdb_summary(meal, ingredients=[ingredient])
            if recipe is not None:
                recipes.append(recipe)
        return recipes

    def find_by_ingredients(self, pantry_names: Sequence[str]) -> List[Recipe]:
        """Query the first few pantry items, combining meals found by several of them."""

        names = [name for name in pantry_names if name and name.strip()][: self._lookup_items]
        order: List[str] = []
        combined: Dict[str, Recipe] = {}
        for name in names:
            try:
                found = self.filter_by_ingredient(name)
            except (httpx.HTTPError, ValueError) as exc:
                logger.info("TheMealDB filter failed for ingredient=%s: %s", name, exc)
                continue
            for recipe in found:
                key = str(recipe.id)
                existing = combined.get(key)
                if existing is None:
                    order.append(key)
                    combined[key] = recipe
                    continue
                combined[key] = existing.model_copy(
                    update={"ingredients": [*existing.ingredients, *recipe.ingredients]}
                )
        return [combined[key] for key in order]

    def lookup(self, recipe_id: str) -> Optional[Recipe]:
        payload = self._get_json("/lookup.php", params={"i": str(recipe_id)})
        meals = (payload or {}).get("meals") or []
        if not meals:
            return None
        return _mealdb_detail(meals[0])

    def random(self) -> Optional[Recipe]:
        payload = self._get_json("/random.php")
        meals = (payload or {}).get("meals") or []
        if not meals:
            return None
        return _mealdb_detail(meals[0])


class SpoonacularClient(_HttpProvider):
    """Client for the Spoonacular recipe API (API key required)."""

    name = "spoonacular"

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        timeout: float = 8.0,
        number: int = 12,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        super().__init__(base_url=base_url, timeout=timeout, transport=transport)
        self._api_key = api_key
        self._number = number

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, transport: httpx.BaseTransport | None = None
    ) -> Optional["SpoonacularClient"]:
        """Build a client, or return ``None`` when no usable API key is configured."""

        settings = settings or get_settings()
        if not settings.spoonacular_enabled:
            return None
        return cls(
            base_url=settings.spoonacular_base_url,
            api_key=settings.recipe_api_key or "",
            timeout=settings.provider_timeout,
            number=settings.suggestion_limit,
            transport=transport,
        )

    def find_by_ingredients(self, pantry_names: Sequence[str]) -> List[Recipe]:
        names = [name.strip() for name in pantry_names if name and name.strip()]
        if not names:
            return []
        payload = self._get_json(
            "/recipes/findByIngredients",
            params={
                "ingredients": ",".join(names),
                "number": self._number,
                "ranking": 2,
                "ignorePantry": "false",
                "apiKey": self._api_key,
            },
        )
        recipes: List[Recipe] = []
        for entry in payload or []:
            if not isinstance(entry, dict) or entry.get("id") is None:
                continue
            ingredients = [
                *(entry.get("usedIngredients") or []),
                *(entry.get("missedIngredients") or []),
            ]
            recipes.append(
                Recipe.model_validate(
                    {
                        "id": entry["id"],
                        "title": entry.get("title") or "Untitled recipe",
                        "image": entry.get("image"),
                        "source": "spoonacular",
                        "ingredients": ingredients,
                    }
                )
            )
        return recipes

    def lookup(self, recipe_id: str) -> Optional[Recipe]:
        try:
            payload = self._get_json(
                f"/recipes/{recipe_id}/information", params={"apiKey": self._api_key}
            )
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                return None
            raise
        if not isinstance(payload, dict) or payload.get("id") is None:
            return None
        extended = payload.get("extendedIngredients") or []
        return Recipe.model_validate(
            {
                "id": payload["id"],
                "title": payload.get("title") or "Untitled recipe",
                "image": payload.get("image"),
                "source": "spoonacular",
                "readyInMinutes": payload.get("readyInMinutes"),
                "servings": payload.get("servings"),
                "instructions": payload.get("instructions"),
                "ingredients": extended,
                "extendedIngredients": [
                    {"original": entry.get("original")}
                    for entry in extended
                    if isinstance(entry, dict) and entry.get("original")
                ],
                "sourceUrl": payload.get("sourceUrl"),
            }
        )


def _mealdb_summary(meal: Dict[str, Any], *, ingredients: List[str]) -> Optional[Recipe]:
    meal_id = meal.get("idMeal")
    title = meal.get("strMeal")
    if not meal_id or not title:
        return None
    return Recipe.model_validate(
        {
            "id": str(meal_id),
            "title": title,
            "image": meal.get("strMealThumb"),
            "source": "mealdb",
            "readyInMinutes": DEFAULT_READY_IN_MINUTES,
            "servings": DEFAULT_SERVINGS,
            "ingredients": ingredients,
        }
    )


def _mealdb_detail(meal: Dict[str, Any]) -> Optional[Recipe]:
    """Flatten TheMealDB's numbered strIngredientN/strMeasureN slots."""

    meal_id = meal.get("idMeal")
    title = meal.get("strMeal")
    if not meal_id or not title:
        return None

    ingredients: List[str] = []
    lines: List[str] = []
    for slot in range(1, MEALDB_MAX_INGREDIENT_SLOTS + 1):
        ingredient = (meal.get(f"strIngredient{slot}") or "").strip()
        if not ingredient:
            continue
        measure = (meal.get(f"strMeasure{slot}") or "").strip()
        ingredients.append(ingredient)
        lines.append(f"{measure} {ingredient}".strip())

    return Recipe.model_validate(
        {
            "id": str(meal_id),
            "title": title,
            "image": meal.get("strMealThumb"),
            "source": "mealdb",
            "readyInMinutes": DEFAULT_READY_IN_MINUTES,
            "servings": DEFAULT_SERVINGS,
            "instructions": meal.get("strInstructions"),
            "ingredients": ingredients,
            "extendedIngredients": lines,
            "sourceUrl": meal.get("strSource") or meal.get("strYoutube") or None,
            "category": meal.get("strCategory"),
            "area": meal.get("strArea"),
        }
    )


__all__ = ["MealDBClient", "RecipeProvider", "SpoonacularClient"]
