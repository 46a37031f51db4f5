"""Tests for the TheMealDB and Spoonacular HTTP clients using mocked transports."""

from __future__ import annotations

import httpx
import pytest

from pantrypal.config import Settings
from pantrypal.recipes.providers import MealDBClient, SpoonacularClient

MEALDB_URL = "https://mealdb.test/api/json/v1/1"
SPOONACULAR_URL = "https://spoonacular.test"


def _meal(meal_id: str, title: str) -> dict:
    return {"idMeal": meal_id, "strMeal": title, "strMealThumb": f"https://img.test/{meal_id}.jpg"}


def _mealdb(handler, **kwargs) -> MealDBClient:
    return MealDBClient(base_url=MEALDB_URL, transport=httpx.MockTransport(handler), **kwargs)


def test_mealdb_find_by_ingredients_combines_meals_found_by_several_names():
    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("/filter.php")
        ingredient = request.url.params["i"]
        requested.append(ingredient)
        meals = {
            "chicken": [_meal("52795", "Chicken Handi"), _meal("52940", "Brown Stew Chicken")],
            "garlic": [_meal("52795", "Chicken Handi")],
            "rice": None,
        }[ingredient]
        return httpx.Response(200, json={"meals": meals})

    client = _mealdb(handler)
    recipes = client.find_by_ingredients(["chicken", "garlic", "rice", "onion"])

    assert requested == ["chicken", "garlic", "rice"]
    assert [r.id for r in recipes] == ["52795", "52940"]
    assert [i.name for i in recipes[0].ingredients] == ["chicken", "garlic"]
    assert [i.name for i in recipes[1].ingredients] == ["chicken"]
    assert all(r.source == "mealdb" for r in recipes)


def test_mealdb_limits_results_per_ingredient():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, json={"meals": [_meal(str(50000 + i), f"Meal {i}") for i in range(10)]}
        )

    recipes = _mealdb(handler, results_per_ingredient=6).find_by_ingredients(["beef"])

    assert len(recipes) == 6


def test_mealdb_skips_ingredient_whose_request_fails():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params["i"] == "beef":
            return httpx.Response(503)
        return httpx.Response(200, json={"meals": [_meal("52772", "Teriyaki Chicken")]})

    recipes = _mealdb(handler).find_by_ingredients(["beef", "chicken"])

    assert [r.title for r in recipes] == ["Teriyaki Chicken"]


def test_mealdb_lookup_flattens_numbered_ingredient_slots():
    meal = {
        **_meal("52772", "Teriyaki Chicken Casserole"),
        "strInstructions": "Preheat oven.",
        "strCategory": "Chicken",
        "strArea": "Japanese",
        "strSource": "",
        "strYoutube": "https://www.youtube.com/watch?v=4aZr5hZXP_s",
        "strIngredient1": "soy sauce",
        "strMeasure1": "3/4 cup",
        "strIngredient2": "water",
        "strMeasure2": " 1/2 cup ",
        "strIngredient3": "",
        "strMeasure3": "",
        "strIngredient4": None,
        "strIngredient5": "garlic",
        "strMeasure5": None,
    }

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("/lookup.php")
        assert request.url.params["i"] == "52772"
        return httpx.Response(200, json={"meals": [meal]})

    recipe = _mealdb(handler).lookup("52772")

    assert recipe is not None
    assert [i.name for i in recipe.ingredients] == ["soy sauce", "water", "garlic"]
    assert [line.original for line in recipe.extended_ingredients] == [
        "3/4 cup soy sauce",
        "1/2 cup water",
        "garlic",
    ]
    assert recipe.source_url == "https://www.youtube.com/watch?v=4aZr5hZXP_s"
    assert recipe.servings == 4
    assert recipe.ready_in_minutes == 30
    assert recipe.area == "Japanese"


def test_mealdb_lookup_unknown_id_returns_none():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"meals": None})

    assert _mealdb(handler).lookup("1") is None


def test_spoonacular_find_by_ingredients_sends_expected_query():
    captured: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured.update(request.url.params)
        captured["path"] = request.url.path
        return httpx.Response(
            200,
            json=[
                {
                    "id": 654959,
                    "title": "Pasta With Tuna",
                    "image": "https://img.spoonacular.test/654959.jpg",
                    "usedIngredients": [{"name": "pasta"}],
                    "missedIngredients": [{"name": "tuna"}, {"name": "capers"}],
                },
                {"title": "No id"},
            ],
        )

    client = SpoonacularClient(
        base_url=SPOONACULAR_URL, api_key="k-123", transport=httpx.MockTransport(handler)
    )
    recipes = client.find_by_ingredients(["pasta", " garlic "])

    assert captured["path"] == "/recipes/findByIngredients"
    assert captured["ingredients"] == "pasta,garlic"
    assert captured["number"] == "12"
    assert captured["ranking"] == "2"
    assert captured["ignorePantry"] == "false"
    assert captured["apiKey"] == "k-123"
    assert len(recipes) == 1
    assert recipes[0].source == "spoonacular"
    assert [i.name for i in recipes[0].ingredients] == ["pasta", "tuna", "capers"]


def test_spoonacular_error_status_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(402, json={"message": "quota exceeded"})

    client = SpoonacularClient(
        base_url=SPOONACULAR_URL, api_key="k", transport=httpx.MockTransport(handler)
    )

    with pytest.raises(httpx.HTTPStatusError):
        client.find_by_ingredients(["rice"])


def test_spoonacular_lookup_not_found_returns_none():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    client = SpoonacularClient(
        base_url=SPOONACULAR_URL, api_key="k", transport=httpx.MockTransport(handler)
    )

    assert client.lookup("999999") is None


def test_spoonacular_lookup_maps_extended_ingredients():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/recipes/716429/information"
        return httpx.Response(
            200,
            json={
                "id": 716429,
                "title": "Pasta with Garlic",
                "readyInMinutes": 45,
                "servings": 2,
                "sourceUrl": "https://example.test/pasta",
                "extendedIngredients": [
                    {"name": "butter", "original": "1 tbsp butter"},
                    {"name": "garlic", "original": "2 cloves garlic"},
                ],
            },
        )

    client = SpoonacularClient(
        base_url=SPOONACULAR_URL, api_key="k", transport=httpx.MockTransport(handler)
    )
    recipe = client.lookup("716429")

    assert recipe is not None
    assert recipe.ready_in_minutes == 45
    assert [i.name for i in recipe.ingredients] == ["butter", "garlic"]
    assert [line.original for line in recipe.extended_ingredients] == [
        "1 tbsp butter",
        "2 cloves garlic",
    ]


@pytest.mark.parametrize("api_key", [None, "", "demo_key"])
def test_spoonacular_disabled_without_usable_key(api_key):
    assert SpoonacularClient.from_settings(Settings(recipe_api_key=api_key)) is None


def test_spoonacular_enabled_with_key():
    client = SpoonacularClient.from_settings(Settings(recipe_api_key="real-key"))

    assert isinstance(client, SpoonacularClient)
