"""Shared pytest fixtures for the PantryPal test suite."""

from __future__ import annotations

from typing import Callable, Dict, Generator, List, Optional, Sequence

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from pantrypal.config import get_settings
from pantrypal.db.repository import reset_repository_state
from pantrypal.models.recipes import Recipe
from pantrypal.server.app import create_app


class FakeProvider:
    """In-memory recipe provider used in place of the HTTP clients."""

    def __init__(
        self,
        name: str,
        recipes: Sequence[Recipe] = (),
        *,
        details: Optional[Dict[str, Recipe]] = None,
        error: Optional[Exception] = None,
        random_recipe: Optional[Recipe] = None,
    ) -> None:
        self.name = name
        self._recipes = list(recipes)
        self._details = details or {}
        self._error = error
        self._random = random_recipe
        self.queries: List[List[str]] = []

    def find_by_ingredients(self, pantry_names: Sequence[str]) -> List[Recipe]:
        self.queries.append(list(pantry_names))
        if self._error is not None:
            raise self._error
        return list(self._recipes)

    def lookup(self, recipe_id: str) -> Optional[Recipe]:
        if self._error is not None:
            raise self._error
        return self._details.get(str(recipe_id))

    def random(self) -> Optional[Recipe]:
        if self._error is not None:
            raise self._error
        return self._random


@pytest.fixture()
def fake_provider() -> Callable[..., FakeProvider]:
    """Factory for in-memory recipe providers."""

    return FakeProvider


@pytest.fixture()
def app() -> Generator[FastAPI, None, None]:
    """Create a new FastAPI app instance for each test and reset overrides."""

    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture()
def client(app) -> TestClient:
    """Return a test client bound to the FastAPI app."""

    return TestClient(app)


@pytest.fixture()
def register(client) -> Callable[..., Dict[str, str]]:
    """Register an account and return bearer auth headers for it."""

    def _register(
        email: str = "cook@example.com", password: str = "secret123", name: str = "Cook"
    ) -> Dict[str, str]:
        response = client.post(
            "/api/auth/register",
            json={"email": email, "password": password, "name": name},
        )
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _register


@pytest.fixture()
def auth_headers(register) -> Dict[str, str]:
    return register()


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Ensure each test uses an isolated SQLite database and no provider key."""

    db_path = tmp_path / "test_pantrypal.db"
    monkeypatch.setenv("PANTRYPAL_DATABASE_PATH", str(db_path))
    monkeypatch.delenv("PANTRYPAL_RECIPE_API_KEY", raising=False)
    monkeypatch.delenv("RECIPE_API_KEY", raising=False)
    get_settings.cache_clear()
    reset_repository_state()
    yield
    reset_repository_state()
    monkeypatch.delenv("PANTRYPAL_DATABASE_PATH", raising=False)
    get_settings.cache_clear()
