"""Tests for environment-driven settings."""

from __future__ import annotations

from pathlib import Path

from pantrypal.config import get_settings


def test_defaults_without_overrides(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PANTRYPAL_DATABASE_PATH", raising=False)
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.database_path == Path("./data/pantrypal.db")
    assert settings.suggestion_limit == 12
    assert settings.empty_pantry_sample == 8
    assert settings.spoonacular_enabled is False


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("RECIPE_API_KEY", "live-key")
    monkeypatch.setenv("PANTRYPAL_MEALDB_BASE_URL", "http://mealdb.local/api/")
    monkeypatch.setenv("PANTRYPAL_LOW_STOCK_THRESHOLD", "0.5")
    monkeypatch.setenv("PANTRYPAL_SUGGESTION_LIMIT", "not-a-number")
    monkeypatch.setenv("PANTRYPAL_SESSION_CLEANUP_ENABLED", "yes")
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.recipe_api_key == "live-key"
    assert settings.spoonacular_enabled is True
    assert settings.mealdb_base_url == "http://mealdb.local/api"
    assert settings.low_stock_threshold == 0.5
    assert settings.suggestion_limit == 12
    assert settings.session_cleanup_enabled is True


def test_env_file_and_placeholder_key(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text(
        "# local overrides\nPANTRYPAL_RECIPE_API_KEY=demo_key\nPANTRYPAL_EXPIRING_WINDOW_DAYS=5\n",
        encoding="utf-8",
    )
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.recipe_api_key == "demo_key"
    assert settings.spoonacular_enabled is False
    assert settings.expiring_window_days == 5
