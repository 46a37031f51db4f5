"""Application configuration helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

ENV_FILE_CANDIDATES = (Path(".env"), Path(".env.local"))

PLACEHOLDER_API_KEYS = {"demo_key"}


class Settings(BaseModel):
    """Global application settings loaded from environment variables or .env files."""

    database_path: Path = Field(
        default=Path("./data/pantrypal.db"),
        description="SQLite database location.",
    )
    recipe_api_key: Optional[str] = Field(
        default=None,
        description="Spoonacular API key; the primary recipe provider is disabled when unset.",
    )
    spoonacular_base_url: str = Field(
        default="https://api.spoonacular.com",
        description="Spoonacular API base URL.",
    )
    mealdb_base_url: str = Field(
        default="https://www.themealdb.com/api/json/v1/1",
        description="TheMealDB API base URL.",
    )
    provider_timeout: float = Field(
        default=8.0,
        description="Seconds to wait for a single recipe provider call.",
    )
    suggestion_limit: int = Field(
        default=12,
        description="Maximum number of recipe suggestions returned.",
    )
    empty_pantry_sample: int = Field(
        default=8,
        description="Number of catalog recipes shown when the pantry is empty.",
    )
    mealdb_lookup_items: int = Field(
        default=3,
        description="Number of pantry items used to query TheMealDB.",
    )
    mealdb_results_per_ingredient: int = Field(
        default=6,
        description="Meals kept per TheMealDB ingredient query.",
    )
    expiring_window_days: int = Field(
        default=3,
        description="Items expiring within this many days count as expiring soon.",
    )
    low_stock_threshold: float = Field(
        default=2.0,
        description="Items at or below this quantity count as low stock.",
    )
    session_ttl_days: int = Field(
        default=7,
        description="Lifetime of issued auth tokens in days.",
    )
    session_cleanup_enabled: bool = Field(
        default=False,
        description="Periodically purge expired auth sessions when true.",
    )
    session_cleanup_interval: float = Field(
        default=3600.0,
        description="Seconds between expired session purges.",
    )
    log_level: str = Field(default="INFO", description="Logging level (DEBUG/INFO/WARNING/ERROR)")
    log_format: str = Field(
        default="plain",
        description="Logging format (plain/json).",
    )
    log_requests: bool = Field(
        default=True,
        description="Emit request access logs when true.",
    )

    model_config = ConfigDict(frozen=True)

    @property
    def spoonacular_enabled(self) -> bool:
        key = (self.recipe_api_key or "").strip()
        return bool(key) and key not in PLACEHOLDER_API_KEYS


def _coerce_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _parse_env_file(path: Path) -> dict[str, str]:
    payload: dict[str, str] = {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, raw_value = line.split("=", 1)
                payload[key.strip()] = raw_value.strip()
    except FileNotFoundError:
        return {}
    return payload


def _load_env_file_values() -> dict[str, str]:
    values: dict[str, str] = {}
    for candidate in ENV_FILE_CANDIDATES:
        values.update(_parse_env_file(candidate))
    return values


_INT_FIELDS = {
    "PANTRYPAL_SUGGESTION_LIMIT": "suggestion_limit",
    "PANTRYPAL_EMPTY_PANTRY_SAMPLE": "empty_pantry_sample",
    "PANTRYPAL_MEALDB_LOOKUP_ITEMS": "mealdb_lookup_items",
    "PANTRYPAL_MEALDB_RESULTS_PER_INGREDIENT": "mealdb_results_per_ingredient",
    "PANTRYPAL_EXPIRING_WINDOW_DAYS": "expiring_window_days",
    "PANTRYPAL_SESSION_TTL_DAYS": "session_ttl_days",
}

_FLOAT_FIELDS = {
    "PANTRYPAL_PROVIDER_TIMEOUT": "provider_timeout",
    "PANTRYPAL_LOW_STOCK_THRESHOLD": "low_stock_threshold",
    "PANTRYPAL_SESSION_CLEANUP_INTERVAL": "session_cleanup_interval",
}


def _load_from_env() -> dict[str, object]:
    """Load optional overrides from env vars (with .env fallbacks)."""

    file_values = _load_env_file_values()

    def _env(key: str) -> Optional[str]:
        return os.environ.get(key) or file_values.get(key)

    payload: dict[str, object] = {}
    if (db_path := _env("PANTRYPAL_DATABASE_PATH")):
        payload["database_path"] = Path(db_path)
    if (api_key := _env("PANTRYPAL_RECIPE_API_KEY") or _env("RECIPE_API_KEY")):
        payload["recipe_api_key"] = api_key
    if (spoonacular_url := _env("PANTRYPAL_SPOONACULAR_BASE_URL")):
        payload["spoonacular_base_url"] = spoonacular_url.rstrip("/")
    if (mealdb_url := _env("PANTRYPAL_MEALDB_BASE_URL")):
        payload["mealdb_base_url"] = mealdb_url.rstrip("/")
    for env_key, field_name in _INT_FIELDS.items():
        if (raw := _env(env_key)):
            try:
                payload[field_name] = int(raw)
            except ValueError:
                pass
    for env_key, field_name in _FLOAT_FIELDS.items():
        if (raw := _env(env_key)):
            try:
                payload[field_name] = float(raw)
            except ValueError:
                pass
    if (cleanup_enabled := _env("PANTRYPAL_SESSION_CLEANUP_ENABLED")):
        payload["session_cleanup_enabled"] = _coerce_bool(cleanup_enabled)
    if (log_level := _env("PANTRYPAL_LOG_LEVEL")):
        payload["log_level"] = log_level
    if (log_format := _env("PANTRYPAL_LOG_FORMAT")):
        payload["log_format"] = log_format
    if (log_requests := _env("PANTRYPAL_LOG_REQUESTS")):
        payload["log_requests"] = _coerce_bool(log_requests)
    return payload


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings(**_load_from_env())
