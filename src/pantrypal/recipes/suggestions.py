"""Recipe suggestion pipeline combining external providers with the built-in catalog."""

from __future__ import annotations

import logging
import random
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Callable, List, Optional, Sequence

from pantrypal import metrics
from pantrypal.config import Settings, get_settings
from pantrypal.models.recipes import Recipe, RecipeSource, SuggestionResponse
from pantrypal.recipes.catalog import find_catalog_recipe, list_catalog, search_catalog
from pantrypal.recipes.matcher import match_recipes, merge_sources, rank_results
from pantrypal.recipes.providers import MealDBClient, RecipeProvider, SpoonacularClient

logger = logging.getLogger(__name__)

EMPTY_PANTRY_MESSAGE = (
    "Add items to your pantry to get personalized recipe suggestions! "
    "Here are some popular recipes:"
)


def found_message(recipe_count: int, pantry_count: int) -> str:
    return f"Found {recipe_count} recipes based on your {pantry_count} pantry items!"


class SuggestionService:
    """Build ranked suggestions, searches and detail lookups across recipe sources.

    ``primary`` and ``secondary`` are optional external providers queried
    concurrently; their failures degrade to empty results. The static catalog
    is always merged last.
    """

    def __init__(
        self,
        *,
        primary: Optional[RecipeProvider] = None,
        secondary: Optional[RecipeProvider] = None,
        catalog: Optional[Sequence[Recipe]] = None,
        limit: int = 12,
        empty_pantry_sample: int = 8,
        provider_timeout: float = 8.0,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._primary = primary
        self._secondary = secondary
        self._catalog = list(catalog) if catalog is not None else list_catalog()
        self._limit = limit
        self._empty_pantry_sample = empty_pantry_sample
        self._provider_timeout = provider_timeout
        self._rng = rng or random.Random()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "SuggestionService":
        settings = settings or get_settings()
        return cls(
            primary=SpoonacularClient.from_settings(settings),
            secondary=MealDBClient.from_settings(settings),
            limit=settings.suggestion_limit,
            empty_pantry_sample=settings.empty_pantry_sample,
            provider_timeout=settings.provider_timeout,
        )

    @property
    def providers(self) -> List[RecipeProvider]:
        return [provider for provider in (self._primary, self._secondary) if provider is not None]

    def suggest(self, pantry_names: Sequence[str]) -> SuggestionResponse:
        """Return catalog and provider recipes ranked by how many ingredients the pantry covers."""

        names = [name for name in pantry_names if name and name.strip()]
        if not names:
            metrics.SUGGESTIONS_SERVED.labels(pantry="empty").inc()
            sample = self._catalog[: self._empty_pantry_sample]
            return SuggestionResponse(
                recipes=match_recipes(sample, []),
                message=EMPTY_PANTRY_MESSAGE,
            )

        provider_results = self._fan_out(lambda provider: provider.find_by_ingredients(names))
        merged = merge_sources([*provider_results, self._catalog], limit=None)
        ranked = rank_results(match_recipes(merged, names))[: self._limit]
        metrics.SUGGESTIONS_SERVED.labels(pantry="stocked").inc()
        logger.info(
            "Suggested %s recipe(s) for %s pantry item(s) from %s provider(s)",
            len(ranked),
            len(names),
            len(self.providers),
        )
        return SuggestionResponse(recipes=ranked, message=found_message(len(ranked), len(names)))

    def search(self, ingredient: str) -> List[Recipe]:
        """Return provider and catalog recipes mentioning ``ingredient``."""

        term = ingredient.strip()
        if not term:
            return []
        sources: List[Callable[[], Sequence[Recipe]]] = []
        secondary = self._secondary
        if secondary is not None:
            sources.append(lambda: secondary.find_by_ingredients([term]))
        sources.append(lambda: search_catalog(term, self._catalog))
        return merge_sources(sources, limit=self._limit)

    def random_inspiration(self) -> Optional[Recipe]:
        """Return a random provider recipe, or a random catalog recipe when unavailable."""

        random_lookup = getattr(self._secondary, "random", None)
        if callable(random_lookup):
            try:
                recipe = random_lookup()
            except Exception as exc:
                logger.warning("Random recipe lookup failed; using catalog: %s", exc)
                recipe = None
            if recipe is not None:
                return recipe
        if not self._catalog:
            return None
        return self._rng.choice(self._catalog)

    def lookup(self, recipe_id: str, source: Optional[RecipeSource] = None) -> Optional[Recipe]:
        """Resolve recipe details, dispatching on ``source`` when the caller knows it."""

        if source == "catalog":
            return find_catalog_recipe(recipe_id, self._catalog)
        if source is not None:
            provider = self._provider_named(source)
            return self._safe_lookup(provider, recipe_id) if provider is not None else None

        recipe = find_catalog_recipe(recipe_id, self._catalog)
        if recipe is not None:
            return recipe
        for provider in (self._secondary, self._primary):
            if provider is None:
                continue
            recipe = self._safe_lookup(provider, recipe_id)
            if recipe is not None:
                return recipe
        return None

    def _provider_named(self, name: str) -> Optional[RecipeProvider]:
        for provider in self.providers:
            if getattr(provider, "name", None) == name:
                return provider
        return None

    @staticmethod
    def _safe_lookup(provider: RecipeProvider, recipe_id: str) -> Optional[Recipe]:
        try:
            return provider.lookup(recipe_id)
        except Exception as exc:
            logger.warning(
                "Recipe lookup failed provider=%s id=%s: %s",
                getattr(provider, "name", type(provider).__name__),
                recipe_id,
                exc,
            )
            return None

    def _fan_out(
        self, call: Callable[[RecipeProvider], Sequence[Recipe]]
    ) -> List[Sequence[Recipe]]:
        """Run ``call`` against every provider concurrently and wait for all of them.

        Results keep provider priority order. A provider that raises or misses
        the timeout contributes an empty list.
        """

        providers = self.providers
        if not providers:
            return []

        executor = ThreadPoolExecutor(max_workers=len(providers), thread_name_prefix="recipe-provider")
        try:
            futures: List[Future] = [executor.submit(call, provider) for provider in providers]
            # One shared deadline: the join never waits longer than a single timeout.
            deadline = time.monotonic() + self._provider_timeout
            results: List[Sequence[Recipe]] = []
            for provider, future in zip(providers, futures):
                name = getattr(provider, "name", type(provider).__name__)
                try:
                    remaining = max(0.0, deadline - time.monotonic())
                    results.append(future.result(timeout=remaining) or [])
                except FutureTimeoutError:
                    logger.warning("Recipe provider %s timed out after %.1fs", name, self._provider_timeout)
                    metrics.PROVIDER_CALLS.labels(provider=name, result="timeout").inc()
                    results.append([])
                except Exception as exc:
                    logger.warning("Recipe provider %s failed; continuing without it: %s", name, exc)
                    results.append([])
            return results
        finally:
            executor.shutdown(wait=False, cancel_futures=True)


__all__ = ["EMPTY_PANTRY_MESSAGE", "SuggestionService", "found_message"]
