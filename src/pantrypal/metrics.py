"""Prometheus metrics definitions for PantryPal."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "pantrypal_http_requests_total",
    "Total number of HTTP requests processed by the PantryPal API",
    ["method", "path", "status"],
)

REQUEST_LATENCY = Histogram(
    "pantrypal_http_request_duration_seconds",
    "Latency of HTTP requests processed by the PantryPal API",
    ["method", "path"],
)

PROVIDER_CALLS = Counter(
    "pantrypal_recipe_provider_calls_total",
    "Number of external recipe provider calls by outcome",
    ["provider", "result"],
)

SUGGESTIONS_SERVED = Counter(
    "pantrypal_recipe_suggestions_total",
    "Number of suggestion responses served by pantry state",
    ["pantry"],
)

__all__ = [
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "PROVIDER_CALLS",
    "SUGGESTIONS_SERVED",
]
