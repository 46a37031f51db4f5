"""Integration tests for metrics endpoint."""

from __future__ import annotations


def test_metrics_endpoint_available(client):
    client.get("/api/health")

    response = client.get("/metrics")
    assert response.status_code == 200
    body = response.content.decode()
    assert "pantrypal_http_requests_total" in body
    assert "pantrypal_recipe_provider_calls_total" in body
