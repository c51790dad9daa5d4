"""Integration tests for health, readiness and metrics endpoints"""

import pytest

pytestmark = pytest.mark.integration


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["components"]["database"]["status"] == "healthy"


def test_ready(client):
    response = client.get("/ready")

    assert response.status_code == 200
    assert response.json()["status"] == "ready"


def test_metrics_exposes_sku_counters(client, sku_payload):
    client.post("/api/v1/skus", json=sku_payload())

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "sku_created_total" in response.text
    assert "sku_duplicate_rejections_total" in response.text


def test_root(client):
    assert client.get("/").json()["name"] == "SKU Service API"
