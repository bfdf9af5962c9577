"""Integration tests for service-level endpoints"""

from fastapi.testclient import TestClient


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "budget-gateway"}


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "budget_predictions_generated_total" in response.text
    assert "budget_balance_adjustments_total" in response.text


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_request_id_is_generated(client: TestClient):
    response = client.get("/health")
    assert response.headers.get("X-Request-ID")


def test_missing_user_header_is_unauthorized(client: TestClient, wallet_factory):
    wallet = wallet_factory()
    del client.headers["X-User-ID"]

    response = client.get("/api/stats", params={"walletId": wallet.id})

    assert response.status_code == 401
    assert response.json()["detail"] == "Unauthorized"


def test_non_numeric_user_header_is_unauthorized(client: TestClient, wallet_factory):
    wallet = wallet_factory()

    response = client.get("/api/stats", params={"walletId": wallet.id}, headers={"X-User-ID": "alice"})

    assert response.status_code == 401


def test_malformed_query_parameter_is_bad_request(client: TestClient):
    response = client.get("/api/stats", params={"walletId": "abc"})
    assert response.status_code == 400
