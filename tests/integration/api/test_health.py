"""
Integration tests for health and readiness endpoints.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient


@pytest.mark.integration
def test_health_endpoint_returns_ok(client: TestClient) -> None:
    """Test that /api/health returns 200 with status ok."""
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.integration
def test_readiness_endpoint_returns_ready_when_db_accessible(client: TestClient) -> None:
    response = client.get("/api/ready")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["checks"]["database"] == "ok"


@pytest.mark.integration
def test_readiness_endpoint_returns_503_when_db_not_accessible(client: TestClient) -> None:
    """Test that /api/ready returns 503 when the database check fails."""
    with patch("apartment_api.routes.health.check_engine_health") as mock_health:
        mock_health.return_value = False

        response = client.get("/api/ready")

    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "not ready"
    assert data["checks"]["database"] == "failed"


@pytest.mark.integration
def test_health_endpoint_always_returns_ok_even_if_db_down(client: TestClient) -> None:
    """Liveness only reports that the process is serving; /api/ready covers the database."""
    with patch("apartment_api.routes.health.check_engine_health", return_value=False):
        response = client.get("/api/health")

    assert response.status_code == 200
