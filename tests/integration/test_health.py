"""
Integration tests for health check and index endpoints.
"""

from unittest.mock import AsyncMock, patch


class TestHealthEndpoints:
    """Tests for /api/health endpoints."""

    def test_health_check_basic(self, client):
        """Test basic health check endpoint."""
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data

    def test_health_check_live(self, client):
        """Test liveness probe endpoint."""
        response = client.get("/api/health/live")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"

    def test_health_check_ready(self, client):
        """Test readiness probe pings the database."""
        response = client.get("/api/health/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_health_check_ready_database_down(self, client):
        """Test readiness reports 503 when the database does not answer."""
        with patch.object(
            client.app.state.db, "ping", new=AsyncMock(side_effect=ConnectionError("refused"))
        ):
            response = client.get("/api/health/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"

    def test_health_check_detailed(self, client):
        """Test detailed health check includes the database component."""
        response = client.get("/api/health/detailed")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["environment"] == "testing"
        assert data["components"]["database"]["status"] == "healthy"
        assert data["components"]["database"]["latency_ms"] is not None
        assert data["uptime_seconds"] >= 0

    def test_root_endpoint(self, client):
        """Test root endpoint returns API info."""
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Prompt Collection API"
        assert "version" in data

    def test_api_index(self, client):
        """Test the API index lists resource endpoints."""
        response = client.get("/api")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert set(body["data"]["endpoints"]) >= {"auth", "categories", "tags", "prompts"}

    def test_unknown_route(self, client):
        """Test an unknown path is wrapped in the error envelope."""
        response = client.get("/api/nothing-here")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "NOT_FOUND"
