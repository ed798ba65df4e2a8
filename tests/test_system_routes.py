"""Tests for health and metrics endpoints"""

from unittest.mock import patch

from flask import Flask
from sqlalchemy.exc import OperationalError

from turfboard.routes.system import register_system_routes


class TestHealth:
    def test_healthy(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.get_json()
        assert data["status"] == "ok"
        assert data["database"] == "ok"
        assert data["cache"]["ttlSeconds"] == 5.0

    def test_database_down(self, client):
        with patch("turfboard.routes.system.db.session.execute") as mock_execute:
            mock_execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))
            response = client.get("/health")

        assert response.status_code == 503
        assert response.get_json()["status"] == "degraded"


class TestMetrics:
    def test_metrics_disabled_in_tests(self, client):
        assert client.get("/metrics").status_code == 404

    def test_metrics_exposed_when_enabled(self):
        app = Flask(__name__)
        app.config["MONITORING_ENABLED"] = True
        register_system_routes(app)

        response = app.test_client().get("/metrics")

        assert response.status_code == 200
        assert b"turfboard_response_cache_invalidations_total" in response.data
