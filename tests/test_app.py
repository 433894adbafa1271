"""
Tests for application wiring: index, health, envelope on errors
"""
from unittest.mock import patch

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from agerapp_api import __version__
from agerapp_api.exceptions import general_exception_handler
from agerapp_api.logging_config import RequestIDMiddleware, get_request_id


class TestAppRoutes:
    """Top-level routes"""

    def test_root_redirects_to_v1(self, client):
        response = client.get("/", follow_redirects=False)

        assert response.status_code in (302, 307)
        assert response.headers["location"] == "/v1"

    def test_welcome(self, client):
        response = client.get("/v1")

        assert response.status_code == 200
        assert response.json() == {"status": "success", "message": "Welcome to AgerApp API", "error": False}

    def test_health(self, client):
        response = client.get("/health")

        assert response.json() == {"status": "healthy", "service": "agerapp-api", "version": __version__}


class TestEnvelope:
    """Errors render in the standard envelope"""

    def test_unknown_route(self, client):
        response = client.get("/v1/nothing-here")

        assert response.status_code == 404
        body = response.json()
        assert body["status"] == "error"
        assert body["error"] is True
        assert body["data"] is None

    def test_missing_token(self, client):
        response = client.get("/v1/customers")

        assert response.status_code == 401
        assert response.json()["status"] == "error"

    def test_request_id_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"

    def test_request_id_generated(self, client):
        response = client.get("/health")

        assert response.headers.get("X-Request-ID")


class TestRequestID:
    """Request IDs reach the handler for unhandled errors"""

    @pytest.fixture
    def failing_client(self):
        failing_app = FastAPI()
        failing_app.add_middleware(RequestIDMiddleware)
        failing_app.add_exception_handler(Exception, general_exception_handler)

        @failing_app.get("/boom")
        async def boom():
            raise RuntimeError("boom")

        return TestClient(failing_app, raise_server_exceptions=False)

    def test_unhandled_error_logs_request_id(self, failing_client):
        with patch("agerapp_api.exceptions.logger") as logger:
            response = failing_client.get("/boom", headers={"X-Request-ID": "req-500"})

        assert response.status_code == 500
        assert response.json()["message"] == "Internal Server Error"
        logged = logger.error.call_args[0][0]
        assert "request_id: req-500" in logged

    def test_state_wins_over_context(self):
        request = Request({"type": "http", "method": "GET", "path": "/", "headers": []})
        request.state.request_id = "from-state"

        assert get_request_id(request) == "from-state"
        assert get_request_id() is None
