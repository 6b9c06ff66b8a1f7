"""
Tests for health endpoints and the response middleware.
"""
import pytest
from fastapi import status


@pytest.mark.unit
class TestHealth:

    def test_healthz(self, client):
        response = client.get("/healthz")
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"status": "ok"}

    def test_readyz_pings_database(self, client):
        response = client.get("/readyz")
        assert response.status_code == status.HTTP_200_OK


@pytest.mark.unit
class TestMiddleware:

    def test_request_id_is_generated(self, client):
        response = client.get("/healthz")
        assert response.headers["X-Request-ID"]

    def test_request_id_is_echoed(self, client):
        response = client.get("/healthz", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"

    def test_security_headers(self, client):
        response = client.get("/")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "Cache-Control" not in response.headers

    def test_errors_use_common_shape(self, client, auth_headers):
        response = client.get("/projects/00000000-0000-0000-0000-000000000000", headers=auth_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND
        body = response.json()
        assert body["error_code"] == "NOT_FOUND"
        assert body["details"]["resource"] == "Projekt"
