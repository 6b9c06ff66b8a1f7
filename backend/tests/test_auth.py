"""
Tests for authentication endpoints.
"""
from datetime import timedelta

import pytest
from fastapi import status

from agency.auth import create_access_token, decode_access_token


@pytest.mark.unit
class TestLogin:
    """Test login functionality."""

    def test_login_success(self, client, admin_user):
        response = client.post(
            "/auth/login",
            json={"email": "admin@test.com", "password": "admin123"}
        )
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert "access_token" in data
        assert data["token_type"] == "bearer"
        assert "access_token" in response.cookies

    def test_login_invalid_email(self, client):
        response = client.post(
            "/auth/login",
            json={"email": "nonexistent@test.com", "password": "password"}
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error_code"] == "HTTP_ERROR"

    def test_login_invalid_password(self, client, admin_user):
        response = client.post(
            "/auth/login",
            json={"email": "admin@test.com", "password": "wrongpassword"}
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_inactive_user(self, client, db_session):
        from agency.models import User, Role
        from agency.auth import get_password_hash

        db_session.add(User(
            email="inactive@test.com",
            name="Inactive User",
            password_hash=get_password_hash("password"),
            role=Role.AGENT,
            is_active=False
        ))
        db_session.commit()

        response = client.post(
            "/auth/login",
            json={"email": "inactive@test.com", "password": "password"}
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.unit
class TestCurrentUser:

    def test_me_returns_role(self, client, agent_auth_headers):
        response = client.get("/auth/me", headers=agent_auth_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["role"] == "AGENT"

    def test_missing_token(self, client):
        response = client.get("/auth/me")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_garbage_token(self, client):
        response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_session_cookie_authenticates(self, client, admin_user):
        client.post("/auth/login", json={"email": "admin@test.com", "password": "admin123"})
        response = client.get("/auth/me")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["email"] == "admin@test.com"

    def test_logout_clears_cookie(self, client, auth_headers):
        response = client.post("/auth/logout", headers=auth_headers)
        assert response.status_code == status.HTTP_204_NO_CONTENT


@pytest.mark.unit
class TestTokens:

    def test_round_trip(self):
        token = create_access_token({"sub": "someone@test.com"})
        assert decode_access_token(token)["sub"] == "someone@test.com"

    def test_expired_token_is_rejected(self):
        token = create_access_token({"sub": "someone@test.com"}, expires_delta=timedelta(seconds=-10))
        assert decode_access_token(token) is None
