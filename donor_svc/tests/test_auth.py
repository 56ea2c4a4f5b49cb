"""
Tests for hospital login and bearer-token authentication.
"""
from datetime import timedelta

import jwt
import pytest

from core.auth import create_access_token, decode_access_token
from core.config import settings
from core.datetime_utils import utc_now
from services.hospital_service import hash_password, verify_password


class TestLogin:
    """Test suite for POST /api/v1/auth/login."""

    def test_login_success(self, client, hospital):
        response = client.post(
            "/api/v1/auth/login",
            json={"username": hospital["username"], "password": hospital["password"]}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Login successful"
        assert data["hospital_name"] == "City Hospital"
        assert data["token_type"] == "bearer"
        assert data["expires_in"] == settings.donor_svc_jwt_expiry_hours * 3600

        claims = decode_access_token(data["token"])
        assert claims["sub"] == "cityhospital"
        assert claims["name"] == "City Hospital"
        assert claims["area"] == "Kothrud"

    def test_login_wrong_password(self, client, hospital):
        response = client.post(
            "/api/v1/auth/login",
            json={"username": hospital["username"], "password": "not-the-password"}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"

    def test_login_unknown_user(self, client):
        response = client.post(
            "/api/v1/auth/login",
            json={"username": "nobody", "password": "whatever"}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"

    @pytest.mark.parametrize("payload", [
        {"username": "", "password": "secret"},
        {"username": "cityhospital", "password": ""},
        {},
    ])
    def test_login_missing_fields(self, client, payload):
        response = client.post("/api/v1/auth/login", json=payload)
        assert response.status_code == 400
        assert response.json()["detail"] == "Username and password are required"


class TestBearerAuth:
    """Protected endpoints reject missing and invalid tokens."""

    def test_missing_token(self, client):
        response = client.post("/api/v1/alerts", json={"area": "All", "blood_group": "Any"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Access token required"

    def test_wrong_scheme(self, client):
        response = client.post(
            "/api/v1/alerts",
            json={"area": "All", "blood_group": "Any"},
            headers={"Authorization": "Basic Zm9vOmJhcg=="}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Access token required"

    def test_garbage_token(self, client):
        response = client.post(
            "/api/v1/alerts",
            json={"area": "All", "blood_group": "Any"},
            headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"

    def test_token_signed_with_other_secret(self, client):
        token = jwt.encode(
            {"sub": "cityhospital", "exp": utc_now() + timedelta(hours=1)},
            "some-other-secret-that-is-long-enough-1234",
            algorithm="HS256"
        )
        response = client.post(
            "/api/v1/alerts",
            json={"area": "All", "blood_group": "Any"},
            headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"

    def test_expired_token(self, client):
        token = jwt.encode(
            {"sub": "cityhospital", "exp": utc_now() - timedelta(minutes=1)},
            settings.donor_svc_jwt_secret,
            algorithm=settings.donor_svc_jwt_algorithm
        )
        response = client.delete(
            "/api/v1/inventory/1",
            headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"

    def test_login_token_unlocks_protected_route(self, client, hospital):
        token = client.post(
            "/api/v1/auth/login",
            json={"username": hospital["username"], "password": hospital["password"]}
        ).json()["token"]

        response = client.post(
            "/api/v1/inventory/low-stock-check",
            headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 200


class TestHospitalAccounts:
    """Test suite for POST /api/v1/hospitals."""

    def test_create_hospital(self, client, auth_headers, hospital_repo):
        response = client.post(
            "/api/v1/hospitals",
            json={"username": "ruby", "password": "ruby-hall-pass", "name": "Ruby Hall", "area": "Shivajinagar"},
            headers=auth_headers
        )
        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "ruby"
        assert "password" not in data and "password_hash" not in data

        stored = hospital_repo.get_by_username("ruby")
        assert stored["password_hash"] != "ruby-hall-pass"

    def test_create_hospital_duplicate(self, client, auth_headers, hospital):
        response = client.post(
            "/api/v1/hospitals",
            json={"username": hospital["username"], "password": "another-pass", "name": "X", "area": "Y"},
            headers=auth_headers
        )
        assert response.status_code == 409

    def test_create_hospital_requires_auth(self, client):
        response = client.post(
            "/api/v1/hospitals",
            json={"username": "ruby", "password": "ruby-hall-pass", "name": "Ruby Hall", "area": "Shivajinagar"}
        )
        assert response.status_code == 401

    def test_ensure_default_hospital_is_idempotent(self, hospital_service):
        assert hospital_service.ensure_default_hospital("hospital", "password123", "General Hospital", "Shivajinagar")
        assert not hospital_service.ensure_default_hospital("hospital", "password123", "General Hospital", "Shivajinagar")

        login = hospital_service.login("hospital", "password123")
        assert login.hospital_name == "General Hospital"


def test_password_hashing():
    hashed = hash_password("s3cret-value")
    assert hashed.startswith("$2")
    assert verify_password("s3cret-value", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("s3cret-value", "not-a-bcrypt-hash")


def test_create_access_token_roundtrip():
    token, expires_in = create_access_token("cityhospital", "City Hospital", "Kothrud")
    claims = decode_access_token(token)
    assert claims["sub"] == "cityhospital"
    assert expires_in > 0
