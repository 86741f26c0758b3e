# hims/iam/tests/test_auth_api.py
from datetime import timedelta

import jwt
import pytest
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework.throttling import ScopedRateThrottle
from rest_framework_simplejwt.tokens import AccessToken

from hims.conftest import make_user

pytestmark = pytest.mark.django_db


def test_login_returns_tokens_and_user(anon_client):
    make_user("Receptionist", email="desk@hims.test")

    r = anon_client.post("/api/v1/auth/login/", {"email": "DESK@hims.test", "password": "secret123"}, format="json")
    assert r.status_code == 200, r.data
    assert r.data["success"] is True
    assert r.data["data"]["user"]["role"] == "Receptionist"
    assert r.data["data"]["access"]
    assert r.data["data"]["refresh"]


def test_login_wrong_password_is_401(anon_client):
    make_user("Receptionist", email="desk@hims.test")

    r = anon_client.post("/api/v1/auth/login/", {"email": "desk@hims.test", "password": "nope"}, format="json")
    assert r.status_code == 401
    assert r.data == {"success": False, "message": "Invalid email or password", "data": None}


def test_issued_access_token_authenticates(anon_client):
    make_user("Doctor", email="doc@hims.test")
    login = anon_client.post("/api/v1/auth/login/", {"email": "doc@hims.test", "password": "secret123"}, format="json")

    c = APIClient()
    c.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['data']['access']}")
    r = c.get("/api/v1/me/")
    assert r.status_code == 200, r.data
    assert r.data["data"]["email"] == "doc@hims.test"


def test_refresh_rotates_tokens(anon_client):
    make_user("Doctor", email="doc@hims.test")
    login = anon_client.post("/api/v1/auth/login/", {"email": "doc@hims.test", "password": "secret123"}, format="json")

    r = anon_client.post("/api/v1/auth/refresh/", {"refresh": login.data["data"]["refresh"]}, format="json")
    assert r.status_code == 200, r.data
    assert r.data["data"]["access"]

    r = anon_client.post("/api/v1/auth/refresh/", {"refresh": "garbage"}, format="json")
    assert r.status_code in (400, 401)
    assert r.data["success"] is False


def test_signup_defaults_to_receptionist(anon_client):
    r = anon_client.post(
        "/api/v1/auth/signup/",
        {"first_name": "New", "email": "new@hims.test", "password": "secret123"},
        format="json",
    )
    assert r.status_code == 201, r.data
    assert r.data["data"]["role"] == "Receptionist"


def test_signup_cannot_create_admin(anon_client):
    r = anon_client.post(
        "/api/v1/auth/signup/",
        {"first_name": "Sneaky", "email": "x@hims.test", "password": "secret123", "role": "Admin"},
        format="json",
    )
    assert r.status_code == 400
    assert r.data["success"] is False


def test_signup_duplicate_email(anon_client):
    make_user("Technician", email="tech@hims.test")
    r = anon_client.post(
        "/api/v1/auth/signup/",
        {"first_name": "Dup", "email": "tech@hims.test", "password": "secret123"},
        format="json",
    )
    assert r.status_code == 400
    assert r.data["message"] == "User with this email already exists"


def test_expired_access_token_reports_expiry(anon_client):
    token = AccessToken.for_user(make_user("Doctor", email="doc@hims.test"))
    token.set_exp(lifetime=timedelta(minutes=-5))

    anon_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    r = anon_client.get("/api/v1/me/")
    assert r.status_code == 401
    assert r.data["message"] == "Token expired"


def test_forged_token_with_past_exp_is_invalid_not_expired(anon_client):
    user = make_user("Doctor", email="doc@hims.test")
    forged = jwt.encode(
        {
            "token_type": "access",
            "user_id": str(user.pk),
            "jti": "forged",
            "exp": int((timezone.now() - timedelta(hours=1)).timestamp()),
        },
        "someone-elses-signing-key-of-sufficient-length",
        algorithm="HS256",
    )

    anon_client.credentials(HTTP_AUTHORIZATION=f"Bearer {forged}")
    r = anon_client.get("/api/v1/me/")
    assert r.status_code == 401
    assert r.data["message"] == "Invalid token"


def test_login_attempts_are_throttled(anon_client, monkeypatch):
    monkeypatch.setitem(ScopedRateThrottle.THROTTLE_RATES, "auth", "2/min")
    make_user("Receptionist", email="desk@hims.test")
    payload = {"email": "desk@hims.test", "password": "nope"}

    for _ in range(2):
        assert anon_client.post("/api/v1/auth/login/", payload, format="json").status_code == 401

    r = anon_client.post("/api/v1/auth/login/", payload, format="json")
    assert r.status_code == 429
    assert r.data == {"success": False, "message": "Too many authentication attempts, please try again later", "data": None}
    assert r.has_header("Retry-After")


def test_throttling_is_per_scope(anon_client, api_client, monkeypatch):
    monkeypatch.setitem(ScopedRateThrottle.THROTTLE_RATES, "auth", "1/min")
    anon_client.post("/api/v1/auth/login/", {"email": "x@hims.test", "password": "nope"}, format="json")
    assert anon_client.post("/api/v1/auth/login/", {"email": "x@hims.test", "password": "nope"}, format="json").status_code == 429

    # routes without the auth scope keep their own budget
    r = api_client.get("/api/v1/enums/gender/")
    assert r.status_code == 200
