# hims/common/tests/test_api_envelope.py
import uuid

import pytest
from rest_framework.throttling import UserRateThrottle

from hims.patients.models import Patient

pytestmark = pytest.mark.django_db


def test_enums_catalog(api_client):
    r = api_client.get("/api/v1/enums/")
    assert r.status_code == 200, r.data
    assert r.data["status"] is True
    assert {"value": "Male", "label": "Male"} in r.data["data"]["gender"]
    assert "orderStatus" in r.data["data"]


def test_single_enum_and_unknown_enum(api_client):
    r = api_client.get("/api/v1/enums/bedStatus/")
    assert r.status_code == 200
    assert [o["value"] for o in r.data["data"]] == ["available", "occupied", "maintenance"]

    r = api_client.get("/api/v1/enums/nope/")
    assert r.status_code == 404
    assert r.data == {"message": "Enum Not Found", "data": None, "status": False}


def test_missing_token_returns_401_envelope(anon_client):
    r = anon_client.get("/api/v1/patients/")
    assert r.status_code == 401
    assert r.data["message"] == "Access token required"
    assert r.data["status"] is False


def test_garbage_token_is_rejected(anon_client):
    anon_client.credentials(HTTP_AUTHORIZATION="Bearer not-a-jwt")
    r = anon_client.get("/api/v1/patients/")
    assert r.status_code == 401
    assert r.data["message"] == "Invalid token"


def test_user_rate_limit_returns_429_envelope(api_client, monkeypatch):
    monkeypatch.setitem(UserRateThrottle.THROTTLE_RATES, "user", "1/min")
    assert api_client.get("/api/v1/enums/gender/").status_code == 200

    r = api_client.get("/api/v1/enums/gender/")
    assert r.status_code == 429
    assert r.data == {"message": "API rate limit exceeded, please try again later", "data": None, "status": False}


def test_legacy_alias_serves_same_routes(api_client):
    assert api_client.get("/api/enums/gender/").status_code == 200


def test_malformed_uuid_is_a_400(api_client):
    r = api_client.get("/api/v1/patients/not-a-uuid/")
    assert r.status_code in (400, 404)
    assert r.data["status"] is False


def test_unknown_id_is_404(api_client):
    r = api_client.get(f"/api/v1/patients/{uuid.uuid4()}/")
    assert r.status_code == 404
    assert r.data["message"] == "Patient Not Found"


def test_pagination_meta(api_client):
    for i in range(12):
        Patient.objects.create(name=f"P{i}", gender="Male", relation="S/O", uhid=f"U{i:03d}")

    r = api_client.get("/api/v1/patients/", {"page": 2, "limit": 5})
    assert r.status_code == 200
    data = r.data["data"]
    assert data["total"] == 12
    assert len(data["items"]) == 5
    assert data["pagination"]["currentPage"] == 2
    assert data["pagination"]["totalPages"] == 3
    assert data["pagination"]["hasNext"] is True
    assert data["pagination"]["prevPage"] == 1

    r = api_client.get("/api/v1/patients/", {"all": "true"})
    assert r.data["data"]["total"] == 12
    assert r.data["data"]["pagination"] is None
