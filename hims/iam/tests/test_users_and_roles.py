# hims/iam/tests/test_users_and_roles.py
import pytest
from django.core.management import call_command

from hims.audit.models import AuditEvent
from hims.iam.models import User

pytestmark = pytest.mark.django_db


def test_admin_creates_and_deactivates_user(api_client):
    r = api_client.post(
        "/api/v1/users/",
        {"first_name": "Tara", "email": "tara@hims.test", "password": "secret123", "role": "Technician"},
        format="json",
    )
    assert r.status_code == 201, r.data
    user_id = r.data["data"]["id"]
    assert AuditEvent.objects.filter(event_code="user.created", entity_id=str(user_id)).exists()

    r = api_client.delete(f"/api/v1/users/{user_id}/")
    assert r.status_code == 200
    assert User.objects.get(pk=user_id).is_active is False


def test_users_are_admin_only(client_for_role):
    r = client_for_role("Receptionist").get("/api/v1/users/")
    assert r.status_code == 403
    assert r.data["message"] == "Forbidden: insufficient role"


def test_technician_cannot_bill_but_can_read_lab(client_for_role):
    tech = client_for_role("Technician")
    assert tech.get("/api/v1/opd-billing/").status_code == 403
    assert tech.get("/api/v1/lab-orders/").status_code == 200


def test_receptionist_cannot_edit_catalog(client_for_role):
    desk = client_for_role("Receptionist")
    r = desk.post("/api/v1/service-types/", {"name": "Lab", "service_head": "Pathology"}, format="json")
    assert r.status_code == 403
    assert desk.get("/api/v1/service-types/").status_code == 200


def test_collections_are_admin_only(client_for_role, api_client):
    assert client_for_role("Doctor").get("/api/v1/collections/all-types/").status_code == 403
    assert api_client.get("/api/v1/collections/all-types/").status_code == 200


def test_ensure_admin_is_idempotent():
    call_command("ensure_admin", email="Root@hims.test", password="pw-123456")
    call_command("ensure_admin", email="root@hims.test", password="pw-654321")

    user = User.objects.get(email="root@hims.test")
    assert user.role == "Admin"
    assert user.is_superuser
    assert user.check_password("pw-654321")
