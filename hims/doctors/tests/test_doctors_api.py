# hims/doctors/tests/test_doctors_api.py
import pytest

from hims.doctors.models import Doctor
from hims.iam.models import User

pytestmark = pytest.mark.django_db

PAYLOAD = {
    "doctor_name": "Priya Singh",
    "specialization": "Cardiology",
    "qualification": "MD",
    "license_no": "lic-900",
    "email": "Priya@hims.test",
    "mobile_no": "9123456780",
    "department": "Cardiology",
    "consultation_fee": "700.00",
    "password": "doctor123",
}


def test_create_doctor_provisions_login(api_client):
    r = api_client.post("/api/v1/doctors/", PAYLOAD, format="json")
    assert r.status_code == 201, r.data
    data = r.data["data"]
    assert data["employee_id"].startswith("DOC")
    assert data["license_no"] == "LIC-900"

    user = User.objects.get(email="priya@hims.test")
    assert user.role == "Doctor"
    assert user.check_password("doctor123")
    assert data["user_id"] == user.pk


def test_duplicate_license_is_rejected(api_client, doctor):
    r = api_client.post("/api/v1/doctors/", {**PAYLOAD, "license_no": doctor.license_no}, format="json")
    assert r.status_code == 400
    assert r.data["message"] == "Doctor with this license number already exists"
    assert not User.objects.filter(email="priya@hims.test").exists()


def test_delete_deactivates_doctor_and_login(api_client):
    doctor_id = api_client.post("/api/v1/doctors/", PAYLOAD, format="json").data["data"]["id"]

    r = api_client.delete(f"/api/v1/doctors/{doctor_id}/")
    assert r.status_code == 200
    doctor = Doctor.objects.select_related("user").get(id=doctor_id)
    assert doctor.is_active is False
    assert doctor.user.is_active is False


def test_update_syncs_user_email(api_client):
    doctor_id = api_client.post("/api/v1/doctors/", PAYLOAD, format="json").data["data"]["id"]

    r = api_client.patch(f"/api/v1/doctors/{doctor_id}/", {"email": "priya.s@hims.test"}, format="json")
    assert r.status_code == 200, r.data
    assert User.objects.filter(email="priya.s@hims.test", role="Doctor").exists()


def test_dropdown_lists_only_active(api_client, doctor, other_doctor):
    other_doctor.is_active = False
    other_doctor.save()

    r = api_client.get("/api/v1/doctors/dropdown-list/")
    assert r.status_code == 200
    assert [o["value"] for o in r.data["data"]] == [str(doctor.id)]


def test_specializations_and_departments(client_for_role, doctor, other_doctor):
    c = client_for_role("Receptionist")
    assert c.get("/api/v1/doctors/specializations/").data["data"] == ["Medicine", "Surgery"]
    assert c.get("/api/v1/doctors/departments/").data["data"] == ["General Medicine", "Surgery"]


def test_only_admin_creates_doctors(client_for_role):
    r = client_for_role("Receptionist").post("/api/v1/doctors/", PAYLOAD, format="json")
    assert r.status_code == 403
