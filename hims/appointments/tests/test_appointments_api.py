# hims/appointments/tests/test_appointments_api.py
from datetime import timedelta

import pytest
from django.utils import timezone

from hims.appointments.models import Appointment

pytestmark = pytest.mark.django_db


def _payload(patient, doctor, when=None):
    when = when or timezone.now() + timedelta(days=1)
    return {
        "patient_id": str(patient.id),
        "doctor_id": str(doctor.id),
        "appointment_date": when.isoformat(),
        "reason": "Follow-up",
    }


def test_book_appointment(api_client, patient, doctor):
    r = api_client.post("/api/v1/appointments/", _payload(patient, doctor), format="json")
    assert r.status_code == 201, r.data
    assert r.data["data"]["appointment_number"].startswith("APPT-")
    assert r.data["data"]["status"] == "scheduled"


def test_past_date_is_rejected(api_client, patient, doctor):
    r = api_client.post(
        "/api/v1/appointments/",
        _payload(patient, doctor, timezone.now() - timedelta(days=2)),
        format="json",
    )
    assert r.status_code == 400
    assert "Invalid appointment date" in r.data["message"]


def test_duplicate_slot_is_rejected(api_client, patient, doctor):
    payload = _payload(patient, doctor)
    assert api_client.post("/api/v1/appointments/", payload, format="json").status_code == 201

    r = api_client.post("/api/v1/appointments/", payload, format="json")
    assert r.status_code == 400
    assert r.data["message"] == "Appointment with this patient already exists"


def test_delete_cancels(client_for_role, patient, doctor):
    desk = client_for_role("Receptionist")
    appt_id = desk.post("/api/v1/appointments/", _payload(patient, doctor), format="json").data["data"]["id"]

    r = desk.delete(f"/api/v1/appointments/{appt_id}/")
    assert r.status_code == 200
    assert Appointment.objects.get(id=appt_id).status == "canceled"


def test_doctor_cannot_delete(client_for_role, patient, doctor):
    appt_id = client_for_role("Receptionist").post(
        "/api/v1/appointments/", _payload(patient, doctor), format="json"
    ).data["data"]["id"]

    assert client_for_role("Doctor").delete(f"/api/v1/appointments/{appt_id}/").status_code == 403
