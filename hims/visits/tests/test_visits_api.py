# hims/visits/tests/test_visits_api.py
import uuid

import pytest

from hims.visits.models import Visit

pytestmark = pytest.mark.django_db


def test_create_visit_assigns_code_and_pending(api_client, patient, doctor):
    r = api_client.post(
        "/api/v1/visits/",
        {"patient_id": str(patient.id), "consulting_doctor_id": str(doctor.id), "referred_by": "Self"},
        format="json",
    )
    assert r.status_code == 201, r.data
    data = r.data["data"]
    assert data["code"].startswith("VISIT")
    assert data["status"] == "pending"
    assert data["patient"]["uhid"] == patient.uhid
    assert data["consulting_doctor"]["id"] == str(doctor.id)


def test_create_visit_unknown_patient(api_client, doctor):
    r = api_client.post(
        "/api/v1/visits/",
        {"patient_id": str(uuid.uuid4()), "consulting_doctor_id": str(doctor.id)},
        format="json",
    )
    assert r.status_code == 404
    assert r.data["message"] == "Patient Not Found"
    assert not Visit.objects.exists()


def test_update_visit_changes_doctor(api_client, patient, doctor, other_doctor):
    visit_id = api_client.post(
        "/api/v1/visits/",
        {"patient_id": str(patient.id), "consulting_doctor_id": str(doctor.id)},
        format="json",
    ).data["data"]["id"]

    r = api_client.patch(f"/api/v1/visits/{visit_id}/", {"consulting_doctor_id": str(other_doctor.id)}, format="json")
    assert r.status_code == 200, r.data
    assert r.data["data"]["consulting_doctor"]["id"] == str(other_doctor.id)


def test_list_filters(api_client, patient, female_patient, doctor, other_doctor):
    for p, d in ((patient, doctor), (female_patient, other_doctor)):
        api_client.post(
            "/api/v1/visits/",
            {"patient_id": str(p.id), "consulting_doctor_id": str(d.id)},
            format="json",
        )

    r = api_client.get("/api/v1/visits/", {"doctor_id": str(other_doctor.id)})
    assert r.data["data"]["total"] == 1
    assert r.data["data"]["items"][0]["patient"]["id"] == str(female_patient.id)

    r = api_client.get("/api/v1/visits/", {"status": "closed"})
    assert r.data["data"]["total"] == 0
