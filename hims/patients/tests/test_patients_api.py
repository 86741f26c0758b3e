# hims/patients/tests/test_patients_api.py
from decimal import Decimal

import pytest

from hims.audit.models import AuditEvent
from hims.patients.models import Patient

pytestmark = pytest.mark.django_db

PAYLOAD = {
    "name": "Ravi Kumar",
    "gender": "Male",
    "age": 34,
    "relation": "S/O",
    "relative_name": "Mohan",
    "mobile_number": "9876543210",
    "address": {"city": "Patna", "state": "Bihar"},
}


def test_register_patient_issues_uhid(api_client):
    r = api_client.post("/api/v1/patients/", PAYLOAD, format="json")
    assert r.status_code == 201, r.data
    data = r.data["data"]
    assert data["uhid"].startswith("UHID")
    assert len(data["uhid"]) == len("UHID") + 8 + 4
    assert AuditEvent.objects.filter(event_code="patient.created", entity_id=data["id"]).exists()


def test_uhids_are_unique_and_increasing(api_client):
    first = api_client.post("/api/v1/patients/", PAYLOAD, format="json").data["data"]["uhid"]
    second = api_client.post("/api/v1/patients/", {**PAYLOAD, "name": "Second"}, format="json").data["data"]["uhid"]
    assert first != second
    assert int(second[-4:]) == int(first[-4:]) + 1


def test_register_requires_name_and_valid_mobile(api_client):
    r = api_client.post("/api/v1/patients/", {**PAYLOAD, "name": ""}, format="json")
    assert r.status_code == 400
    assert "Patient name is required" in r.data["message"]

    r = api_client.post("/api/v1/patients/", {**PAYLOAD, "mobile_number": "12ab"}, format="json")
    assert r.status_code == 400


def test_update_merges_address_and_keeps_uhid(api_client, patient):
    patient.address = {"city": "Patna", "pincode": "800001"}
    patient.save()

    r = api_client.patch(f"/api/v1/patients/{patient.id}/", {"address": {"city": "Gaya"}, "uhid": "HACK"}, format="json")
    assert r.status_code == 200, r.data
    patient.refresh_from_db()
    assert patient.address == {"city": "Gaya", "pincode": "800001"}
    assert patient.uhid == "UHID202601010001"


def test_empty_update_is_rejected(api_client, patient):
    r = api_client.patch(f"/api/v1/patients/{patient.id}/", {}, format="json")
    assert r.status_code == 400


def test_list_search_by_mobile_and_uhid(api_client, patient, female_patient):
    r = api_client.get("/api/v1/patients/", {"search": "98765"})
    assert [p["id"] for p in r.data["data"]["items"]] == [str(patient.id)]

    r = api_client.get("/api/v1/patients/", {"search": female_patient.uhid})
    assert [p["id"] for p in r.data["data"]["items"]] == [str(female_patient.id)]

    r = api_client.get("/api/v1/patients/", {"gender": "Female"})
    assert r.data["data"]["total"] == 1


def test_dropdown_list_has_more(api_client):
    for i in range(3):
        Patient.objects.create(name=f"P{i}", gender="Male", relation="S/O", uhid=f"U{i}")

    r = api_client.get("/api/v1/patients/dropdown-list/", {"limit": 2})
    assert r.status_code == 200
    assert len(r.data["data"]["items"]) == 2
    assert r.data["data"]["hasMore"] is True
    assert " | " in r.data["data"]["items"][0]["label"]

    r = api_client.get("/api/v1/patients/dropdown-list/", {"limit": 2, "page": 2})
    assert r.data["data"]["hasMore"] is False


def test_details_bundle(api_client, patient, doctor):
    from hims.visits.services import VisitService

    VisitService.create_visit(actor_user_id=None, patient_id=patient.id, consulting_doctor_id=doctor.id)

    r = api_client.get(f"/api/v1/patients/{patient.id}/details/")
    assert r.status_code == 200, r.data
    assert r.data["data"]["patient"]["uhid"] == patient.uhid
    assert len(r.data["data"]["visits"]) == 1
    assert r.data["data"]["opd_bills"] == []
    assert r.data["data"]["ipd_admissions"] == []


def test_technician_cannot_register(client_for_role):
    r = client_for_role("Technician").post("/api/v1/patients/", PAYLOAD, format="json")
    assert r.status_code == 403


def test_age_keeps_fractional_years(api_client):
    r = api_client.post("/api/v1/patients/", {**PAYLOAD, "age": "1.0833"}, format="json")
    assert r.status_code == 201, r.data
    patient = Patient.objects.get(id=r.data["data"]["id"])
    assert patient.age == Decimal("1.0833")
    assert patient.age_display == "1.0833"

    r = api_client.post("/api/v1/patients/", {**PAYLOAD, "age": "150.5"}, format="json")
    assert r.status_code == 400
