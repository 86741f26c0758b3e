# hims/billing/tests/test_ipd_admission_api.py
import pytest

from hims.billing.models import IpdAdmission
from hims.lab.models import LabOrder, LabOrderTest
from hims.visits.models import Visit

pytestmark = pytest.mark.django_db


def _admit(client, patient, doctor, bed, *lines, **extra):
    return client.post(
        "/api/v1/ipd-billing/",
        {
            "patient_id": str(patient.id),
            "referring_doctor_id": str(doctor.id),
            "bed_id": str(bed.id),
            "services": [{"service_id": str(s.id), "price": str(s.rate), "quantity": q} for s, q in lines],
            **extra,
        },
        format="json",
    )


def test_admission_occupies_bed(api_client, patient, doctor, bed, ipd_only_service):
    r = _admit(api_client, patient, doctor, bed, (ipd_only_service, 2), discount="500", paid_amount="1000")
    assert r.status_code == 201, r.data
    data = r.data["data"]
    assert data["bill_number"].startswith("IPD-")
    assert data["patient_status"] == "In Treatment"
    assert data["total_amount"] == "3000.00"
    assert data["net_amount"] == "2500.00"
    assert data["due_amount"] == "1500.00"

    bed.refresh_from_db()
    assert bed.status == "occupied"
    assert bed.patient_id == patient.id
    assert Visit.objects.get(id=data["visit_id"]).visit_type == "IPD"


def test_unavailable_bed_is_rejected(api_client, patient, female_patient, doctor, bed):
    assert _admit(api_client, patient, doctor, bed).status_code == 201

    r = _admit(api_client, female_patient, doctor, bed)
    assert r.status_code == 400
    assert r.data["message"] == "Bed is not available"
    assert IpdAdmission.objects.count() == 1


def test_maintenance_bed_is_rejected(api_client, patient, doctor, bed):
    bed.status = "maintenance"
    bed.save()

    r = _admit(api_client, patient, doctor, bed)
    assert r.status_code == 400
    assert not IpdAdmission.objects.exists()


def test_patient_cannot_be_admitted_twice(api_client, patient, doctor, bed, second_bed):
    assert _admit(api_client, patient, doctor, bed).status_code == 201

    r = _admit(api_client, patient, doctor, second_bed)
    assert r.status_code == 400
    assert r.data["message"] == "Patient is already admitted"
    second_bed.refresh_from_db()
    assert second_bed.status == "available"


def test_opd_only_service_cannot_be_billed_in_ipd(api_client, patient, doctor, bed):
    from hims.common.constants import ServiceApplicable, ServiceHead
    from hims.conftest import make_service

    opd_only = make_service("OPD_CARD", ServiceHead.OTHER, applicable_on=ServiceApplicable.OPD)
    r = _admit(api_client, patient, doctor, bed, (opd_only, 1))
    assert r.status_code == 404
    bed.refresh_from_db()
    assert bed.status == "available"
    assert not Visit.objects.exists()


def test_discharge_frees_bed(api_client, patient, doctor, bed):
    admission_id = _admit(api_client, patient, doctor, bed).data["data"]["id"]

    r = api_client.patch(f"/api/v1/ipd-billing/{admission_id}/", {"patient_status": "Discharged"}, format="json")
    assert r.status_code == 200, r.data
    assert r.data["data"]["patient_status"] == "Discharged"
    assert r.data["data"]["discharged_at"] is not None

    bed.refresh_from_db()
    assert bed.status == "available"
    assert bed.patient_id is None


def test_discharged_admission_is_frozen(api_client, patient, doctor, bed, second_bed):
    admission_id = _admit(api_client, patient, doctor, bed).data["data"]["id"]
    api_client.patch(f"/api/v1/ipd-billing/{admission_id}/", {"patient_status": "Discharged"}, format="json")

    r = api_client.patch(f"/api/v1/ipd-billing/{admission_id}/", {"patient_status": "In Treatment"}, format="json")
    assert r.status_code == 400
    assert r.data["message"] == "Patient is already discharged"

    r = api_client.patch(f"/api/v1/ipd-billing/{admission_id}/", {"bed_id": str(second_bed.id)}, format="json")
    assert r.status_code == 400


def test_readmission_after_discharge(api_client, patient, doctor, bed):
    admission_id = _admit(api_client, patient, doctor, bed).data["data"]["id"]
    api_client.patch(f"/api/v1/ipd-billing/{admission_id}/", {"patient_status": "Discharged"}, format="json")

    assert _admit(api_client, patient, doctor, bed).status_code == 201


def test_bed_transfer(api_client, patient, doctor, bed, second_bed):
    admission_id = _admit(api_client, patient, doctor, bed).data["data"]["id"]

    r = api_client.patch(f"/api/v1/ipd-billing/{admission_id}/", {"bed_id": str(second_bed.id)}, format="json")
    assert r.status_code == 200, r.data
    assert r.data["data"]["bed"]["id"] == str(second_bed.id)

    bed.refresh_from_db()
    second_bed.refresh_from_db()
    assert bed.status == "available"
    assert second_bed.status == "occupied"
    assert second_bed.patient_id == patient.id


def test_adding_services_recomputes_and_orders_only_new_lab_work(
    api_client, patient, doctor, bed, ipd_only_service, pathology_service, radiology_service
):
    admission_id = _admit(api_client, patient, doctor, bed, (pathology_service, 1)).data["data"]["id"]
    assert LabOrderTest.objects.filter(lab_order__ipd_admission_id=admission_id).count() == 1

    lines = [
        {"service_id": str(pathology_service.id), "price": "300.00"},
        {"service_id": str(radiology_service.id), "price": "400.00"},
        {"service_id": str(ipd_only_service.id), "price": "1500.00", "quantity": 2},
    ]
    r = api_client.patch(f"/api/v1/ipd-billing/{admission_id}/", {"services": lines, "paid_amount": "1000"}, format="json")
    assert r.status_code == 200, r.data
    assert r.data["data"]["total_amount"] == "3700.00"
    assert r.data["data"]["due_amount"] == "2700.00"
    assert len(r.data["data"]["items"]) == 3

    tests = LabOrderTest.objects.filter(lab_order__ipd_admission_id=admission_id)
    assert sorted(t.service.code for t in tests) == ["CBC", "XRAY_CHEST"]
    assert LabOrder.objects.filter(ipd_admission_id=admission_id).count() == 2


def test_technician_cannot_admit(client_for_role, patient, doctor, bed):
    r = _admit(client_for_role("Technician"), patient, doctor, bed)
    assert r.status_code == 403


def test_admission_pdf(api_client, patient, doctor, bed, ipd_only_service):
    admission_id = _admit(api_client, patient, doctor, bed, (ipd_only_service, 1)).data["data"]["id"]
    r = api_client.get(f"/api/v1/ipd-billing/{admission_id}/pdf/")
    assert r.status_code == 200
    assert r.content.startswith(b"%PDF")
