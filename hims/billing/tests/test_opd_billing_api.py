# hims/billing/tests/test_opd_billing_api.py
import pytest

from hims.billing.models import OpdBill
from hims.lab.models import LabOrder
from hims.visits.models import Visit

pytestmark = pytest.mark.django_db


def _payload(patient, doctor, *lines, **extra):
    return {
        "patient_id": str(patient.id),
        "consultant_doctor_id": str(doctor.id),
        "payment_mode": "cash",
        "services": [{"service_id": str(s.id), "price": str(s.rate), "quantity": q} for s, q in lines],
        **extra,
    }


def test_create_bill_opens_visit(api_client, patient, doctor, consultation_service):
    r = api_client.post(
        "/api/v1/opd-billing/",
        _payload(patient, doctor, (consultation_service, 1), discount="100", paid_amount="200"),
        format="json",
    )
    assert r.status_code == 201, r.data
    data = r.data["data"]
    assert data["bill_id"] == "OPD-00001"
    assert data["gross_amount"] == "500.00"
    assert data["net_amount"] == "400.00"
    assert data["due_amount"] == "200.00"
    assert data["status"] == "partially_paid"
    assert data["lab_order_ids"] == []

    visit = Visit.objects.get(id=data["visit_id"])
    assert visit.visit_type == "OPD"
    assert visit.patient_id == patient.id


def test_lab_services_fan_out_into_one_order(api_client, patient, doctor, consultation_service, pathology_service, radiology_service):
    r = api_client.post(
        "/api/v1/opd-billing/",
        _payload(patient, doctor, (consultation_service, 1), (pathology_service, 1), (radiology_service, 1), paid_amount="1200"),
        format="json",
    )
    assert r.status_code == 201, r.data
    assert r.data["data"]["status"] == "paid"
    assert len(r.data["data"]["lab_order_ids"]) == 1

    order = LabOrder.objects.get(id=r.data["data"]["lab_order_ids"][0])
    assert order.accession_no.startswith("LAB")
    assert order.billing_type == "OPD"
    assert order.status == "pending"
    assert sorted(t.service.code for t in order.tests.all()) == ["CBC", "XRAY_CHEST"]


def test_ipd_only_service_is_rejected_atomically(api_client, patient, doctor, consultation_service, ipd_only_service):
    r = api_client.post(
        "/api/v1/opd-billing/",
        _payload(patient, doctor, (consultation_service, 1), (ipd_only_service, 1)),
        format="json",
    )
    assert r.status_code == 404
    assert r.data["message"] == "Some Services Not Found"
    assert not OpdBill.objects.exists()
    assert not Visit.objects.exists()
    assert not LabOrder.objects.exists()


def test_amount_must_match_price_times_quantity(api_client, patient, doctor, consultation_service):
    payload = _payload(patient, doctor, (consultation_service, 2))
    payload["services"][0]["amount"] = "500.00"

    r = api_client.post("/api/v1/opd-billing/", payload, format="json")
    assert r.status_code == 400
    assert r.data["message"] == "Amount must be equal to price x quantity"


def test_discount_and_paid_limits(api_client, patient, doctor, consultation_service):
    r = api_client.post(
        "/api/v1/opd-billing/",
        _payload(patient, doctor, (consultation_service, 1), discount="600"),
        format="json",
    )
    assert r.status_code == 400
    assert r.data["message"] == "Discount cannot be greater than gross amount"

    r = api_client.post(
        "/api/v1/opd-billing/",
        _payload(patient, doctor, (consultation_service, 1), paid_amount="501"),
        format="json",
    )
    assert r.status_code == 400
    assert r.data["message"] == "Paid amount cannot be greater than net amount"


def test_update_payment_then_cancel(client_for_role, patient, doctor, consultation_service):
    desk = client_for_role("Receptionist")
    bill_id = desk.post(
        "/api/v1/opd-billing/", _payload(patient, doctor, (consultation_service, 1)), format="json"
    ).data["data"]["id"]

    r = desk.patch(f"/api/v1/opd-billing/{bill_id}/", {"paid_amount": "500"}, format="json")
    assert r.status_code == 200, r.data
    assert r.data["data"]["status"] == "paid"

    r = desk.delete(f"/api/v1/opd-billing/{bill_id}/")
    assert r.status_code == 200
    assert OpdBill.objects.get(id=bill_id).status == "cancelled"

    r = desk.delete(f"/api/v1/opd-billing/{bill_id}/")
    assert r.status_code == 400
    assert r.data["message"] == "Bill is already cancelled"

    r = desk.patch(f"/api/v1/opd-billing/{bill_id}/", {"paid_amount": "0"}, format="json")
    assert r.status_code == 400
    assert r.data["message"] == "Cancelled bill cannot be updated"


def test_list_filters_and_search(api_client, patient, female_patient, doctor, consultation_service):
    api_client.post("/api/v1/opd-billing/", _payload(patient, doctor, (consultation_service, 1)), format="json")
    api_client.post(
        "/api/v1/opd-billing/",
        _payload(female_patient, doctor, (consultation_service, 1), paid_amount="500"),
        format="json",
    )

    r = api_client.get("/api/v1/opd-billing/", {"status": "paid"})
    assert r.data["data"]["total"] == 1
    assert r.data["data"]["items"][0]["patient"]["id"] == str(female_patient.id)

    r = api_client.get("/api/v1/opd-billing/", {"patient_id": str(patient.id)})
    assert r.data["data"]["total"] == 1


def test_bill_pdf_download(api_client, patient, doctor, consultation_service):
    bill_id = api_client.post(
        "/api/v1/opd-billing/", _payload(patient, doctor, (consultation_service, 1)), format="json"
    ).data["data"]["id"]

    r = api_client.get(f"/api/v1/opd-billing/{bill_id}/pdf/")
    assert r.status_code == 200
    assert r["Content-Type"] == "application/pdf"
    assert r["Content-Disposition"].startswith("attachment;")
    assert r.content.startswith(b"%PDF")
