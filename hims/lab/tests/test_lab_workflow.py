# hims/lab/tests/test_lab_workflow.py
import uuid

import pytest

from hims.audit.models import AuditEvent
from hims.billing.services import OpdBillingService
from hims.catalog.models import BioReference
from hims.lab.models import LabResult
from hims.lab.services import rollup_status

pytestmark = pytest.mark.django_db


def test_rollup_least_advanced_wins():
    assert rollup_status([]) == "pending"
    assert rollup_status(["authorized", "authorized"]) == "authorized"
    assert rollup_status(["authorized", "saved"]) == "saved"
    assert rollup_status(["collected", "authorized"]) == "collected"
    assert rollup_status(["authorized", "pending"]) == "pending"


def test_order_created_pending_with_sample_type(lab_order, cbc_test):
    assert lab_order.status == "pending"
    assert lab_order.collected_at is None
    assert cbc_test.sample_type == "Blood"


def test_order_detail_and_parameters(client_for_role, lab_order, hb_parameter):
    tech = client_for_role("Technician")
    r = tech.get(f"/api/v1/lab-orders/{lab_order.id}/")
    assert r.status_code == 200, r.data
    assert len(r.data["data"]["tests"]) == 2

    r = tech.get(f"/api/v1/lab-orders/{lab_order.id}/parameters/")
    assert r.status_code == 200
    groups = r.data["data"]
    assert [g["sampleType"] for g in groups] == ["Blood"]
    assert groups[0]["parameters"][0]["parameter_id"] == str(hb_parameter.id)


def test_collect_moves_order_to_collected_when_all_collected(client_for_role, lab_order, cbc_test, xray_test):
    tech = client_for_role("Technician")

    r = tech.post(
        "/api/v1/lab-order-tests/collect/",
        {"ids": [str(cbc_test.id)], "container_type": "edta_tube", "hemolyzed": True},
        format="json",
    )
    assert r.status_code == 200, r.data
    assert r.data["data"][0]["status"] == "collected"
    assert r.data["data"][0]["quality_flags"]

    lab_order.refresh_from_db()
    assert lab_order.status == "pending"

    tech.post("/api/v1/lab-order-tests/collect/", {"ids": [str(xray_test.id)]}, format="json")
    lab_order.refresh_from_db()
    assert lab_order.status == "collected"
    assert lab_order.collected_at is not None

    cbc_test.refresh_from_db()
    assert cbc_test.collected_at is not None
    assert cbc_test.collected_by_id is not None
    assert cbc_test.container_type == "edta_tube"


def test_collect_unknown_id_is_404_and_changes_nothing(client_for_role, cbc_test):
    r = client_for_role("Technician").post(
        "/api/v1/lab-order-tests/collect/",
        {"ids": [str(cbc_test.id), str(uuid.uuid4())]},
        format="json",
    )
    assert r.status_code == 404
    assert r.data["message"] == "Some Lab Order Tests Not Found"
    cbc_test.refresh_from_db()
    assert cbc_test.status == "pending"


def test_bulk_collect_writes_one_valid_audit_row_per_test(client_for_role, cbc_test, xray_test):
    ids = [str(cbc_test.id), str(xray_test.id)]
    r = client_for_role("Technician").post("/api/v1/lab-order-tests/collect/", {"ids": ids}, format="json")
    assert r.status_code == 200, r.data

    events = list(AuditEvent.objects.filter(event_code="lab_order_test.collected"))
    assert sorted(e.entity_id for e in events) == sorted(ids)
    for event in events:
        event.full_clean()
        assert event.metadata["batch"] == ids


def test_results_require_collected_sample(client_for_role, cbc_test, hb_parameter):
    r = client_for_role("Technician").post(
        f"/api/v1/lab-order-tests/{cbc_test.id}/save-results/",
        {"results": [{"parameter_id": str(hb_parameter.id), "value": "14"}]},
        format="json",
    )
    assert r.status_code == 400
    assert r.data["message"] == "Sample is not collected yet"


def test_save_results_interprets_against_patient_reference(client_for_role, cbc_test, hb_parameter):
    tech = client_for_role("Technician")
    tech.post("/api/v1/lab-order-tests/collect/", {"ids": [str(cbc_test.id)]}, format="json")

    r = tech.post(
        f"/api/v1/lab-order-tests/{cbc_test.id}/save-results/",
        {"results": [{"parameter_id": str(hb_parameter.id), "value": "6.5"}]},
        format="json",
    )
    assert r.status_code == 200, r.data
    assert r.data["data"]["status"] == "saved"

    result = LabResult.objects.get(order_test=cbc_test, parameter=hb_parameter)
    assert result.version == 1
    assert result.interpretation == "critical_low"
    assert result.is_critical is True
    assert result.reference_range == "13-17"
    assert result.unit == "g/dL"


def test_resave_bumps_version_and_keeps_history(client_for_role, cbc_test, hb_parameter):
    tech = client_for_role("Technician")
    tech.post("/api/v1/lab-order-tests/collect/", {"ids": [str(cbc_test.id)]}, format="json")
    url = f"/api/v1/lab-order-tests/{cbc_test.id}/save-results/"

    tech.post(url, {"results": [{"parameter_id": str(hb_parameter.id), "value": "14"}]}, format="json")
    tech.post(url, {"results": [{"parameter_id": str(hb_parameter.id), "value": "14.2"}]}, format="json")

    result = LabResult.objects.get(order_test=cbc_test, parameter=hb_parameter)
    assert result.version == 2
    assert result.value == "14.2"
    assert result.interpretation == "normal"
    assert [p["value"] for p in result.previous_values] == ["14"]


def test_unlinked_parameter_is_rejected(client_for_role, cbc_test):
    from hims.catalog.models import LabParameter

    stray = LabParameter.objects.create(parameter_name="Urea")
    tech = client_for_role("Technician")
    tech.post("/api/v1/lab-order-tests/collect/", {"ids": [str(cbc_test.id)]}, format="json")

    r = tech.post(
        f"/api/v1/lab-order-tests/{cbc_test.id}/save-results/",
        {"results": [{"parameter_id": str(stray.id), "value": "30"}]},
        format="json",
    )
    assert r.status_code == 400
    assert r.data["message"] == "Parameter is not linked to this service"


def test_authorize_locks_results(client_for_role, cbc_test, hb_parameter):
    tech = client_for_role("Technician")
    doctor_client = client_for_role("Doctor")
    tech.post("/api/v1/lab-order-tests/collect/", {"ids": [str(cbc_test.id)]}, format="json")
    tech.post(
        f"/api/v1/lab-order-tests/{cbc_test.id}/save-results/",
        {"results": [{"parameter_id": str(hb_parameter.id), "value": "15"}]},
        format="json",
    )

    r = doctor_client.post(f"/api/v1/lab-order-tests/{cbc_test.id}/save-authorize/", {}, format="json")
    assert r.status_code == 200, r.data
    assert r.data["data"]["status"] == "authorized"
    assert r.data["data"]["authorized_at"] is not None
    assert LabResult.objects.get(order_test=cbc_test).status == "authorized"

    r = tech.post(
        f"/api/v1/lab-order-tests/{cbc_test.id}/save-results/",
        {"results": [{"parameter_id": str(hb_parameter.id), "value": "16"}]},
        format="json",
    )
    assert r.status_code == 400
    assert r.data["message"] == "Authorized results cannot be modified"


def test_order_rollup_through_results(client_for_role, lab_order, cbc_test, xray_test, hb_parameter):
    tech = client_for_role("Technician")
    tech.post("/api/v1/lab-order-tests/collect/", {"ids": [str(cbc_test.id), str(xray_test.id)]}, format="json")
    tech.post(
        f"/api/v1/lab-order-tests/{cbc_test.id}/save-authorize/",
        {"results": [{"parameter_id": str(hb_parameter.id), "value": "15"}]},
        format="json",
    )

    lab_order.refresh_from_db()
    assert lab_order.status == "collected"

    r = tech.patch(f"/api/v1/lab-order-tests/{xray_test.id}/update-status/", {"status": "authorized"}, format="json")
    assert r.status_code == 200, r.data
    lab_order.refresh_from_db()
    assert lab_order.status == "authorized"


def test_results_sheet_matches_patient(client_for_role, cbc_test, hb_parameter):
    r = client_for_role("Receptionist").get(f"/api/v1/lab-order-tests/{cbc_test.id}/results/")
    assert r.status_code == 200, r.data
    rows = r.data["data"]["parameters"]
    assert len(rows) == 1
    assert rows[0]["reference_range"] == "13-17"
    assert [ref["gender"] for ref in rows[0]["reference_ranges"]] == ["Male"]
    assert rows[0]["result"] is None


def test_print_requires_authorized_tests(client_for_role, cbc_test, hb_parameter):
    tech = client_for_role("Technician")
    r = tech.get(f"/api/v1/lab-order-tests/{cbc_test.id}/print/")
    assert r.status_code == 400
    assert r.data["message"] == "No authorized tests to print"

    tech.post("/api/v1/lab-order-tests/collect/", {"ids": [str(cbc_test.id)]}, format="json")
    tech.post(
        f"/api/v1/lab-order-tests/{cbc_test.id}/save-authorize/",
        {"results": [{"parameter_id": str(hb_parameter.id), "value": "15"}]},
        format="json",
    )
    r = tech.get(f"/api/v1/lab-order-tests/{cbc_test.id}/print/")
    assert r.status_code == 200
    assert r["Content-Disposition"].startswith("inline;")
    assert r.content.startswith(b"%PDF")


def test_list_filters_by_head_and_status(client_for_role, cbc_test, xray_test):
    tech = client_for_role("Technician")
    r = tech.get("/api/v1/lab-order-tests/", {"head": "Radiology"})
    assert [row["id"] for row in r.data["data"]["items"]] == [str(xray_test.id)]

    r = tech.get("/api/v1/lab-order-tests/", {"status": "collected"})
    assert r.data["data"]["total"] == 0


def test_receptionist_cannot_collect(client_for_role, cbc_test):
    r = client_for_role("Receptionist").post("/api/v1/lab-order-tests/collect/", {"ids": [str(cbc_test.id)]}, format="json")
    assert r.status_code == 403


@pytest.mark.parametrize("age, expected", [("1.0833", ["Year"]), ("1", ["Month", "Year"])])
def test_month_band_follows_registered_fractional_age(api_client, client_for_role, doctor, pathology_service, hb_parameter, age, expected):
    BioReference.objects.create(
        parameter=hb_parameter, age_from=0, age_to=12, age_type="Month", gender="All", min="9.5", max="14"
    )
    BioReference.objects.create(
        parameter=hb_parameter, age_from=1, age_to=17, age_type="Year", gender="All", min="11", max="14.5"
    )
    r = api_client.post(
        "/api/v1/patients/",
        {"name": "Baby Arav", "gender": "Male", "age": age, "relation": "S/O", "relative_name": "Suresh"},
        format="json",
    )
    assert r.status_code == 201, r.data

    bill = OpdBillingService.create_bill(
        actor_user_id=None,
        patient_id=r.data["data"]["id"],
        consultant_doctor_id=doctor.id,
        services=[{"service_id": pathology_service.id, "price": pathology_service.rate}],
        payment_mode="cash",
    )
    order_test = bill.lab_orders.get().tests.get()

    r = client_for_role("Technician").get(f"/api/v1/lab-order-tests/{order_test.id}/results/")
    assert r.status_code == 200, r.data
    row = r.data["data"]["parameters"][0]
    assert sorted(ref["age_type"] for ref in row["reference_ranges"]) == expected
