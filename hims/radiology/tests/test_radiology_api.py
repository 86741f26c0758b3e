# hims/radiology/tests/test_radiology_api.py
import pytest

from hims.billing.services import OpdBillingService
from hims.lab.services import LabOrderService
from hims.radiology.models import RadiologyReport, RadiologyTemplate

pytestmark = pytest.mark.django_db


@pytest.fixture
def template(user):
    return RadiologyTemplate.objects.create(
        template_name="Chest X-Ray PA View",
        template_content="Lungs: <findings>\nHeart: normal size",
        created_by_id=user.pk,
    )


@pytest.fixture
def pending_xray(user, patient, doctor, radiology_service):
    bill = OpdBillingService.create_bill(
        actor_user_id=user.pk,
        patient_id=patient.id,
        consultant_doctor_id=doctor.id,
        services=[{"service_id": radiology_service.id, "price": radiology_service.rate}],
        payment_mode="cash",
    )
    return bill.lab_orders.get().tests.get()


@pytest.fixture
def xray_test(user, pending_xray):
    LabOrderService.collect(actor_user_id=user.pk, order_test_ids=[pending_xray.id])
    pending_xray.refresh_from_db()
    return pending_xray


def test_create_template_and_duplicate_name(client_for_role):
    tech = client_for_role("Technician")
    payload = {"template_name": "CT Brain", "template_content": "Plain CT of the brain"}

    r = tech.post("/api/v1/radiology-templates/", payload, format="json")
    assert r.status_code == 201, r.data
    assert r.data["data"]["is_active"] is True
    assert r.data["data"]["services"] == []

    r = tech.post("/api/v1/radiology-templates/", {**payload, "template_name": "ct brain"}, format="json")
    assert r.status_code == 400
    assert r.data["message"] == "Radiology template with this name already exists"


def test_receptionist_cannot_write_templates(client_for_role):
    r = client_for_role("Receptionist").post(
        "/api/v1/radiology-templates/",
        {"template_name": "USG Abdomen", "template_content": "..."},
        format="json",
    )
    assert r.status_code == 403


def test_link_and_unlink_service(api_client, template, radiology_service):
    url = f"/api/v1/radiology-templates/{template.id}/"

    r = api_client.post(url + "link-service/", {"service_id": str(radiology_service.id)}, format="json")
    assert r.status_code == 200, r.data
    assert r.data["data"]["radiology_template"]["template_name"] == "Chest X-Ray PA View"

    r = api_client.get(url)
    assert [s["code"] for s in r.data["data"]["services"]] == ["XRAY_CHEST"]

    r = api_client.get("/api/v1/radiology-templates/services-with-templates/")
    assert r.status_code == 200
    assert r.data["data"][0]["radiology_template"]["id"] == str(template.id)

    r = api_client.post(url + "unlink-service/", {"service_id": str(radiology_service.id)}, format="json")
    assert r.status_code == 200
    assert r.data["data"]["radiology_template"] is None

    r = api_client.post(url + "unlink-service/", {"service_id": str(radiology_service.id)}, format="json")
    assert r.status_code == 400
    assert r.data["message"] == "Service is not linked to this template"


def test_only_radiology_services_link(api_client, template, pathology_service):
    r = api_client.post(
        f"/api/v1/radiology-templates/{template.id}/link-service/",
        {"service_id": str(pathology_service.id)},
        format="json",
    )
    assert r.status_code == 400
    assert r.data["message"] == "Only Radiology services can be linked to a template"


def test_deleting_template_unlinks_services(api_client, template, radiology_service):
    radiology_service.radiology_template = template
    radiology_service.save()

    r = api_client.delete(f"/api/v1/radiology-templates/{template.id}/")
    assert r.status_code == 200
    radiology_service.refresh_from_db()
    assert radiology_service.radiology_template_id is None


def test_save_report_uses_linked_template(client_for_role, template, radiology_service, xray_test):
    radiology_service.radiology_template = template
    radiology_service.save()

    r = client_for_role("Technician").post(
        f"/api/v1/lab-order-tests/{xray_test.id}/save-radiology/",
        {"findings": "Clear lung fields", "impression": "Normal study"},
        format="json",
    )
    assert r.status_code == 200, r.data
    assert r.data["message"] == "Radiology report saved successfully"
    assert r.data["data"]["status"] == "saved"
    assert r.data["data"]["template"]["id"] == str(template.id)

    xray_test.lab_order.refresh_from_db()
    assert xray_test.lab_order.status == "saved"


def test_authorize_report_requires_findings(client_for_role, xray_test):
    r = client_for_role("Doctor").post(
        f"/api/v1/lab-order-tests/{xray_test.id}/save-radiology/",
        {"authorize": True, "findings": "  "},
        format="json",
    )
    assert r.status_code == 400
    assert r.data["message"] == "Findings are required to authorize the report"


def test_authorized_report_is_locked_and_printable(client_for_role, xray_test):
    doctor_client = client_for_role("Doctor")
    url = f"/api/v1/lab-order-tests/{xray_test.id}/"

    r = doctor_client.post(url + "save-radiology/", {"findings": "Cardiomegaly", "authorize": True}, format="json")
    assert r.status_code == 200, r.data
    assert r.data["data"]["authorized_at"] is not None
    assert r.data["data"]["status"] == "authorized"

    xray_test.refresh_from_db()
    assert xray_test.saved_at is not None
    assert xray_test.lab_order.status == "authorized"

    r = doctor_client.post(url + "save-radiology/", {"findings": "Changed"}, format="json")
    assert r.status_code == 400
    assert r.data["message"] == "Authorized report cannot be modified"
    assert RadiologyReport.objects.get(order_test=xray_test).findings == "Cardiomegaly"

    r = client_for_role("Receptionist").get(url + "print-radiology/")
    assert r.status_code == 200
    assert r.content.startswith(b"%PDF")


def test_report_on_pathology_test_rejected(client_for_role, user, patient, doctor, pathology_service):
    bill = OpdBillingService.create_bill(
        actor_user_id=user.pk,
        patient_id=patient.id,
        consultant_doctor_id=doctor.id,
        services=[{"service_id": pathology_service.id, "price": pathology_service.rate}],
        payment_mode="cash",
    )
    cbc = bill.lab_orders.get().tests.get()

    r = client_for_role("Technician").post(
        f"/api/v1/lab-order-tests/{cbc.id}/save-radiology/", {"findings": "x"}, format="json"
    )
    assert r.status_code == 400
    assert r.data["message"] == "Test is not a radiology service"


def test_report_requires_collected_sample(client_for_role, pending_xray):
    r = client_for_role("Doctor").post(
        f"/api/v1/lab-order-tests/{pending_xray.id}/save-radiology/",
        {"findings": "Clear lungs", "authorize": True},
        format="json",
    )
    assert r.status_code == 400
    assert r.data["message"] == "Sample is not collected yet"
    assert not RadiologyReport.objects.filter(order_test=pending_xray).exists()
    pending_xray.refresh_from_db()
    assert pending_xray.status == "pending"


def test_missing_report_is_404(client_for_role, xray_test):
    r = client_for_role("Technician").get(f"/api/v1/lab-order-tests/{xray_test.id}/radiology-report/")
    assert r.status_code == 404
    assert r.data["message"] == "Radiology Report Not Found"
