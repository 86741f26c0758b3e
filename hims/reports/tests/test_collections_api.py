# hims/reports/tests/test_collections_api.py
from decimal import Decimal

import pytest

from hims.billing.services import IpdService, OpdBillingService

pytestmark = pytest.mark.django_db


@pytest.fixture
def activity(user, patient, female_patient, doctor, other_doctor, bed, consultation_service):
    line = [{"service_id": consultation_service.id, "price": "500"}]
    OpdBillingService.create_bill(
        actor_user_id=user.pk,
        patient_id=patient.id,
        consultant_doctor_id=doctor.id,
        services=line,
        payment_mode="cash",
        discount="50",
        paid_amount="200",
    )
    cancelled = OpdBillingService.create_bill(
        actor_user_id=user.pk,
        patient_id=patient.id,
        consultant_doctor_id=doctor.id,
        services=line,
        payment_mode="cash",
        paid_amount="500",
    )
    OpdBillingService.cancel_bill(actor_user_id=user.pk, bill_id=cancelled.id)

    IpdService.admit(
        actor_user_id=user.pk,
        patient_id=female_patient.id,
        referring_doctor_id=other_doctor.id,
        bed_id=bed.id,
        services=line,
        paid_amount="100",
    )


def test_all_types_summary(api_client, activity):
    r = api_client.get("/api/v1/collections/all-types/")
    assert r.status_code == 200, r.data
    data = r.data["data"]

    assert data["opd"]["totalBills"] == 1
    assert data["opd"]["grossAmount"] == Decimal("500.00")
    assert data["opd"]["netAmount"] == Decimal("450.00")
    assert data["opd"]["paidAmount"] == Decimal("200.00")

    assert data["ipd"]["totalAdmissions"] == 1
    assert data["ipd"]["dueAmount"] == Decimal("400.00")

    # visits are counted for every bill and admission, cancelled bills included
    assert data["visit"]["totalVisits"] == 3

    assert data["grandTotal"] == {
        "netAmount": Decimal("950.00"),
        "paidAmount": Decimal("300.00"),
        "dueAmount": Decimal("400.00"),
    }


def test_all_types_empty_range_is_zeroed(api_client, activity):
    r = api_client.get("/api/v1/collections/all-types/", {"fromDate": "2000-01-01", "toDate": "2000-01-31"})
    data = r.data["data"]
    assert data["opd"]["totalBills"] == 0
    assert data["opd"]["netAmount"] == Decimal("0.00")
    assert data["ipd"]["dueAmount"] == Decimal("0.00")
    assert data["visit"]["totalVisits"] == 0


def test_doctors_collection_groups_by_doctor(api_client, activity, doctor, other_doctor):
    r = api_client.get("/api/v1/collections/doctors-collection/")
    assert r.status_code == 200, r.data
    assert r.data["data"]["count"] == 2

    rows = {row["doctorName"]: row["collections"] for row in r.data["data"]["items"]}
    assert rows["Anil Sharma"]["opd"]["totalBills"] == 1
    assert rows["Anil Sharma"]["ipd"]["totalAdmissions"] == 0
    assert rows["Anil Sharma"]["visit"]["totalVisits"] == 2
    assert rows["Meena Rao"]["ipd"]["netAmount"] == Decimal("500.00")
    assert rows["Meena Rao"]["opd"]["totalBills"] == 0


def test_doctors_collection_single_doctor(api_client, activity, other_doctor):
    r = api_client.get("/api/v1/collections/doctors-collection/", {"id": str(other_doctor.id)})
    assert r.data["data"]["count"] == 1
    assert r.data["data"]["items"][0]["doctorId"] == str(other_doctor.id)


def test_doctors_collection_unknown_doctor(api_client):
    r = api_client.get("/api/v1/collections/doctors-collection/", {"id": "0b6f0a9c-4a2f-4b7e-9f6e-2f7c7d1c0e11"})
    assert r.status_code == 404
    assert r.data["message"] == "Doctor Not Found"


def test_collections_are_admin_only(client_for_role):
    r = client_for_role("Receptionist").get("/api/v1/collections/all-types/")
    assert r.status_code == 403
