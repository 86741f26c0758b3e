# hims/lab/tests/conftest.py
import pytest

from hims.billing.services import OpdBillingService


@pytest.fixture
def lab_order(user, patient, doctor, pathology_service, radiology_service):
    """
    OPD bill with one Pathology (CBC) and one Radiology (X-Ray) line.
    """
    bill = OpdBillingService.create_bill(
        actor_user_id=user.pk,
        patient_id=patient.id,
        consultant_doctor_id=doctor.id,
        services=[
            {"service_id": pathology_service.id, "price": pathology_service.rate},
            {"service_id": radiology_service.id, "price": radiology_service.rate},
        ],
        payment_mode="cash",
    )
    return bill.lab_orders.get()


@pytest.fixture
def cbc_test(lab_order, pathology_service):
    return lab_order.tests.get(service=pathology_service)


@pytest.fixture
def xray_test(lab_order, radiology_service):
    return lab_order.tests.get(service=radiology_service)
