# hims/conftest.py
import uuid
from decimal import Decimal

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from hims.catalog.models import BioReference, LabParameter, LabTest, Service, ServiceType
from hims.common.constants import ServiceApplicable, ServiceHead
from hims.doctors.models import Doctor
from hims.iam.models import User
from hims.patients.models import Patient
from hims.wards.models import Bed, Floor, Ward


def make_user(role: str, email: str | None = None, **extra) -> User:
    email = email or f"{role.lower()}@hims.test"
    return User.objects.create_user(email=email, password="secret123", role=role, first_name=role, **extra)


@pytest.fixture(autouse=True)
def _fresh_throttle_counters():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def user(db):
    return make_user("Admin", email="admin@hims.test")


@pytest.fixture
def api_client(user):
    c = APIClient()
    c.force_authenticate(user=user)
    return c


@pytest.fixture
def anon_client():
    return APIClient()


@pytest.fixture
def client_for_role(db):
    """
    client_for_role("Technician") -> APIClient authenticated as a fresh user with that role.
    """
    def _make(role: str) -> APIClient:
        c = APIClient()
        c.force_authenticate(user=make_user(role, email=f"{role.lower()}-{uuid.uuid4().hex[:8]}@hims.test"))
        return c

    return _make


@pytest.fixture
def patient(db):
    return Patient.objects.create(
        name="Ravi Kumar",
        gender="Male",
        age=34,
        relation="S/O",
        relative_name="Mohan Kumar",
        mobile_number="9876543210",
        uhid="UHID202601010001",
    )


@pytest.fixture
def female_patient(db):
    return Patient.objects.create(
        name="Sita Devi",
        gender="Female",
        age=28,
        relation="W/O",
        relative_name="Ram",
        uhid="UHID202601010002",
    )


@pytest.fixture
def doctor(db):
    return Doctor.objects.create(
        doctor_name="Anil Sharma",
        employee_id="DOC260001",
        specialization="Medicine",
        qualification="MBBS",
        license_no="LIC-001",
        email="anil@hims.test",
        department="General Medicine",
        consultation_fee=Decimal("500.00"),
    )


@pytest.fixture
def other_doctor(db):
    return Doctor.objects.create(
        doctor_name="Meena Rao",
        employee_id="DOC260002",
        specialization="Surgery",
        license_no="LIC-002",
        email="meena@hims.test",
        department="Surgery",
    )


@pytest.fixture
def floor(db):
    return Floor.objects.create(name="Ground Floor")


@pytest.fixture
def ward(floor):
    return Ward.objects.create(name="General Ward", floor=floor, type="general")


@pytest.fixture
def bed(ward):
    return Bed.objects.create(bed_number="GW-1", ward=ward, floor=ward.floor, type=ward.type)


@pytest.fixture
def second_bed(ward):
    return Bed.objects.create(bed_number="GW-2", ward=ward, floor=ward.floor, type=ward.type)


def make_service(code: str, head: str, *, rate="100.00", applicable_on=ServiceApplicable.BOTH, name=None) -> Service:
    stype, _ = ServiceType.objects.get_or_create(name=f"{head} Services", defaults={"service_head": head})
    return Service.objects.create(
        name=name or code.title(),
        code=code,
        service_type=stype,
        head=head,
        rate=Decimal(rate),
        applicable_on=applicable_on,
    )


@pytest.fixture
def consultation_service(db):
    return make_service("CONSULT", ServiceHead.CONSULTATION, rate="500.00")


@pytest.fixture
def ipd_only_service(db):
    return make_service("ROOM_RENT", ServiceHead.OTHER, rate="1500.00", applicable_on=ServiceApplicable.IPD)


@pytest.fixture
def hb_parameter(db):
    test = LabTest.objects.create(test_name="Complete Blood Count", report_type="Haematology", format_type="Tabular", sample_type="Blood")
    param = LabParameter.objects.create(test=test, parameter_name="Haemoglobin", unit="g/dL", sample_type="Blood")
    BioReference.objects.create(
        parameter=param,
        unit="g/dL",
        age_from=Decimal("18"),
        age_to=Decimal("100"),
        age_type="Year",
        gender="Male",
        min=Decimal("13"),
        max=Decimal("17"),
        critical_low=Decimal("7"),
        critical_high=Decimal("20"),
    )
    BioReference.objects.create(
        parameter=param,
        unit="g/dL",
        age_from=Decimal("18"),
        age_to=Decimal("100"),
        age_type="Year",
        gender="Female",
        min=Decimal("12"),
        max=Decimal("15"),
    )
    return param


@pytest.fixture
def pathology_service(hb_parameter):
    service = make_service("CBC", ServiceHead.PATHOLOGY, rate="300.00", name="CBC")
    service.linked_parameters.add(hb_parameter)
    return service


@pytest.fixture
def radiology_service(db):
    return make_service("XRAY_CHEST", ServiceHead.RADIOLOGY, rate="400.00", name="X-Ray Chest")
