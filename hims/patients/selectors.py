# hims/patients/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import QuerySet
from rest_framework.exceptions import NotFound

from hims.common.filters import FilterBuilder
from hims.patients.models import Patient

SEARCH_FIELDS = ["name", "relative_name", "mobile_number", "uhid"]


def get_patient(*, patient_id: UUID) -> Patient:
    patient = Patient.objects.filter(id=patient_id).first()
    if patient is None:
        raise NotFound("Patient Not Found")
    return patient


def search_patients(
    *,
    search: str | None = None,
    gender: str | None = None,
    patient_type: str | None = None,
    from_date=None,
    to_date=None,
) -> QuerySet[Patient]:
    q = (
        FilterBuilder()
        .search(SEARCH_FIELDS, search)
        .eq("gender", gender)
        .eq("patient_type", patient_type)
        .date_range("created_at", from_date, to_date)
        .build()
    )
    return Patient.objects.filter(q).order_by("-created_at")


def patient_details(*, patient_id: UUID) -> dict:
    """
    Patient with its visits, OPD bills and IPD admissions, newest first.
    """
    from hims.billing.models import IpdAdmission, OpdBill
    from hims.visits.models import Visit

    patient = get_patient(patient_id=patient_id)
    return {
        "patient": patient,
        "visits": Visit.objects.filter(patient=patient).select_related("consulting_doctor").order_by("-visit_date"),
        "opd_bills": OpdBill.objects.filter(patient=patient).select_related("consultant_doctor").order_by("-bill_date"),
        "ipd_admissions": IpdAdmission.objects.filter(patient=patient)
        .select_related("referring_doctor", "bed")
        .order_by("-admitted_at"),
    }
