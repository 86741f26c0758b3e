# hims/clinical/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import QuerySet
from rest_framework.exceptions import NotFound

from hims.clinical.models import PrimaryExamination, Prescription
from hims.common.filters import FilterBuilder


def get_prescription(*, prescription_id: UUID) -> Prescription:
    prescription = (
        Prescription.objects.select_related("visit", "patient", "doctor").filter(id=prescription_id).first()
    )
    if prescription is None:
        raise NotFound("Prescription Not Found")
    return prescription


def list_prescriptions(
    *,
    visit_id: str | None = None,
    patient_id: str | None = None,
    doctor_id: str | None = None,
    is_active=None,
    from_date=None,
    to_date=None,
) -> QuerySet[Prescription]:
    q = (
        FilterBuilder()
        .eq("visit_id", visit_id)
        .eq("patient_id", patient_id)
        .eq("doctor_id", doctor_id)
        .boolean("is_active", is_active)
        .date_range("created_at", from_date, to_date)
        .build()
    )
    return Prescription.objects.filter(q).select_related("visit", "patient", "doctor").order_by("-created_at")


def get_examination(*, examination_id: UUID) -> PrimaryExamination:
    examination = PrimaryExamination.objects.select_related("visit", "patient").filter(id=examination_id).first()
    if examination is None:
        raise NotFound("Examination Not Found")
    return examination


def list_examinations(*, visit_id: str | None = None, patient_id: str | None = None) -> QuerySet[PrimaryExamination]:
    q = FilterBuilder().eq("visit_id", visit_id).eq("patient_id", patient_id).build()
    return PrimaryExamination.objects.filter(q).select_related("visit", "patient").order_by("-created_at")
