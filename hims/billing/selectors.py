# hims/billing/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import Prefetch, QuerySet
from rest_framework.exceptions import NotFound

from hims.billing.models import IpdAdmission, IpdItem, OpdBill, OpdBillItem
from hims.common.filters import FilterBuilder


def _items(model) -> Prefetch:
    return Prefetch("items", queryset=model.objects.select_related("service").order_by("created_at"))


def get_opd_bill(*, bill_id: UUID) -> OpdBill:
    bill = (
        OpdBill.objects.select_related("patient", "consultant_doctor", "visit")
        .prefetch_related(_items(OpdBillItem), "lab_orders")
        .filter(id=bill_id)
        .first()
    )
    if bill is None:
        raise NotFound("OPD Bill Not Found")
    return bill


def list_opd_bills(
    *,
    search: str | None = None,
    status: str | None = None,
    doctor_id: str | None = None,
    patient_id: str | None = None,
    payment_mode: str | None = None,
    from_date=None,
    to_date=None,
) -> QuerySet[OpdBill]:
    q = (
        FilterBuilder()
        .search(["bill_id", "patient__name", "patient__uhid", "patient__mobile_number"], search)
        .eq("status", status)
        .eq("consultant_doctor_id", doctor_id)
        .eq("patient_id", patient_id)
        .eq("payment_mode", payment_mode)
        .date_range("bill_date", from_date, to_date)
        .build()
    )
    return OpdBill.objects.filter(q).select_related("patient", "consultant_doctor").order_by("-bill_date")


def get_admission(*, admission_id: UUID) -> IpdAdmission:
    admission = (
        IpdAdmission.objects.select_related("patient", "referring_doctor", "bed", "bed__ward", "bed__floor", "visit")
        .prefetch_related(_items(IpdItem), "lab_orders")
        .filter(id=admission_id)
        .first()
    )
    if admission is None:
        raise NotFound("IPD Admission Not Found")
    return admission


def list_admissions(
    *,
    search: str | None = None,
    patient_status: str | None = None,
    doctor_id: str | None = None,
    patient_id: str | None = None,
    from_date=None,
    to_date=None,
) -> QuerySet[IpdAdmission]:
    q = (
        FilterBuilder()
        .search(["bill_number", "patient__name", "patient__uhid", "patient__mobile_number"], search)
        .eq("patient_status", patient_status)
        .eq("referring_doctor_id", doctor_id)
        .eq("patient_id", patient_id)
        .date_range("admitted_at", from_date, to_date)
        .build()
    )
    return (
        IpdAdmission.objects.filter(q)
        .select_related("patient", "referring_doctor", "bed", "bed__ward")
        .order_by("-admitted_at")
    )
