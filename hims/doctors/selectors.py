# hims/doctors/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import QuerySet
from rest_framework.exceptions import NotFound

from hims.common.filters import FilterBuilder
from hims.doctors.models import Doctor


def get_doctor(*, doctor_id: UUID) -> Doctor:
    doctor = Doctor.objects.filter(id=doctor_id).first()
    if doctor is None:
        raise NotFound("Doctor Not Found")
    return doctor


def search_doctors(
    *,
    search: str | None = None,
    department: str | None = None,
    specialization: str | None = None,
    is_active=None,
) -> QuerySet[Doctor]:
    q = (
        FilterBuilder()
        .search(["doctor_name", "mobile_no", "email", "employee_id"], search)
        .eq("department", department)
        .eq("specialization", specialization)
        .boolean("is_active", is_active)
        .build()
    )
    return Doctor.objects.filter(q).order_by("-created_at")


def distinct_values(field_name: str) -> list[str]:
    return list(
        Doctor.objects.filter(is_active=True)
        .exclude(**{field_name: ""})
        .order_by(field_name)
        .values_list(field_name, flat=True)
        .distinct()
    )
