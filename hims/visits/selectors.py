# hims/visits/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import QuerySet
from rest_framework.exceptions import NotFound

from hims.common.filters import FilterBuilder
from hims.visits.models import Visit


def get_visit(*, visit_id: UUID) -> Visit:
    visit = Visit.objects.select_related("patient", "consulting_doctor").filter(id=visit_id).first()
    if visit is None:
        raise NotFound("Visit Not Found")
    return visit


def list_visits(
    *,
    patient_id: str | None = None,
    doctor_id: str | None = None,
    status: str | None = None,
    visit_type: str | None = None,
    from_date=None,
    to_date=None,
    search: str | None = None,
) -> QuerySet[Visit]:
    q = (
        FilterBuilder()
        .eq("patient_id", patient_id)
        .eq("consulting_doctor_id", doctor_id)
        .eq("status", status)
        .eq("visit_type", visit_type)
        .date_range("visit_date", from_date, to_date)
        .search(["code", "patient__name", "patient__uhid"], search)
        .build()
    )
    return Visit.objects.filter(q).select_related("patient", "consulting_doctor").order_by("-visit_date")
