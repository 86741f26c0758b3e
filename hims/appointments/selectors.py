# hims/appointments/selectors.py
from __future__ import annotations

from django.db.models import QuerySet
from rest_framework.exceptions import NotFound

from hims.appointments.models import Appointment
from hims.common.filters import FilterBuilder


def get_appointment(*, appointment_id) -> Appointment:
    appt = Appointment.objects.select_related("doctor", "patient").filter(id=appointment_id).first()
    if appt is None:
        raise NotFound("Appointment Not Found")
    return appt


def list_appointments(
    *,
    doctor_id=None,
    patient_id=None,
    status: str | None = None,
    from_date=None,
    to_date=None,
    search: str | None = None,
) -> QuerySet[Appointment]:
    q = (
        FilterBuilder()
        .eq("doctor_id", doctor_id)
        .eq("patient_id", patient_id)
        .eq("status", status)
        .date_range("appointment_date", from_date, to_date)
        .search(["appointment_number", "patient__name", "patient__uhid", "doctor__doctor_name"], search)
        .build()
    )
    return Appointment.objects.filter(q).select_related("doctor", "patient").order_by("-appointment_date")
