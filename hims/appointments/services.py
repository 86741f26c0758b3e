# hims/appointments/services.py
from __future__ import annotations

import logging
from uuid import UUID

from django.db import IntegrityError, transaction
from rest_framework.exceptions import NotFound, ValidationError

from hims.appointments.models import Appointment
from hims.audit.services import AuditService
from hims.common.constants import AppointmentStatus
from hims.common.sequences import timestamp_code
from hims.doctors.models import Doctor
from hims.patients.models import Patient

logger = logging.getLogger(__name__)

DUPLICATE_APPOINTMENT = "Appointment with this patient already exists"


def _check_refs(*, doctor_id=None, patient_id=None) -> None:
    if doctor_id is not None and not Doctor.objects.filter(id=doctor_id).exists():
        raise NotFound("Doctor Not Found")
    if patient_id is not None and not Patient.objects.filter(id=patient_id).exists():
        raise NotFound("Patient Not Found")


class AppointmentService:
    @staticmethod
    @transaction.atomic
    def create_appointment(
        *,
        actor_user_id: int | None,
        doctor_id: UUID,
        patient_id: UUID,
        appointment_date,
        reason: str,
    ) -> Appointment:
        _check_refs(doctor_id=doctor_id, patient_id=patient_id)

        if Appointment.objects.filter(
            doctor_id=doctor_id,
            patient_id=patient_id,
            appointment_date=appointment_date,
            status=AppointmentStatus.SCHEDULED,
        ).exists():
            raise ValidationError(DUPLICATE_APPOINTMENT)

        try:
            appointment = Appointment.objects.create(
                appointment_number=timestamp_code("APPT"),
                doctor_id=doctor_id,
                patient_id=patient_id,
                appointment_date=appointment_date,
                reason=reason,
            )
        except IntegrityError:
            raise ValidationError("Appointment number already exists")

        AuditService.log(
            event_code="appointment.created",
            entity_type="Appointment",
            entity_id=appointment.id,
            actor_user_id=actor_user_id,
            metadata={"appointment_number": appointment.appointment_number},
        )
        logger.info("Appointment booked number=%s", appointment.appointment_number)
        return appointment

    @staticmethod
    @transaction.atomic
    def update_appointment(*, actor_user_id: int | None, appointment_id: UUID, data: dict) -> Appointment:
        appointment = Appointment.objects.select_for_update().filter(id=appointment_id).first()
        if appointment is None:
            raise NotFound("Appointment Not Found")

        allowed = {"doctor_id", "patient_id", "appointment_date", "reason", "status"}
        updates = {k: v for k, v in (data or {}).items() if k in allowed}
        _check_refs(doctor_id=updates.get("doctor_id"), patient_id=updates.get("patient_id"))

        for k, v in updates.items():
            setattr(appointment, k, v)
        appointment.save()

        AuditService.log(
            event_code="appointment.updated",
            entity_type="Appointment",
            entity_id=appointment.id,
            actor_user_id=actor_user_id,
            metadata={"updated_fields": sorted(updates.keys())},
        )
        return appointment

    @staticmethod
    @transaction.atomic
    def cancel_appointment(*, actor_user_id: int | None, appointment_id: UUID) -> Appointment:
        return AppointmentService.update_appointment(
            actor_user_id=actor_user_id,
            appointment_id=appointment_id,
            data={"status": AppointmentStatus.CANCELED},
        )
