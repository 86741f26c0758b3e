# hims/visits/services.py
from __future__ import annotations

import logging
from uuid import UUID

from django.db import transaction
from rest_framework.exceptions import NotFound

from hims.audit.services import AuditService
from hims.common.constants import VisitStatus, VisitType
from hims.common.sequences import next_visit_code
from hims.doctors.models import Doctor
from hims.patients.models import Patient
from hims.visits.models import Visit

logger = logging.getLogger(__name__)

VISIT_NOT_FOUND = "Visit Not Found"

UPDATABLE_FIELDS = {
    "consulting_doctor_id",
    "visit_type",
    "referred_by",
    "visit_note",
    "medico_legal",
    "insurance_type",
    "policy_number",
    "status",
    "visit_date",
}


def _require_patient(patient_id) -> Patient:
    patient = Patient.objects.filter(id=patient_id).first()
    if patient is None:
        raise NotFound("Patient Not Found")
    return patient


def _require_doctor(doctor_id) -> Doctor:
    doctor = Doctor.objects.filter(id=doctor_id).first()
    if doctor is None:
        raise NotFound("Doctor Not Found")
    return doctor


class VisitService:
    @staticmethod
    @transaction.atomic
    def create_visit(
        *,
        actor_user_id: int | None,
        patient_id: UUID,
        consulting_doctor_id: UUID,
        visit_type: str = VisitType.OPD,
        **extra,
    ) -> Visit:
        patient = _require_patient(patient_id)
        doctor = _require_doctor(consulting_doctor_id)

        fields = {k: v for k, v in extra.items() if k in UPDATABLE_FIELDS and v is not None}
        fields.pop("consulting_doctor_id", None)
        visit = Visit.objects.create(
            code=next_visit_code(),
            patient=patient,
            consulting_doctor=doctor,
            visit_type=visit_type,
            **fields,
        )

        AuditService.log(
            event_code="visit.created",
            entity_type="Visit",
            entity_id=visit.id,
            actor_user_id=actor_user_id,
            metadata={"code": visit.code, "patient_id": str(patient.id)},
        )
        logger.info("Visit created code=%s patient=%s", visit.code, patient.uhid)
        return visit

    @staticmethod
    @transaction.atomic
    def update_visit(*, actor_user_id: int | None, visit_id: UUID, data: dict) -> Visit:
        visit = Visit.objects.select_for_update().filter(id=visit_id).first()
        if visit is None:
            raise NotFound(VISIT_NOT_FOUND)

        updates = {k: v for k, v in (data or {}).items() if k in UPDATABLE_FIELDS}
        if "consulting_doctor_id" in updates:
            _require_doctor(updates["consulting_doctor_id"])

        for k, v in updates.items():
            setattr(visit, k, v)
        visit.save()

        AuditService.log(
            event_code="visit.updated",
            entity_type="Visit",
            entity_id=visit.id,
            actor_user_id=actor_user_id,
            metadata={"updated_fields": sorted(updates.keys())},
        )
        return visit

    @staticmethod
    def close_visit(*, visit: Visit, actor_user_id: int | None) -> Visit:
        """
        pending -> closed. Runs inside the caller's transaction.
        """
        if visit.status == VisitStatus.CLOSED:
            return visit
        visit.status = VisitStatus.CLOSED
        visit.save(update_fields=["status", "updated_at"])

        AuditService.log(
            event_code="visit.closed",
            entity_type="Visit",
            entity_id=visit.id,
            actor_user_id=actor_user_id,
        )
        return visit
