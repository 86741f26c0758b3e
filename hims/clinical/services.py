# hims/clinical/services.py
from __future__ import annotations

import logging
from uuid import UUID

from django.db import transaction
from rest_framework.exceptions import NotFound, ValidationError

from hims.audit.services import AuditService
from hims.clinical.models import PrimaryExamination, Prescription
from hims.patients.models import Patient
from hims.visits.models import Visit
from hims.visits.services import VISIT_NOT_FOUND, VisitService

logger = logging.getLogger(__name__)

PRESCRIPTION_NOT_FOUND = "Prescription Not Found"
VISIT_PATIENT_MISMATCH = "Visit does not belong to this patient"

PRESCRIPTION_FIELDS = {
    "medicines",
    "provisional_diagnosis",
    "final_diagnosis",
    "investigation_advised",
    "treatment",
    "notes",
    "follow_up_date",
    "is_active",
}
EXAMINATION_FIELDS = {
    "complaints",
    "history",
    "vitals",
    "female_details",
    "investigations",
    "investigation_advised",
}


def _locked_visit(visit_id: UUID) -> Visit:
    visit = Visit.objects.select_for_update().filter(id=visit_id).first()
    if visit is None:
        raise NotFound(VISIT_NOT_FOUND)
    return visit


def _check_patient(visit: Visit, patient_id: UUID | None) -> None:
    if patient_id is None:
        return
    if not Patient.objects.filter(id=patient_id).exists():
        raise NotFound("Patient Not Found")
    if visit.patient_id != patient_id:
        raise ValidationError(VISIT_PATIENT_MISMATCH)


class PrescriptionService:
    @staticmethod
    @transaction.atomic
    def create(*, actor_user_id: int | None, visit_id: UUID, patient_id: UUID | None = None, **data) -> Prescription:
        visit = _locked_visit(visit_id)
        _check_patient(visit, patient_id)

        prescription = Prescription.objects.create(
            visit=visit,
            patient_id=visit.patient_id,
            doctor_id=visit.consulting_doctor_id,
            **{k: v for k, v in data.items() if k in PRESCRIPTION_FIELDS},
        )
        VisitService.close_visit(visit=visit, actor_user_id=actor_user_id)

        AuditService.log(
            event_code="prescription.created",
            entity_type="Prescription",
            entity_id=prescription.id,
            actor_user_id=actor_user_id,
            metadata={"visit": visit.code},
        )
        logger.info("Prescription written for visit %s", visit.code)
        return prescription

    @staticmethod
    @transaction.atomic
    def update(*, actor_user_id: int | None, prescription_id: UUID, data: dict) -> Prescription:
        prescription = Prescription.objects.select_for_update().filter(id=prescription_id).first()
        if prescription is None:
            raise NotFound(PRESCRIPTION_NOT_FOUND)

        updates = {k: v for k, v in data.items() if k in PRESCRIPTION_FIELDS}
        for k, v in updates.items():
            setattr(prescription, k, v)
        prescription.save()

        AuditService.log(
            event_code="prescription.updated",
            entity_type="Prescription",
            entity_id=prescription.id,
            actor_user_id=actor_user_id,
            metadata={"updated_fields": sorted(updates.keys())},
        )
        return prescription

    @staticmethod
    @transaction.atomic
    def deactivate(*, actor_user_id: int | None, prescription_id: UUID) -> Prescription:
        prescription = Prescription.objects.select_for_update().filter(id=prescription_id).first()
        if prescription is None:
            raise NotFound(PRESCRIPTION_NOT_FOUND)
        prescription.is_active = False
        prescription.save(update_fields=["is_active", "updated_at"])

        AuditService.log(
            event_code="prescription.deactivated",
            entity_type="Prescription",
            entity_id=prescription.id,
            actor_user_id=actor_user_id,
        )
        return prescription


class ExaminationService:
    @staticmethod
    @transaction.atomic
    def create(*, actor_user_id: int | None, visit_id: UUID, patient_id: UUID, **data) -> PrimaryExamination:
        visit = Visit.objects.filter(id=visit_id).first()
        if visit is None:
            raise NotFound(VISIT_NOT_FOUND)
        _check_patient(visit, patient_id)

        examination = PrimaryExamination.objects.create(
            visit=visit,
            patient_id=patient_id,
            created_by_id=actor_user_id,
            **{k: v for k, v in data.items() if k in EXAMINATION_FIELDS},
        )

        AuditService.log(
            event_code="examination.created",
            entity_type="PrimaryExamination",
            entity_id=examination.id,
            actor_user_id=actor_user_id,
            metadata={"visit": visit.code},
        )
        return examination
