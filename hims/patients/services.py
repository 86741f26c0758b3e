# hims/patients/services.py
from __future__ import annotations

import logging
from uuid import UUID

from django.db import IntegrityError, transaction
from rest_framework.exceptions import NotFound, ValidationError

from hims.audit.services import AuditService
from hims.common.sequences import next_uhid
from hims.patients.models import Patient

logger = logging.getLogger(__name__)

PATIENT_NOT_FOUND = "Patient Not Found"

UPDATABLE_FIELDS = {
    "name",
    "gender",
    "age",
    "patient_type",
    "mobile_number",
    "relation",
    "relative_name",
    "marital_status",
    "religion",
    "occupation",
    "email",
    "id_type",
    "id_no",
    "address",
}


class PatientService:
    @staticmethod
    @transaction.atomic
    def create_patient(*, actor_user_id: int | None, **data) -> Patient:
        fields = {k: v for k, v in data.items() if k in UPDATABLE_FIELDS}
        try:
            patient = Patient.objects.create(uhid=next_uhid(), **fields)
        except IntegrityError:
            raise ValidationError("Patient with this UHID already exists")

        AuditService.log(
            event_code="patient.created",
            entity_type="Patient",
            entity_id=patient.id,
            actor_user_id=actor_user_id,
            metadata={"uhid": patient.uhid},
        )
        logger.info("Patient registered uhid=%s", patient.uhid)
        return patient

    @staticmethod
    @transaction.atomic
    def update_patient(*, actor_user_id: int | None, patient_id: UUID, data: dict) -> Patient:
        patient = Patient.objects.select_for_update().filter(id=patient_id).first()
        if patient is None:
            raise NotFound(PATIENT_NOT_FOUND)

        updates = {k: v for k, v in (data or {}).items() if k in UPDATABLE_FIELDS}
        if "address" in updates:
            updates["address"] = {**(patient.address or {}), **(updates["address"] or {})}

        for k, v in updates.items():
            setattr(patient, k, v)
        patient.save()

        AuditService.log(
            event_code="patient.updated",
            entity_type="Patient",
            entity_id=patient.id,
            actor_user_id=actor_user_id,
            metadata={"updated_fields": sorted(updates.keys())},
        )
        return patient
