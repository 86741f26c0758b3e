# hims/doctors/services.py
from __future__ import annotations

import logging
from uuid import UUID

from django.db import IntegrityError, transaction
from django.utils.crypto import get_random_string
from rest_framework.exceptions import NotFound, ValidationError

from hims.audit.services import AuditService
from hims.common.constants import Role
from hims.common.sequences import next_employee_id
from hims.doctors.models import Doctor
from hims.iam.models import User
from hims.iam.services import UserService

logger = logging.getLogger(__name__)

DOCTOR_NOT_FOUND = "Doctor Not Found"
LICENSE_EXISTS = "Doctor with this license number already exists"
EMAIL_EXISTS = "Doctor with this email already exists"

PROFILE_FIELDS = {
    "doctor_name",
    "specialization",
    "qualification",
    "license_no",
    "email",
    "mobile_no",
    "emergency_contact_no",
    "department",
    "designation",
    "consultation_fee",
    "address",
    "joining_date",
    "is_active",
    "is_consultant",
    "available_days",
    "consultation_timings",
    "notes",
}


def _split_name(full_name: str) -> tuple[str, str]:
    first, _, last = (full_name or "").strip().partition(" ")
    return first, last.strip()


def _check_unique(*, license_no: str | None, email: str | None, exclude_id=None) -> None:
    qs = Doctor.objects.all()
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    if license_no and qs.filter(license_no__iexact=license_no).exists():
        raise ValidationError(LICENSE_EXISTS)
    if email and qs.filter(email__iexact=email).exists():
        raise ValidationError(EMAIL_EXISTS)


class DoctorService:
    @staticmethod
    @transaction.atomic
    def create_doctor(*, actor_user_id: int | None, password: str | None = None, **data) -> Doctor:
        fields = {k: v for k, v in data.items() if k in PROFILE_FIELDS}
        fields["license_no"] = fields["license_no"].strip().upper()
        fields["email"] = fields["email"].strip().lower()

        _check_unique(license_no=fields["license_no"], email=fields["email"])
        if User.objects.filter(email__iexact=fields["email"]).exists():
            raise ValidationError(EMAIL_EXISTS)

        first_name, last_name = _split_name(fields["doctor_name"])
        user = UserService.create_user(
            actor_user_id=actor_user_id,
            email=fields["email"],
            password=password or get_random_string(12),
            first_name=first_name,
            last_name=last_name,
            mobile_number=fields.get("mobile_no", ""),
            role=Role.DOCTOR,
            is_active=fields.get("is_active", True),
        )

        try:
            doctor = Doctor.objects.create(user=user, employee_id=next_employee_id(), **fields)
        except IntegrityError:
            raise ValidationError(LICENSE_EXISTS)

        AuditService.log(
            event_code="doctor.created",
            entity_type="Doctor",
            entity_id=doctor.id,
            actor_user_id=actor_user_id,
            metadata={"employee_id": doctor.employee_id, "user_id": user.pk},
        )
        logger.info("Doctor created employee_id=%s", doctor.employee_id)
        return doctor

    @staticmethod
    @transaction.atomic
    def update_doctor(*, actor_user_id: int | None, doctor_id: UUID, data: dict) -> Doctor:
        doctor = Doctor.objects.select_for_update().select_related("user").filter(id=doctor_id).first()
        if doctor is None:
            raise NotFound(DOCTOR_NOT_FOUND)

        updates = {k: v for k, v in (data or {}).items() if k in PROFILE_FIELDS}
        if "license_no" in updates:
            updates["license_no"] = updates["license_no"].strip().upper()
        if "email" in updates:
            updates["email"] = updates["email"].strip().lower()
        _check_unique(license_no=updates.get("license_no"), email=updates.get("email"), exclude_id=doctor.id)

        for k, v in updates.items():
            setattr(doctor, k, v)
        try:
            doctor.save()
        except IntegrityError:
            raise ValidationError(LICENSE_EXISTS)

        user_updates = {}
        if "email" in updates:
            user_updates["email"] = updates["email"]
        if "doctor_name" in updates:
            user_updates["first_name"], user_updates["last_name"] = _split_name(updates["doctor_name"])
        if "mobile_no" in updates:
            user_updates["mobile_number"] = updates["mobile_no"]
        if "is_active" in updates:
            user_updates["is_active"] = updates["is_active"]
        if (data or {}).get("password"):
            user_updates["password"] = data["password"]
        if doctor.user_id and user_updates:
            UserService.update_user(actor_user_id=actor_user_id, user_id=doctor.user_id, data=user_updates)

        AuditService.log(
            event_code="doctor.updated",
            entity_type="Doctor",
            entity_id=doctor.id,
            actor_user_id=actor_user_id,
            metadata={"updated_fields": sorted(updates.keys())},
        )
        return doctor

    @staticmethod
    @transaction.atomic
    def deactivate_doctor(*, actor_user_id: int | None, doctor_id: UUID) -> Doctor:
        doctor = Doctor.objects.select_for_update().filter(id=doctor_id).first()
        if doctor is None:
            raise NotFound(DOCTOR_NOT_FOUND)

        doctor.is_active = False
        doctor.save(update_fields=["is_active", "updated_at"])
        if doctor.user_id:
            UserService.deactivate_user(actor_user_id=actor_user_id, user_id=doctor.user_id)

        AuditService.log(
            event_code="doctor.deactivated",
            entity_type="Doctor",
            entity_id=doctor.id,
            actor_user_id=actor_user_id,
        )
        return doctor
