# hims/wards/services.py
from __future__ import annotations

import logging
from uuid import UUID

from django.db import IntegrityError, transaction
from django.db.models import ProtectedError
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from hims.audit.services import AuditService
from hims.common.constants import BedStatus
from hims.wards.models import Bed, Floor, Ward

logger = logging.getLogger(__name__)

FLOOR_NOT_FOUND = "Floor with this Id Not Found"
WARD_NOT_FOUND = "Ward with this Id Not Found"
BED_NOT_FOUND = "Bed with this Id Not Found"
BED_NOT_AVAILABLE = "Bed is not available"


def _locked(model, obj_id, message: str):
    obj = model.objects.select_for_update().filter(id=obj_id).first()
    if obj is None:
        raise NotFound(message)
    return obj


def _audit(event_code: str, entity_type: str, entity_id, actor_user_id, **metadata) -> None:
    AuditService.log(
        event_code=event_code,
        entity_type=entity_type,
        entity_id=entity_id,
        actor_user_id=actor_user_id,
        metadata=metadata or None,
    )


class FloorService:
    @staticmethod
    @transaction.atomic
    def create(*, actor_user_id: int | None, name: str, status: str) -> Floor:
        if Floor.objects.filter(name__iexact=name.strip()).exists():
            raise ValidationError("Floor with this name already exists")
        try:
            floor = Floor.objects.create(name=name.strip(), status=status)
        except IntegrityError:
            raise ValidationError("Floor with this name already exists")
        _audit("floor.created", "Floor", floor.id, actor_user_id, name=floor.name)
        return floor

    @staticmethod
    @transaction.atomic
    def update(*, actor_user_id: int | None, floor_id: UUID, data: dict) -> Floor:
        floor = _locked(Floor, floor_id, FLOOR_NOT_FOUND)
        name = (data.get("name") or "").strip()
        if name and Floor.objects.filter(name__iexact=name).exclude(id=floor.id).exists():
            raise ValidationError("Floor with this name already exists")
        if name:
            floor.name = name
        if "status" in data:
            floor.status = data["status"]
        floor.save()
        _audit("floor.updated", "Floor", floor.id, actor_user_id, updated_fields=sorted(data.keys()))
        return floor

    @staticmethod
    @transaction.atomic
    def delete(*, actor_user_id: int | None, floor_id: UUID) -> None:
        floor = _locked(Floor, floor_id, FLOOR_NOT_FOUND)
        try:
            floor.delete()
        except ProtectedError:
            raise ValidationError("Floor has wards and cannot be deleted")
        _audit("floor.deleted", "Floor", floor_id, actor_user_id)


class WardService:
    @staticmethod
    @transaction.atomic
    def create(*, actor_user_id: int | None, name: str, floor_id: UUID, type: str, status: str) -> Ward:
        if not Floor.objects.filter(id=floor_id).exists():
            raise NotFound(FLOOR_NOT_FOUND)
        if Ward.objects.filter(floor_id=floor_id, name__iexact=name.strip()).exists():
            raise ValidationError("Ward with this name already exists")
        try:
            ward = Ward.objects.create(name=name.strip(), floor_id=floor_id, type=type, status=status)
        except IntegrityError:
            raise ValidationError("Ward with this name already exists")
        _audit("ward.created", "Ward", ward.id, actor_user_id, name=ward.name)
        return ward

    @staticmethod
    @transaction.atomic
    def update(*, actor_user_id: int | None, ward_id: UUID, data: dict) -> Ward:
        ward = _locked(Ward, ward_id, WARD_NOT_FOUND)
        if "floor_id" in data and not Floor.objects.filter(id=data["floor_id"]).exists():
            raise NotFound(FLOOR_NOT_FOUND)

        for k in ("name", "floor_id", "type", "status"):
            if k in data:
                setattr(ward, k, data[k])
        if Ward.objects.filter(floor_id=ward.floor_id, name__iexact=ward.name).exclude(id=ward.id).exists():
            raise ValidationError("Ward with this name already exists")
        ward.save()

        if "floor_id" in data:
            # beds follow their ward
            Bed.objects.filter(ward=ward).update(floor_id=ward.floor_id)

        _audit("ward.updated", "Ward", ward.id, actor_user_id, updated_fields=sorted(data.keys()))
        return ward

    @staticmethod
    @transaction.atomic
    def delete(*, actor_user_id: int | None, ward_id: UUID) -> None:
        ward = _locked(Ward, ward_id, WARD_NOT_FOUND)
        try:
            ward.delete()
        except ProtectedError:
            raise ValidationError("Ward has beds and cannot be deleted")
        _audit("ward.deleted", "Ward", ward_id, actor_user_id)


class BedService:
    @staticmethod
    @transaction.atomic
    def create_range(
        *,
        actor_user_id: int | None,
        ward_id: UUID,
        floor_id: UUID,
        bed_number_from: int,
        bed_number_to: int,
        status: str = BedStatus.AVAILABLE,
        type: str | None = None,
    ) -> list[Bed]:
        """
        One bed per number in [from, to]. Fails without creating anything when
        any number is already used in the ward.
        """
        ward = Ward.objects.filter(id=ward_id).first()
        if ward is None:
            raise NotFound(WARD_NOT_FOUND)
        if not Floor.objects.filter(id=floor_id).exists():
            raise NotFound(FLOOR_NOT_FOUND)
        if ward.floor_id != floor_id:
            raise ValidationError("Ward does not belong to this floor")

        numbers = [str(n) for n in range(bed_number_from, bed_number_to + 1)]
        taken = sorted(
            Bed.objects.filter(ward=ward, bed_number__in=numbers).values_list("bed_number", flat=True),
            key=int,
        )
        if taken:
            raise ValidationError(f"Bed with this number already exists: {', '.join(taken)}")

        try:
            beds = Bed.objects.bulk_create(
                [
                    Bed(bed_number=n, ward=ward, floor_id=floor_id, type=type or ward.type, status=status)
                    for n in numbers
                ]
            )
        except IntegrityError:
            raise ValidationError("Bed with this number already exists")

        _audit("bed.created", "Ward", ward.id, actor_user_id, bed_numbers=numbers)
        logger.info("Created %s beds in ward %s", len(beds), ward.name)
        return beds

    @staticmethod
    @transaction.atomic
    def update(*, actor_user_id: int | None, bed_id: UUID, data: dict) -> Bed:
        bed = _locked(Bed, bed_id, BED_NOT_FOUND)
        if "ward_id" in data:
            ward = Ward.objects.filter(id=data["ward_id"]).first()
            if ward is None:
                raise NotFound(WARD_NOT_FOUND)
            bed.ward = ward
            bed.floor_id = ward.floor_id
        if "bed_number" in data:
            bed.bed_number = str(data["bed_number"]).strip()
        if "type" in data:
            bed.type = data["type"]
        if "status" in data:
            if data["status"] != BedStatus.OCCUPIED and bed.status == BedStatus.OCCUPIED and bed.patient_id:
                raise ValidationError("Bed is occupied; discharge or transfer the patient first")
            bed.status = data["status"]

        if Bed.objects.filter(ward_id=bed.ward_id, bed_number=bed.bed_number).exclude(id=bed.id).exists():
            raise ValidationError("Bed with this number already exists")
        bed.save()

        _audit("bed.updated", "Bed", bed.id, actor_user_id, updated_fields=sorted(data.keys()))
        return bed

    @staticmethod
    @transaction.atomic
    def delete(*, actor_user_id: int | None, bed_id: UUID) -> None:
        bed = _locked(Bed, bed_id, BED_NOT_FOUND)
        if bed.status == BedStatus.OCCUPIED:
            raise ValidationError("Occupied bed cannot be deleted")
        try:
            bed.delete()
        except ProtectedError:
            raise ValidationError("Bed is referenced by admissions and cannot be deleted")
        _audit("bed.deleted", "Bed", bed_id, actor_user_id)

    # Occupancy, called by IPD admission inside its transaction.

    @staticmethod
    def lock_available(*, bed_id: UUID) -> Bed:
        bed = Bed.objects.select_for_update().filter(id=bed_id).first()
        if bed is None:
            raise NotFound("Bed Not Found")
        if bed.status != BedStatus.AVAILABLE:
            raise ValidationError(BED_NOT_AVAILABLE)
        return bed

    @staticmethod
    def occupy(*, bed: Bed, patient_id: UUID) -> Bed:
        bed.status = BedStatus.OCCUPIED
        bed.patient_id = patient_id
        bed.save(update_fields=["status", "patient", "updated_at"])
        return bed

    @staticmethod
    def release(*, bed_id: UUID | None) -> None:
        if bed_id is None:
            return
        Bed.objects.filter(id=bed_id).update(
            status=BedStatus.AVAILABLE,
            patient=None,
            updated_at=timezone.now(),
        )
