# hims/billing/services.py
from __future__ import annotations

import logging
from uuid import UUID

from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from hims.audit.services import AuditService
from hims.billing.models import IpdAdmission, IpdItem, OpdBill, OpdBillItem
from hims.billing.totals import compute_totals, line_amount, money, payment_status, totals_from_gross
from hims.catalog.models import Service
from hims.common.constants import BillingType, BillStatus, PatientStatus, ServiceApplicable, VisitType
from hims.common.sequences import next_opd_bill_id, timestamp_code
from hims.doctors.models import Doctor
from hims.lab.services import LabOrderService
from hims.patients.models import Patient
from hims.visits.services import VisitService
from hims.wards.services import BedService

logger = logging.getLogger(__name__)

OPD_BILL_NOT_FOUND = "OPD Bill Not Found"
IPD_NOT_FOUND = "IPD Admission Not Found"
SERVICES_NOT_FOUND = "Some Services Not Found"
ALREADY_ADMITTED = "Patient is already admitted"
ALREADY_DISCHARGED = "Patient is already discharged"


def _require_patient(patient_id, *, lock: bool = False) -> Patient:
    qs = Patient.objects.select_for_update() if lock else Patient.objects.all()
    patient = qs.filter(id=patient_id).first()
    if patient is None:
        raise NotFound("Patient Not Found")
    return patient


def _require_doctor(doctor_id) -> Doctor:
    doctor = Doctor.objects.filter(id=doctor_id).first()
    if doctor is None:
        raise NotFound("Doctor Not Found")
    return doctor


def _billable_services(lines: list[dict], billing_type: str) -> dict[UUID, Service]:
    """
    Every line's service must exist and apply to `billing_type` (or Both).
    """
    ids = {line["service_id"] for line in lines}
    found = {
        s.id: s
        for s in Service.objects.filter(
            id__in=ids,
            applicable_on__in=[billing_type, ServiceApplicable.BOTH],
        ).prefetch_related("lab_tests", "linked_parameters")
    }
    if len(found) != len(ids):
        raise NotFound(SERVICES_NOT_FOUND)
    return found


def _audit(event_code: str, entity_type: str, entity_id, actor_user_id, **metadata) -> None:
    AuditService.log(
        event_code=event_code,
        entity_type=entity_type,
        entity_id=entity_id,
        actor_user_id=actor_user_id,
        metadata=metadata or None,
    )


class OpdBillingService:
    @staticmethod
    @transaction.atomic
    def create_bill(
        *,
        actor_user_id: int | None,
        patient_id: UUID,
        consultant_doctor_id: UUID,
        services: list[dict],
        payment_mode: str,
        paid_amount=0,
        discount=0,
        referred_by: str = "",
        visit_note: str = "",
        priority: str | None = None,
        instructions: str = "",
        bill_date=None,
    ) -> OpdBill:
        """
        Bill, OPD visit and lab order are written together or not at all.
        """
        if not services:
            raise ValidationError("At least one service is required")
        totals = compute_totals(services, discount=discount, paid=paid_amount)

        patient = _require_patient(patient_id)
        doctor = _require_doctor(consultant_doctor_id)
        catalog = _billable_services(services, BillingType.OPD)

        visit = VisitService.create_visit(
            actor_user_id=actor_user_id,
            patient_id=patient.id,
            consulting_doctor_id=doctor.id,
            visit_type=VisitType.OPD,
            referred_by=referred_by,
            visit_note=visit_note,
        )

        try:
            bill = OpdBill.objects.create(
                bill_id=next_opd_bill_id(),
                visit=visit,
                patient=patient,
                consultant_doctor=doctor,
                payment_mode=payment_mode,
                gross_amount=totals.gross,
                discount=totals.discount,
                net_amount=totals.net,
                paid_amount=totals.paid,
                status=payment_status(totals),
                bill_date=bill_date or timezone.now(),
            )
        except IntegrityError:
            raise ValidationError("Bill with this id already exists")

        OpdBillItem.objects.bulk_create(
            [
                OpdBillItem(
                    bill=bill,
                    service=catalog[line["service_id"]],
                    price=money(line["price"]),
                    quantity=line.get("quantity") or 1,
                    amount=line_amount(line),
                )
                for line in services
            ]
        )

        order = LabOrderService.create_for_bill(
            actor_user_id=actor_user_id,
            billing_type=BillingType.OPD,
            patient=patient,
            services=[catalog[line["service_id"]] for line in services],
            visit=visit,
            doctor=doctor,
            opd_bill=bill,
            priority=priority,
            instructions=instructions,
        )

        _audit(
            "opd_bill.created",
            "OpdBill",
            bill.id,
            actor_user_id,
            bill_id=bill.bill_id,
            net_amount=str(bill.net_amount),
            lab_order=order.accession_no if order else None,
        )
        logger.info("OPD bill created bill_id=%s patient=%s net=%s", bill.bill_id, patient.uhid, bill.net_amount)
        return bill

    @staticmethod
    @transaction.atomic
    def update_bill(*, actor_user_id: int | None, bill_id: UUID, data: dict) -> OpdBill:
        bill = OpdBill.objects.select_for_update().filter(id=bill_id).first()
        if bill is None:
            raise NotFound(OPD_BILL_NOT_FOUND)
        if bill.status == BillStatus.CANCELLED:
            raise ValidationError("Cancelled bill cannot be updated")

        totals = totals_from_gross(
            bill.gross_amount,
            discount=data.get("discount", bill.discount),
            paid=data.get("paid_amount", bill.paid_amount),
        )
        if "payment_mode" in data:
            bill.payment_mode = data["payment_mode"]
        bill.discount = totals.discount
        bill.net_amount = totals.net
        bill.paid_amount = totals.paid
        bill.status = payment_status(totals)
        bill.save()

        _audit("opd_bill.updated", "OpdBill", bill.id, actor_user_id, updated_fields=sorted(data.keys()), status=bill.status)
        return bill

    @staticmethod
    @transaction.atomic
    def cancel_bill(*, actor_user_id: int | None, bill_id: UUID) -> OpdBill:
        bill = OpdBill.objects.select_for_update().filter(id=bill_id).first()
        if bill is None:
            raise NotFound(OPD_BILL_NOT_FOUND)
        if bill.status == BillStatus.CANCELLED:
            raise ValidationError("Bill is already cancelled")

        bill.status = BillStatus.CANCELLED
        bill.save(update_fields=["status", "updated_at"])

        _audit("opd_bill.cancelled", "OpdBill", bill.id, actor_user_id, bill_id=bill.bill_id)
        logger.info("OPD bill cancelled bill_id=%s", bill.bill_id)
        return bill


class IpdService:
    @staticmethod
    @transaction.atomic
    def admit(
        *,
        actor_user_id: int | None,
        patient_id: UUID,
        referring_doctor_id: UUID,
        bed_id: UUID,
        services: list[dict] | None = None,
        discount=0,
        paid_amount=0,
        admitted_at=None,
        priority: str | None = None,
        instructions: str = "",
    ) -> IpdAdmission:
        services = services or []
        totals = compute_totals(services, discount=discount, paid=paid_amount)

        # patient row lock serializes concurrent admissions of the same patient
        patient = _require_patient(patient_id, lock=True)
        doctor = _require_doctor(referring_doctor_id)
        bed = BedService.lock_available(bed_id=bed_id)
        if IpdAdmission.objects.filter(patient=patient, patient_status=PatientStatus.IN_TREATMENT).exists():
            raise ValidationError(ALREADY_ADMITTED)
        catalog = _billable_services(services, BillingType.IPD) if services else {}

        visit = VisitService.create_visit(
            actor_user_id=actor_user_id,
            patient_id=patient.id,
            consulting_doctor_id=doctor.id,
            visit_type=VisitType.IPD,
        )

        try:
            admission = IpdAdmission.objects.create(
                bill_number=timestamp_code("IPD"),
                patient=patient,
                referring_doctor=doctor,
                bed=bed,
                visit=visit,
                admitted_at=admitted_at or timezone.now(),
                total_amount=totals.gross,
                discount=totals.discount,
                net_amount=totals.net,
                paid_amount=totals.paid,
                due_amount=totals.due,
            )
        except IntegrityError:
            raise ValidationError("Admission with this bill number already exists")

        BedService.occupy(bed=bed, patient_id=patient.id)
        IpdService._write_items(admission=admission, lines=services, catalog=catalog)
        LabOrderService.create_for_bill(
            actor_user_id=actor_user_id,
            billing_type=BillingType.IPD,
            patient=patient,
            services=[catalog[line["service_id"]] for line in services],
            visit=visit,
            doctor=doctor,
            ipd_admission=admission,
            priority=priority,
            instructions=instructions,
        )

        _audit(
            "ipd.admitted",
            "IpdAdmission",
            admission.id,
            actor_user_id,
            bill_number=admission.bill_number,
            bed_id=str(bed.id),
        )
        logger.info("IPD admission %s patient=%s bed=%s", admission.bill_number, patient.uhid, bed.bed_number)
        return admission

    @staticmethod
    @transaction.atomic
    def update_admission(*, actor_user_id: int | None, admission_id: UUID, data: dict) -> IpdAdmission:
        admission = IpdAdmission.objects.select_for_update().filter(id=admission_id).first()
        if admission is None:
            raise NotFound(IPD_NOT_FOUND)

        discharged = admission.patient_status == PatientStatus.DISCHARGED
        new_status = data.get("patient_status")
        if discharged and (new_status == PatientStatus.IN_TREATMENT or "bed_id" in data):
            raise ValidationError(ALREADY_DISCHARGED)

        if "referring_doctor_id" in data:
            admission.referring_doctor = _require_doctor(data["referring_doctor_id"])

        if new_status == PatientStatus.DISCHARGED and not discharged:
            BedService.release(bed_id=admission.bed_id)
            admission.patient_status = PatientStatus.DISCHARGED
            admission.discharged_at = timezone.now()
            logger.info("IPD discharge %s bed=%s", admission.bill_number, admission.bed_id)
        elif data.get("bed_id") and data["bed_id"] != admission.bed_id:
            new_bed = BedService.lock_available(bed_id=data["bed_id"])
            BedService.occupy(bed=new_bed, patient_id=admission.patient_id)
            BedService.release(bed_id=admission.bed_id)
            logger.info("IPD transfer %s bed %s -> %s", admission.bill_number, admission.bed_id, new_bed.id)
            admission.bed = new_bed

        gross = admission.total_amount
        if "services" in data:
            lines = data["services"] or []
            totals = compute_totals(
                lines,
                discount=data.get("discount", admission.discount),
                paid=data.get("paid_amount", admission.paid_amount),
            )
            catalog = _billable_services(lines, BillingType.IPD) if lines else {}
            billed_before = set(admission.items.values_list("service_id", flat=True))
            admission.items.all().delete()
            IpdService._write_items(admission=admission, lines=lines, catalog=catalog)
            LabOrderService.create_for_bill(
                actor_user_id=actor_user_id,
                billing_type=BillingType.IPD,
                patient=admission.patient,
                services=[s for sid, s in catalog.items() if sid not in billed_before],
                visit=admission.visit,
                doctor=admission.referring_doctor,
                ipd_admission=admission,
            )
        else:
            totals = totals_from_gross(
                gross,
                discount=data.get("discount", admission.discount),
                paid=data.get("paid_amount", admission.paid_amount),
            )

        admission.total_amount = totals.gross
        admission.discount = totals.discount
        admission.net_amount = totals.net
        admission.paid_amount = totals.paid
        admission.due_amount = totals.due
        admission.save()

        _audit(
            "ipd.updated",
            "IpdAdmission",
            admission.id,
            actor_user_id,
            updated_fields=sorted(data.keys()),
            patient_status=admission.patient_status,
        )
        return admission

    @staticmethod
    def _write_items(*, admission: IpdAdmission, lines: list[dict], catalog: dict[UUID, Service]) -> None:
        IpdItem.objects.bulk_create(
            [
                IpdItem(
                    admission=admission,
                    service=catalog[line["service_id"]],
                    price=money(line["price"]),
                    quantity=line.get("quantity") or 1,
                    amount=line_amount(line),
                )
                for line in lines
            ]
        )
