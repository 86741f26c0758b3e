# hims/lab/services.py
from __future__ import annotations

import logging
from typing import Iterable
from uuid import UUID

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from hims.audit.services import AuditService
from hims.catalog.models import LabParameter, Service
from hims.catalog.reference_ranges import best_reference
from hims.common.constants import ORDER_STATUS_RANK, OrderStatus, Priority
from hims.common.sequences import next_accession_no
from hims.lab.interpretation import interpret
from hims.lab.models import LabOrder, LabOrderTest, LabResult

logger = logging.getLogger(__name__)

LAB_ORDER_NOT_FOUND = "Lab Order Not Found"
LAB_ORDER_TEST_NOT_FOUND = "Lab Order Test Not Found"
SOME_TESTS_NOT_FOUND = "Some Lab Order Tests Not Found"
SAMPLE_NOT_COLLECTED = "Sample is not collected yet"
RESULTS_LOCKED = "Authorized results cannot be modified"

# status -> (timestamp field, actor field) stamped on first entry
STATUS_STAMPS = {
    OrderStatus.COLLECTED: ("collected_at", "collected_by_id"),
    OrderStatus.SAVED: ("saved_at", "saved_by_id"),
    OrderStatus.AUTHORIZED: ("authorized_at", "authorized_by_id"),
}

SAMPLE_FIELDS = {
    "sample_type",
    "container_type",
    "instructions",
    "technician_id",
    "machine_used",
    "hemolyzed",
    "lipemic",
    "icteric",
    "remarks",
}

_RANK_TO_STATUS = {rank: status for status, rank in ORDER_STATUS_RANK.items()}


def rollup_status(statuses: Iterable[str]) -> str:
    """
    Order status from its tests: the least advanced test wins.

    all authorized -> authorized; all saved/authorized -> saved;
    all at least collected -> collected; otherwise pending.
    """
    ranks = [ORDER_STATUS_RANK[OrderStatus(s)] for s in statuses]
    if not ranks:
        return OrderStatus.PENDING
    return _RANK_TO_STATUS[min(ranks)]


def _default_sample_type(service: Service) -> str:
    for test in service.lab_tests.all():
        if test.sample_type:
            return test.sample_type
    for parameter in service.linked_parameters.all():
        if parameter.sample_type:
            return parameter.sample_type
    return ""


class LabOrderService:
    @staticmethod
    def create_for_bill(
        *,
        actor_user_id: int | None,
        billing_type: str,
        patient,
        services: Iterable[Service],
        visit=None,
        doctor=None,
        opd_bill=None,
        ipd_admission=None,
        priority: str = Priority.NORMAL,
        instructions: str = "",
    ) -> LabOrder | None:
        """
        One order per bill with one test per distinct Pathology/Radiology
        service. Returns None when the bill has no lab services.
        Runs inside the billing transaction.
        """
        lab_services: list[Service] = []
        seen: set[UUID] = set()
        for service in services:
            if service.is_lab_service and service.id not in seen:
                seen.add(service.id)
                lab_services.append(service)
        if not lab_services:
            return None

        order = LabOrder.objects.create(
            accession_no=next_accession_no(),
            patient=patient,
            visit=visit,
            doctor=doctor,
            billing_type=billing_type,
            opd_bill=opd_bill,
            ipd_admission=ipd_admission,
            priority=priority or Priority.NORMAL,
            instructions=instructions or "",
        )
        LabOrderTest.objects.bulk_create(
            [
                LabOrderTest(lab_order=order, service=service, sample_type=_default_sample_type(service))
                for service in lab_services
            ]
        )

        AuditService.log(
            event_code="lab_order.created",
            entity_type="LabOrder",
            entity_id=order.id,
            actor_user_id=actor_user_id,
            metadata={"accession_no": order.accession_no, "tests": len(lab_services), "billing_type": billing_type},
        )
        logger.info("Lab order created accession_no=%s tests=%s", order.accession_no, len(lab_services))
        return order

    # Locking order: the parent LabOrder row first, then its tests. Every
    # status write goes through here so the rollup sees committed siblings.

    @staticmethod
    def lock_order(*, order_id: UUID) -> LabOrder:
        order = LabOrder.objects.select_for_update().filter(id=order_id).first()
        if order is None:
            raise NotFound(LAB_ORDER_NOT_FOUND)
        return order

    @staticmethod
    def lock_test(*, order_test_id: UUID) -> LabOrderTest:
        order_id = LabOrderTest.objects.filter(id=order_test_id).values_list("lab_order_id", flat=True).first()
        if order_id is None:
            raise NotFound(LAB_ORDER_TEST_NOT_FOUND)
        LabOrderService.lock_order(order_id=order_id)
        return LabOrderTest.objects.select_for_update(of=("self",)).select_related("service").get(id=order_test_id)

    @staticmethod
    def apply_status(*, order_test: LabOrderTest, status: str, actor_user_id: int | None) -> LabOrderTest:
        """
        Set the status and stamp its timestamp and actor when unset.
        Caller holds the order lock and recomputes the order afterwards.
        """
        order_test.status = status
        stamp = STATUS_STAMPS.get(status)
        if stamp is not None:
            at_field, by_field = stamp
            if getattr(order_test, at_field) is None:
                setattr(order_test, at_field, timezone.now())
            if getattr(order_test, by_field) is None:
                setattr(order_test, by_field, actor_user_id)
        order_test.save()
        return order_test

    @staticmethod
    def recompute_order(*, order_id: UUID) -> LabOrder:
        order = LabOrderService.lock_order(order_id=order_id)
        previous = order.status
        order.status = rollup_status(order.tests.values_list("status", flat=True))
        if ORDER_STATUS_RANK[OrderStatus(order.status)] >= ORDER_STATUS_RANK[OrderStatus.COLLECTED]:
            if order.collected_at is None:
                order.collected_at = timezone.now()
        else:
            order.collected_at = None
        order.save(update_fields=["status", "collected_at", "updated_at"])

        if previous != order.status:
            logger.info("Lab order %s %s -> %s", order.accession_no, previous, order.status)
        return order

    @staticmethod
    @transaction.atomic
    def update_test_status(
        *,
        actor_user_id: int | None,
        order_test_id: UUID,
        status: str,
        details: dict | None = None,
    ) -> LabOrderTest:
        order_test = LabOrderService.lock_test(order_test_id=order_test_id)
        for k, v in (details or {}).items():
            if k in SAMPLE_FIELDS:
                setattr(order_test, k, v)
        LabOrderService.apply_status(order_test=order_test, status=status, actor_user_id=actor_user_id)
        LabOrderService.recompute_order(order_id=order_test.lab_order_id)

        AuditService.log(
            event_code="lab_order_test.status_changed",
            entity_type="LabOrderTest",
            entity_id=order_test.id,
            actor_user_id=actor_user_id,
            metadata={"status": status},
        )
        return order_test

    @staticmethod
    @transaction.atomic
    def collect(*, actor_user_id: int | None, order_test_ids: list[UUID], details: dict | None = None) -> list[LabOrderTest]:
        """
        Bulk sample collection. Tests already past pending keep their status.
        """
        ids = list(dict.fromkeys(order_test_ids))
        order_ids = set(
            LabOrderTest.objects.filter(id__in=ids).values_list("lab_order_id", flat=True)
        )
        if LabOrderTest.objects.filter(id__in=ids).count() != len(ids):
            raise NotFound(SOME_TESTS_NOT_FOUND)

        for order_id in sorted(order_ids, key=str):
            LabOrderService.lock_order(order_id=order_id)

        tests = list(LabOrderTest.objects.select_for_update().filter(id__in=ids).order_by("created_at"))
        collected: list[LabOrderTest] = []
        for order_test in tests:
            if order_test.status != OrderStatus.PENDING:
                continue
            for k, v in (details or {}).items():
                if k in SAMPLE_FIELDS:
                    setattr(order_test, k, v)
            LabOrderService.apply_status(order_test=order_test, status=OrderStatus.COLLECTED, actor_user_id=actor_user_id)
            collected.append(order_test)

        for order_id in order_ids:
            LabOrderService.recompute_order(order_id=order_id)

        # one row per test; the batch is kept in metadata
        batch = [str(i) for i in ids]
        for order_test in collected:
            AuditService.log(
                event_code="lab_order_test.collected",
                entity_type="LabOrderTest",
                entity_id=order_test.id,
                actor_user_id=actor_user_id,
                metadata={"lab_order_id": str(order_test.lab_order_id), "batch": batch},
            )
        logger.info("Samples collected: %s of %s requested", len(collected), len(ids))
        return tests


class LabResultService:
    @staticmethod
    @transaction.atomic
    def save_results(
        *,
        actor_user_id: int | None,
        order_test_id: UUID,
        results: list[dict],
        authorize: bool = False,
        remarks: str | None = None,
    ) -> LabOrderTest:
        """
        Upsert one LabResult per parameter, then move the test to saved, or
        to authorized together with all of its results.
        """
        order_test = LabOrderService.lock_test(order_test_id=order_test_id)
        if order_test.status == OrderStatus.PENDING:
            raise ValidationError(SAMPLE_NOT_COLLECTED)
        if order_test.status == OrderStatus.AUTHORIZED:
            raise ValidationError(RESULTS_LOCKED)

        if results:
            LabResultService._upsert(order_test=order_test, results=results, actor_user_id=actor_user_id)
        elif not order_test.results.exists():
            raise ValidationError("Results are required")

        if remarks is not None:
            order_test.remarks = remarks

        now = timezone.now()
        if authorize:
            order_test.results.update(
                status=OrderStatus.AUTHORIZED,
                authorized_at=now,
                authorized_by_id=actor_user_id,
                updated_at=now,
            )
            status = OrderStatus.AUTHORIZED
        else:
            order_test.results.update(status=OrderStatus.SAVED, updated_at=now)
            status = OrderStatus.SAVED

        if status == OrderStatus.AUTHORIZED and order_test.saved_at is None:
            order_test.saved_at = now
            order_test.saved_by_id = actor_user_id
        LabOrderService.apply_status(order_test=order_test, status=status, actor_user_id=actor_user_id)
        order = LabOrderService.recompute_order(order_id=order_test.lab_order_id)

        AuditService.log(
            event_code="lab_result.authorized" if authorize else "lab_result.saved",
            entity_type="LabOrderTest",
            entity_id=order_test.id,
            actor_user_id=actor_user_id,
            metadata={"accession_no": order.accession_no, "parameters": len(results or [])},
        )
        logger.info("Lab results %s for %s (%s)", status, order.accession_no, order_test.service_id)
        return order_test

    @staticmethod
    def _upsert(*, order_test: LabOrderTest, results: list[dict], actor_user_id: int | None) -> None:
        parameter_ids = list(dict.fromkeys(r["parameter_id"] for r in results))
        parameters = {
            p.id: p
            for p in LabParameter.objects.filter(id__in=parameter_ids).prefetch_related("bio_references")
        }
        if len(parameters) != len(parameter_ids):
            raise NotFound("Some Lab Parameters Not Found")

        linked = set(order_test.service.linked_parameters.values_list("id", flat=True))
        if linked and not set(parameter_ids) <= linked:
            raise ValidationError("Parameter is not linked to this service")

        patient = order_test.lab_order.patient
        existing = {r.parameter_id: r for r in order_test.results.select_for_update()}
        now = timezone.now()

        for row in results:
            parameter = parameters[row["parameter_id"]]
            value = str(row.get("value") if row.get("value") is not None else "").strip()
            reference = best_reference(parameter.bio_references.all(), age_years=patient.age, gender=patient.gender)
            flag = interpret(value, reference)

            result = existing.get(parameter.id)
            if result is None:
                result = LabResult(order_test=order_test, parameter=parameter, value=value, version=1)
                existing[parameter.id] = result
            elif result.value != value:
                result.previous_values = list(result.previous_values or []) + [
                    {
                        "value": result.value,
                        "version": result.version,
                        "entered_at": result.entered_at.isoformat() if result.entered_at else None,
                        "entered_by": result.entered_by_id,
                    }
                ]
                result.version += 1
                result.value = value

            result.unit = row.get("unit") or (reference.unit if reference and reference.unit else parameter.unit)
            result.reference_range = reference.display_range if reference else ""
            result.interpretation = flag.interpretation
            result.is_critical = flag.is_critical
            result.is_abnormal = flag.is_abnormal
            if "remarks" in row:
                result.remarks = row.get("remarks") or ""
            result.entered_at = now
            result.entered_by_id = actor_user_id
            result.save()

            if flag.is_critical:
                logger.warning(
                    "Critical result %s=%s on order test %s", parameter.parameter_name, value, order_test.id
                )
