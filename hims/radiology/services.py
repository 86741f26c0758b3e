# hims/radiology/services.py
from __future__ import annotations

import logging
from uuid import UUID

from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from hims.audit.services import AuditService
from hims.catalog.models import Service
from hims.common.constants import OrderStatus, ServiceHead
from hims.lab.services import SAMPLE_NOT_COLLECTED, LabOrderService
from hims.radiology.models import RadiologyReport, RadiologyTemplate
from hims.radiology.selectors import TEMPLATE_NOT_FOUND

logger = logging.getLogger(__name__)

TEMPLATE_EXISTS = "Radiology template with this name already exists"

TEMPLATE_FIELDS = {"template_name", "template_content", "description", "is_active"}


def _locked_template(template_id: UUID) -> RadiologyTemplate:
    template = RadiologyTemplate.objects.select_for_update().filter(id=template_id).first()
    if template is None:
        raise NotFound(TEMPLATE_NOT_FOUND)
    return template


def _radiology_service(service_id: UUID) -> Service:
    service = Service.objects.select_for_update().filter(id=service_id).first()
    if service is None:
        raise NotFound("Service Not Found")
    if service.head != ServiceHead.RADIOLOGY:
        raise ValidationError("Only Radiology services can be linked to a template")
    return service


class RadiologyTemplateService:
    @staticmethod
    @transaction.atomic
    def create(*, actor_user_id: int | None, **data) -> RadiologyTemplate:
        fields = {k: v for k, v in data.items() if k in TEMPLATE_FIELDS}
        if RadiologyTemplate.objects.filter(template_name__iexact=fields["template_name"]).exists():
            raise ValidationError(TEMPLATE_EXISTS)
        try:
            template = RadiologyTemplate.objects.create(
                created_by_id=actor_user_id,
                updated_by_id=actor_user_id,
                **fields,
            )
        except IntegrityError:
            raise ValidationError(TEMPLATE_EXISTS)

        AuditService.log(
            event_code="radiology_template.created",
            entity_type="RadiologyTemplate",
            entity_id=template.id,
            actor_user_id=actor_user_id,
            metadata={"template_name": template.template_name},
        )
        return template

    @staticmethod
    @transaction.atomic
    def update(*, actor_user_id: int | None, template_id: UUID, data: dict) -> RadiologyTemplate:
        template = _locked_template(template_id)
        updates = {k: v for k, v in data.items() if k in TEMPLATE_FIELDS}
        name = updates.get("template_name")
        if name and RadiologyTemplate.objects.filter(template_name__iexact=name).exclude(id=template.id).exists():
            raise ValidationError(TEMPLATE_EXISTS)

        for k, v in updates.items():
            setattr(template, k, v)
        template.updated_by_id = actor_user_id
        template.save()

        AuditService.log(
            event_code="radiology_template.updated",
            entity_type="RadiologyTemplate",
            entity_id=template.id,
            actor_user_id=actor_user_id,
            metadata={"updated_fields": sorted(updates.keys())},
        )
        return template

    @staticmethod
    @transaction.atomic
    def delete(*, actor_user_id: int | None, template_id: UUID) -> None:
        template = _locked_template(template_id)
        template.delete()
        AuditService.log(
            event_code="radiology_template.deleted",
            entity_type="RadiologyTemplate",
            entity_id=template_id,
            actor_user_id=actor_user_id,
        )

    @staticmethod
    @transaction.atomic
    def link_service(*, actor_user_id: int | None, template_id: UUID, service_id: UUID) -> Service:
        template = _locked_template(template_id)
        service = _radiology_service(service_id)
        service.radiology_template = template
        service.save(update_fields=["radiology_template", "updated_at"])

        AuditService.log(
            event_code="radiology_template.service_linked",
            entity_type="RadiologyTemplate",
            entity_id=template.id,
            actor_user_id=actor_user_id,
            metadata={"service_id": str(service.id)},
        )
        return service

    @staticmethod
    @transaction.atomic
    def unlink_service(*, actor_user_id: int | None, template_id: UUID, service_id: UUID) -> Service:
        template = _locked_template(template_id)
        service = _radiology_service(service_id)
        if service.radiology_template_id != template.id:
            raise ValidationError("Service is not linked to this template")
        service.radiology_template = None
        service.save(update_fields=["radiology_template", "updated_at"])

        AuditService.log(
            event_code="radiology_template.service_unlinked",
            entity_type="RadiologyTemplate",
            entity_id=template.id,
            actor_user_id=actor_user_id,
            metadata={"service_id": str(service.id)},
        )
        return service


class RadiologyReportService:
    @staticmethod
    @transaction.atomic
    def save_report(
        *,
        actor_user_id: int | None,
        order_test_id: UUID,
        template_id: UUID | None = None,
        findings: str = "",
        impression: str = "",
        methodology: str = "",
        authorize: bool = False,
    ) -> RadiologyReport:
        """
        Create or replace the report of a radiology test. The test moves to
        saved, or authorized when `authorize` is set.
        """
        order_test = LabOrderService.lock_test(order_test_id=order_test_id)
        if order_test.service.head != ServiceHead.RADIOLOGY:
            raise ValidationError("Test is not a radiology service")
        if order_test.status == OrderStatus.PENDING:
            raise ValidationError(SAMPLE_NOT_COLLECTED)
        if order_test.status == OrderStatus.AUTHORIZED:
            raise ValidationError("Authorized report cannot be modified")

        if template_id is not None:
            template = RadiologyTemplate.objects.filter(id=template_id).first()
            if template is None:
                raise NotFound(TEMPLATE_NOT_FOUND)
        else:
            template = order_test.service.radiology_template

        report, created = RadiologyReport.objects.select_for_update().get_or_create(
            order_test=order_test,
            defaults={"created_by_id": actor_user_id},
        )
        report.template = template
        report.findings = findings
        report.impression = impression
        report.methodology = methodology
        if authorize:
            report.authorized_at = timezone.now()
            report.authorized_by_id = actor_user_id
        report.save()

        status = OrderStatus.AUTHORIZED if authorize else OrderStatus.SAVED
        if authorize and order_test.saved_at is None:
            order_test.saved_at = report.authorized_at
            order_test.saved_by_id = actor_user_id
        LabOrderService.apply_status(order_test=order_test, status=status, actor_user_id=actor_user_id)
        order = LabOrderService.recompute_order(order_id=order_test.lab_order_id)

        AuditService.log(
            event_code="radiology_report.authorized" if authorize else "radiology_report.saved",
            entity_type="RadiologyReport",
            entity_id=report.id,
            actor_user_id=actor_user_id,
            metadata={"accession_no": order.accession_no, "created": created},
        )
        logger.info("Radiology report %s for %s", status, order.accession_no)
        return report
