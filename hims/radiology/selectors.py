# hims/radiology/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import QuerySet
from rest_framework.exceptions import NotFound

from hims.catalog.models import Service
from hims.common.constants import ServiceHead
from hims.common.filters import FilterBuilder
from hims.lab.models import LabOrderTest
from hims.radiology.models import RadiologyReport, RadiologyTemplate

TEMPLATE_NOT_FOUND = "Radiology Template Not Found"


def get_template(*, template_id: UUID) -> RadiologyTemplate:
    template = RadiologyTemplate.objects.prefetch_related("services").filter(id=template_id).first()
    if template is None:
        raise NotFound(TEMPLATE_NOT_FOUND)
    return template


def list_templates(*, search: str | None = None, is_active=None) -> QuerySet[RadiologyTemplate]:
    q = FilterBuilder().search(["template_name", "description"], search).boolean("is_active", is_active).build()
    return RadiologyTemplate.objects.filter(q).prefetch_related("services").order_by("template_name")


def services_with_templates(*, search: str | None = None) -> QuerySet[Service]:
    q = FilterBuilder().eq("head", ServiceHead.RADIOLOGY).search(["name", "code"], search).build()
    return Service.objects.filter(q).select_related("radiology_template").order_by("name")


def get_report_for_test(*, order_test_id: UUID) -> RadiologyReport:
    if not LabOrderTest.objects.filter(id=order_test_id).exists():
        raise NotFound("Lab Order Test Not Found")
    report = (
        RadiologyReport.objects.select_related(
            "template",
            "order_test__service",
            "order_test__lab_order__patient",
            "order_test__lab_order__doctor",
        )
        .filter(order_test_id=order_test_id)
        .first()
    )
    if report is None:
        raise NotFound("Radiology Report Not Found")
    return report
