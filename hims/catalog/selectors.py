# hims/catalog/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import QuerySet
from rest_framework.exceptions import NotFound

from hims.catalog.models import LabParameter, LabTest, Service, ServiceType
from hims.common.constants import ActiveStatus, ServiceApplicable
from hims.common.filters import FilterBuilder


def _get(model, obj_id, message: str, qs: QuerySet | None = None):
    obj = (qs if qs is not None else model.objects.all()).filter(id=obj_id).first()
    if obj is None:
        raise NotFound(message)
    return obj


def get_service_type(*, service_type_id: UUID) -> ServiceType:
    return _get(ServiceType, service_type_id, "Service Type Not Found")


def get_service(*, service_id: UUID) -> Service:
    return _get(
        Service,
        service_id,
        "Service Not Found",
        Service.objects.select_related("service_type", "radiology_template").prefetch_related("linked_parameters"),
    )


def get_lab_test(*, lab_test_id: UUID) -> LabTest:
    return _get(LabTest, lab_test_id, "Lab test Not Found", LabTest.objects.prefetch_related("linked_services"))


def get_lab_parameter(*, parameter_id: UUID) -> LabParameter:
    return _get(
        LabParameter,
        parameter_id,
        "Lab Parameter not found",
        LabParameter.objects.select_related("test").prefetch_related("bio_references"),
    )


def list_service_types(*, search: str | None = None, service_head: str | None = None) -> QuerySet[ServiceType]:
    q = FilterBuilder().search(["name"], search).eq("service_head", service_head).build()
    return ServiceType.objects.filter(q).order_by("name")


def applicable_filter(applicable: str | None) -> FilterBuilder:
    """
    `applicable=OPD` keeps OPD and Both services; same for IPD.
    """
    fb = FilterBuilder()
    if applicable in (ServiceApplicable.OPD, ServiceApplicable.IPD):
        fb.in_("applicable_on", [applicable, ServiceApplicable.BOTH])
    return fb


def list_services(
    *,
    search: str | None = None,
    head: str | None = None,
    status: str | None = None,
    applicable_on: str | None = None,
    service_type_id: str | None = None,
) -> QuerySet[Service]:
    q = (
        FilterBuilder()
        .search(["name", "code"], search)
        .eq("head", head)
        .eq("status", status)
        .eq("applicable_on", applicable_on)
        .eq("service_type_id", service_type_id)
        .build()
    )
    return (
        Service.objects.filter(q)
        .select_related("service_type", "radiology_template")
        .prefetch_related("linked_parameters")
        .order_by("name")
    )


def service_options(*, search: str | None = None, applicable: str | None = None, head: str | None = None) -> QuerySet[Service]:
    q = (
        FilterBuilder()
        .eq("status", ActiveStatus.ACTIVE)
        .eq("head", head)
        .search(["name", "code"], search)
        .and_(applicable_filter(applicable))
        .build()
    )
    return Service.objects.filter(q).order_by("name")


def list_lab_tests(
    *,
    search: str | None = None,
    report_type: str | None = None,
    sample_type: str | None = None,
    is_active=None,
) -> QuerySet[LabTest]:
    q = (
        FilterBuilder()
        .search(["test_name", "methodology"], search)
        .eq("report_type", report_type)
        .eq("sample_type", sample_type)
        .boolean("is_active", is_active)
        .build()
    )
    return LabTest.objects.filter(q).prefetch_related("linked_services").order_by("test_name")


def services_with_link_flag(*, lab_test: LabTest) -> list[tuple[Service, bool]]:
    """
    Every service with whether it is linked to `lab_test`, linked first.
    """
    linked = set(lab_test.linked_services.values_list("id", flat=True))
    rows = [(s, s.id in linked) for s in Service.objects.order_by("name")]
    rows.sort(key=lambda row: not row[1])
    return rows


def list_lab_parameters(
    *,
    search: str | None = None,
    test_id: str | None = None,
    report_type: str | None = None,
    is_active=None,
) -> QuerySet[LabParameter]:
    q = (
        FilterBuilder()
        .search(["parameter_name", "unit"], search)
        .eq("test_id", test_id)
        .eq("report_type", report_type)
        .boolean("is_active", is_active)
        .build()
    )
    return LabParameter.objects.filter(q).select_related("test").prefetch_related("bio_references").order_by("parameter_name")
