# hims/lab/selectors.py
from __future__ import annotations

from collections import OrderedDict
from uuid import UUID

from django.db.models import Prefetch, QuerySet
from rest_framework.exceptions import NotFound

from hims.catalog.models import LabParameter
from hims.catalog.reference_ranges import best_reference, filter_bio_references
from hims.common.constants import OrderStatus
from hims.common.filters import FilterBuilder
from hims.lab.models import LabOrder, LabOrderTest, LabResult

TEST_RELATED = ("service", "lab_order", "lab_order__patient", "lab_order__doctor")


def _tests_prefetch() -> Prefetch:
    return Prefetch("tests", queryset=LabOrderTest.objects.select_related("service").order_by("created_at"))


def get_lab_order(*, order_id: UUID) -> LabOrder:
    order = (
        LabOrder.objects.select_related("patient", "doctor", "visit", "opd_bill", "ipd_admission")
        .prefetch_related(_tests_prefetch())
        .filter(id=order_id)
        .first()
    )
    if order is None:
        raise NotFound("Lab Order Not Found")
    return order


def get_order_test(*, order_test_id: UUID) -> LabOrderTest:
    order_test = LabOrderTest.objects.select_related(*TEST_RELATED).filter(id=order_test_id).first()
    if order_test is None:
        raise NotFound("Lab Order Test Not Found")
    return order_test


def list_lab_orders(
    *,
    search: str | None = None,
    status: str | None = None,
    billing_type: str | None = None,
    priority: str | None = None,
    patient_id: str | None = None,
    from_date=None,
    to_date=None,
) -> QuerySet[LabOrder]:
    q = (
        FilterBuilder()
        .search(["accession_no", "patient__name", "patient__uhid"], search)
        .eq("status", status)
        .eq("billing_type", billing_type)
        .eq("priority", priority)
        .eq("patient_id", patient_id)
        .date_range("order_date", from_date, to_date)
        .build()
    )
    return (
        LabOrder.objects.filter(q)
        .select_related("patient", "doctor")
        .prefetch_related(_tests_prefetch())
        .order_by("-order_date")
    )


def list_order_tests(
    *,
    search: str | None = None,
    status: str | None = None,
    head: str | None = None,
    lab_order_id: str | None = None,
    from_date=None,
    to_date=None,
) -> QuerySet[LabOrderTest]:
    q = (
        FilterBuilder()
        .search(["service__name", "lab_order__accession_no", "lab_order__patient__name"], search)
        .eq("status", status)
        .eq("service__head", head)
        .eq("lab_order_id", lab_order_id)
        .date_range("created_at", from_date, to_date)
        .build()
    )
    return LabOrderTest.objects.filter(q).select_related(*TEST_RELATED).order_by("-created_at")


def order_parameters(*, order: LabOrder) -> list[dict]:
    """
    Parameters of every test in the order grouped by sample type:
    [{sampleType, parameters: [{order_test_id, service_name, parameter_id, ...}]}]
    """
    groups: "OrderedDict[str, list[dict]]" = OrderedDict()
    tests = order.tests.select_related("service").prefetch_related(
        Prefetch("service__linked_parameters", queryset=LabParameter.objects.filter(is_active=True))
    )
    for order_test in tests.order_by("created_at"):
        for parameter in order_test.service.linked_parameters.all():
            sample_type = parameter.sample_type or order_test.sample_type or "Other"
            groups.setdefault(sample_type, []).append(
                {
                    "order_test_id": str(order_test.id),
                    "service_id": str(order_test.service_id),
                    "service_name": order_test.service.name,
                    "parameter_id": str(parameter.id),
                    "parameter_name": parameter.parameter_name,
                    "unit": parameter.unit,
                    "status": order_test.status,
                }
            )
    return [{"sampleType": k, "parameters": v} for k, v in groups.items()]


def results_sheet(*, order_test: LabOrderTest) -> list[dict]:
    """
    One row per linked parameter: ranges matched to the patient's age and
    gender plus the current result, if any.
    """
    patient = order_test.lab_order.patient
    current = {r.parameter_id: r for r in LabResult.objects.filter(order_test=order_test)}
    parameters = order_test.service.linked_parameters.filter(is_active=True).prefetch_related("bio_references")

    rows = []
    for parameter in parameters.order_by("parameter_name"):
        refs = list(parameter.bio_references.all())
        matched = filter_bio_references(refs, age_years=patient.age, gender=patient.gender)
        best = best_reference(refs, age_years=patient.age, gender=patient.gender)
        rows.append(
            {
                "parameter": parameter,
                "reference_ranges": matched,
                "reference_range": best.display_range if best else "",
                "unit": (best.unit if best and best.unit else parameter.unit),
                "result": current.get(parameter.id),
            }
        )
    return rows


def printable_tests(*, order: LabOrder) -> QuerySet[LabOrderTest]:
    return (
        order.tests.filter(status=OrderStatus.AUTHORIZED)
        .select_related("service", "authorized_by")
        .prefetch_related(Prefetch("results", queryset=LabResult.objects.select_related("parameter").order_by("parameter__parameter_name")))
        .order_by("created_at")
    )
