# hims/reports/selectors.py
"""
Collection summaries. Date bounds apply to bill_date (OPD), admitted_at (IPD)
and visit_date (visits). Cancelled OPD bills are excluded.
"""
from __future__ import annotations

from decimal import Decimal

from django.db.models import Count, DecimalField, QuerySet, Sum, Value
from django.db.models.functions import Coalesce
from rest_framework.exceptions import NotFound

from hims.billing.models import IpdAdmission, OpdBill
from hims.common.constants import BillStatus
from hims.common.filters import FilterBuilder
from hims.doctors.models import Doctor
from hims.visits.models import Visit

ZERO = Decimal("0.00")

OPD_FIELDS = {
    "grossAmount": "gross_amount",
    "discount": "discount",
    "netAmount": "net_amount",
    "paidAmount": "paid_amount",
}
IPD_FIELDS = {
    "totalAmount": "total_amount",
    "discount": "discount",
    "netAmount": "net_amount",
    "paidAmount": "paid_amount",
    "dueAmount": "due_amount",
}


def _sum(field: str):
    return Coalesce(Sum(field), Value(ZERO), output_field=DecimalField(max_digits=14, decimal_places=2))


def _opd(from_date=None, to_date=None, doctor_id=None) -> QuerySet[OpdBill]:
    q = (
        FilterBuilder()
        .date_range("bill_date", from_date, to_date)
        .eq("consultant_doctor_id", doctor_id)
        .build()
    )
    return OpdBill.objects.filter(q).exclude(status=BillStatus.CANCELLED)


def _ipd(from_date=None, to_date=None, doctor_id=None) -> QuerySet[IpdAdmission]:
    q = (
        FilterBuilder()
        .date_range("admitted_at", from_date, to_date)
        .eq("referring_doctor_id", doctor_id)
        .build()
    )
    return IpdAdmission.objects.filter(q)


def _visits(from_date=None, to_date=None, doctor_id=None) -> QuerySet[Visit]:
    q = (
        FilterBuilder()
        .date_range("visit_date", from_date, to_date)
        .eq("consulting_doctor_id", doctor_id)
        .build()
    )
    return Visit.objects.filter(q)


def _aggregates(fields: dict[str, str]) -> dict:
    # aliased with a prefix; annotate() rejects names that clash with model fields
    return {"n": Count("id"), **{f"sum_{f}": _sum(f) for f in fields.values()}}


def _shape(agg: dict, count_key: str, fields: dict[str, str]) -> dict:
    return {count_key: agg["n"], **{k: agg[f"sum_{f}"] for k, f in fields.items()}}


def empty_opd() -> dict:
    return {"totalBills": 0, **{k: ZERO for k in OPD_FIELDS}}


def empty_ipd() -> dict:
    return {"totalAdmissions": 0, **{k: ZERO for k in IPD_FIELDS}}


def doctors_collection(*, doctor_id=None, from_date=None, to_date=None) -> list[dict]:
    """
    Per doctor with any activity in range:
    {doctorId, doctorName, collections: {opd, ipd, visit}}.
    """
    if doctor_id and not Doctor.objects.filter(id=doctor_id).exists():
        raise NotFound("Doctor Not Found")

    rows: dict[str, dict] = {}

    def row(doc_id) -> dict:
        key = str(doc_id)
        if key not in rows:
            rows[key] = {"doctorId": key, "collections": {"opd": empty_opd(), "ipd": empty_ipd(), "visit": {"totalVisits": 0}}}
        return rows[key]

    opd = _opd(from_date, to_date, doctor_id).values("consultant_doctor_id").annotate(**_aggregates(OPD_FIELDS))
    for agg in opd:
        row(agg["consultant_doctor_id"])["collections"]["opd"] = _shape(agg, "totalBills", OPD_FIELDS)

    ipd = _ipd(from_date, to_date, doctor_id).values("referring_doctor_id").annotate(**_aggregates(IPD_FIELDS))
    for agg in ipd:
        row(agg["referring_doctor_id"])["collections"]["ipd"] = _shape(agg, "totalAdmissions", IPD_FIELDS)

    visits = _visits(from_date, to_date, doctor_id).values("consulting_doctor_id").annotate(n=Count("id"))
    for agg in visits:
        row(agg["consulting_doctor_id"])["collections"]["visit"] = {"totalVisits": agg["n"]}

    names = {str(pk): name for pk, name in Doctor.objects.filter(id__in=list(rows)).values_list("id", "doctor_name")}
    for key, data in rows.items():
        data["doctorName"] = names.get(key, "")
    return sorted(rows.values(), key=lambda r: r["doctorName"])


def all_types_collection(*, from_date=None, to_date=None) -> dict:
    opd = _shape(_opd(from_date, to_date).aggregate(**_aggregates(OPD_FIELDS)), "totalBills", OPD_FIELDS)
    ipd = _shape(_ipd(from_date, to_date).aggregate(**_aggregates(IPD_FIELDS)), "totalAdmissions", IPD_FIELDS)
    visit = {"totalVisits": _visits(from_date, to_date).count()}

    return {
        "opd": opd,
        "ipd": ipd,
        "visit": visit,
        "grandTotal": {
            "netAmount": opd["netAmount"] + ipd["netAmount"],
            "paidAmount": opd["paidAmount"] + ipd["paidAmount"],
            "dueAmount": ipd["dueAmount"],
        },
    }
