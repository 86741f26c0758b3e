# hims/wards/selectors.py
from __future__ import annotations

from django.db.models import Count, Q, QuerySet
from rest_framework.exceptions import NotFound

from hims.common.constants import BedStatus
from hims.common.filters import FilterBuilder
from hims.wards.models import Bed, Floor, Ward


def get_floor(*, floor_id) -> Floor:
    floor = Floor.objects.filter(id=floor_id).first()
    if floor is None:
        raise NotFound("Floor with this Id Not Found")
    return floor


def get_ward(*, ward_id) -> Ward:
    ward = Ward.objects.select_related("floor").filter(id=ward_id).first()
    if ward is None:
        raise NotFound("Ward with this Id Not Found")
    return ward


def get_bed(*, bed_id) -> Bed:
    bed = Bed.objects.select_related("ward", "floor", "patient").filter(id=bed_id).first()
    if bed is None:
        raise NotFound("Bed with this Id Not Found")
    return bed


def list_floors(*, search: str | None = None, status: str | None = None) -> QuerySet[Floor]:
    q = FilterBuilder().search(["name"], search).eq("status", status).build()
    return Floor.objects.filter(q).annotate(ward_count=Count("wards", distinct=True)).order_by("name")


def list_wards(
    *,
    search: str | None = None,
    status: str | None = None,
    floor_id=None,
    type: str | None = None,
) -> QuerySet[Ward]:
    q = (
        FilterBuilder()
        .search(["name", "floor__name"], search)
        .eq("status", status)
        .eq("floor_id", floor_id)
        .eq("type", type)
        .build()
    )
    return (
        Ward.objects.filter(q)
        .select_related("floor")
        .annotate(
            total_beds=Count("beds", distinct=True),
            available_beds=Count("beds", filter=Q(beds__status=BedStatus.AVAILABLE), distinct=True),
        )
        .order_by("floor__name", "name")
    )


def list_beds(
    *,
    search: str | None = None,
    status: str | None = None,
    ward_id=None,
    floor_id=None,
    type: str | None = None,
) -> QuerySet[Bed]:
    q = (
        FilterBuilder()
        .search(["bed_number", "ward__name", "patient__name", "patient__uhid"], search)
        .eq("status", status)
        .eq("ward_id", ward_id)
        .eq("floor_id", floor_id)
        .eq("type", type)
        .build()
    )
    return Bed.objects.filter(q).select_related("ward", "floor", "patient").order_by("ward__name", "bed_number")
