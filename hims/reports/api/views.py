# hims/reports/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action

from hims.common.api.responses import envelope
from hims.reports import selectors

DATE_PARAMS = [
    OpenApiParameter(name="fromDate", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
    OpenApiParameter(name="toDate", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
]


class CollectionViewSet(viewsets.ViewSet):
    policy_resource = "collections"

    @extend_schema(
        tags=["Collections"],
        parameters=[
            OpenApiParameter(name="id", type=OpenApiTypes.UUID, location=OpenApiParameter.QUERY, required=False),
            *DATE_PARAMS,
        ],
    )
    @action(detail=False, methods=["get"], url_path="doctors-collection")
    def doctors_collection(self, request):
        p = request.query_params
        rows = selectors.doctors_collection(doctor_id=p.get("id"), from_date=p.get("fromDate"), to_date=p.get("toDate"))
        return envelope({"count": len(rows), "items": rows}, message="Doctor collections fetched successfully")

    @extend_schema(tags=["Collections"], parameters=DATE_PARAMS)
    @action(detail=False, methods=["get"], url_path="all-types")
    def all_types(self, request):
        p = request.query_params
        summary = selectors.all_types_collection(from_date=p.get("fromDate"), to_date=p.get("toDate"))
        return envelope(summary, message="Collections summary fetched successfully")
