# hims/visits/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets

from hims.audit.services import actor_id
from hims.common.api.pagination import paginate
from hims.common.api.responses import created, envelope
from hims.visits.api.serializers import VisitCreateSerializer, VisitSerializer, VisitUpdateSerializer
from hims.visits.models import Visit
from hims.visits.selectors import get_visit, list_visits
from hims.visits.services import VisitService


class VisitViewSet(viewsets.ViewSet):
    policy_resource = "visits"

    serializer_class = VisitSerializer
    queryset = Visit.objects.none()

    @extend_schema(
        tags=["Visits"],
        parameters=[
            OpenApiParameter(name="patient_id", type=OpenApiTypes.UUID, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="doctor_id", type=OpenApiTypes.UUID, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="status", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="visit_type", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="fromDate", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="toDate", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="search", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        params = request.query_params
        qs = list_visits(
            patient_id=params.get("patient_id"),
            doctor_id=params.get("doctor_id"),
            status=params.get("status"),
            visit_type=params.get("visit_type"),
            from_date=params.get("fromDate"),
            to_date=params.get("toDate"),
            search=params.get("search"),
        )
        return paginate(request, qs, VisitSerializer, message="Visits fetched successfully")

    @extend_schema(tags=["Visits"], request=VisitCreateSerializer, responses={201: VisitSerializer})
    def create(self, request):
        ser = VisitCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        visit = VisitService.create_visit(actor_user_id=actor_id(request.user), **ser.validated_data)
        return created(VisitSerializer(visit).data, message="Visit created successfully")

    @extend_schema(tags=["Visits"], responses={200: VisitSerializer})
    def retrieve(self, request, pk=None):
        return envelope(VisitSerializer(get_visit(visit_id=pk)).data, message="Visit fetched successfully")

    @extend_schema(tags=["Visits"], request=VisitUpdateSerializer, responses={200: VisitSerializer})
    def update(self, request, pk=None):
        ser = VisitUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        VisitService.update_visit(actor_user_id=actor_id(request.user), visit_id=pk, data=ser.validated_data)
        return envelope(VisitSerializer(get_visit(visit_id=pk)).data, message="Visit updated successfully")

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)
