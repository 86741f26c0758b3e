# hims/patients/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action

from hims.audit.services import actor_id
from hims.billing.api.serializers import IpdAdmissionListSerializer, OpdBillListSerializer
from hims.common.api.pagination import paginate
from hims.common.api.responses import created, envelope
from hims.patients.api.serializers import (
    PatientCreateSerializer,
    PatientOptionSerializer,
    PatientSerializer,
    PatientUpdateSerializer,
)
from hims.patients.models import Patient
from hims.patients.selectors import get_patient, patient_details, search_patients
from hims.patients.services import PatientService
from hims.visits.api.serializers import VisitSerializer


def _page_params(request) -> tuple[int, int]:
    try:
        page = max(int(request.query_params.get("page", 1)), 1)
    except (TypeError, ValueError):
        page = 1
    try:
        limit = min(max(int(request.query_params.get("limit", 10)), 1), 200)
    except (TypeError, ValueError):
        limit = 10
    return page, limit


class PatientViewSet(viewsets.ViewSet):
    policy_resource = "patients"

    serializer_class = PatientSerializer
    queryset = Patient.objects.none()

    @extend_schema(
        tags=["Patients"],
        parameters=[
            OpenApiParameter(name="search", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="gender", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="patient_type", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="fromDate", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="toDate", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        params = request.query_params
        qs = search_patients(
            search=params.get("search"),
            gender=params.get("gender"),
            patient_type=params.get("patient_type"),
            from_date=params.get("fromDate"),
            to_date=params.get("toDate"),
        )
        return paginate(request, qs, PatientSerializer, message="Patients fetched successfully")

    @extend_schema(tags=["Patients"], request=PatientCreateSerializer, responses={201: PatientSerializer})
    def create(self, request):
        ser = PatientCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        patient = PatientService.create_patient(actor_user_id=actor_id(request.user), **ser.validated_data)
        return created(PatientSerializer(patient).data, message="Patient created successfully")

    @extend_schema(tags=["Patients"], responses={200: PatientSerializer})
    def retrieve(self, request, pk=None):
        patient = get_patient(patient_id=pk)
        return envelope(PatientSerializer(patient).data, message="Patient fetched successfully")

    @extend_schema(tags=["Patients"], request=PatientUpdateSerializer, responses={200: PatientSerializer})
    def update(self, request, pk=None):
        ser = PatientUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        patient = PatientService.update_patient(
            actor_user_id=actor_id(request.user),
            patient_id=pk,
            data=ser.validated_data,
        )
        return envelope(PatientSerializer(patient).data, message="Patient updated successfully")

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Patients"])
    @action(detail=False, methods=["get"], url_path="dropdown-list")
    def dropdown_list(self, request):
        page, limit = _page_params(request)
        qs = search_patients(search=request.query_params.get("search"))

        total = qs.count()
        rows = qs[(page - 1) * limit : page * limit]
        return envelope(
            {"items": PatientOptionSerializer(rows, many=True).data, "hasMore": page * limit < total},
            message="Patients fetched successfully",
        )

    @extend_schema(tags=["Patients"])
    @action(detail=True, methods=["get"], url_path="details")
    def details(self, request, pk=None):
        d = patient_details(patient_id=pk)
        return envelope(
            {
                "patient": PatientSerializer(d["patient"]).data,
                "visits": VisitSerializer(d["visits"], many=True).data,
                "opd_bills": OpdBillListSerializer(d["opd_bills"], many=True).data,
                "ipd_admissions": IpdAdmissionListSerializer(d["ipd_admissions"], many=True).data,
            },
            message="Patient details fetched successfully",
        )
