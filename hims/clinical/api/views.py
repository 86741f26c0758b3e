# hims/clinical/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action

from hims.audit.services import actor_id
from hims.clinical.api.serializers import (
    ExaminationCreateSerializer,
    ExaminationSerializer,
    PrescriptionCreateSerializer,
    PrescriptionSerializer,
    PrescriptionUpdateSerializer,
)
from hims.clinical.models import PrimaryExamination, Prescription
from hims.clinical.pdf import build_prescription
from hims.clinical.selectors import get_examination, get_prescription, list_examinations, list_prescriptions
from hims.clinical.services import ExaminationService, PrescriptionService
from hims.common.api.pagination import paginate
from hims.common.api.responses import created, envelope
from hims.common.pdf import pdf_response


def _q(name: str, kind=OpenApiTypes.STR) -> OpenApiParameter:
    return OpenApiParameter(name=name, type=kind, location=OpenApiParameter.QUERY, required=False)


class PrescriptionViewSet(viewsets.ViewSet):
    policy_resource = "prescriptions"

    serializer_class = PrescriptionSerializer
    queryset = Prescription.objects.none()

    @extend_schema(
        tags=["Prescriptions"],
        parameters=[
            _q("visit_id"),
            _q("patient_id"),
            _q("doctor_id"),
            _q("is_active", OpenApiTypes.BOOL),
            _q("fromDate", OpenApiTypes.DATE),
            _q("toDate", OpenApiTypes.DATE),
        ],
    )
    def list(self, request):
        p = request.query_params
        qs = list_prescriptions(
            visit_id=p.get("visit_id"),
            patient_id=p.get("patient_id"),
            doctor_id=p.get("doctor_id"),
            is_active=p.get("is_active"),
            from_date=p.get("fromDate"),
            to_date=p.get("toDate"),
        )
        return paginate(request, qs, PrescriptionSerializer, message="Prescriptions fetched successfully")

    @extend_schema(tags=["Prescriptions"], request=PrescriptionCreateSerializer, responses={201: PrescriptionSerializer})
    def create(self, request):
        ser = PrescriptionCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        prescription = PrescriptionService.create(actor_user_id=actor_id(request.user), **ser.validated_data)
        return created(
            PrescriptionSerializer(get_prescription(prescription_id=prescription.id)).data,
            message="Prescription created successfully",
        )

    @extend_schema(tags=["Prescriptions"])
    def retrieve(self, request, pk=None):
        return envelope(
            PrescriptionSerializer(get_prescription(prescription_id=pk)).data,
            message="Prescription fetched successfully",
        )

    @extend_schema(tags=["Prescriptions"], request=PrescriptionUpdateSerializer)
    def update(self, request, pk=None):
        ser = PrescriptionUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        PrescriptionService.update(actor_user_id=actor_id(request.user), prescription_id=pk, data=ser.validated_data)
        return envelope(
            PrescriptionSerializer(get_prescription(prescription_id=pk)).data,
            message="Prescription updated successfully",
        )

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Prescriptions"])
    def destroy(self, request, pk=None):
        PrescriptionService.deactivate(actor_user_id=actor_id(request.user), prescription_id=pk)
        return envelope(None, message="Prescription deactivated successfully")

    @extend_schema(tags=["Prescriptions"], responses={(200, "application/pdf"): OpenApiTypes.BINARY})
    @action(detail=True, methods=["get"], url_path="print")
    def print_prescription(self, request, pk=None):
        prescription = get_prescription(prescription_id=pk)
        return pdf_response(
            build_prescription(prescription),
            filename=f"prescription-{prescription.visit.code}.pdf",
            inline=True,
        )


class ExaminationViewSet(viewsets.ViewSet):
    policy_resource = "examinations"

    serializer_class = ExaminationSerializer
    queryset = PrimaryExamination.objects.none()

    @extend_schema(tags=["Examinations"], parameters=[_q("visit_id"), _q("patient_id")])
    def list(self, request):
        qs = list_examinations(
            visit_id=request.query_params.get("visit_id"),
            patient_id=request.query_params.get("patient_id"),
        )
        return paginate(request, qs, ExaminationSerializer, message="Examinations fetched successfully")

    @extend_schema(tags=["Examinations"], request=ExaminationCreateSerializer, responses={201: ExaminationSerializer})
    def create(self, request):
        ser = ExaminationCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        examination = ExaminationService.create(actor_user_id=actor_id(request.user), **ser.validated_data)
        return created(
            ExaminationSerializer(get_examination(examination_id=examination.id)).data,
            message="Primary examination created successfully",
        )

    @extend_schema(tags=["Examinations"])
    def retrieve(self, request, pk=None):
        return envelope(
            ExaminationSerializer(get_examination(examination_id=pk)).data,
            message="Primary examination fetched successfully",
        )
