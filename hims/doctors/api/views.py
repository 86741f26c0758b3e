# hims/doctors/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action

from hims.audit.services import actor_id
from hims.common.api.pagination import paginate
from hims.common.api.responses import created, envelope, options
from hims.doctors.api.serializers import DoctorCreateSerializer, DoctorSerializer, DoctorUpdateSerializer
from hims.doctors.models import Doctor
from hims.doctors.selectors import distinct_values, get_doctor, search_doctors
from hims.doctors.services import DoctorService


class DoctorViewSet(viewsets.ViewSet):
    policy_resource = "doctors"

    serializer_class = DoctorSerializer
    queryset = Doctor.objects.none()

    @extend_schema(
        tags=["Doctors"],
        parameters=[
            OpenApiParameter(name="search", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="department", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="specialization", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="is_active", type=OpenApiTypes.BOOL, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        params = request.query_params
        qs = search_doctors(
            search=params.get("search"),
            department=params.get("department"),
            specialization=params.get("specialization"),
            is_active=params.get("is_active"),
        )
        return paginate(request, qs, DoctorSerializer, message="Doctors fetched successfully")

    @extend_schema(tags=["Doctors"], request=DoctorCreateSerializer, responses={201: DoctorSerializer})
    def create(self, request):
        ser = DoctorCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        doctor = DoctorService.create_doctor(actor_user_id=actor_id(request.user), **ser.validated_data)
        return created(DoctorSerializer(doctor).data, message="Doctor created successfully")

    @extend_schema(tags=["Doctors"], responses={200: DoctorSerializer})
    def retrieve(self, request, pk=None):
        return envelope(DoctorSerializer(get_doctor(doctor_id=pk)).data, message="Doctor fetched successfully")

    @extend_schema(tags=["Doctors"], request=DoctorUpdateSerializer, responses={200: DoctorSerializer})
    def update(self, request, pk=None):
        ser = DoctorUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        doctor = DoctorService.update_doctor(actor_user_id=actor_id(request.user), doctor_id=pk, data=ser.validated_data)
        return envelope(DoctorSerializer(doctor).data, message="Doctor updated successfully")

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Doctors"])
    def destroy(self, request, pk=None):
        DoctorService.deactivate_doctor(actor_user_id=actor_id(request.user), doctor_id=pk)
        return envelope(None, message="Doctor deleted successfully")

    @extend_schema(tags=["Doctors"])
    @action(detail=False, methods=["get"], url_path="dropdown-list")
    def dropdown_list(self, request):
        qs = search_doctors(search=request.query_params.get("search"), is_active=True)
        return envelope(options(qs, label=lambda d: d.dropdown_label), message="Doctors fetched successfully")

    @extend_schema(tags=["Doctors"])
    @action(detail=False, methods=["get"])
    def specializations(self, request):
        return envelope(distinct_values("specialization"), message="Specializations fetched successfully")

    @extend_schema(tags=["Doctors"])
    @action(detail=False, methods=["get"])
    def departments(self, request):
        return envelope(distinct_values("department"), message="Departments fetched successfully")
