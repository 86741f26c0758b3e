# hims/appointments/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets

from hims.appointments.api.serializers import (
    AppointmentCreateSerializer,
    AppointmentSerializer,
    AppointmentUpdateSerializer,
)
from hims.appointments.models import Appointment
from hims.appointments.selectors import get_appointment, list_appointments
from hims.appointments.services import AppointmentService
from hims.audit.services import actor_id
from hims.common.api.pagination import paginate
from hims.common.api.responses import created, envelope


class AppointmentViewSet(viewsets.ViewSet):
    policy_resource = "appointments"

    serializer_class = AppointmentSerializer
    queryset = Appointment.objects.none()

    @extend_schema(
        tags=["Appointments"],
        parameters=[
            OpenApiParameter(name="doctor_id", type=OpenApiTypes.UUID, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="patient_id", type=OpenApiTypes.UUID, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="status", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="fromDate", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="toDate", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        params = request.query_params
        qs = list_appointments(
            doctor_id=params.get("doctor_id"),
            patient_id=params.get("patient_id"),
            status=params.get("status"),
            from_date=params.get("fromDate"),
            to_date=params.get("toDate"),
            search=params.get("search"),
        )
        return paginate(request, qs, AppointmentSerializer, message="Appointments fetched successfully")

    @extend_schema(tags=["Appointments"], request=AppointmentCreateSerializer, responses={201: AppointmentSerializer})
    def create(self, request):
        ser = AppointmentCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        appt = AppointmentService.create_appointment(actor_user_id=actor_id(request.user), **ser.validated_data)
        return created(AppointmentSerializer(appt).data, message="Appointment created successfully")

    @extend_schema(tags=["Appointments"], responses={200: AppointmentSerializer})
    def retrieve(self, request, pk=None):
        return envelope(AppointmentSerializer(get_appointment(appointment_id=pk)).data, message="Appointment fetched successfully")

    @extend_schema(tags=["Appointments"], request=AppointmentUpdateSerializer, responses={200: AppointmentSerializer})
    def update(self, request, pk=None):
        ser = AppointmentUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        AppointmentService.update_appointment(actor_user_id=actor_id(request.user), appointment_id=pk, data=ser.validated_data)
        return envelope(AppointmentSerializer(get_appointment(appointment_id=pk)).data, message="Appointment updated successfully")

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Appointments"])
    def destroy(self, request, pk=None):
        appt = AppointmentService.cancel_appointment(actor_user_id=actor_id(request.user), appointment_id=pk)
        return envelope(AppointmentSerializer(get_appointment(appointment_id=appt.id)).data, message="Appointment cancelled successfully")
