# hims/appointments/api/serializers.py
from __future__ import annotations

from django.utils import timezone
from rest_framework import serializers

from hims.appointments.models import Appointment
from hims.common.constants import AppointmentStatus
from hims.doctors.api.serializers import DoctorBriefSerializer
from hims.patients.api.serializers import PatientBriefSerializer


def _not_in_past(value):
    if timezone.localtime(value).date() < timezone.localdate():
        raise serializers.ValidationError("Invalid appointment date")
    return value


class AppointmentCreateSerializer(serializers.Serializer):
    patient_id = serializers.UUIDField()
    doctor_id = serializers.UUIDField()
    appointment_date = serializers.DateTimeField(validators=[_not_in_past])
    reason = serializers.CharField(max_length=500, error_messages={"blank": "Reason is required"})


class AppointmentUpdateSerializer(serializers.Serializer):
    patient_id = serializers.UUIDField(required=False)
    doctor_id = serializers.UUIDField(required=False)
    appointment_date = serializers.DateTimeField(required=False, validators=[_not_in_past])
    reason = serializers.CharField(max_length=500, required=False)
    status = serializers.ChoiceField(choices=AppointmentStatus.choices, required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class AppointmentSerializer(serializers.ModelSerializer):
    doctor = DoctorBriefSerializer(read_only=True)
    patient = PatientBriefSerializer(read_only=True)

    class Meta:
        model = Appointment
        fields = [
            "id",
            "appointment_number",
            "doctor",
            "patient",
            "appointment_date",
            "reason",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
