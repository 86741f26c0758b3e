# hims/visits/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from hims.common.constants import VisitStatus, VisitType
from hims.doctors.api.serializers import DoctorBriefSerializer
from hims.patients.api.serializers import PatientBriefSerializer
from hims.visits.models import Visit


class VisitCreateSerializer(serializers.Serializer):
    patient_id = serializers.UUIDField()
    consulting_doctor_id = serializers.UUIDField()
    visit_type = serializers.ChoiceField(choices=VisitType.choices, required=False, default=VisitType.OPD)
    referred_by = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    visit_note = serializers.CharField(required=False, allow_blank=True, default="")
    medico_legal = serializers.BooleanField(required=False, default=False)
    insurance_type = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    policy_number = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    visit_date = serializers.DateTimeField(required=False)


class VisitUpdateSerializer(serializers.Serializer):
    consulting_doctor_id = serializers.UUIDField(required=False)
    visit_type = serializers.ChoiceField(choices=VisitType.choices, required=False)
    referred_by = serializers.CharField(max_length=100, required=False, allow_blank=True)
    visit_note = serializers.CharField(required=False, allow_blank=True)
    medico_legal = serializers.BooleanField(required=False)
    insurance_type = serializers.CharField(max_length=50, required=False, allow_blank=True)
    policy_number = serializers.CharField(max_length=50, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=VisitStatus.choices, required=False)
    visit_date = serializers.DateTimeField(required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class VisitSerializer(serializers.ModelSerializer):
    patient = PatientBriefSerializer(read_only=True)
    consulting_doctor = DoctorBriefSerializer(read_only=True)

    class Meta:
        model = Visit
        fields = [
            "id",
            "code",
            "patient",
            "consulting_doctor",
            "visit_type",
            "referred_by",
            "visit_note",
            "medico_legal",
            "insurance_type",
            "policy_number",
            "status",
            "visit_date",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
