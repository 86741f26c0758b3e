# hims/clinical/api/serializers.py
from __future__ import annotations

from datetime import date

from rest_framework import serializers

from hims.clinical.models import PrimaryExamination, Prescription
from hims.doctors.api.serializers import DoctorBriefSerializer
from hims.patients.api.serializers import PatientBriefSerializer


class MedicineSerializer(serializers.Serializer):
    medicine_name = serializers.CharField(max_length=200)
    dosage = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    frequency = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    duration = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    instructions = serializers.CharField(required=False, allow_blank=True, default="")


class PrescriptionCreateSerializer(serializers.Serializer):
    visit_id = serializers.UUIDField()
    patient_id = serializers.UUIDField(required=False)
    medicines = MedicineSerializer(many=True, required=False, default=list)
    provisional_diagnosis = serializers.CharField(required=False, allow_blank=True, default="")
    final_diagnosis = serializers.CharField(required=False, allow_blank=True, default="")
    investigation_advised = serializers.CharField(required=False, allow_blank=True, default="")
    treatment = serializers.CharField(required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    follow_up_date = serializers.DateField(required=False, allow_null=True)

    def validate_medicines(self, value):
        return [dict(m) for m in value]


class PrescriptionUpdateSerializer(serializers.Serializer):
    medicines = MedicineSerializer(many=True, required=False)
    provisional_diagnosis = serializers.CharField(required=False, allow_blank=True)
    final_diagnosis = serializers.CharField(required=False, allow_blank=True)
    investigation_advised = serializers.CharField(required=False, allow_blank=True)
    treatment = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)
    follow_up_date = serializers.DateField(required=False, allow_null=True)
    is_active = serializers.BooleanField(required=False)

    def validate_medicines(self, value):
        return [dict(m) for m in value]

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class VisitRefSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    code = serializers.CharField()
    visit_date = serializers.DateTimeField()
    status = serializers.CharField()


class PrescriptionSerializer(serializers.ModelSerializer):
    visit = VisitRefSerializer(read_only=True)
    patient = PatientBriefSerializer(read_only=True)
    doctor = DoctorBriefSerializer(read_only=True, allow_null=True)

    class Meta:
        model = Prescription
        fields = [
            "id",
            "visit",
            "patient",
            "doctor",
            "medicines",
            "provisional_diagnosis",
            "final_diagnosis",
            "investigation_advised",
            "treatment",
            "notes",
            "follow_up_date",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


# --- examinations ---

class VitalsSerializer(serializers.Serializer):
    height = serializers.FloatField(required=False, min_value=0)
    weight = serializers.FloatField(required=False, min_value=0)
    spo2 = serializers.FloatField(required=False, min_value=0, max_value=100)
    pulse = serializers.FloatField(required=False, min_value=0)
    bp = serializers.CharField(max_length=20, required=False, allow_blank=True)
    resp = serializers.FloatField(required=False, min_value=0)
    temp = serializers.FloatField(required=False)


class FemaleDetailsSerializer(serializers.Serializer):
    lmp = serializers.DateField(required=False, allow_null=True)
    edd = serializers.DateField(required=False, allow_null=True)
    gravida = serializers.IntegerField(required=False, min_value=0)
    parity = serializers.IntegerField(required=False, min_value=0)
    no_of_child = serializers.IntegerField(required=False, min_value=0)

    def validate(self, attrs):
        # stored as JSON
        return {k: v.isoformat() if isinstance(v, date) else v for k, v in attrs.items()}


class ExaminationCreateSerializer(serializers.Serializer):
    visit_id = serializers.UUIDField()
    patient_id = serializers.UUIDField()
    complaints = serializers.ListField(
        child=serializers.CharField(min_length=1),
        allow_empty=False,
        error_messages={"empty": "At least one complaint required"},
    )
    history = serializers.CharField(required=False, allow_blank=True, default="")
    vitals = VitalsSerializer()
    female_details = FemaleDetailsSerializer(required=False, default=dict)
    investigations = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    investigation_advised = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        attrs["vitals"] = dict(attrs["vitals"])
        attrs["female_details"] = dict(attrs.get("female_details") or {})
        return attrs


class ExaminationSerializer(serializers.ModelSerializer):
    visit = VisitRefSerializer(read_only=True)
    patient = PatientBriefSerializer(read_only=True)

    class Meta:
        model = PrimaryExamination
        fields = [
            "id",
            "visit",
            "patient",
            "complaints",
            "history",
            "vitals",
            "female_details",
            "investigations",
            "investigation_advised",
            "created_by_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
