# hims/lab/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from hims.catalog.api.serializers import BioReferenceSerializer, ServiceBriefSerializer
from hims.common.constants import ContainerType, OrderStatus, SampleType
from hims.doctors.api.serializers import DoctorBriefSerializer
from hims.lab.models import LabOrder, LabOrderTest, LabResult
from hims.patients.api.serializers import PatientBriefSerializer


# --- write ---

class SampleDetailsSerializer(serializers.Serializer):
    sample_type = serializers.ChoiceField(choices=SampleType.choices, required=False, allow_blank=True)
    container_type = serializers.ChoiceField(choices=ContainerType.choices, required=False, allow_blank=True)
    instructions = serializers.CharField(required=False, allow_blank=True)
    technician_id = serializers.IntegerField(required=False, allow_null=True)
    machine_used = serializers.CharField(max_length=100, required=False, allow_blank=True)
    hemolyzed = serializers.BooleanField(required=False)
    lipemic = serializers.BooleanField(required=False)
    icteric = serializers.BooleanField(required=False)
    remarks = serializers.CharField(required=False, allow_blank=True)


class CollectSerializer(SampleDetailsSerializer):
    ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)


class UpdateStatusSerializer(SampleDetailsSerializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)


class ResultInputSerializer(serializers.Serializer):
    parameter_id = serializers.UUIDField()
    value = serializers.CharField(max_length=255, allow_blank=True)
    unit = serializers.CharField(max_length=50, required=False, allow_blank=True)
    remarks = serializers.CharField(required=False, allow_blank=True)


class SaveResultsSerializer(serializers.Serializer):
    results = ResultInputSerializer(many=True, allow_empty=False)
    remarks = serializers.CharField(required=False, allow_blank=True)

    def validate_results(self, value):
        ids = [row["parameter_id"] for row in value]
        if len(ids) != len(set(ids)):
            raise serializers.ValidationError("Duplicate parameter in results")
        return value


class AuthorizeResultsSerializer(SaveResultsSerializer):
    # authorizing already saved results needs no new values
    results = ResultInputSerializer(many=True, required=False, default=list)


# --- read ---

class LabResultSerializer(serializers.ModelSerializer):
    parameter_id = serializers.UUIDField(read_only=True)
    parameter_name = serializers.CharField(source="parameter.parameter_name", read_only=True)

    class Meta:
        model = LabResult
        fields = [
            "id",
            "parameter_id",
            "parameter_name",
            "value",
            "unit",
            "reference_range",
            "status",
            "interpretation",
            "is_critical",
            "is_abnormal",
            "version",
            "previous_values",
            "remarks",
            "entered_at",
            "entered_by_id",
            "authorized_at",
            "authorized_by_id",
        ]
        read_only_fields = fields


class LabOrderTestSerializer(serializers.ModelSerializer):
    service = ServiceBriefSerializer(read_only=True)
    lab_order_id = serializers.UUIDField(read_only=True)
    status_display = serializers.CharField(read_only=True)
    quality_flags = serializers.CharField(read_only=True)

    class Meta:
        model = LabOrderTest
        fields = [
            "id",
            "lab_order_id",
            "service",
            "status",
            "status_display",
            "sample_type",
            "container_type",
            "instructions",
            "technician_id",
            "machine_used",
            "hemolyzed",
            "lipemic",
            "icteric",
            "quality_flags",
            "remarks",
            "collected_at",
            "collected_by_id",
            "saved_at",
            "saved_by_id",
            "authorized_at",
            "authorized_by_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class LabOrderBriefSerializer(serializers.ModelSerializer):
    patient = PatientBriefSerializer(read_only=True)
    status_display = serializers.CharField(read_only=True)

    class Meta:
        model = LabOrder
        fields = ["id", "accession_no", "patient", "billing_type", "status", "status_display", "priority", "order_date"]
        read_only_fields = fields


class LabOrderTestDetailSerializer(LabOrderTestSerializer):
    lab_order = LabOrderBriefSerializer(read_only=True)

    class Meta(LabOrderTestSerializer.Meta):
        fields = LabOrderTestSerializer.Meta.fields + ["lab_order"]
        read_only_fields = fields


class LabOrderSerializer(serializers.ModelSerializer):
    patient = PatientBriefSerializer(read_only=True)
    doctor = DoctorBriefSerializer(read_only=True, allow_null=True)
    visit_id = serializers.UUIDField(read_only=True, allow_null=True)
    opd_bill_id = serializers.UUIDField(read_only=True, allow_null=True)
    ipd_admission_id = serializers.UUIDField(read_only=True, allow_null=True)
    status_display = serializers.CharField(read_only=True)
    tests = LabOrderTestSerializer(many=True, read_only=True)

    class Meta:
        model = LabOrder
        fields = [
            "id",
            "accession_no",
            "patient",
            "doctor",
            "visit_id",
            "billing_type",
            "opd_bill_id",
            "ipd_admission_id",
            "status",
            "status_display",
            "priority",
            "instructions",
            "order_date",
            "collected_at",
            "tests",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ResultSheetRowSerializer(serializers.Serializer):
    parameter_id = serializers.UUIDField(source="parameter.id")
    parameter_name = serializers.CharField(source="parameter.parameter_name")
    sample_type = serializers.CharField(source="parameter.sample_type")
    unit = serializers.CharField()
    reference_range = serializers.CharField()
    reference_ranges = BioReferenceSerializer(many=True)
    result = LabResultSerializer(allow_null=True)
