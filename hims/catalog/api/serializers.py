# hims/catalog/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from hims.catalog.models import BioReference, LabParameter, LabTest, Service, ServiceType
from hims.common.constants import (
    ActiveStatus,
    AgeUnit,
    FormatType,
    GenderWithAll,
    ReportType,
    SampleType,
    ServiceApplicable,
    ServiceHead,
)


class PartialMixin:
    """Update contracts: every field optional, at least one required."""

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("partial", True)
        super().__init__(*args, **kwargs)

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


# --- service types ---

class ServiceTypeWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    service_head = serializers.ChoiceField(choices=ServiceHead.choices)


class ServiceTypeUpdateSerializer(PartialMixin, ServiceTypeWriteSerializer):
    pass


class ServiceTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = ServiceType
        fields = ["id", "name", "service_head", "created_at", "updated_at"]
        read_only_fields = fields


# --- services ---

class ServiceWriteSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=100)
    code = serializers.RegexField(
        r"^[A-Za-z0-9_]{2,20}$",
        error_messages={"invalid": "Service code should only contain uppercase letters, numbers, and underscores"},
    )
    description = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")
    service_type_id = serializers.UUIDField(required=False, allow_null=True)
    head = serializers.ChoiceField(choices=ServiceHead.choices)
    rate = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    status = serializers.ChoiceField(choices=ActiveStatus.choices, required=False, default=ActiveStatus.ACTIVE)
    applicable_on = serializers.ChoiceField(choices=ServiceApplicable.choices, required=False, default=ServiceApplicable.BOTH)
    linked_parameter_ids = serializers.ListField(child=serializers.UUIDField(), required=False)


class ServiceUpdateSerializer(PartialMixin, ServiceWriteSerializer):
    pass


class ServiceSerializer(serializers.ModelSerializer):
    service_type = ServiceTypeSerializer(read_only=True)
    linked_parameter_ids = serializers.SerializerMethodField()
    radiology_template_id = serializers.UUIDField(read_only=True)
    is_lab_service = serializers.BooleanField(read_only=True)

    class Meta:
        model = Service
        fields = [
            "id",
            "name",
            "code",
            "description",
            "service_type",
            "head",
            "rate",
            "status",
            "applicable_on",
            "is_lab_service",
            "linked_parameter_ids",
            "radiology_template_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_linked_parameter_ids(self, obj) -> list[str]:
        return [str(p.id) for p in obj.linked_parameters.all()]


class ServiceBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Service
        fields = ["id", "name", "code", "head", "rate"]
        read_only_fields = fields


# --- lab tests ---

class LabTestWriteSerializer(serializers.Serializer):
    test_name = serializers.CharField(max_length=200)
    report_type = serializers.ChoiceField(choices=ReportType.choices)
    format_type = serializers.ChoiceField(choices=FormatType.choices)
    sample_type = serializers.ChoiceField(choices=SampleType.choices, required=False, allow_blank=True, default="")
    methodology = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")
    is_active = serializers.BooleanField(required=False, default=True)
    is_printable = serializers.BooleanField(required=False, default=True)
    linked_service_ids = serializers.ListField(child=serializers.UUIDField(), required=False)


class LabTestUpdateSerializer(PartialMixin, LabTestWriteSerializer):
    pass


class LinkedServicesSerializer(serializers.Serializer):
    service_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=True)


class LabTestSerializer(serializers.ModelSerializer):
    linked_services = ServiceBriefSerializer(many=True, read_only=True)

    class Meta:
        model = LabTest
        fields = [
            "id",
            "test_name",
            "report_type",
            "format_type",
            "sample_type",
            "methodology",
            "is_active",
            "is_printable",
            "linked_services",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


# --- lab parameters ---

class BioReferenceWriteSerializer(serializers.Serializer):
    unit = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    age_from = serializers.DecimalField(max_digits=8, decimal_places=2, min_value=0)
    age_to = serializers.DecimalField(max_digits=8, decimal_places=2, min_value=0)
    age_type = serializers.ChoiceField(choices=AgeUnit.choices)
    gender = serializers.ChoiceField(choices=GenderWithAll.choices)
    range = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    min = serializers.DecimalField(max_digits=12, decimal_places=3, required=False, allow_null=True, default=None)
    max = serializers.DecimalField(max_digits=12, decimal_places=3, required=False, allow_null=True, default=None)
    critical_low = serializers.DecimalField(max_digits=12, decimal_places=3, required=False, allow_null=True, default=None)
    critical_high = serializers.DecimalField(max_digits=12, decimal_places=3, required=False, allow_null=True, default=None)

    def validate(self, attrs):
        age_from, age_to = attrs.get("age_from"), attrs.get("age_to")
        if age_from is None or age_to is None:
            raise serializers.ValidationError("Age from and age to are required")
        if age_to < age_from:
            raise serializers.ValidationError("Age to must be greater than or equal to age from")
        lo, hi = attrs.get("min"), attrs.get("max")
        if lo is not None and hi is not None and hi < lo:
            raise serializers.ValidationError("Max must be greater than or equal to min")
        return attrs


class LabParameterWriteSerializer(serializers.Serializer):
    test_id = serializers.UUIDField(required=False, allow_null=True)
    parameter_name = serializers.CharField(max_length=200)
    unit = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    report_type = serializers.ChoiceField(choices=ReportType.choices, required=False, allow_blank=True, default="")
    format_type = serializers.ChoiceField(choices=FormatType.choices, required=False, allow_blank=True, default="")
    sample_type = serializers.ChoiceField(choices=SampleType.choices, required=False, allow_blank=True, default="")
    is_printable = serializers.BooleanField(required=False, default=True)
    interpretation_type = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    interpretation_male = serializers.CharField(required=False, allow_blank=True, default="")
    interpretation_female = serializers.CharField(required=False, allow_blank=True, default="")
    interpretation_both = serializers.CharField(required=False, allow_blank=True, default="")
    methodology = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")
    is_active = serializers.BooleanField(required=False, default=True)
    bio_references = BioReferenceWriteSerializer(many=True, required=False)


class LabParameterUpdateSerializer(PartialMixin, LabParameterWriteSerializer):
    def validate_bio_references(self, value):
        # ranges are replaced wholesale, so validate them as a full payload
        ser = BioReferenceWriteSerializer(data=self.initial_data.get("bio_references") or [], many=True)
        ser.is_valid(raise_exception=True)
        return ser.validated_data


class BioReferenceSerializer(serializers.ModelSerializer):
    display_range = serializers.CharField(read_only=True)

    class Meta:
        model = BioReference
        fields = [
            "id",
            "unit",
            "age_from",
            "age_to",
            "age_type",
            "gender",
            "range",
            "display_range",
            "min",
            "max",
            "critical_low",
            "critical_high",
        ]
        read_only_fields = fields


class LabParameterSerializer(serializers.ModelSerializer):
    test_id = serializers.UUIDField(read_only=True)
    test_name = serializers.CharField(source="test.test_name", read_only=True, default=None)
    bio_references = BioReferenceSerializer(many=True, read_only=True)

    class Meta:
        model = LabParameter
        fields = [
            "id",
            "test_id",
            "test_name",
            "parameter_name",
            "unit",
            "report_type",
            "format_type",
            "sample_type",
            "is_printable",
            "interpretation_type",
            "interpretation_male",
            "interpretation_female",
            "interpretation_both",
            "methodology",
            "is_active",
            "bio_references",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
