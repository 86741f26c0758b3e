# hims/radiology/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from hims.catalog.models import Service
from hims.radiology.models import RadiologyReport, RadiologyTemplate


class RadiologyTemplateWriteSerializer(serializers.Serializer):
    template_name = serializers.CharField(max_length=200)
    template_content = serializers.CharField()
    description = serializers.CharField(required=False, allow_blank=True, default="")
    is_active = serializers.BooleanField(required=False, default=True)

    def validate_template_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Template name is required")
        return value


class RadiologyTemplateUpdateSerializer(RadiologyTemplateWriteSerializer):
    def __init__(self, *args, **kwargs):
        kwargs.setdefault("partial", True)
        super().__init__(*args, **kwargs)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class ServiceLinkSerializer(serializers.Serializer):
    service_id = serializers.UUIDField()


class TemplateServiceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Service
        fields = ["id", "name", "code", "rate"]
        read_only_fields = fields


class RadiologyTemplateSerializer(serializers.ModelSerializer):
    services = TemplateServiceSerializer(many=True, read_only=True)

    class Meta:
        model = RadiologyTemplate
        fields = [
            "id",
            "template_name",
            "template_content",
            "description",
            "is_active",
            "services",
            "created_by_id",
            "updated_by_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class RadiologyTemplateBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = RadiologyTemplate
        fields = ["id", "template_name", "is_active"]
        read_only_fields = fields


class ServiceWithTemplateSerializer(serializers.ModelSerializer):
    radiology_template = RadiologyTemplateBriefSerializer(read_only=True, allow_null=True)

    class Meta:
        model = Service
        fields = ["id", "name", "code", "rate", "status", "radiology_template"]
        read_only_fields = fields


class RadiologyReportWriteSerializer(serializers.Serializer):
    template_id = serializers.UUIDField(required=False, allow_null=True)
    findings = serializers.CharField(required=False, allow_blank=True, default="")
    impression = serializers.CharField(required=False, allow_blank=True, default="")
    methodology = serializers.CharField(required=False, allow_blank=True, default="")
    authorize = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        if attrs.get("authorize") and not (attrs.get("findings") or "").strip():
            raise serializers.ValidationError("Findings are required to authorize the report")
        return attrs


class RadiologyReportSerializer(serializers.ModelSerializer):
    order_test_id = serializers.UUIDField(read_only=True)
    template = RadiologyTemplateBriefSerializer(read_only=True, allow_null=True)
    service_name = serializers.CharField(source="order_test.service.name", read_only=True)
    status = serializers.CharField(source="order_test.status", read_only=True)

    class Meta:
        model = RadiologyReport
        fields = [
            "id",
            "order_test_id",
            "service_name",
            "status",
            "template",
            "findings",
            "impression",
            "methodology",
            "created_by_id",
            "authorized_at",
            "authorized_by_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
