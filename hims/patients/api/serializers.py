# hims/patients/api/serializers.py
from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from hims.common.constants import Gender, IdType, MaritalStatus, PatientType, Relation
from hims.patients.models import Patient


class AddressSerializer(serializers.Serializer):
    street = serializers.CharField(max_length=255, required=False, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    state = serializers.CharField(max_length=100, required=False, allow_blank=True)
    district = serializers.CharField(max_length=100, required=False, allow_blank=True)
    tehsil = serializers.CharField(max_length=100, required=False, allow_blank=True)
    post = serializers.CharField(max_length=100, required=False, allow_blank=True)
    pincode = serializers.CharField(max_length=10, required=False, allow_blank=True)
    country = serializers.CharField(max_length=100, required=False, allow_blank=True)


class PatientCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, error_messages={"blank": "Patient name is required"})
    gender = serializers.ChoiceField(choices=Gender.choices)
    age = serializers.DecimalField(
        max_digits=7,
        decimal_places=4,
        min_value=Decimal("0"),
        max_value=Decimal("150"),
        required=False,
        allow_null=True,
    )
    patient_type = serializers.ChoiceField(choices=PatientType.choices, required=False, default=PatientType.GENERAL)
    mobile_number = serializers.RegexField(r"^\d{10,15}$", required=False, allow_blank=True, default="")
    relation = serializers.ChoiceField(choices=Relation.choices)
    relative_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    marital_status = serializers.ChoiceField(choices=MaritalStatus.choices, required=False, allow_blank=True, default="")
    religion = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")
    occupation = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")
    email = serializers.EmailField(required=False, allow_blank=True, default="")
    id_type = serializers.ChoiceField(choices=IdType.choices, required=False, allow_blank=True, default="")
    id_no = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")
    address = AddressSerializer(required=False, default=dict)


class PatientUpdateSerializer(PatientCreateSerializer):
    """
    Partial update contract (PUT/PATCH).
    """

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("partial", True)
        super().__init__(*args, **kwargs)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class PatientSerializer(serializers.ModelSerializer):
    class Meta:
        model = Patient
        fields = [
            "id",
            "uhid",
            "name",
            "gender",
            "age",
            "patient_type",
            "mobile_number",
            "relation",
            "relative_name",
            "marital_status",
            "religion",
            "occupation",
            "email",
            "id_type",
            "id_no",
            "address",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PatientBriefSerializer(serializers.ModelSerializer):
    """Embedded in visits, bills and lab orders."""

    class Meta:
        model = Patient
        fields = ["id", "uhid", "name", "gender", "age", "mobile_number"]
        read_only_fields = fields


class PatientOptionSerializer(serializers.ModelSerializer):
    value = serializers.UUIDField(source="id", read_only=True)
    label = serializers.CharField(source="dropdown_label", read_only=True)

    class Meta:
        model = Patient
        fields = [
            "value",
            "label",
            "name",
            "uhid",
            "mobile_number",
            "age",
            "gender",
            "patient_type",
            "relation",
            "relative_name",
        ]
        read_only_fields = fields
