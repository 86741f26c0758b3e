# hims/doctors/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from hims.common.constants import WeekDay
from hims.doctors.models import Doctor


class DoctorAddressSerializer(serializers.Serializer):
    street = serializers.CharField(max_length=255, required=False, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    state = serializers.CharField(max_length=100, required=False, allow_blank=True)
    pincode = serializers.RegexField(r"^\d{6}$", required=False, allow_blank=True, error_messages={"invalid": "Pincode must be 6 digits"})
    country = serializers.CharField(max_length=100, required=False, allow_blank=True, default="India")


class TimingSerializer(serializers.Serializer):
    start_time = serializers.CharField(max_length=10, required=False, allow_blank=True)
    end_time = serializers.CharField(max_length=10, required=False, allow_blank=True)


class ConsultationTimingsSerializer(serializers.Serializer):
    morning = TimingSerializer(required=False)
    evening = TimingSerializer(required=False)


class DoctorCreateSerializer(serializers.Serializer):
    doctor_name = serializers.CharField(max_length=100, error_messages={"blank": "Doctor name is required"})
    specialization = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    qualification = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")
    license_no = serializers.CharField(max_length=50, error_messages={"blank": "License number is required"})
    email = serializers.EmailField(max_length=100)
    mobile_no = serializers.RegexField(
        r"^\d{10,15}$",
        error_messages={"invalid": "Please enter a valid mobile number"},
    )
    emergency_contact_no = serializers.CharField(max_length=15, required=False, allow_blank=True, default="")
    department = serializers.CharField(max_length=100, error_messages={"blank": "Department is required"})
    designation = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    consultation_fee = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False, default=0)
    address = DoctorAddressSerializer(required=False, default=dict)
    joining_date = serializers.DateField(required=False, allow_null=True)
    is_active = serializers.BooleanField(required=False, default=True)
    is_consultant = serializers.BooleanField(required=False, default=True)
    available_days = serializers.ListField(child=serializers.ChoiceField(choices=WeekDay.choices), required=False, default=list)
    consultation_timings = ConsultationTimingsSerializer(required=False, default=dict)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")
    password = serializers.CharField(min_length=6, required=False, write_only=True)


class DoctorUpdateSerializer(DoctorCreateSerializer):
    def __init__(self, *args, **kwargs):
        kwargs.setdefault("partial", True)
        super().__init__(*args, **kwargs)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class DoctorSerializer(serializers.ModelSerializer):
    display_name = serializers.CharField(read_only=True)
    name_with_specialization = serializers.CharField(read_only=True)
    user_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Doctor
        fields = [
            "id",
            "user_id",
            "employee_id",
            "doctor_name",
            "display_name",
            "name_with_specialization",
            "specialization",
            "qualification",
            "license_no",
            "email",
            "mobile_no",
            "emergency_contact_no",
            "department",
            "designation",
            "consultation_fee",
            "address",
            "joining_date",
            "is_active",
            "is_consultant",
            "available_days",
            "consultation_timings",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class DoctorBriefSerializer(serializers.ModelSerializer):
    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = Doctor
        fields = ["id", "employee_id", "doctor_name", "display_name", "department", "specialization"]
        read_only_fields = fields
