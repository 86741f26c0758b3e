# hims/wards/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from hims.common.constants import ActiveStatus, BedStatus, WardType
from hims.patients.api.serializers import PatientBriefSerializer
from hims.wards.models import Bed, Floor, Ward


class FloorWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, error_messages={"blank": "Floor name is required"})
    status = serializers.ChoiceField(choices=ActiveStatus.choices, required=False, default=ActiveStatus.ACTIVE)


class FloorUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False)
    status = serializers.ChoiceField(choices=ActiveStatus.choices, required=False)


class FloorSerializer(serializers.ModelSerializer):
    ward_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Floor
        fields = ["id", "name", "status", "ward_count", "created_at", "updated_at"]
        read_only_fields = fields


class WardWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, error_messages={"blank": "Ward name is required"})
    floor_id = serializers.UUIDField()
    type = serializers.ChoiceField(choices=WardType.choices)
    status = serializers.ChoiceField(choices=ActiveStatus.choices, required=False, default=ActiveStatus.ACTIVE)


class WardUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False)
    floor_id = serializers.UUIDField(required=False)
    type = serializers.ChoiceField(choices=WardType.choices, required=False)
    status = serializers.ChoiceField(choices=ActiveStatus.choices, required=False)


class FloorBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Floor
        fields = ["id", "name"]
        read_only_fields = fields


class WardSerializer(serializers.ModelSerializer):
    floor = FloorBriefSerializer(read_only=True)
    total_beds = serializers.IntegerField(read_only=True, required=False)
    available_beds = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Ward
        fields = ["id", "name", "floor", "type", "status", "total_beds", "available_beds", "created_at", "updated_at"]
        read_only_fields = fields


class BedCreateSerializer(serializers.Serializer):
    bedNumberFrom = serializers.IntegerField(
        min_value=1,
        error_messages={"min_value": "Bed Number From must be at least 1", "invalid": "Bed Number From must be a number"},
    )
    bedNumberTo = serializers.IntegerField(
        min_value=1,
        error_messages={"min_value": "Bed Number To must be at least 1", "invalid": "Bed Number To must be a number"},
    )
    ward_id = serializers.UUIDField()
    floor_id = serializers.UUIDField()
    type = serializers.ChoiceField(choices=WardType.choices, required=False)
    status = serializers.ChoiceField(
        choices=[BedStatus.AVAILABLE, BedStatus.MAINTENANCE],
        required=False,
        default=BedStatus.AVAILABLE,
    )

    def validate(self, attrs):
        if attrs["bedNumberTo"] < attrs["bedNumberFrom"]:
            raise serializers.ValidationError(
                {"bedNumberTo": "Bed Number To must be greater than or equal to Bed Number From"}
            )
        if attrs["bedNumberTo"] - attrs["bedNumberFrom"] >= 500:
            raise serializers.ValidationError({"bedNumberTo": "At most 500 beds can be created at once"})
        return attrs


class BedUpdateSerializer(serializers.Serializer):
    bed_number = serializers.CharField(max_length=20, required=False)
    ward_id = serializers.UUIDField(required=False)
    type = serializers.ChoiceField(choices=WardType.choices, required=False)
    status = serializers.ChoiceField(choices=BedStatus.choices, required=False)


class WardBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Ward
        fields = ["id", "name", "type"]
        read_only_fields = fields


class BedSerializer(serializers.ModelSerializer):
    ward = WardBriefSerializer(read_only=True)
    floor = FloorBriefSerializer(read_only=True)
    patient = PatientBriefSerializer(read_only=True, allow_null=True)

    class Meta:
        model = Bed
        fields = ["id", "bed_number", "ward", "floor", "type", "status", "patient", "created_at", "updated_at"]
        read_only_fields = fields
