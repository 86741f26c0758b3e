# hims/iam/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from hims.common.constants import Role
from hims.iam.models import User


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class SignupSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=150)
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    email = serializers.EmailField()
    mobile_number = serializers.RegexField(r"^\d{10,15}$", required=False, allow_blank=True, default="")
    password = serializers.CharField(min_length=6, write_only=True)
    role = serializers.ChoiceField(
        choices=[r for r in Role.values if r != Role.ADMIN],
        required=False,
        default=Role.RECEPTIONIST,
    )


class RefreshSerializer(serializers.Serializer):
    refresh = serializers.CharField()


class UserCreateSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=150)
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    email = serializers.EmailField()
    mobile_number = serializers.RegexField(r"^\d{10,15}$", required=False, allow_blank=True, default="")
    password = serializers.CharField(min_length=6, write_only=True)
    role = serializers.ChoiceField(choices=Role.choices)
    is_active = serializers.BooleanField(required=False, default=True)


class UserUpdateSerializer(serializers.Serializer):
    """
    Partial update contract (PUT/PATCH).
    """
    first_name = serializers.CharField(max_length=150, required=False)
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    email = serializers.EmailField(required=False)
    mobile_number = serializers.RegexField(r"^\d{10,15}$", required=False, allow_blank=True)
    password = serializers.CharField(min_length=6, required=False, write_only=True)
    role = serializers.ChoiceField(choices=Role.choices, required=False)
    is_active = serializers.BooleanField(required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class UserSerializer(serializers.ModelSerializer):
    full_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "first_name",
            "last_name",
            "full_name",
            "mobile_number",
            "role",
            "is_active",
            "date_joined",
            "last_login",
        ]
        read_only_fields = fields

    def get_full_name(self, obj) -> str:
        return obj.get_full_name()
