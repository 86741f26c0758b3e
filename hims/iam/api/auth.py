# hims/iam/api/auth.py

from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer

from hims.common.api.exceptions import first_error_message
from hims.common.api.responses import legacy_envelope
from hims.iam.api.serializers import LoginSerializer, RefreshSerializer, SignupSerializer, UserSerializer
from hims.iam.services import UserService, issue_tokens

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def _legacy_error(exc: ValidationError, http_status: int = status.HTTP_400_BAD_REQUEST):
    return legacy_envelope(
        None,
        message=first_error_message(exc.detail) or "Validation failed",
        success=False,
        status=http_status,
    )


class LoginView(APIView):
    """
    Email + password -> {access, refresh, user}. Legacy {success, message, data} body.
    """
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_scope = "auth"
    legacy_errors = True

    @extend_schema(request=LoginSerializer, tags=["Auth"])
    def post(self, request):
        ser = LoginSerializer(data=request.data)
        try:
            ser.is_valid(raise_exception=True)
        except ValidationError as e:
            return _legacy_error(e)

        email = ser.validated_data["email"].strip().lower()
        user = authenticate(request, username=email, password=ser.validated_data["password"])
        if user is None:
            logger.warning("Failed login for %s", email)
            return legacy_envelope(None, message=INVALID_CREDENTIALS, success=False, status=status.HTTP_401_UNAUTHORIZED)

        tokens = issue_tokens(user)
        return legacy_envelope(
            {"token": tokens["access"], **tokens, "user": UserSerializer(user).data},
            message="Login successful",
        )


class SignupView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_scope = "auth"
    legacy_errors = True

    @extend_schema(request=SignupSerializer, tags=["Auth"])
    def post(self, request):
        ser = SignupSerializer(data=request.data)
        try:
            ser.is_valid(raise_exception=True)
            user = UserService.create_user(actor_user_id=None, **ser.validated_data)
        except ValidationError as e:
            return _legacy_error(e)

        return legacy_envelope(
            UserSerializer(user).data,
            message="User registered successfully",
            status=status.HTTP_201_CREATED,
        )


class RefreshView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_scope = "auth"
    legacy_errors = True

    @extend_schema(request=RefreshSerializer, tags=["Auth"])
    def post(self, request):
        ser = TokenRefreshSerializer(data=request.data)
        try:
            ser.is_valid(raise_exception=True)
        except ValidationError as e:
            return _legacy_error(e)
        except TokenError:
            return legacy_envelope(None, message="Invalid token", success=False, status=status.HTTP_401_UNAUTHORIZED)

        return legacy_envelope(dict(ser.validated_data), message="Token refreshed")
