# hims/common/api/exceptions.py

from __future__ import annotations

import logging
from typing import Any

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.exceptions import NotAuthenticated, Throttled, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)

ACCESS_TOKEN_REQUIRED = "Access token required"
SERVER_ERROR = "Server error"
TOO_MANY_REQUESTS = "API rate limit exceeded, please try again later"
TOO_MANY_AUTH_ATTEMPTS = "Too many authentication attempts, please try again later"


def build_error_envelope(*, message: str, data: Any = None) -> dict[str, Any]:
    """
    Canonical error body. Same shape as success responses with status=False.
    """
    return {"message": message, "data": data, "status": False}


def first_error_message(detail: Any) -> str:
    """
    Walk DRF error details depth first and return the first message.
    Field errors are prefixed with the field name unless they are
    non_field_errors.
    """
    if isinstance(detail, dict):
        for key, value in detail.items():
            msg = first_error_message(value)
            if not msg:
                continue
            if key in ("non_field_errors", "detail"):
                return msg
            if isinstance(value, dict):
                return msg
            return f"{key}: {msg}"
        return ""
    if isinstance(detail, (list, tuple)):
        for item in detail:
            msg = first_error_message(item)
            if msg:
                return msg
        return ""
    return str(detail) if detail is not None else ""


def api_exception_handler(exc: Exception, context: dict[str, Any]):
    request = context.get("request")
    if isinstance(exc, DjangoValidationError):
        # model-level errors, e.g. a malformed UUID in a lookup
        exc = ValidationError(exc.messages)
    response = drf_exception_handler(exc, context)

    # Truly unhandled error
    if response is None:
        logger.exception(
            "Unhandled error on %s %s",
            getattr(request, "method", "-"),
            getattr(request, "path", "-"),
            exc_info=exc,
        )
        return Response(
            build_error_envelope(message=SERVER_ERROR),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, NotAuthenticated):
        message = ACCESS_TOKEN_REQUIRED
    elif isinstance(exc, Throttled):
        logger.warning("Throttled %s %s", getattr(request, "method", "-"), getattr(request, "path", "-"))
        auth_scope = getattr(context.get("view"), "throttle_scope", None) == "auth"
        message = TOO_MANY_AUTH_ATTEMPTS if auth_scope else TOO_MANY_REQUESTS
    elif isinstance(exc, ValidationError):
        message = first_error_message(response.data) or "Validation failed"
    else:
        message = first_error_message(response.data) or "Request failed."

    # auth routes answer in their older {success, message, data} shape
    if getattr(context.get("view"), "legacy_errors", False):
        body = {"success": False, "message": message, "data": None}
    else:
        body = build_error_envelope(message=message)
    return Response(
        body,
        status=response.status_code,
        headers={k: response[k] for k in ("WWW-Authenticate", "Retry-After") if response.has_header(k)},
    )
