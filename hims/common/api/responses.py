# hims/common/api/responses.py
from __future__ import annotations

from typing import Any

from rest_framework import status as http_status
from rest_framework.response import Response


def envelope(data: Any = None, *, message: str = "", status: int = http_status.HTTP_200_OK) -> Response:
    """
    Success body: {message, data, status: true}.
    Errors use the same shape via hims.common.api.exceptions.
    """
    return Response({"message": message, "data": data, "status": True}, status=status)


def created(data: Any = None, *, message: str = "") -> Response:
    return envelope(data, message=message, status=http_status.HTTP_201_CREATED)


def legacy_envelope(data: Any = None, *, message: str = "", success: bool = True, status: int = http_status.HTTP_200_OK) -> Response:
    """
    Auth routes keep the older {success, message, data} body.
    """
    return Response({"success": success, "message": message, "data": data}, status=status)


def options(rows, *, value_attr: str = "id", label) -> list[dict[str, Any]]:
    """
    {value, label} pairs for the dropdown-list endpoints.
    `label` is a callable taking the row.
    """
    return [{"value": str(getattr(row, value_attr)), "label": label(row)} for row in rows]
