# hims/audit/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.exceptions import ValidationError

from hims.audit.api.serializers import AuditEventSerializer
from hims.audit.models import AuditEvent
from hims.audit.selectors import list_audit_events
from hims.common.api.pagination import paginate


class AuditEventViewSet(viewsets.GenericViewSet):
    """
    Audit trail (Admin only).
    """
    policy_resource = "audit"
    serializer_class = AuditEventSerializer
    queryset = AuditEvent.objects.none()

    @extend_schema(
        tags=["Audit"],
        parameters=[
            OpenApiParameter(name="entity_type", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="entity_id", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="event_code", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="actor_user_id", type=OpenApiTypes.INT, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        params = request.query_params

        actor_user_id = params.get("actor_user_id") or None
        if actor_user_id and not str(actor_user_id).isdigit():
            raise ValidationError({"actor_user_id": "Invalid actor_user_id (int expected)"})

        qs = list_audit_events(
            entity_type=params.get("entity_type"),
            entity_id=params.get("entity_id"),
            event_code=params.get("event_code"),
            actor_user_id=actor_user_id,
        )
        return paginate(request, qs, AuditEventSerializer, message="Audit events fetched successfully")
