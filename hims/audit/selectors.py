# hims/audit/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from hims.audit.models import AuditEvent
from hims.common.filters import FilterBuilder


def list_audit_events(
    *,
    entity_type: str | None = None,
    entity_id: str | None = None,
    event_code: str | None = None,
    actor_user_id: str | None = None,
) -> QuerySet[AuditEvent]:
    q = (
        FilterBuilder()
        .eq("entity_type", entity_type)
        .eq("entity_id", entity_id)
        .eq("event_code", event_code)
        .eq("actor_user_id", actor_user_id)
        .build()
    )
    return AuditEvent.objects.filter(q).select_related("actor_user").order_by("-occurred_at")
