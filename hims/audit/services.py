# hims/audit/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from hims.audit.models import AuditEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditRecord:
    event_code: str
    entity_type: str
    entity_id: str
    actor_user_id: int | None
    metadata: Dict[str, Any]


def actor_id(user) -> int | None:
    return user.pk if user is not None and getattr(user, "is_authenticated", False) else None


class AuditService:
    """
    Central audit writer. Runs inside the caller's transaction so the audit
    row commits or rolls back with the business write.
    """

    @staticmethod
    def log(
        *,
        event_code: str,
        entity_type: str,
        entity_id,
        actor_user_id: int | None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> AuditRecord:
        metadata = metadata or {}

        AuditEvent.objects.create(
            event_code=event_code,
            entity_type=entity_type,
            entity_id=str(entity_id),
            actor_user_id=actor_user_id,
            metadata=metadata,
        )
        logger.info("%s %s=%s %s", event_code, entity_type, entity_id, metadata)

        return AuditRecord(
            event_code=event_code,
            entity_type=entity_type,
            entity_id=str(entity_id),
            actor_user_id=actor_user_id,
            metadata=metadata,
        )
