# hims/audit/api/serializers.py
from rest_framework import serializers

from hims.audit.models import AuditEvent


class AuditEventSerializer(serializers.ModelSerializer):
    timestamp = serializers.DateTimeField(source="occurred_at", read_only=True)
    actor_user_id = serializers.IntegerField(read_only=True, allow_null=True)
    actor_email = serializers.EmailField(source="actor_user.email", read_only=True, default=None)

    class Meta:
        model = AuditEvent
        fields = [
            "id",
            "timestamp",
            "event_code",
            "entity_type",
            "entity_id",
            "actor_user_id",
            "actor_email",
            "metadata",
        ]
        read_only_fields = fields
