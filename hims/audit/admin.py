# hims/audit/admin.py
from django.contrib import admin

from hims.audit.models import AuditEvent


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ("occurred_at", "event_code", "entity_type", "entity_id", "actor_user")
    list_filter = ("entity_type", "event_code")
    search_fields = ("entity_id", "event_code", "actor_user__email")
    date_hierarchy = "occurred_at"
    readonly_fields = ("id", "occurred_at", "event_code", "entity_type", "entity_id", "actor_user", "metadata")

    # append-only trail
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
