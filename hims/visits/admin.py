# hims/visits/admin.py
from django.contrib import admin

from hims.visits.models import Visit


@admin.register(Visit)
class VisitAdmin(admin.ModelAdmin):
    list_display = ("code", "patient", "consulting_doctor", "visit_type", "status", "visit_date")
    list_filter = ("status", "visit_type", "medico_legal")
    search_fields = ("code", "patient__name", "patient__uhid")
    readonly_fields = ("code", "created_at", "updated_at")
    ordering = ("-visit_date",)
