# hims/patients/admin.py
from django.contrib import admin

from hims.patients.models import Patient


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ("name", "uhid", "gender", "age", "mobile_number", "patient_type", "created_at")
    list_filter = ("gender", "patient_type")
    search_fields = ("name", "uhid", "mobile_number", "relative_name")
    readonly_fields = ("uhid", "created_at", "updated_at")
    ordering = ("-created_at",)
