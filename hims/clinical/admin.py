# hims/clinical/admin.py
from django.contrib import admin

from hims.clinical.models import PrimaryExamination, Prescription


@admin.register(Prescription)
class PrescriptionAdmin(admin.ModelAdmin):
    list_display = ("visit", "patient", "doctor", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("visit__code", "patient__name", "patient__uhid")
    ordering = ("-created_at",)


@admin.register(PrimaryExamination)
class PrimaryExaminationAdmin(admin.ModelAdmin):
    list_display = ("visit", "patient", "created_at")
    search_fields = ("visit__code", "patient__name", "patient__uhid")
    ordering = ("-created_at",)
