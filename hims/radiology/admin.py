# hims/radiology/admin.py
from django.contrib import admin

from hims.radiology.models import RadiologyReport, RadiologyTemplate


@admin.register(RadiologyTemplate)
class RadiologyTemplateAdmin(admin.ModelAdmin):
    list_display = ("template_name", "is_active", "updated_at")
    list_filter = ("is_active",)
    search_fields = ("template_name",)
    ordering = ("template_name",)


@admin.register(RadiologyReport)
class RadiologyReportAdmin(admin.ModelAdmin):
    list_display = ("order_test", "template", "authorized_at")
    search_fields = ("order_test__lab_order__accession_no",)
    readonly_fields = ("created_at", "updated_at")
