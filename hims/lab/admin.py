# hims/lab/admin.py
from django.contrib import admin

from hims.lab.models import LabOrder, LabOrderTest, LabResult


class LabOrderTestInline(admin.TabularInline):
    model = LabOrderTest
    extra = 0
    fields = ("service", "status", "sample_type", "collected_at", "saved_at", "authorized_at")
    readonly_fields = ("collected_at", "saved_at", "authorized_at")


@admin.register(LabOrder)
class LabOrderAdmin(admin.ModelAdmin):
    list_display = ("accession_no", "patient", "billing_type", "status", "priority", "order_date")
    list_filter = ("status", "billing_type", "priority")
    search_fields = ("accession_no", "patient__name", "patient__uhid")
    readonly_fields = ("accession_no", "status", "collected_at", "created_at", "updated_at")
    inlines = [LabOrderTestInline]
    ordering = ("-order_date",)


@admin.register(LabResult)
class LabResultAdmin(admin.ModelAdmin):
    list_display = ("order_test", "parameter", "value", "interpretation", "status", "version")
    list_filter = ("status", "interpretation", "is_critical")
    search_fields = ("parameter__parameter_name", "order_test__lab_order__accession_no")
    readonly_fields = ("version", "previous_values", "created_at", "updated_at")
