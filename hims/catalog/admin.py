# hims/catalog/admin.py
from django.contrib import admin

from hims.catalog.models import BioReference, LabParameter, LabTest, Service, ServiceType


@admin.register(ServiceType)
class ServiceTypeAdmin(admin.ModelAdmin):
    list_display = ("name", "service_head", "created_at")
    list_filter = ("service_head",)
    search_fields = ("name",)
    ordering = ("name",)


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "head", "rate", "applicable_on", "status")
    list_filter = ("head", "applicable_on", "status")
    search_fields = ("code", "name")
    filter_horizontal = ("linked_parameters",)
    ordering = ("name",)


@admin.register(LabTest)
class LabTestAdmin(admin.ModelAdmin):
    list_display = ("test_name", "report_type", "format_type", "sample_type", "is_active")
    list_filter = ("report_type", "format_type", "is_active")
    search_fields = ("test_name",)
    filter_horizontal = ("linked_services",)
    ordering = ("test_name",)


class BioReferenceInline(admin.TabularInline):
    model = BioReference
    extra = 0


@admin.register(LabParameter)
class LabParameterAdmin(admin.ModelAdmin):
    list_display = ("parameter_name", "test", "unit", "report_type", "is_active")
    list_filter = ("report_type", "is_active")
    search_fields = ("parameter_name",)
    inlines = [BioReferenceInline]
    ordering = ("parameter_name",)
