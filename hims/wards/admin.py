# hims/wards/admin.py
from django.contrib import admin

from hims.wards.models import Bed, Floor, Ward


@admin.register(Floor)
class FloorAdmin(admin.ModelAdmin):
    list_display = ("name", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("name",)
    ordering = ("name",)


@admin.register(Ward)
class WardAdmin(admin.ModelAdmin):
    list_display = ("name", "floor", "type", "status")
    list_filter = ("floor", "type", "status")
    search_fields = ("name",)
    ordering = ("floor", "name")


@admin.register(Bed)
class BedAdmin(admin.ModelAdmin):
    list_display = ("bed_number", "ward", "floor", "type", "status", "patient")
    list_filter = ("status", "type", "ward", "floor")
    search_fields = ("bed_number", "ward__name", "patient__name", "patient__uhid")
    ordering = ("ward", "bed_number")
