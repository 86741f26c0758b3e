# hims/iam/admin.py
from __future__ import annotations

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from hims.iam.models import User


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    list_display = ("email", "first_name", "last_name", "role", "is_active", "date_joined")
    list_filter = ("role", "is_active", "is_superuser")
    search_fields = ("email", "first_name", "last_name", "mobile_number")
    ordering = ("-date_joined",)
    fieldsets = DjangoUserAdmin.fieldsets + (("Hospital", {"fields": ("mobile_number", "role")}),)
