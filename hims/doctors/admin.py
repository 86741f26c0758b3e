# hims/doctors/admin.py
from django.contrib import admin

from hims.doctors.models import Doctor


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ("doctor_name", "employee_id", "department", "specialization", "license_no", "is_active")
    list_filter = ("department", "specialization", "is_active", "is_consultant")
    search_fields = ("doctor_name", "employee_id", "license_no", "email", "mobile_no")
    readonly_fields = ("employee_id", "created_at", "updated_at")
    ordering = ("doctor_name",)
