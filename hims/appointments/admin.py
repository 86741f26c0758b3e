# hims/appointments/admin.py
from django.contrib import admin

from hims.appointments.models import Appointment


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ("appointment_number", "patient", "doctor", "appointment_date", "status")
    list_filter = ("status",)
    search_fields = ("appointment_number", "patient__name", "doctor__doctor_name")
    ordering = ("-appointment_date",)
