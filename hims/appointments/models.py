# hims/appointments/models.py
from django.db import models

from hims.common.constants import AppointmentStatus
from hims.common.models import BaseModel


class Appointment(BaseModel):
    appointment_number = models.CharField(max_length=32, unique=True, editable=False)
    doctor = models.ForeignKey("doctors.Doctor", on_delete=models.PROTECT, related_name="appointments")
    patient = models.ForeignKey("patients.Patient", on_delete=models.PROTECT, related_name="appointments")
    appointment_date = models.DateTimeField(db_index=True)
    reason = models.CharField(max_length=500)
    status = models.CharField(
        max_length=16,
        choices=AppointmentStatus.choices,
        default=AppointmentStatus.SCHEDULED,
        db_index=True,
    )

    class Meta:
        db_table = "appointments_appointment"

    def __str__(self) -> str:
        return f"{self.appointment_number} ({self.status})"
