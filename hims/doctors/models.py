# hims/doctors/models.py
from django.conf import settings
from django.db import models

from hims.common.models import BaseModel


class Doctor(BaseModel):
    """
    Doctor profile. Each doctor has a linked login `user` with role Doctor.
    """
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="doctor_profile",
    )

    doctor_name = models.CharField(max_length=100)
    employee_id = models.CharField(max_length=20, unique=True, editable=False)
    specialization = models.CharField(max_length=100, blank=True)
    qualification = models.CharField(max_length=200, blank=True)
    license_no = models.CharField(max_length=50, unique=True)
    email = models.EmailField(max_length=100, unique=True)
    mobile_no = models.CharField(max_length=15, blank=True)
    emergency_contact_no = models.CharField(max_length=15, blank=True)
    department = models.CharField(max_length=100)
    designation = models.CharField(max_length=100, blank=True)
    consultation_fee = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    # {street, city, state, pincode, country}
    address = models.JSONField(default=dict, blank=True)
    joining_date = models.DateField(null=True, blank=True)

    is_active = models.BooleanField(default=True, db_index=True)
    is_consultant = models.BooleanField(default=True)
    available_days = models.JSONField(default=list, blank=True)
    # {morning: {start_time, end_time}, evening: {...}}
    consultation_timings = models.JSONField(default=dict, blank=True)
    notes = models.CharField(max_length=500, blank=True)

    class Meta:
        db_table = "doctors_doctor"
        indexes = [
            models.Index(fields=["doctor_name"]),
            models.Index(fields=["specialization"]),
            models.Index(fields=["department"]),
            models.Index(fields=["is_active", "is_consultant"]),
        ]

    def __str__(self) -> str:
        return self.display_name

    @property
    def display_name(self) -> str:
        if self.qualification:
            return f"Dr. {self.doctor_name} ({self.qualification})"
        return f"Dr. {self.doctor_name}"

    @property
    def name_with_specialization(self) -> str:
        return f"Dr. {self.doctor_name} - {self.specialization or '-'}"

    @property
    def dropdown_label(self) -> str:
        return f"{self.doctor_name} | {self.department or '-'} | {self.specialization or '-'} | {self.mobile_no or '-'}"
