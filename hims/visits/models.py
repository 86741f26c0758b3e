# hims/visits/models.py
from django.db import models
from django.utils import timezone

from hims.common.constants import VisitStatus, VisitType
from hims.common.models import BaseModel


class Visit(BaseModel):
    """
    One patient encounter with a consulting doctor.
    Lifecycle: pending -> closed (closed when a prescription is written).
    """
    code = models.CharField(max_length=32, unique=True, editable=False)
    patient = models.ForeignKey("patients.Patient", on_delete=models.PROTECT, related_name="visits")
    consulting_doctor = models.ForeignKey("doctors.Doctor", on_delete=models.PROTECT, related_name="visits")

    visit_type = models.CharField(max_length=20, choices=VisitType.choices, default=VisitType.OPD)
    referred_by = models.CharField(max_length=100, blank=True)
    visit_note = models.TextField(blank=True)
    medico_legal = models.BooleanField(default=False)
    insurance_type = models.CharField(max_length=50, blank=True)
    policy_number = models.CharField(max_length=50, blank=True)

    status = models.CharField(max_length=16, choices=VisitStatus.choices, default=VisitStatus.PENDING, db_index=True)
    visit_date = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = "visits_visit"
        indexes = [
            models.Index(fields=["patient", "visit_date"]),
            models.Index(fields=["consulting_doctor", "visit_date"]),
        ]

    def __str__(self) -> str:
        return f"{self.code} ({self.status})"
