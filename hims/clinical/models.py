# hims/clinical/models.py
from django.conf import settings
from django.db import models

from hims.common.models import BaseModel


class Prescription(BaseModel):
    """
    Written at the end of a consultation; creating one closes the visit.
    """
    visit = models.ForeignKey("visits.Visit", on_delete=models.PROTECT, related_name="prescriptions")
    patient = models.ForeignKey("patients.Patient", on_delete=models.PROTECT, related_name="prescriptions")
    doctor = models.ForeignKey("doctors.Doctor", null=True, blank=True, on_delete=models.SET_NULL, related_name="prescriptions")

    # [{medicine_name, dosage, frequency, duration, instructions}]
    medicines = models.JSONField(default=list, blank=True)
    provisional_diagnosis = models.TextField(blank=True)
    final_diagnosis = models.TextField(blank=True)
    investigation_advised = models.TextField(blank=True)
    treatment = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    follow_up_date = models.DateField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "clinical_prescription"
        indexes = [models.Index(fields=["patient", "created_at"])]

    def __str__(self) -> str:
        return f"Prescription {self.id} visit={self.visit_id}"


class PrimaryExamination(BaseModel):
    visit = models.ForeignKey("visits.Visit", on_delete=models.PROTECT, related_name="examinations")
    patient = models.ForeignKey("patients.Patient", on_delete=models.PROTECT, related_name="examinations")

    complaints = models.JSONField(default=list)
    history = models.TextField(blank=True)
    # {height, weight, spo2, pulse, bp, resp, temp}
    vitals = models.JSONField(default=dict, blank=True)
    # {lmp, edd, gravida, parity, no_of_child}
    female_details = models.JSONField(default=dict, blank=True)
    investigations = models.JSONField(default=list, blank=True)
    investigation_advised = models.TextField(blank=True)

    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+")

    class Meta:
        db_table = "clinical_primary_examination"
        indexes = [models.Index(fields=["patient", "created_at"])]

    def __str__(self) -> str:
        return f"Examination {self.id} visit={self.visit_id}"
