# hims/patients/models.py
from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from hims.common.constants import Gender, IdType, MaritalStatus, PatientType, Relation
from hims.common.models import BaseModel


class Patient(BaseModel):
    """
    Registered patient. `uhid` is issued once at registration and never changes.
    """
    name = models.CharField(max_length=255)
    gender = models.CharField(max_length=16, choices=Gender.choices)
    # years, fractions allowed (1 year 1 month = 1.0833)
    age = models.DecimalField(
        max_digits=7,
        decimal_places=4,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("150"))],
    )
    patient_type = models.CharField(max_length=16, choices=PatientType.choices, default=PatientType.GENERAL)
    mobile_number = models.CharField(max_length=15, blank=True)
    uhid = models.CharField(max_length=32, unique=True, editable=False)

    relation = models.CharField(max_length=16, choices=Relation.choices)
    relative_name = models.CharField(max_length=255, blank=True)
    marital_status = models.CharField(max_length=16, choices=MaritalStatus.choices, blank=True)
    religion = models.CharField(max_length=32, blank=True)
    occupation = models.CharField(max_length=32, blank=True)
    email = models.EmailField(blank=True)
    id_type = models.CharField(max_length=32, choices=IdType.choices, blank=True)
    id_no = models.CharField(max_length=64, blank=True)

    # {street, city, state, district, tehsil, post, pincode, country}
    address = models.JSONField(default=dict, blank=True)

    class Meta:
        db_table = "patients_patient"
        indexes = [
            models.Index(fields=["name"]),
            models.Index(fields=["mobile_number"]),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.uhid})"

    @property
    def age_display(self) -> str:
        if self.age is None:
            return "-"
        return f"{Decimal(self.age).normalize():f}"

    @property
    def dropdown_label(self) -> str:
        return (
            f"{self.name} | {self.relative_name or '-'} | {self.mobile_number or '-'} | "
            f"{self.uhid or '-'} | {self.age_display}yrs | {self.gender}"
        )
