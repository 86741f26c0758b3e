# hims/wards/models.py
from django.db import models

from hims.common.constants import ActiveStatus, BedStatus, WardType
from hims.common.models import BaseModel


class Floor(BaseModel):
    name = models.CharField(max_length=100, unique=True)
    status = models.CharField(max_length=10, choices=ActiveStatus.choices, default=ActiveStatus.ACTIVE)

    class Meta:
        db_table = "wards_floor"
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Ward(BaseModel):
    name = models.CharField(max_length=100)
    floor = models.ForeignKey(Floor, on_delete=models.PROTECT, related_name="wards")
    type = models.CharField(max_length=10, choices=WardType.choices)
    status = models.CharField(max_length=10, choices=ActiveStatus.choices, default=ActiveStatus.ACTIVE)

    class Meta:
        db_table = "wards_ward"
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(fields=["floor", "name"], name="uq_ward_floor_name"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.floor.name})"


class Bed(BaseModel):
    """
    Occupancy is changed by IPD admission, transfer and discharge.
    """
    bed_number = models.CharField(max_length=20)
    ward = models.ForeignKey(Ward, on_delete=models.PROTECT, related_name="beds")
    floor = models.ForeignKey(Floor, on_delete=models.PROTECT, related_name="beds")
    type = models.CharField(max_length=10, choices=WardType.choices)
    status = models.CharField(max_length=12, choices=BedStatus.choices, default=BedStatus.AVAILABLE, db_index=True)
    patient = models.ForeignKey(
        "patients.Patient",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="beds",
    )

    class Meta:
        db_table = "wards_bed"
        ordering = ["ward", "bed_number"]
        constraints = [
            models.UniqueConstraint(fields=["ward", "bed_number"], name="uq_bed_ward_number"),
        ]

    def __str__(self) -> str:
        return f"{self.ward.name} / {self.bed_number}"

    @property
    def is_available(self) -> bool:
        return self.status == BedStatus.AVAILABLE
