# hims/catalog/models.py
from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator, RegexValidator
from django.db import models

from hims.common.constants import (
    LAB_SERVICE_HEADS,
    ActiveStatus,
    AgeUnit,
    FormatType,
    GenderWithAll,
    ReportType,
    SampleType,
    ServiceApplicable,
    ServiceHead,
)
from hims.common.models import BaseModel

SERVICE_CODE_VALIDATOR = RegexValidator(
    r"^[A-Z0-9_]+$",
    "Service code should only contain uppercase letters, numbers, and underscores",
)


class ServiceType(BaseModel):
    name = models.CharField(max_length=100, unique=True)
    service_head = models.CharField(max_length=20, choices=ServiceHead.choices)

    class Meta:
        db_table = "catalog_service_type"
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Service(BaseModel):
    """
    Billable catalog item. Pathology/Radiology services fan out into lab work.
    """
    name = models.CharField(max_length=100)
    code = models.CharField(max_length=20, unique=True, validators=[SERVICE_CODE_VALIDATOR])
    description = models.CharField(max_length=500, blank=True)
    service_type = models.ForeignKey(
        ServiceType,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="services",
    )
    head = models.CharField(max_length=20, choices=ServiceHead.choices, db_index=True)
    rate = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    status = models.CharField(max_length=10, choices=ActiveStatus.choices, default=ActiveStatus.ACTIVE, db_index=True)
    applicable_on = models.CharField(max_length=10, choices=ServiceApplicable.choices, default=ServiceApplicable.BOTH)

    linked_parameters = models.ManyToManyField("catalog.LabParameter", blank=True, related_name="services")
    radiology_template = models.ForeignKey(
        "radiology.RadiologyTemplate",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="services",
    )

    class Meta:
        db_table = "catalog_service"
        indexes = [models.Index(fields=["applicable_on", "status"])]

    def __str__(self) -> str:
        return f"{self.code} - {self.name}"

    @property
    def is_lab_service(self) -> bool:
        return self.head in LAB_SERVICE_HEADS

    def applies_to(self, billing_type: str) -> bool:
        return self.applicable_on in (billing_type, ServiceApplicable.BOTH)


class LabTest(BaseModel):
    test_name = models.CharField(max_length=200)
    report_type = models.CharField(max_length=32, choices=ReportType.choices)
    format_type = models.CharField(max_length=16, choices=FormatType.choices)
    sample_type = models.CharField(max_length=16, choices=SampleType.choices, blank=True)
    methodology = models.CharField(max_length=200, blank=True)
    is_active = models.BooleanField(default=True)
    is_printable = models.BooleanField(default=True)
    linked_services = models.ManyToManyField(Service, blank=True, related_name="lab_tests")

    class Meta:
        db_table = "catalog_lab_test"
        constraints = [
            models.UniqueConstraint(fields=["test_name", "report_type"], name="uq_lab_test_name_report_type"),
        ]

    def __str__(self) -> str:
        return self.test_name


class LabParameter(BaseModel):
    test = models.ForeignKey(LabTest, null=True, blank=True, on_delete=models.SET_NULL, related_name="parameters")
    parameter_name = models.CharField(max_length=200)
    unit = models.CharField(max_length=50, blank=True)
    report_type = models.CharField(max_length=32, choices=ReportType.choices, blank=True)
    format_type = models.CharField(max_length=16, choices=FormatType.choices, blank=True)
    sample_type = models.CharField(max_length=16, choices=SampleType.choices, blank=True)
    is_printable = models.BooleanField(default=True)
    interpretation_type = models.CharField(max_length=50, blank=True)
    interpretation_male = models.TextField(blank=True)
    interpretation_female = models.TextField(blank=True)
    interpretation_both = models.TextField(blank=True)
    methodology = models.CharField(max_length=200, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "catalog_lab_parameter"
        ordering = ["parameter_name"]

    def __str__(self) -> str:
        return self.parameter_name


def _plain(value) -> str:
    # 13.000 -> "13", 0.700 -> "0.7"
    return f"{Decimal(value).normalize():f}"


class BioReference(BaseModel):
    """
    Normal range for one parameter, scoped by age band and gender.
    Ages are expressed in `age_type` units; `All` ignores age.
    """
    parameter = models.ForeignKey(LabParameter, on_delete=models.CASCADE, related_name="bio_references")
    unit = models.CharField(max_length=50, blank=True)
    age_from = models.DecimalField(max_digits=8, decimal_places=2, validators=[MinValueValidator(0)])
    age_to = models.DecimalField(max_digits=8, decimal_places=2, validators=[MinValueValidator(0)])
    age_type = models.CharField(max_length=8, choices=AgeUnit.choices)
    gender = models.CharField(max_length=8, choices=GenderWithAll.choices)
    range = models.CharField(max_length=100, blank=True)
    min = models.DecimalField(max_digits=12, decimal_places=3, null=True, blank=True)
    max = models.DecimalField(max_digits=12, decimal_places=3, null=True, blank=True)
    critical_low = models.DecimalField(max_digits=12, decimal_places=3, null=True, blank=True)
    critical_high = models.DecimalField(max_digits=12, decimal_places=3, null=True, blank=True)

    class Meta:
        db_table = "catalog_bio_reference"
        ordering = ["age_type", "age_from"]

    def __str__(self) -> str:
        return f"{self.parameter_id} {self.gender} {self.age_from}-{self.age_to} {self.age_type}"

    @property
    def display_range(self) -> str:
        if self.range:
            return self.range
        if self.min is not None and self.max is not None:
            return f"{_plain(self.min)}-{_plain(self.max)}"
        return ""
