# hims/lab/models.py
from django.conf import settings
from django.db import models
from django.utils import timezone

from hims.common.constants import (
    BillingType,
    ContainerType,
    Interpretation,
    OrderStatus,
    Priority,
    SampleType,
)
from hims.common.models import BaseModel


class LabOrder(BaseModel):
    """
    Lab work raised by one bill. Its status is never written directly:
    it is recomputed from the tests by LabOrderService.
    """
    accession_no = models.CharField(max_length=32, unique=True, editable=False)
    patient = models.ForeignKey("patients.Patient", on_delete=models.PROTECT, related_name="lab_orders")
    visit = models.ForeignKey("visits.Visit", null=True, blank=True, on_delete=models.SET_NULL, related_name="lab_orders")
    doctor = models.ForeignKey("doctors.Doctor", null=True, blank=True, on_delete=models.SET_NULL, related_name="lab_orders")

    billing_type = models.CharField(max_length=8, choices=BillingType.choices)
    opd_bill = models.ForeignKey("billing.OpdBill", null=True, blank=True, on_delete=models.CASCADE, related_name="lab_orders")
    ipd_admission = models.ForeignKey(
        "billing.IpdAdmission",
        null=True,
        blank=True,
        on_delete=models.CASCADE,
        related_name="lab_orders",
    )

    status = models.CharField(max_length=16, choices=OrderStatus.choices, default=OrderStatus.PENDING, db_index=True)
    priority = models.CharField(max_length=8, choices=Priority.choices, default=Priority.NORMAL)
    instructions = models.TextField(blank=True)
    order_date = models.DateTimeField(default=timezone.now, db_index=True)
    collected_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "lab_order"
        indexes = [
            models.Index(fields=["patient", "order_date"]),
            models.Index(fields=["status", "order_date"]),
        ]

    def __str__(self) -> str:
        return f"{self.accession_no} ({self.status})"

    @property
    def status_display(self) -> str:
        return self.get_status_display()


class LabOrderTest(BaseModel):
    """
    One billed Pathology/Radiology service inside an order.
    """
    lab_order = models.ForeignKey(LabOrder, on_delete=models.CASCADE, related_name="tests")
    service = models.ForeignKey("catalog.Service", on_delete=models.PROTECT, related_name="lab_order_tests")
    status = models.CharField(max_length=16, choices=OrderStatus.choices, default=OrderStatus.PENDING, db_index=True)

    collected_at = models.DateTimeField(null=True, blank=True)
    collected_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+"
    )
    saved_at = models.DateTimeField(null=True, blank=True)
    saved_by = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+")
    authorized_at = models.DateTimeField(null=True, blank=True)
    authorized_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+"
    )

    sample_type = models.CharField(max_length=16, choices=SampleType.choices, blank=True)
    container_type = models.CharField(max_length=24, choices=ContainerType.choices, blank=True)
    instructions = models.TextField(blank=True)
    technician = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+"
    )
    machine_used = models.CharField(max_length=100, blank=True)
    hemolyzed = models.BooleanField(default=False)
    lipemic = models.BooleanField(default=False)
    icteric = models.BooleanField(default=False)
    remarks = models.TextField(blank=True)

    class Meta:
        db_table = "lab_order_test"
        indexes = [models.Index(fields=["lab_order", "status"])]

    def __str__(self) -> str:
        return f"{self.lab_order_id}:{self.service_id} ({self.status})"

    @property
    def status_display(self) -> str:
        return self.get_status_display()

    @property
    def quality_flags(self) -> str:
        flags = [name for name, on in (("Hemolyzed", self.hemolyzed), ("Lipemic", self.lipemic), ("Icteric", self.icteric)) if on]
        return ", ".join(flags) if flags else "Normal"


class LabResult(BaseModel):
    """
    Current value of one parameter for one order test. Edits bump `version`
    and push the replaced value onto `previous_values`.
    """
    order_test = models.ForeignKey(LabOrderTest, on_delete=models.CASCADE, related_name="results")
    parameter = models.ForeignKey("catalog.LabParameter", on_delete=models.PROTECT, related_name="results")

    value = models.CharField(max_length=255, blank=True)
    unit = models.CharField(max_length=50, blank=True)
    reference_range = models.CharField(max_length=100, blank=True)
    status = models.CharField(max_length=16, choices=OrderStatus.choices, default=OrderStatus.SAVED)
    interpretation = models.CharField(max_length=16, choices=Interpretation.choices, blank=True)
    is_critical = models.BooleanField(default=False)
    is_abnormal = models.BooleanField(default=False)
    version = models.PositiveIntegerField(default=1)
    previous_values = models.JSONField(default=list, blank=True)
    remarks = models.TextField(blank=True)

    entered_at = models.DateTimeField(null=True, blank=True)
    entered_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+"
    )
    authorized_at = models.DateTimeField(null=True, blank=True)
    authorized_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+"
    )

    class Meta:
        db_table = "lab_result"
        constraints = [
            models.UniqueConstraint(fields=["order_test", "parameter"], name="uq_lab_result_test_parameter"),
        ]

    def __str__(self) -> str:
        return f"{self.parameter_id}={self.value} v{self.version}"
