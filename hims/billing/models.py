# hims/billing/models.py
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from hims.common.constants import BillStatus, PatientStatus, PaymentMode
from hims.common.models import BaseModel

MONEY = {"max_digits": 12, "decimal_places": 2, "default": 0, "validators": [MinValueValidator(0)]}


class OpdBill(BaseModel):
    """
    Outpatient bill. Creating one also opens an OPD visit and, for lab
    services, a lab order.
    """
    bill_id = models.CharField(max_length=16, unique=True, editable=False)
    visit = models.ForeignKey("visits.Visit", null=True, blank=True, on_delete=models.SET_NULL, related_name="opd_bills")
    patient = models.ForeignKey("patients.Patient", on_delete=models.PROTECT, related_name="opd_bills")
    consultant_doctor = models.ForeignKey("doctors.Doctor", on_delete=models.PROTECT, related_name="opd_bills")

    payment_mode = models.CharField(max_length=16, choices=PaymentMode.choices, default=PaymentMode.CASH)
    gross_amount = models.DecimalField(**MONEY)
    discount = models.DecimalField(**MONEY)
    net_amount = models.DecimalField(**MONEY)
    paid_amount = models.DecimalField(**MONEY)

    status = models.CharField(max_length=16, choices=BillStatus.choices, default=BillStatus.UNPAID, db_index=True)
    bill_date = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = "billing_opd_bill"
        indexes = [
            models.Index(fields=["consultant_doctor", "bill_date"]),
            models.Index(fields=["patient", "bill_date"]),
        ]

    def __str__(self) -> str:
        return f"{self.bill_id} ({self.status})"

    @property
    def due_amount(self):
        return max(self.net_amount - self.paid_amount, 0)


class OpdBillItem(BaseModel):
    bill = models.ForeignKey(OpdBill, on_delete=models.CASCADE, related_name="items")
    service = models.ForeignKey("catalog.Service", on_delete=models.PROTECT, related_name="opd_bill_items")
    price = models.DecimalField(**MONEY)
    quantity = models.PositiveIntegerField(default=1)
    amount = models.DecimalField(**MONEY)

    class Meta:
        db_table = "billing_opd_bill_item"

    def __str__(self) -> str:
        return f"{self.service_id} x{self.quantity}"


class IpdAdmission(BaseModel):
    """
    Inpatient stay and its running bill. While In Treatment the bed is
    occupied by the patient; discharge frees it.
    """
    bill_number = models.CharField(max_length=32, unique=True, editable=False)
    patient = models.ForeignKey("patients.Patient", on_delete=models.PROTECT, related_name="ipd_admissions")
    referring_doctor = models.ForeignKey("doctors.Doctor", on_delete=models.PROTECT, related_name="ipd_admissions")
    bed = models.ForeignKey("wards.Bed", on_delete=models.PROTECT, related_name="admissions")
    visit = models.ForeignKey("visits.Visit", null=True, blank=True, on_delete=models.SET_NULL, related_name="ipd_admissions")

    patient_status = models.CharField(
        max_length=16,
        choices=PatientStatus.choices,
        default=PatientStatus.IN_TREATMENT,
        db_index=True,
    )
    admitted_at = models.DateTimeField(default=timezone.now, db_index=True)
    discharged_at = models.DateTimeField(null=True, blank=True)

    total_amount = models.DecimalField(**MONEY)
    discount = models.DecimalField(**MONEY)
    net_amount = models.DecimalField(**MONEY)
    paid_amount = models.DecimalField(**MONEY)
    due_amount = models.DecimalField(**MONEY)

    class Meta:
        db_table = "billing_ipd_admission"
        indexes = [
            models.Index(fields=["referring_doctor", "admitted_at"]),
            models.Index(fields=["patient", "patient_status"]),
        ]

    def __str__(self) -> str:
        return f"{self.bill_number} ({self.patient_status})"


class IpdItem(BaseModel):
    admission = models.ForeignKey(IpdAdmission, on_delete=models.CASCADE, related_name="items")
    service = models.ForeignKey("catalog.Service", on_delete=models.PROTECT, related_name="ipd_items")
    price = models.DecimalField(**MONEY)
    quantity = models.PositiveIntegerField(default=1)
    amount = models.DecimalField(**MONEY)

    class Meta:
        db_table = "billing_ipd_item"

    def __str__(self) -> str:
        return f"{self.service_id} x{self.quantity}"
