# hims/common/constants.py
"""
Shared vocabularies used by models, serializers and the enums endpoint.
"""
from __future__ import annotations

from django.db import models


class Gender(models.TextChoices):
    MALE = "Male", "Male"
    FEMALE = "Female", "Female"
    OTHER = "Other", "Other"


class GenderWithAll(models.TextChoices):
    MALE = "Male", "Male"
    FEMALE = "Female", "Female"
    ALL = "All", "All"


class AgeUnit(models.TextChoices):
    ALL = "All", "All"
    YEAR = "Year", "Year"
    MONTH = "Month", "Month"
    DAY = "Day", "Day"


class Relation(models.TextChoices):
    SON_OF = "S/O", "S/O"
    WIFE_OF = "W/O", "W/O"
    DAUGHTER_OF = "D/O", "D/O"
    OTHER = "Other", "Other"


class MaritalStatus(models.TextChoices):
    DIVORCED = "Divorced", "Divorced"
    MARRIED = "Married", "Married"
    SEPARATED = "Separated", "Separated"
    UNMARRIED = "Unmarried", "Unmarried"
    WIDOWED = "Widowed", "Widowed"


class Religion(models.TextChoices):
    HINDU = "Hindu", "Hindu"
    BUDDHIST = "Buddhist", "Buddhist"
    CHRISTIAN = "Christian", "Christian"
    JAIN = "Jain", "Jain"
    MUSLIM = "Muslim", "Muslim"
    PARSI = "Parsi", "Parsi"
    SIKH = "Sikh", "Sikh"
    OTHER = "Other", "Other"


class Occupation(models.TextChoices):
    SELF_EMPLOYED = "SELF EMPLOYED", "Self Employed"
    GOVT_SERVICE = "GOVT. SERVICE", "Govt. Service"
    PVT_SERVICE = "PVT. SERVICE", "Pvt. Service"
    BUSINESS = "BUSINESS", "Business"
    HOUSE_WORK = "HOUSE WORK", "House Work"
    STUDY = "STUDY", "Study"
    UNEMPLOYED = "UN-EMPLOYED", "Un-employed"
    OTHER = "OTHER", "Other"


class IdType(models.TextChoices):
    AADHAR = "Aadhar Card", "Aadhar Card"
    PANCARD = "Pancard", "Pancard"
    DRIVING_LICENSE = "Driving license", "Driving license"
    VOTER_ID = "Voter ID", "Voter ID"
    PASSPORT = "Passport", "Passport"


class PatientType(models.TextChoices):
    GENERAL = "General", "General"
    VIP = "VIP", "VIP"
    STAFF = "Staff", "Staff"


class Role(models.TextChoices):
    ADMIN = "Admin", "Admin"
    RECEPTIONIST = "Receptionist", "Receptionist"
    DOCTOR = "Doctor", "Doctor"
    TECHNICIAN = "Technician", "Technician"


class ReportType(models.TextChoices):
    HAEMATOLOGY = "Haematology", "Haematology"
    BIOCHEMISTRY = "Biochemistry", "Biochemistry"
    SEROLOGY = "Serology", "Serology"
    CYTOLOGY = "Cytology", "Cytology"
    OUTSOURCE = "Outsource", "Outsource"
    HORMONES_IMMUNOLOGY = "HormonesImmunology", "Hormones & Immunology"
    CLINICAL = "Clinical", "Clinical Pathology"


class FormatType(models.TextChoices):
    TABULAR = "Tabular", "Tabular"
    FREE_STYLE = "FreeStyle", "Free Style"
    SELECTIVE = "Selective", "Selective"


class SampleType(models.TextChoices):
    SERUM = "Serum", "Serum"
    URINE = "Urine", "Urine"
    BLOOD = "Blood", "Blood"
    FLUIDS = "Fluids", "Fluids"
    SEMEN = "Semen", "Semen"
    TISSUE = "Tissue", "Tissue"
    STOOL = "Stool", "Stool"
    SWAB = "Swab", "Swab"


class ContainerType(models.TextChoices):
    EDTA_TUBE = "edta_tube", "EDTA Tube"
    PLAIN_TUBE = "plain_tube", "Plain Tube"
    CITRATE_TUBE = "citrate_tube", "Citrate Tube"
    FLUORIDE_TUBE = "fluoride_tube", "Fluoride Tube"
    URINE_CONTAINER = "urine_container", "Urine Container"
    STOOL_CONTAINER = "stool_container", "Stool Container"
    SWAB_TUBE = "swab_tube", "Swab Tube"
    OTHER = "other", "Other"


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending Collection"
    COLLECTED = "collected", "Sample Collected"
    SAVED = "saved", "Results Saved"
    AUTHORIZED = "authorized", "Authorized"


# Lowest first; used by the lab order rollup.
ORDER_STATUS_RANK = {
    OrderStatus.PENDING: 0,
    OrderStatus.COLLECTED: 1,
    OrderStatus.SAVED: 2,
    OrderStatus.AUTHORIZED: 3,
}


class Priority(models.TextChoices):
    NORMAL = "normal", "Normal"
    URGENT = "urgent", "Urgent"
    STAT = "stat", "Stat"


class ServiceHead(models.TextChoices):
    PROCEDURE = "Procedure", "Procedure"
    PATHOLOGY = "Pathology", "Pathology"
    CONSULTATION = "Consultation", "Consultation"
    SURGERY = "Surgery", "Surgery"
    RADIOLOGY = "Radiology", "Radiology"
    OTHER = "Other", "Other"


LAB_SERVICE_HEADS = (ServiceHead.PATHOLOGY, ServiceHead.RADIOLOGY)


class ServiceApplicable(models.TextChoices):
    OPD = "OPD", "OPD"
    IPD = "IPD", "IPD"
    BOTH = "Both", "Both"


class ActiveStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    INACTIVE = "inactive", "Inactive"


class VisitStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    CLOSED = "closed", "Closed"


class VisitType(models.TextChoices):
    OPD = "OPD", "OPD"
    IPD = "IPD", "IPD"
    EMG = "EMG", "Emergency"
    CAMP = "Camp", "Camp"
    DAY_CARE = "Day Care", "Day Care"
    INVESTIGATION = "Investigation", "Investigation"


class PaymentMode(models.TextChoices):
    CASH = "cash", "Cash"
    CARD = "card", "Card"
    UPI = "upi", "UPI"
    INSURANCE = "insurance", "Insurance"


class BillStatus(models.TextChoices):
    UNPAID = "unpaid", "Unpaid"
    PARTIALLY_PAID = "partially_paid", "Partially Paid"
    PAID = "paid", "Paid"
    CANCELLED = "cancelled", "Cancelled"


class BillingType(models.TextChoices):
    OPD = "OPD", "OPD"
    IPD = "IPD", "IPD"


class BedStatus(models.TextChoices):
    AVAILABLE = "available", "Available"
    OCCUPIED = "occupied", "Occupied"
    MAINTENANCE = "maintenance", "Maintenance"


class WardType(models.TextChoices):
    GENERAL = "general", "General"
    ICU = "icu", "ICU"
    WARD = "ward", "Ward"


class PatientStatus(models.TextChoices):
    IN_TREATMENT = "In Treatment", "In Treatment"
    DISCHARGED = "Discharged", "Discharged"


class AppointmentStatus(models.TextChoices):
    SCHEDULED = "scheduled", "Scheduled"
    COMPLETED = "completed", "Completed"
    CANCELED = "canceled", "Canceled"


class Interpretation(models.TextChoices):
    NORMAL = "normal", "Normal"
    HIGH = "high", "High"
    LOW = "low", "Low"
    CRITICAL_HIGH = "critical_high", "Critical High"
    CRITICAL_LOW = "critical_low", "Critical Low"
    ABNORMAL = "abnormal", "Abnormal"


class WeekDay(models.TextChoices):
    MONDAY = "Monday", "Monday"
    TUESDAY = "Tuesday", "Tuesday"
    WEDNESDAY = "Wednesday", "Wednesday"
    THURSDAY = "Thursday", "Thursday"
    FRIDAY = "Friday", "Friday"
    SATURDAY = "Saturday", "Saturday"
    SUNDAY = "Sunday", "Sunday"


# Exposed via GET enums/ ; keys are the public names.
ENUM_REGISTRY: dict[str, type[models.TextChoices]] = {
    "gender": Gender,
    "genderWithAll": GenderWithAll,
    "ageUnits": AgeUnit,
    "relationTypes": Relation,
    "maritalStatus": MaritalStatus,
    "religions": Religion,
    "occupations": Occupation,
    "idTypes": IdType,
    "patientTypes": PatientType,
    "roles": Role,
    "reportTypes": ReportType,
    "formatTypes": FormatType,
    "sampleTypes": SampleType,
    "containerTypes": ContainerType,
    "orderStatus": OrderStatus,
    "priority": Priority,
    "serviceHeads": ServiceHead,
    "serviceApplicable": ServiceApplicable,
    "visitStatus": VisitStatus,
    "visitTypes": VisitType,
    "paymentModes": PaymentMode,
    "billStatus": BillStatus,
    "bedStatus": BedStatus,
    "wardTypes": WardType,
    "patientStatus": PatientStatus,
    "appointmentStatus": AppointmentStatus,
    "interpretations": Interpretation,
    "weekDays": WeekDay,
}


def choices_as_options(enum_cls: type[models.TextChoices]) -> list[dict[str, str]]:
    return [{"value": value, "label": label} for value, label in enum_cls.choices]


def enum_catalog() -> dict[str, list[dict[str, str]]]:
    return {name: choices_as_options(enum_cls) for name, enum_cls in ENUM_REGISTRY.items()}
