# hims/api/urls.py
from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from hims.appointments.api.views import AppointmentViewSet
from hims.audit.api.views import AuditEventViewSet
from hims.billing.api.views import IpdAdmissionViewSet, OpdBillViewSet
from hims.catalog.api.views import LabParameterViewSet, LabTestViewSet, ServiceTypeViewSet, ServiceViewSet
from hims.clinical.api.views import ExaminationViewSet, PrescriptionViewSet
from hims.common.api.views import EnumsView
from hims.doctors.api.views import DoctorViewSet
from hims.iam.api.auth import LoginView, RefreshView, SignupView
from hims.iam.api.me import MeView
from hims.iam.api.views import UserViewSet
from hims.lab.api.views import LabOrderTestViewSet, LabOrderViewSet
from hims.patients.api.views import PatientViewSet
from hims.radiology.api.views import RadiologyTemplateViewSet
from hims.reports.api.views import CollectionViewSet
from hims.visits.api.views import VisitViewSet
from hims.wards.api.views import BedViewSet, FloorViewSet, WardViewSet

router = DefaultRouter()

# registration
router.register(r"users", UserViewSet, basename="users")
router.register(r"patients", PatientViewSet, basename="patients")
router.register(r"doctors", DoctorViewSet, basename="doctors")
router.register(r"visits", VisitViewSet, basename="visits")
router.register(r"appointments", AppointmentViewSet, basename="appointments")

# catalog
router.register(r"service-types", ServiceTypeViewSet, basename="service-types")
router.register(r"services", ServiceViewSet, basename="services")
router.register(r"lab-tests", LabTestViewSet, basename="lab-tests")
router.register(r"lab-parameters", LabParameterViewSet, basename="lab-parameters")

# wards
router.register(r"floors", FloorViewSet, basename="floors")
router.register(r"wards", WardViewSet, basename="wards")
router.register(r"beds", BedViewSet, basename="beds")

# billing
router.register(r"opd-billing", OpdBillViewSet, basename="opd-billing")
router.register(r"ipd-billing", IpdAdmissionViewSet, basename="ipd-billing")
router.register(r"collections", CollectionViewSet, basename="collections")

# laboratory
router.register(r"lab-orders", LabOrderViewSet, basename="lab-orders")
router.register(r"lab-order-tests", LabOrderTestViewSet, basename="lab-order-tests")
router.register(r"radiology-templates", RadiologyTemplateViewSet, basename="radiology-templates")

# clinical notes
router.register(r"prescriptions", PrescriptionViewSet, basename="prescriptions")
router.register(r"examinations", ExaminationViewSet, basename="examinations")

router.register(r"audit/events", AuditEventViewSet, basename="audit-events")

urlpatterns = [
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/signup/", SignupView.as_view(), name="signup"),
    path("auth/refresh/", RefreshView.as_view(), name="refresh"),
    path("me/", MeView.as_view(), name="me"),
    path("enums/", EnumsView.as_view(), name="enums"),
    path("enums/<str:name>/", EnumsView.as_view(), name="enum-detail"),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]
