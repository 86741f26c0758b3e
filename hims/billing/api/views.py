# hims/billing/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action

from hims.audit.services import actor_id
from hims.billing.api.serializers import (
    IpdAdmissionCreateSerializer,
    IpdAdmissionListSerializer,
    IpdAdmissionSerializer,
    IpdAdmissionUpdateSerializer,
    OpdBillCreateSerializer,
    OpdBillListSerializer,
    OpdBillSerializer,
    OpdBillUpdateSerializer,
)
from hims.billing.models import IpdAdmission, OpdBill
from hims.billing.pdf import build_ipd_bill, build_opd_bill
from hims.billing.selectors import get_admission, get_opd_bill, list_admissions, list_opd_bills
from hims.billing.services import IpdService, OpdBillingService
from hims.common.api.pagination import paginate
from hims.common.api.responses import created, envelope
from hims.common.pdf import pdf_response


def _q(name: str, kind=OpenApiTypes.STR) -> OpenApiParameter:
    return OpenApiParameter(name=name, type=kind, location=OpenApiParameter.QUERY, required=False)


PDF_RESPONSE = {(200, "application/pdf"): OpenApiTypes.BINARY}


class OpdBillViewSet(viewsets.ViewSet):
    policy_resource = "opd_bills"

    serializer_class = OpdBillSerializer
    queryset = OpdBill.objects.none()

    @extend_schema(
        tags=["OPD Billing"],
        parameters=[
            _q("search"),
            _q("status"),
            _q("doctor_id"),
            _q("patient_id"),
            _q("payment_mode"),
            _q("fromDate", OpenApiTypes.DATE),
            _q("toDate", OpenApiTypes.DATE),
        ],
    )
    def list(self, request):
        p = request.query_params
        qs = list_opd_bills(
            search=p.get("search"),
            status=p.get("status"),
            doctor_id=p.get("doctor_id"),
            patient_id=p.get("patient_id"),
            payment_mode=p.get("payment_mode"),
            from_date=p.get("fromDate"),
            to_date=p.get("toDate"),
        )
        return paginate(request, qs, OpdBillListSerializer, message="OPD bills fetched successfully")

    @extend_schema(tags=["OPD Billing"], request=OpdBillCreateSerializer, responses={201: OpdBillSerializer})
    def create(self, request):
        ser = OpdBillCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        bill = OpdBillingService.create_bill(actor_user_id=actor_id(request.user), **ser.validated_data)
        return created(OpdBillSerializer(get_opd_bill(bill_id=bill.id)).data, message="OPD bill created successfully")

    @extend_schema(tags=["OPD Billing"])
    def retrieve(self, request, pk=None):
        return envelope(OpdBillSerializer(get_opd_bill(bill_id=pk)).data, message="OPD bill fetched successfully")

    @extend_schema(tags=["OPD Billing"], request=OpdBillUpdateSerializer)
    def update(self, request, pk=None):
        ser = OpdBillUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        bill = OpdBillingService.update_bill(actor_user_id=actor_id(request.user), bill_id=pk, data=ser.validated_data)
        return envelope(OpdBillSerializer(get_opd_bill(bill_id=bill.id)).data, message="OPD bill updated successfully")

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["OPD Billing"])
    def destroy(self, request, pk=None):
        bill = OpdBillingService.cancel_bill(actor_user_id=actor_id(request.user), bill_id=pk)
        return envelope(OpdBillListSerializer(bill).data, message="OPD bill cancelled successfully")

    @extend_schema(tags=["OPD Billing"], responses=PDF_RESPONSE)
    @action(detail=True, methods=["get"], url_path="pdf")
    def pdf(self, request, pk=None):
        bill = get_opd_bill(bill_id=pk)
        return pdf_response(build_opd_bill(bill), filename=f"{bill.bill_id}.pdf")


class IpdAdmissionViewSet(viewsets.ViewSet):
    policy_resource = "ipd_admissions"

    serializer_class = IpdAdmissionSerializer
    queryset = IpdAdmission.objects.none()

    @extend_schema(
        tags=["IPD Billing"],
        parameters=[
            _q("search"),
            _q("patient_status"),
            _q("doctor_id"),
            _q("patient_id"),
            _q("fromDate", OpenApiTypes.DATE),
            _q("toDate", OpenApiTypes.DATE),
        ],
    )
    def list(self, request):
        p = request.query_params
        qs = list_admissions(
            search=p.get("search"),
            patient_status=p.get("patient_status"),
            doctor_id=p.get("doctor_id"),
            patient_id=p.get("patient_id"),
            from_date=p.get("fromDate"),
            to_date=p.get("toDate"),
        )
        return paginate(request, qs, IpdAdmissionListSerializer, message="IPD admissions fetched successfully")

    @extend_schema(tags=["IPD Billing"], request=IpdAdmissionCreateSerializer, responses={201: IpdAdmissionSerializer})
    def create(self, request):
        ser = IpdAdmissionCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        admission = IpdService.admit(actor_user_id=actor_id(request.user), **ser.validated_data)
        return created(
            IpdAdmissionSerializer(get_admission(admission_id=admission.id)).data,
            message="IPD admission created successfully",
        )

    @extend_schema(tags=["IPD Billing"])
    def retrieve(self, request, pk=None):
        return envelope(
            IpdAdmissionSerializer(get_admission(admission_id=pk)).data,
            message="IPD admission fetched successfully",
        )

    @extend_schema(tags=["IPD Billing"], request=IpdAdmissionUpdateSerializer)
    def update(self, request, pk=None):
        ser = IpdAdmissionUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        admission = IpdService.update_admission(
            actor_user_id=actor_id(request.user),
            admission_id=pk,
            data=ser.validated_data,
        )
        return envelope(
            IpdAdmissionSerializer(get_admission(admission_id=admission.id)).data,
            message="IPD admission updated successfully",
        )

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["IPD Billing"], responses=PDF_RESPONSE)
    @action(detail=True, methods=["get"], url_path="pdf")
    def pdf(self, request, pk=None):
        admission = get_admission(admission_id=pk)
        return pdf_response(build_ipd_bill(admission), filename=f"{admission.bill_number}.pdf")
