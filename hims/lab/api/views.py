# hims/lab/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError

from hims.audit.services import actor_id
from hims.common.api.pagination import paginate
from hims.common.api.responses import envelope
from hims.common.pdf import pdf_response
from hims.lab.api.serializers import (
    AuthorizeResultsSerializer,
    CollectSerializer,
    LabOrderSerializer,
    LabOrderTestDetailSerializer,
    LabOrderTestSerializer,
    ResultSheetRowSerializer,
    SaveResultsSerializer,
    UpdateStatusSerializer,
)
from hims.lab.models import LabOrder, LabOrderTest
from hims.lab.pdf import build_lab_report
from hims.lab.selectors import (
    get_lab_order,
    get_order_test,
    list_lab_orders,
    list_order_tests,
    order_parameters,
    printable_tests,
    results_sheet,
)
from hims.lab.services import LabOrderService, LabResultService
from hims.radiology.api.serializers import RadiologyReportSerializer, RadiologyReportWriteSerializer
from hims.radiology.pdf import build_radiology_report
from hims.radiology.selectors import get_report_for_test
from hims.radiology.services import RadiologyReportService


def _q(name: str, kind=OpenApiTypes.STR) -> OpenApiParameter:
    return OpenApiParameter(name=name, type=kind, location=OpenApiParameter.QUERY, required=False)


def _details(validated: dict, *exclude: str) -> dict:
    return {k: v for k, v in validated.items() if k not in exclude}


class LabOrderViewSet(viewsets.ViewSet):
    policy_resource = "lab_orders"

    serializer_class = LabOrderSerializer
    queryset = LabOrder.objects.none()

    @extend_schema(
        tags=["Lab Orders"],
        parameters=[
            _q("search"),
            _q("status"),
            _q("billing_type"),
            _q("priority"),
            _q("patient_id"),
            _q("fromDate", OpenApiTypes.DATE),
            _q("toDate", OpenApiTypes.DATE),
        ],
    )
    def list(self, request):
        p = request.query_params
        qs = list_lab_orders(
            search=p.get("search"),
            status=p.get("status"),
            billing_type=p.get("billing_type"),
            priority=p.get("priority"),
            patient_id=p.get("patient_id"),
            from_date=p.get("fromDate"),
            to_date=p.get("toDate"),
        )
        return paginate(request, qs, LabOrderSerializer, message="Lab orders fetched successfully")

    @extend_schema(tags=["Lab Orders"])
    def retrieve(self, request, pk=None):
        return envelope(LabOrderSerializer(get_lab_order(order_id=pk)).data, message="Lab order fetched successfully")

    @extend_schema(tags=["Lab Orders"])
    @action(detail=True, methods=["get"], url_path="parameters")
    def parameters(self, request, pk=None):
        order = get_lab_order(order_id=pk)
        return envelope(order_parameters(order=order), message="Lab order parameters fetched successfully")


class LabOrderTestViewSet(viewsets.ViewSet):
    policy_resource = "lab_order_tests"

    serializer_class = LabOrderTestDetailSerializer
    queryset = LabOrderTest.objects.none()

    @extend_schema(
        tags=["Lab Order Tests"],
        parameters=[
            _q("search"),
            _q("status"),
            _q("head"),
            _q("lab_order_id"),
            _q("fromDate", OpenApiTypes.DATE),
            _q("toDate", OpenApiTypes.DATE),
        ],
    )
    def list(self, request):
        p = request.query_params
        qs = list_order_tests(
            search=p.get("search"),
            status=p.get("status"),
            head=p.get("head"),
            lab_order_id=p.get("lab_order_id"),
            from_date=p.get("fromDate"),
            to_date=p.get("toDate"),
        )
        return paginate(request, qs, LabOrderTestDetailSerializer, message="Lab order tests fetched successfully")

    @extend_schema(tags=["Lab Order Tests"])
    def retrieve(self, request, pk=None):
        order_test = get_order_test(order_test_id=pk)
        return envelope(LabOrderTestDetailSerializer(order_test).data, message="Lab order test fetched successfully")

    @extend_schema(tags=["Lab Order Tests"], request=CollectSerializer)
    @action(detail=False, methods=["post"], url_path="collect")
    def collect(self, request):
        ser = CollectSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        tests = LabOrderService.collect(
            actor_user_id=actor_id(request.user),
            order_test_ids=ser.validated_data["ids"],
            details=_details(ser.validated_data, "ids"),
        )
        return envelope(LabOrderTestSerializer(tests, many=True).data, message="Samples collected successfully")

    @extend_schema(tags=["Lab Order Tests"], request=UpdateStatusSerializer)
    @action(detail=True, methods=["patch", "post"], url_path="update-status")
    def update_status(self, request, pk=None):
        ser = UpdateStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        order_test = LabOrderService.update_test_status(
            actor_user_id=actor_id(request.user),
            order_test_id=pk,
            status=ser.validated_data["status"],
            details=_details(ser.validated_data, "status"),
        )
        return envelope(LabOrderTestSerializer(order_test).data, message="Lab order test status updated successfully")

    @extend_schema(tags=["Lab Order Tests"])
    @action(detail=True, methods=["get"], url_path="results")
    def results(self, request, pk=None):
        order_test = get_order_test(order_test_id=pk)
        return envelope(
            {
                "test": LabOrderTestDetailSerializer(order_test).data,
                "parameters": ResultSheetRowSerializer(results_sheet(order_test=order_test), many=True).data,
            },
            message="Lab results fetched successfully",
        )

    @extend_schema(tags=["Lab Order Tests"], request=SaveResultsSerializer)
    @action(detail=True, methods=["post"], url_path="save-results")
    def save_results(self, request, pk=None):
        ser = SaveResultsSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        order_test = LabResultService.save_results(
            actor_user_id=actor_id(request.user),
            order_test_id=pk,
            results=ser.validated_data["results"],
            remarks=ser.validated_data.get("remarks"),
        )
        return envelope(LabOrderTestSerializer(order_test).data, message="Lab results saved successfully")

    @extend_schema(tags=["Lab Order Tests"], request=AuthorizeResultsSerializer)
    @action(detail=True, methods=["post"], url_path="save-authorize")
    def save_authorize(self, request, pk=None):
        ser = AuthorizeResultsSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        order_test = LabResultService.save_results(
            actor_user_id=actor_id(request.user),
            order_test_id=pk,
            results=ser.validated_data["results"],
            remarks=ser.validated_data.get("remarks"),
            authorize=True,
        )
        return envelope(LabOrderTestSerializer(order_test).data, message="Lab results authorized successfully")

    @extend_schema(tags=["Lab Order Tests"], responses={(200, "application/pdf"): OpenApiTypes.BINARY})
    @action(detail=True, methods=["get"], url_path="print")
    def print_report(self, request, pk=None):
        order_test = get_order_test(order_test_id=pk)
        order = order_test.lab_order
        tests = list(printable_tests(order=order))
        if not tests:
            raise ValidationError("No authorized tests to print")
        content = build_lab_report(order, tests)
        return pdf_response(content, filename=f"lab-report-{order.accession_no}.pdf", inline=True)

    # Radiology report for one test

    @extend_schema(tags=["Lab Order Tests"], responses={200: RadiologyReportSerializer})
    @action(detail=True, methods=["get"], url_path="radiology-report")
    def radiology_report(self, request, pk=None):
        report = get_report_for_test(order_test_id=pk)
        return envelope(RadiologyReportSerializer(report).data, message="Radiology report fetched successfully")

    @extend_schema(tags=["Lab Order Tests"], request=RadiologyReportWriteSerializer, responses={200: RadiologyReportSerializer})
    @action(detail=True, methods=["post"], url_path="save-radiology")
    def save_radiology(self, request, pk=None):
        ser = RadiologyReportWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        report = RadiologyReportService.save_report(
            actor_user_id=actor_id(request.user),
            order_test_id=pk,
            **ser.validated_data,
        )
        message = "Radiology report authorized successfully" if report.authorized_at else "Radiology report saved successfully"
        return envelope(RadiologyReportSerializer(report).data, message=message)

    @extend_schema(tags=["Lab Order Tests"], responses={(200, "application/pdf"): OpenApiTypes.BINARY})
    @action(detail=True, methods=["get"], url_path="print-radiology")
    def print_radiology(self, request, pk=None):
        report = get_report_for_test(order_test_id=pk)
        content = build_radiology_report(report)
        return pdf_response(
            content,
            filename=f"radiology-report-{report.order_test.lab_order.accession_no}.pdf",
            inline=True,
        )
