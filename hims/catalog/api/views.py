# hims/catalog/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError

from hims.audit.services import actor_id
from hims.catalog.api.serializers import (
    BioReferenceSerializer,
    LabParameterSerializer,
    LabParameterUpdateSerializer,
    LabParameterWriteSerializer,
    LabTestSerializer,
    LabTestUpdateSerializer,
    LabTestWriteSerializer,
    LinkedServicesSerializer,
    ServiceSerializer,
    ServiceTypeSerializer,
    ServiceTypeUpdateSerializer,
    ServiceTypeWriteSerializer,
    ServiceUpdateSerializer,
    ServiceWriteSerializer,
)
from hims.catalog.models import LabParameter, LabTest, Service, ServiceType
from hims.catalog.reference_ranges import filter_bio_references
from hims.catalog.selectors import (
    get_lab_parameter,
    get_lab_test,
    get_service,
    get_service_type,
    list_lab_parameters,
    list_lab_tests,
    list_service_types,
    list_services,
    service_options,
    services_with_link_flag,
)
from hims.catalog.services import CatalogService, LabParameterService, LabTestService, ServiceTypeService
from hims.common.api.pagination import paginate
from hims.common.api.responses import created, envelope, options
from hims.common.constants import GenderWithAll

SEARCH = OpenApiParameter(name="search", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False)


class ServiceTypeViewSet(viewsets.ViewSet):
    policy_resource = "service_types"

    serializer_class = ServiceTypeSerializer
    queryset = ServiceType.objects.none()

    @extend_schema(tags=["Service Types"], parameters=[SEARCH])
    def list(self, request):
        qs = list_service_types(
            search=request.query_params.get("search"),
            service_head=request.query_params.get("service_head"),
        )
        return paginate(request, qs, ServiceTypeSerializer, message="Service types fetched successfully")

    @extend_schema(tags=["Service Types"], request=ServiceTypeWriteSerializer, responses={201: ServiceTypeSerializer})
    def create(self, request):
        ser = ServiceTypeWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        st = ServiceTypeService.create(actor_user_id=actor_id(request.user), **ser.validated_data)
        return created(ServiceTypeSerializer(st).data, message="Service type created successfully")

    @extend_schema(tags=["Service Types"])
    def retrieve(self, request, pk=None):
        return envelope(ServiceTypeSerializer(get_service_type(service_type_id=pk)).data, message="Service type fetched successfully")

    @extend_schema(tags=["Service Types"], request=ServiceTypeUpdateSerializer)
    def update(self, request, pk=None):
        ser = ServiceTypeUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        st = ServiceTypeService.update(actor_user_id=actor_id(request.user), service_type_id=pk, data=ser.validated_data)
        return envelope(ServiceTypeSerializer(st).data, message="Service type updated successfully")

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Service Types"])
    def destroy(self, request, pk=None):
        ServiceTypeService.delete(actor_user_id=actor_id(request.user), service_type_id=pk)
        return envelope(None, message="Service type deleted successfully")

    @extend_schema(tags=["Service Types"], parameters=[SEARCH])
    @action(detail=False, methods=["get"], url_path="dropdown-list")
    def dropdown_list(self, request):
        qs = list_service_types(search=request.query_params.get("search"))
        return envelope(options(qs, label=lambda st: st.name), message="Service types fetched successfully")


class ServiceViewSet(viewsets.ViewSet):
    policy_resource = "services"

    serializer_class = ServiceSerializer
    queryset = Service.objects.none()

    @extend_schema(
        tags=["Services"],
        parameters=[
            SEARCH,
            OpenApiParameter(name="head", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="status", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="applicable_on", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        params = request.query_params
        qs = list_services(
            search=params.get("search"),
            head=params.get("head"),
            status=params.get("status"),
            applicable_on=params.get("applicable_on"),
            service_type_id=params.get("service_type_id"),
        )
        return paginate(request, qs, ServiceSerializer, message="Services fetched successfully")

    @extend_schema(tags=["Services"], request=ServiceWriteSerializer, responses={201: ServiceSerializer})
    def create(self, request):
        ser = ServiceWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        service = CatalogService.create(actor_user_id=actor_id(request.user), **ser.validated_data)
        return created(ServiceSerializer(get_service(service_id=service.id)).data, message="Service created successfully")

    @extend_schema(tags=["Services"])
    def retrieve(self, request, pk=None):
        return envelope(ServiceSerializer(get_service(service_id=pk)).data, message="Service fetched successfully")

    @extend_schema(tags=["Services"], request=ServiceUpdateSerializer)
    def update(self, request, pk=None):
        ser = ServiceUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        CatalogService.update(actor_user_id=actor_id(request.user), service_id=pk, data=ser.validated_data)
        return envelope(ServiceSerializer(get_service(service_id=pk)).data, message="Service updated successfully")

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Services"])
    def destroy(self, request, pk=None):
        CatalogService.delete(actor_user_id=actor_id(request.user), service_id=pk)
        return envelope(None, message="Service deleted successfully")

    @extend_schema(
        tags=["Services"],
        parameters=[
            SEARCH,
            OpenApiParameter(name="applicable", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="head", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    @action(detail=False, methods=["get"], url_path="dropdown-list")
    def dropdown_list(self, request):
        params = request.query_params
        qs = service_options(search=params.get("search"), applicable=params.get("applicable"), head=params.get("head"))
        rows = [
            {"value": str(s.id), "label": f"{s.name} ({s.code})", "rate": str(s.rate), "head": s.head}
            for s in qs
        ]
        return envelope(rows, message="Services fetched successfully")


class LabTestViewSet(viewsets.ViewSet):
    policy_resource = "lab_tests"

    serializer_class = LabTestSerializer
    queryset = LabTest.objects.none()

    @extend_schema(tags=["Lab Tests"], parameters=[SEARCH])
    def list(self, request):
        params = request.query_params
        qs = list_lab_tests(
            search=params.get("search"),
            report_type=params.get("report_type"),
            sample_type=params.get("sample_type"),
            is_active=params.get("is_active"),
        )
        return paginate(request, qs, LabTestSerializer, message="Lab tests fetched successfully")

    @extend_schema(tags=["Lab Tests"], request=LabTestWriteSerializer, responses={201: LabTestSerializer})
    def create(self, request):
        ser = LabTestWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        test = LabTestService.create(actor_user_id=actor_id(request.user), **ser.validated_data)
        return created(LabTestSerializer(get_lab_test(lab_test_id=test.id)).data, message="Lab test created successfully")

    @extend_schema(tags=["Lab Tests"])
    def retrieve(self, request, pk=None):
        return envelope(LabTestSerializer(get_lab_test(lab_test_id=pk)).data, message="Lab test fetched successfully")

    @extend_schema(tags=["Lab Tests"], request=LabTestUpdateSerializer)
    def update(self, request, pk=None):
        ser = LabTestUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        LabTestService.update(actor_user_id=actor_id(request.user), lab_test_id=pk, data=ser.validated_data)
        return envelope(LabTestSerializer(get_lab_test(lab_test_id=pk)).data, message="Lab test updated successfully")

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Lab Tests"])
    def destroy(self, request, pk=None):
        LabTestService.delete(actor_user_id=actor_id(request.user), lab_test_id=pk)
        return envelope(None, message="Lab test deleted successfully")

    @extend_schema(tags=["Lab Tests"])
    @action(detail=True, methods=["get"], url_path="linking")
    def linking(self, request, pk=None):
        rows = services_with_link_flag(lab_test=get_lab_test(lab_test_id=pk))
        data = [
            {"id": str(s.id), "name": s.name, "code": s.code, "head": s.head, "is_linked": is_linked}
            for s, is_linked in rows
        ]
        return envelope(data, message="linked Services fetched successfully")

    @extend_schema(tags=["Lab Tests"], request=LinkedServicesSerializer)
    @linking.mapping.put
    def update_linking(self, request, pk=None):
        ser = LinkedServicesSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        LabTestService.update_linked_services(
            actor_user_id=actor_id(request.user),
            lab_test_id=pk,
            service_ids=ser.validated_data["service_ids"],
        )
        return envelope(LabTestSerializer(get_lab_test(lab_test_id=pk)).data, message="Linked services updated successfully")


class LabParameterViewSet(viewsets.ViewSet):
    policy_resource = "lab_parameters"

    serializer_class = LabParameterSerializer
    queryset = LabParameter.objects.none()

    @extend_schema(tags=["Lab Parameters"], parameters=[SEARCH])
    def list(self, request):
        params = request.query_params
        qs = list_lab_parameters(
            search=params.get("search"),
            test_id=params.get("test_id"),
            report_type=params.get("report_type"),
            is_active=params.get("is_active"),
        )
        return paginate(request, qs, LabParameterSerializer, message="Lab Parameters fetched successfully")

    @extend_schema(tags=["Lab Parameters"], request=LabParameterWriteSerializer, responses={201: LabParameterSerializer})
    def create(self, request):
        ser = LabParameterWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        parameter = LabParameterService.create(actor_user_id=actor_id(request.user), **ser.validated_data)
        return created(
            LabParameterSerializer(get_lab_parameter(parameter_id=parameter.id)).data,
            message="Lab Parameter created successfully",
        )

    @extend_schema(tags=["Lab Parameters"])
    def retrieve(self, request, pk=None):
        return envelope(LabParameterSerializer(get_lab_parameter(parameter_id=pk)).data, message="Lab Parameter fetched successfully")

    @extend_schema(tags=["Lab Parameters"], request=LabParameterUpdateSerializer)
    def update(self, request, pk=None):
        ser = LabParameterUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        LabParameterService.update(actor_user_id=actor_id(request.user), parameter_id=pk, data=ser.validated_data)
        return envelope(LabParameterSerializer(get_lab_parameter(parameter_id=pk)).data, message="Lab Parameter updated successfully")

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Lab Parameters"])
    def destroy(self, request, pk=None):
        LabParameterService.delete(actor_user_id=actor_id(request.user), parameter_id=pk)
        return envelope(None, message="Lab Parameter and linked BioReferences deleted successfully")

    @extend_schema(
        tags=["Lab Parameters"],
        parameters=[
            OpenApiParameter(name="age", type=OpenApiTypes.NUMBER, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="gender", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    @action(detail=True, methods=["get"], url_path="reference-ranges")
    def reference_ranges(self, request, pk=None):
        parameter = get_lab_parameter(parameter_id=pk)

        raw_age = request.query_params.get("age")
        try:
            age = float(raw_age) if raw_age not in (None, "") else None
        except ValueError:
            raise ValidationError({"age": "Age must be a number"})
        if age is not None and age < 0:
            raise ValidationError({"age": "Age cannot be negative"})

        gender = request.query_params.get("gender") or None
        if gender is not None and gender not in GenderWithAll.values and gender != "Other":
            raise ValidationError({"gender": f"Invalid gender: {gender}"})

        refs = filter_bio_references(parameter.bio_references.all(), age_years=age, gender=gender)
        return envelope(BioReferenceSerializer(refs, many=True).data, message="Reference ranges fetched successfully")
