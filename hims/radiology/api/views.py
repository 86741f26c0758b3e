# hims/radiology/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action

from hims.audit.services import actor_id
from hims.common.api.pagination import paginate
from hims.common.api.responses import created, envelope
from hims.radiology.api.serializers import (
    RadiologyTemplateSerializer,
    RadiologyTemplateUpdateSerializer,
    RadiologyTemplateWriteSerializer,
    ServiceLinkSerializer,
    ServiceWithTemplateSerializer,
)
from hims.radiology.models import RadiologyTemplate
from hims.radiology.selectors import get_template, list_templates, services_with_templates as radiology_services
from hims.radiology.services import RadiologyTemplateService


def _q(name: str, kind=OpenApiTypes.STR) -> OpenApiParameter:
    return OpenApiParameter(name=name, type=kind, location=OpenApiParameter.QUERY, required=False)


class RadiologyTemplateViewSet(viewsets.ViewSet):
    policy_resource = "radiology_templates"

    serializer_class = RadiologyTemplateSerializer
    queryset = RadiologyTemplate.objects.none()

    @extend_schema(tags=["Radiology"], parameters=[_q("search"), _q("is_active", OpenApiTypes.BOOL)])
    def list(self, request):
        qs = list_templates(search=request.query_params.get("search"), is_active=request.query_params.get("is_active"))
        return paginate(request, qs, RadiologyTemplateSerializer, message="Radiology templates fetched successfully")

    @extend_schema(tags=["Radiology"], request=RadiologyTemplateWriteSerializer, responses={201: RadiologyTemplateSerializer})
    def create(self, request):
        ser = RadiologyTemplateWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        template = RadiologyTemplateService.create(actor_user_id=actor_id(request.user), **ser.validated_data)
        return created(RadiologyTemplateSerializer(template).data, message="Radiology template created successfully")

    @extend_schema(tags=["Radiology"])
    def retrieve(self, request, pk=None):
        return envelope(
            RadiologyTemplateSerializer(get_template(template_id=pk)).data,
            message="Radiology template fetched successfully",
        )

    @extend_schema(tags=["Radiology"], request=RadiologyTemplateUpdateSerializer)
    def update(self, request, pk=None):
        ser = RadiologyTemplateUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        template = RadiologyTemplateService.update(
            actor_user_id=actor_id(request.user),
            template_id=pk,
            data=ser.validated_data,
        )
        return envelope(RadiologyTemplateSerializer(template).data, message="Radiology template updated successfully")

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Radiology"])
    def destroy(self, request, pk=None):
        RadiologyTemplateService.delete(actor_user_id=actor_id(request.user), template_id=pk)
        return envelope(None, message="Radiology template deleted successfully")

    @extend_schema(tags=["Radiology"], request=ServiceLinkSerializer)
    @action(detail=True, methods=["post"], url_path="link-service")
    def link_service(self, request, pk=None):
        ser = ServiceLinkSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        service = RadiologyTemplateService.link_service(
            actor_user_id=actor_id(request.user),
            template_id=pk,
            service_id=ser.validated_data["service_id"],
        )
        return envelope(ServiceWithTemplateSerializer(service).data, message="Service linked successfully")

    @extend_schema(tags=["Radiology"], request=ServiceLinkSerializer)
    @action(detail=True, methods=["post"], url_path="unlink-service")
    def unlink_service(self, request, pk=None):
        ser = ServiceLinkSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        service = RadiologyTemplateService.unlink_service(
            actor_user_id=actor_id(request.user),
            template_id=pk,
            service_id=ser.validated_data["service_id"],
        )
        return envelope(ServiceWithTemplateSerializer(service).data, message="Service unlinked successfully")

    @extend_schema(tags=["Radiology"], parameters=[_q("search")])
    @action(detail=False, methods=["get"], url_path="services-with-templates")
    def services_with_templates(self, request):
        qs = radiology_services(search=request.query_params.get("search"))
        return envelope(
            ServiceWithTemplateSerializer(qs, many=True).data,
            message="Radiology services fetched successfully",
        )
