# hims/wards/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action

from hims.audit.services import actor_id
from hims.common.api.pagination import paginate
from hims.common.api.responses import created, envelope, options
from hims.wards.api.serializers import (
    BedCreateSerializer,
    BedSerializer,
    BedUpdateSerializer,
    FloorSerializer,
    FloorUpdateSerializer,
    FloorWriteSerializer,
    WardSerializer,
    WardUpdateSerializer,
    WardWriteSerializer,
)
from hims.wards.models import Bed, Floor, Ward
from hims.wards.selectors import get_bed, get_floor, get_ward, list_beds, list_floors, list_wards
from hims.wards.services import BedService, FloorService, WardService


def _q(name: str, kind=OpenApiTypes.STR) -> OpenApiParameter:
    return OpenApiParameter(name=name, type=kind, location=OpenApiParameter.QUERY, required=False)


class FloorViewSet(viewsets.ViewSet):
    policy_resource = "floors"

    serializer_class = FloorSerializer
    queryset = Floor.objects.none()

    @extend_schema(tags=["Floors"], parameters=[_q("search"), _q("status")])
    def list(self, request):
        qs = list_floors(search=request.query_params.get("search"), status=request.query_params.get("status"))
        return paginate(request, qs, FloorSerializer, message="Floors fetched successfully")

    @extend_schema(tags=["Floors"], request=FloorWriteSerializer, responses={201: FloorSerializer})
    def create(self, request):
        ser = FloorWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        floor = FloorService.create(actor_user_id=actor_id(request.user), **ser.validated_data)
        return created(FloorSerializer(floor).data, message="Floor created successfully")

    @extend_schema(tags=["Floors"])
    def retrieve(self, request, pk=None):
        return envelope(FloorSerializer(get_floor(floor_id=pk)).data, message="Floor fetched successfully")

    @extend_schema(tags=["Floors"], request=FloorUpdateSerializer)
    def update(self, request, pk=None):
        ser = FloorUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        floor = FloorService.update(actor_user_id=actor_id(request.user), floor_id=pk, data=ser.validated_data)
        return envelope(FloorSerializer(floor).data, message="Floor updated successfully")

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Floors"])
    def destroy(self, request, pk=None):
        FloorService.delete(actor_user_id=actor_id(request.user), floor_id=pk)
        return envelope(None, message="Floor deleted successfully")

    @extend_schema(tags=["Floors"], parameters=[_q("search")])
    @action(detail=False, methods=["get"], url_path="dropdown-list")
    def dropdown_list(self, request):
        qs = list_floors(search=request.query_params.get("search"), status=request.query_params.get("status"))
        return envelope(options(qs, label=lambda f: f.name), message="Floors fetched successfully")


class WardViewSet(viewsets.ViewSet):
    policy_resource = "wards"

    serializer_class = WardSerializer
    queryset = Ward.objects.none()

    @extend_schema(tags=["Wards"], parameters=[_q("search"), _q("status"), _q("floor_id", OpenApiTypes.UUID), _q("type")])
    def list(self, request):
        params = request.query_params
        qs = list_wards(
            search=params.get("search"),
            status=params.get("status"),
            floor_id=params.get("floor_id"),
            type=params.get("type"),
        )
        return paginate(request, qs, WardSerializer, message="Wards fetched successfully")

    @extend_schema(tags=["Wards"], request=WardWriteSerializer, responses={201: WardSerializer})
    def create(self, request):
        ser = WardWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        ward = WardService.create(actor_user_id=actor_id(request.user), **ser.validated_data)
        return created(WardSerializer(get_ward(ward_id=ward.id)).data, message="Ward created successfully")

    @extend_schema(tags=["Wards"])
    def retrieve(self, request, pk=None):
        return envelope(WardSerializer(get_ward(ward_id=pk)).data, message="Ward fetched successfully")

    @extend_schema(tags=["Wards"], request=WardUpdateSerializer)
    def update(self, request, pk=None):
        ser = WardUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        WardService.update(actor_user_id=actor_id(request.user), ward_id=pk, data=ser.validated_data)
        return envelope(WardSerializer(get_ward(ward_id=pk)).data, message="Ward updated successfully")

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Wards"])
    def destroy(self, request, pk=None):
        WardService.delete(actor_user_id=actor_id(request.user), ward_id=pk)
        return envelope(None, message="Ward deleted successfully")

    @extend_schema(tags=["Wards"], parameters=[_q("search"), _q("floor_id", OpenApiTypes.UUID)])
    @action(detail=False, methods=["get"], url_path="dropdown-list")
    def dropdown_list(self, request):
        params = request.query_params
        qs = list_wards(search=params.get("search"), floor_id=params.get("floor_id"), status=params.get("status"))
        return envelope(options(qs, label=lambda w: f"{w.name} ({w.floor.name})"), message="Wards fetched successfully")


class BedViewSet(viewsets.ViewSet):
    policy_resource = "beds"

    serializer_class = BedSerializer
    queryset = Bed.objects.none()

    @extend_schema(
        tags=["Beds"],
        parameters=[_q("search"), _q("status"), _q("ward_id", OpenApiTypes.UUID), _q("floor_id", OpenApiTypes.UUID), _q("type")],
    )
    def list(self, request):
        params = request.query_params
        qs = list_beds(
            search=params.get("search"),
            status=params.get("status"),
            ward_id=params.get("ward_id"),
            floor_id=params.get("floor_id"),
            type=params.get("type"),
        )
        return paginate(request, qs, BedSerializer, message="Beds fetched successfully")

    @extend_schema(tags=["Beds"], request=BedCreateSerializer, responses={201: BedSerializer(many=True)})
    def create(self, request):
        ser = BedCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        v = ser.validated_data
        beds = BedService.create_range(
            actor_user_id=actor_id(request.user),
            ward_id=v["ward_id"],
            floor_id=v["floor_id"],
            bed_number_from=v["bedNumberFrom"],
            bed_number_to=v["bedNumberTo"],
            status=v["status"],
            type=v.get("type"),
        )
        qs = list_beds(ward_id=v["ward_id"]).filter(id__in=[b.id for b in beds])
        return created(BedSerializer(qs, many=True).data, message="Bed created successfully")

    @extend_schema(tags=["Beds"])
    def retrieve(self, request, pk=None):
        return envelope(BedSerializer(get_bed(bed_id=pk)).data, message="Bed fetched successfully")

    @extend_schema(tags=["Beds"], request=BedUpdateSerializer)
    def update(self, request, pk=None):
        ser = BedUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        BedService.update(actor_user_id=actor_id(request.user), bed_id=pk, data=ser.validated_data)
        return envelope(BedSerializer(get_bed(bed_id=pk)).data, message="Bed updated successfully")

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Beds"])
    def destroy(self, request, pk=None):
        BedService.delete(actor_user_id=actor_id(request.user), bed_id=pk)
        return envelope(None, message="Bed deleted successfully")

    @extend_schema(tags=["Beds"], parameters=[_q("search"), _q("status"), _q("ward_id", OpenApiTypes.UUID)])
    @action(detail=False, methods=["get"], url_path="dropdown-list")
    def dropdown_list(self, request):
        params = request.query_params
        qs = list_beds(
            search=params.get("search"),
            status=params.get("status"),
            ward_id=params.get("ward_id"),
            floor_id=params.get("floor_id"),
        )
        return envelope(
            options(qs, label=lambda b: f"{b.bed_number} | {b.ward.name} | {b.floor.name} | {b.status}"),
            message="Beds fetched successfully",
        )
