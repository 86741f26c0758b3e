# hims/iam/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import viewsets
from rest_framework.exceptions import NotFound

from hims.audit.services import actor_id
from hims.common.api.pagination import paginate
from hims.common.api.responses import created, envelope
from hims.common.filters import FilterBuilder
from hims.iam.api.serializers import UserCreateSerializer, UserSerializer, UserUpdateSerializer
from hims.iam.models import User
from hims.iam.services import UserService


class UserViewSet(viewsets.ViewSet):
    """
    Staff accounts. Admin only.
    """
    policy_resource = "users"
    serializer_class = UserSerializer
    queryset = User.objects.none()

    @extend_schema(tags=["Users"], responses={200: UserSerializer(many=True)})
    def list(self, request):
        params = request.query_params
        q = (
            FilterBuilder()
            .search(["email", "first_name", "last_name", "mobile_number"], params.get("search"))
            .eq("role", params.get("role"))
            .boolean("is_active", params.get("is_active"))
            .build()
        )
        qs = User.objects.filter(q).order_by("-date_joined")
        return paginate(request, qs, UserSerializer, message="Users fetched successfully")

    @extend_schema(tags=["Users"], responses={200: UserSerializer})
    def retrieve(self, request, pk=None):
        user = User.objects.filter(pk=pk).first()
        if user is None:
            raise NotFound("User Not Found")
        return envelope(UserSerializer(user).data, message="User fetched successfully")

    @extend_schema(tags=["Users"], request=UserCreateSerializer, responses={201: UserSerializer})
    def create(self, request):
        ser = UserCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        user = UserService.create_user(actor_user_id=actor_id(request.user), **ser.validated_data)
        return created(UserSerializer(user).data, message="User created successfully")

    @extend_schema(tags=["Users"], request=UserUpdateSerializer, responses={200: UserSerializer})
    def update(self, request, pk=None):
        ser = UserUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        user = UserService.update_user(actor_user_id=actor_id(request.user), user_id=pk, data=ser.validated_data)
        return envelope(UserSerializer(user).data, message="User updated successfully")

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Users"])
    def destroy(self, request, pk=None):
        user = UserService.deactivate_user(actor_user_id=actor_id(request.user), user_id=pk)
        return envelope(UserSerializer(user).data, message="User deactivated successfully")
