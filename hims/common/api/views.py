# hims/common/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework.exceptions import NotFound
from rest_framework.views import APIView

from hims.common.api.responses import envelope
from hims.common.constants import ENUM_REGISTRY, choices_as_options, enum_catalog


class EnumsView(APIView):
    """
    Static vocabularies for form dropdowns.
    """
    policy_resource = "enums"

    @extend_schema(tags=["Enums"])
    def get(self, request, name: str | None = None):
        if name is None:
            return envelope(enum_catalog(), message="Enums fetched successfully")

        enum_cls = ENUM_REGISTRY.get(name)
        if enum_cls is None:
            raise NotFound("Enum Not Found")
        return envelope(choices_as_options(enum_cls), message="Enums fetched successfully")
