# hims/common/api/pagination.py
from __future__ import annotations

import math

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from hims.common.api.responses import envelope


def _truthy(value) -> bool:
    return str(value or "").strip().lower() in ("1", "true", "yes")


class EnvelopePagination(PageNumberPagination):
    """
    ?page=1&limit=10 ; ?all=true returns every row with pagination=None.
    """
    page_size = 10
    page_query_param = "page"
    page_size_query_param = "limit"
    max_page_size = 200

    message = ""

    def paginate_queryset(self, queryset, request, view=None):
        self.show_all = _truthy(request.query_params.get("all"))
        if self.show_all:
            self.rows = list(queryset)
            return self.rows
        return super().paginate_queryset(queryset, request, view=view)

    def get_pagination_meta(self) -> dict | None:
        if self.show_all:
            return None
        current = self.page.number
        total = self.page.paginator.count
        limit = self.page.paginator.per_page
        total_pages = math.ceil(total / limit) if limit else 0
        has_next = current < total_pages
        has_prev = current > 1
        return {
            "currentPage": current,
            "totalPages": total_pages,
            "total": total,
            "limit": limit,
            "hasNext": has_next,
            "hasPrev": has_prev,
            "nextPage": current + 1 if has_next else None,
            "prevPage": current - 1 if has_prev else None,
        }

    def get_paginated_response(self, data):
        total = len(self.rows) if self.show_all else self.page.paginator.count
        return envelope(
            {"items": data, "total": total, "pagination": self.get_pagination_meta()},
            message=self.message,
        )


def paginate(request, queryset, serializer_class, *, message: str = "", context: dict | None = None) -> Response:
    """
    Shared pagination helper to enforce a stable contract:
      {message, status, data: {items, total, pagination}}
    """
    p = EnvelopePagination()
    p.message = message
    page = p.paginate_queryset(queryset, request)
    ser = serializer_class(page, many=True, context=context or {"request": request})
    return p.get_paginated_response(ser.data)
