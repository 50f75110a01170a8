"""Pagination utilities for API v1."""
import math

from django.conf import settings
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardResultsSetPagination(PageNumberPagination):
    """Page number pagination with a ``limit`` query parameter.

    Responses are wrapped as ``{"data": [...], "pagination": {...}}``.
    """

    page_size = settings.API_DEFAULT_PAGE_SIZE
    page_size_query_param = "limit"
    max_page_size = settings.API_MAX_PAGE_SIZE

    def get_paginated_response(self, data):
        total = self.page.paginator.count
        limit = self.get_page_size(self.request)
        return Response(
            {
                "data": data,
                "pagination": {
                    "total": total,
                    "page": self.page.number,
                    "limit": limit,
                    "pages": math.ceil(total / limit) if limit else 0,
                },
            }
        )

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "properties": {
                "data": schema,
                "pagination": {
                    "type": "object",
                    "properties": {
                        "total": {"type": "integer"},
                        "page": {"type": "integer"},
                        "limit": {"type": "integer"},
                        "pages": {"type": "integer"},
                    },
                },
            },
        }
