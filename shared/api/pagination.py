"""Page/limit pagination shared by every list endpoint."""

from __future__ import annotations

import math

from rest_framework.pagination import PageNumberPagination  # type: ignore
from rest_framework.response import Response  # type: ignore


class StandardPagination(PageNumberPagination):
    page_size = 20
    page_query_param = "page"
    page_size_query_param = "limit"
    max_page_size = 50

    def get_pagination_meta(self) -> dict[str, int]:
        total = self.page.paginator.count
        limit = self.page.paginator.per_page
        return {
            "page": self.page.number,
            "limit": limit,
            "total": total,
            "pages": math.ceil(total / limit) if limit else 0,
        }

    def get_paginated_response(self, data):  # type: ignore
        return Response({"results": data, "pagination": self.get_pagination_meta()})

    def get_paginated_response_schema(self, schema):  # type: ignore
        return {
            "type": "object",
            "properties": {
                "results": schema,
                "pagination": {
                    "type": "object",
                    "properties": {
                        "page": {"type": "integer"},
                        "limit": {"type": "integer"},
                        "total": {"type": "integer"},
                        "pages": {"type": "integer"},
                    },
                },
            },
        }
