"""API views for analytics."""

from __future__ import annotations

from rest_framework.permissions import IsAuthenticated  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from .services import overview


class OverviewAnalyticsView(APIView):
    """Headline numbers scoped to the caller's role."""

    permission_classes = [IsAuthenticated]

    def get(self, request, format=None):  # type: ignore
        return Response(overview(request.user))
