"""Journey catalogue and administration endpoints."""

from __future__ import annotations

import logging

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter, SearchFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.api.permissions import IsPlatformAdminOrReadOnly, is_platform_admin
from .filters import JourneyFilterSet
from .models import Journey
from .serializers import (
    JourneyAdminSerializer,
    JourneyDepartureSerializer,
    JourneyDetailSerializer,
    JourneyListSerializer,
    JourneyWriteSerializer,
)

logger = logging.getLogger(__name__)


class JourneyViewSet(viewsets.ModelViewSet):
    """Published journeys for everyone; full management for administrators."""

    queryset = Journey.objects.prefetch_related("itinerary", "departures")
    permission_classes = [IsPlatformAdminOrReadOnly]
    lookup_field = "slug"
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_class = JourneyFilterSet
    search_fields = ["title", "description", "region"]
    ordering_fields = ["price", "duration_days", "created_at"]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if not is_platform_admin(self.request.user):
            return qs.filter(status=Journey.Status.PUBLISHED)
        status_param = self.request.query_params.get("status")
        if self.action == "list" and status_param:
            return qs.filter(status=status_param)
        return qs

    def get_serializer_class(self):  # type: ignore
        if self.action in {"create", "update", "partial_update"}:
            return JourneyWriteSerializer
        if self.action == "list":
            return JourneyListSerializer
        if is_platform_admin(self.request.user):
            return JourneyAdminSerializer
        return JourneyDetailSerializer

    def perform_create(self, serializer):  # type: ignore
        journey = serializer.save()
        logger.info(f"Journey {journey.slug} created by {self.request.user.email}")

    def perform_destroy(self, instance: Journey) -> None:  # type: ignore
        instance.archive()
        logger.info(f"Journey {instance.slug} archived by {self.request.user.email}")

    @action(detail=True, methods=["get"])
    def departures(self, request, slug=None):  # type: ignore
        journey = self.get_object()
        serializer = JourneyDepartureSerializer(journey.upcoming_departures(), many=True)
        return Response(serializer.data)
