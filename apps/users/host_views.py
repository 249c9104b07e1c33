"""Host onboarding, host profile and host dashboard endpoints."""

from __future__ import annotations

import logging

from django.db import transaction  # type: ignore
from django.db.models import Avg, Count, Q  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from rest_framework import generics, status  # type: ignore
from rest_framework.permissions import AllowAny, IsAuthenticated  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.analytics.services import host_dashboard_stats
from apps.bookings.models import Booking
from apps.bookings.serializers import BookingSerializer
from apps.properties.models import Property
from apps.properties.serializers import PropertyListSerializer
from .api.permissions import IsHostOrAdmin
from .models import HostProfile, User
from .serializers import HostProfileSerializer, PublicHostSerializer, UserSerializer

logger = logging.getLogger(__name__)


class HostRegisterView(APIView):
    """Turn the current member into a host."""

    permission_classes = [IsAuthenticated]

    def post(self, request):  # type: ignore
        user = request.user
        if HostProfile.objects.filter(user=user).exists():
            return Response(
                {"detail": "You are already registered as a host."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        serializer = HostProfileSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            profile = serializer.save(user=user)
            if not user.is_platform_admin():
                user.role = User.RoleChoices.HOST
                user.save(update_fields=["role"])

        logger.info(f"User {user.email} registered as host")
        return Response(
            {
                "user": UserSerializer(user).data,
                "host_profile": HostProfileSerializer(profile).data,
            },
            status=status.HTTP_201_CREATED,
        )


class HostProfileView(APIView):
    permission_classes = [IsAuthenticated, IsHostOrAdmin]

    def _get_profile(self, request) -> HostProfile:  # type: ignore
        return get_object_or_404(HostProfile, user=request.user)

    def get(self, request):  # type: ignore
        return Response(HostProfileSerializer(self._get_profile(request)).data)

    def patch(self, request):  # type: ignore
        serializer = HostProfileSerializer(self._get_profile(request), data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)


class PublicHostView(generics.RetrieveAPIView):
    """Public host card with listing count and rating, looked up by user id."""

    serializer_class = PublicHostSerializer
    permission_classes = [AllowAny]
    lookup_field = "user_id"
    lookup_url_kwarg = "pk"

    def get_queryset(self):  # type: ignore
        return HostProfile.objects.select_related("user").filter(user__is_active=True).annotate(
            property_count=Count(
                "user__properties",
                filter=Q(
                    user__properties__status=Property.Status.APPROVED,
                    user__properties__is_active=True,
                ),
                distinct=True,
            ),
            average_rating=Avg(
                "user__host_reviews__rating",
                filter=Q(user__host_reviews__is_visible=True),
            ),
            review_count=Count(
                "user__host_reviews",
                filter=Q(user__host_reviews__is_visible=True),
                distinct=True,
            ),
        )


class HostDashboardView(APIView):
    permission_classes = [IsAuthenticated, IsHostOrAdmin]

    def get(self, request):  # type: ignore
        return Response(host_dashboard_stats(request.user))


class HostPropertiesView(generics.ListAPIView):
    serializer_class = PropertyListSerializer
    permission_classes = [IsAuthenticated, IsHostOrAdmin]

    def get_queryset(self):  # type: ignore
        qs = Property.objects.filter(host=self.request.user).prefetch_related("photos")
        status_param = self.request.query_params.get("status")
        if status_param:
            qs = qs.filter(status=status_param)
        return qs


class HostBookingsView(generics.ListAPIView):
    serializer_class = BookingSerializer
    permission_classes = [IsAuthenticated, IsHostOrAdmin]

    def get_queryset(self):  # type: ignore
        qs = Booking.objects.select_related("member", "property").prefetch_related(
            "travelers"
        ).filter(property__host=self.request.user)
        status_param = self.request.query_params.get("status")
        if status_param:
            qs = qs.filter(status=status_param)
        return qs
