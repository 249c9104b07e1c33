"""Self-service profile endpoints for the signed-in user."""

from __future__ import annotations

import logging

from django.db.models import Q  # type: ignore
from rest_framework import generics, status  # type: ignore
from rest_framework.permissions import IsAuthenticated  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.analytics.services import member_stats
from apps.bookings.models import Booking
from apps.bookings.serializers import BookingSerializer
from apps.properties.models import Property
from apps.properties.serializers import PropertyListSerializer
from apps.reviews.models import Review
from apps.reviews.serializers import ReviewSerializer
from .serializers import (
    ChangePasswordSerializer,
    PreferencesSerializer,
    ProfileUpdateSerializer,
    UpdateEmailSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)


class ProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):  # type: ignore
        return Response(UserSerializer(request.user).data)

    def patch(self, request):  # type: ignore
        serializer = ProfileUpdateSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response(UserSerializer(user).data)

    def delete(self, request):  # type: ignore
        """Deactivate the account; bookings and reviews stay for hosts' records."""
        user = request.user
        user.is_active = False
        user.save(update_fields=["is_active"])
        logger.info(f"Account {user.email} deactivated by its owner")
        return Response({"detail": "Account deleted."}, status=status.HTTP_200_OK)


class PreferencesView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):  # type: ignore
        return Response(PreferencesSerializer(request.user).data)

    def put(self, request):  # type: ignore
        serializer = PreferencesSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info(f"Preferences updated for {request.user.email}")
        return Response(UserSerializer(request.user).data)

    patch = put


class ChangePasswordView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):  # type: ignore
        serializer = ChangePasswordSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({"detail": "Password changed."}, status=status.HTTP_200_OK)


class UpdateEmailView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):  # type: ignore
        serializer = UpdateEmailSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response(UserSerializer(user).data, status=status.HTTP_200_OK)


class ProfileBookingsView(generics.ListAPIView):
    serializer_class = BookingSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):  # type: ignore
        qs = Booking.objects.select_related("property", "journey", "departure").prefetch_related(
            "travelers"
        ).filter(member=self.request.user)
        status_param = self.request.query_params.get("status")
        if status_param:
            qs = qs.filter(status=status_param)
        return qs


class ProfilePropertiesView(generics.ListAPIView):
    serializer_class = PropertyListSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):  # type: ignore
        return Property.objects.filter(host=self.request.user).prefetch_related("photos")


class ProfileReviewsView(generics.ListAPIView):
    """Reviews written by the current user."""

    serializer_class = ReviewSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):  # type: ignore
        return Review.objects.select_related("author", "property", "host").filter(
            author=self.request.user
        )


class ReviewsReceivedView(generics.ListAPIView):
    """Reviews about the user's listings or about the user as a host."""

    serializer_class = ReviewSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):  # type: ignore
        user = self.request.user
        return Review.objects.select_related("author", "property", "host").filter(
            Q(property__host=user) | Q(host=user),
            is_visible=True,
        )


class ProfileStatsView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):  # type: ignore
        return Response(member_stats(request.user))
