"""API views for the booking domain."""

from __future__ import annotations

import logging

from django.db import transaction  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.properties.services import StayValidationError, quote_stay, validate_stay
from apps.users.api.permissions import is_platform_admin
from .models import Booking
from .serializers import (
    BookingCancelSerializer,
    BookingCreateSerializer,
    BookingSerializer,
    BookingStatusSerializer,
    PriceCalculationSerializer,
)
from .services import (
    BookingRuleError,
    cancel_booking,
    change_status,
    confirm_payment,
    quote_journey_with_coupon,
)
from .tasks import notify_booking_cancelled, notify_booking_created, notify_booking_status_changed

logger = logging.getLogger(__name__)


def _is_host_of(user, booking: Booking) -> bool:  # type: ignore
    return bool(booking.property_id and booking.property.host_id == user.id)


class IsBookingStakeholder(permissions.BasePermission):
    """Members, hosts of the booked homestay and administrators can access a booking."""

    def has_object_permission(self, request, view, obj: Booking):  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        if is_platform_admin(user):
            return True
        return obj.member_id == user.id or _is_host_of(user, obj)


class BookingViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Create bookings and manage their lifecycle."""

    queryset = Booking.objects.select_related(
        "member", "property", "property__host", "journey", "departure"
    ).prefetch_related("travelers")
    permission_classes = [permissions.IsAuthenticated, IsBookingStakeholder]

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        if self.action == "cancel":
            return BookingCancelSerializer
        if self.action == "update_status":
            return BookingStatusSerializer
        if self.action == "calculate_price":
            return PriceCalculationSerializer
        return BookingSerializer

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if not user.is_authenticated:
            return qs.none()
        if not is_platform_admin(user):
            if user.is_host() and self.request.query_params.get("as") != "member":
                qs = qs.filter(member=user) | qs.filter(property__host=user)
            else:
                qs = qs.filter(member=user)

        if self.action == "list":
            params = self.request.query_params
            if params.get("status"):
                qs = qs.filter(status=params["status"])
            if params.get("payment_status"):
                qs = qs.filter(payment_status=params["payment_status"])
            kind = params.get("kind")
            if kind == "property":
                qs = qs.filter(property__isnull=False)
            elif kind == "journey":
                qs = qs.filter(journey__isnull=False)
        return qs.distinct()

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = serializer.save()
        transaction.on_commit(lambda: notify_booking_created.delay(booking.id))
        read_serializer = BookingSerializer(booking, context=self.get_serializer_context())
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            cancel_booking(booking, request.user, serializer.validated_data["reason"])
        except BookingRuleError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        transaction.on_commit(lambda: notify_booking_cancelled.delay(booking.id))
        return Response(BookingSerializer(booking, context=self.get_serializer_context()).data)

    @action(detail=True, methods=["post"], url_path="update-status")
    def update_status(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        user = request.user
        if not (is_platform_admin(user) or _is_host_of(user, booking)):
            return Response(
                {"detail": "Only the host or an administrator can change the booking status."},
                status=status.HTTP_403_FORBIDDEN,
            )
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        new_status = serializer.validated_data["status"]
        try:
            change_status(booking, new_status, user, serializer.validated_data["reason"])
        except BookingRuleError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        if new_status == Booking.Status.CANCELLED:
            transaction.on_commit(lambda: notify_booking_cancelled.delay(booking.id))
        else:
            transaction.on_commit(lambda: notify_booking_status_changed.delay(booking.id))
        return Response(BookingSerializer(booking, context=self.get_serializer_context()).data)

    @action(detail=True, methods=["post"], url_path="confirm-payment")
    def confirm_payment(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        if not (is_platform_admin(request.user) or booking.member_id == request.user.id):
            return Response(
                {"detail": "Only the member or an administrator can confirm payment."},
                status=status.HTTP_403_FORBIDDEN,
            )
        try:
            confirm_payment(booking)
        except BookingRuleError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        transaction.on_commit(lambda: notify_booking_status_changed.delay(booking.id))
        return Response({"status": booking.status, "payment_status": booking.payment_status})

    @action(
        detail=False,
        methods=["post"],
        url_path="calculate-price",
        permission_classes=[permissions.AllowAny],
    )
    def calculate_price(self, request):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if data.get("journey"):
            try:
                quote, _coupon = quote_journey_with_coupon(
                    data["journey"],
                    data.get("departure"),
                    data["travelers"],
                    data["add_ons"],
                    data["coupon_code"],
                )
            except BookingRuleError as exc:
                return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
            return Response({"kind": "journey", "journey_id": data["journey"].id, **quote.as_dict()})

        property_obj = data["property"]
        try:
            validate_stay(property_obj, data["check_in"], data["check_out"], data["guests"])
        except StayValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        breakdown = quote_stay(property_obj, data["check_in"], data["check_out"])
        return Response({"kind": "property", "property_id": property_obj.id, **breakdown.as_dict()})
