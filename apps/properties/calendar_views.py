"""Host calendar: booked and blocked dates for a single homestay."""

from __future__ import annotations

import calendar
import logging
from datetime import date, timedelta

from django.db import transaction  # type: ignore
from django.http import Http404  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework import permissions, serializers, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.bookings.models import Booking
from apps.users.api.permissions import is_platform_admin
from . import services
from .models import Property, PropertyAvailability
from .permissions import IsPropertyOwnerOrAdmin
from .serializers import (
    BlockDatesSerializer,
    CalendarWindowQuerySerializer,
    DateRangeQuerySerializer,
    PropertyAvailabilitySerializer,
    UpdateDateSerializer,
)

logger = logging.getLogger(__name__)

DEFAULT_GRID_DAYS = 30


def add_months(value: date, months: int) -> date:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


class PropertyCalendarMixin:
    """Loads the property from the URL and applies visibility and ownership checks."""

    property_lookup_url_kwarg = "property_id"
    permission_classes = [permissions.IsAuthenticated, IsPropertyOwnerOrAdmin]

    def initial(self, request, *args, **kwargs):  # type: ignore
        super().initial(request, *args, **kwargs)
        property_id = kwargs.get(self.property_lookup_url_kwarg)
        self.property_object = get_object_or_404(Property, pk=property_id)
        if not self.property_object.is_public and not self.can_manage(request.user):
            raise Http404
        self.check_object_permissions(request, self.property_object)

    def can_manage(self, user) -> bool:  # type: ignore
        if not user.is_authenticated:
            return False
        return is_platform_admin(user) or self.property_object.host_id == user.id

    def get_property(self) -> Property:
        return self.property_object


class PropertyCalendarView(PropertyCalendarMixin, APIView):
    """Blocks and active bookings, optionally expanded into a per-day grid."""

    permission_classes = [IsPropertyOwnerOrAdmin]

    def get(self, request, property_id):  # type: ignore
        property_obj = self.get_property()
        window = CalendarWindowQuerySerializer(data=request.query_params)
        window.is_valid(raise_exception=True)
        start = window.validated_data.get("start_date")
        end = window.validated_data.get("end_date")

        blocks = PropertyAvailability.objects.filter(property=property_obj)
        bookings = Booking.objects.filter(
            property=property_obj,
            status__in=[
                Booking.Status.CONFIRMED,
                Booking.Status.IN_PROGRESS,
                Booking.Status.COMPLETED,
            ],
        )
        if start:
            blocks = blocks.filter(end_date__gt=start)
            bookings = bookings.filter(check_out__gt=start)
        if end:
            blocks = blocks.filter(start_date__lt=end)
            bookings = bookings.filter(check_in__lt=end)

        payload = {
            "property_id": property_obj.id,
            "blocks": PropertyAvailabilitySerializer(blocks.order_by("start_date"), many=True).data,
            "bookings": [
                {
                    "id": booking.id,
                    "reference": booking.reference,
                    "check_in": booking.check_in,
                    "check_out": booking.check_out,
                    "status": booking.status,
                    "guests": booking.guests,
                }
                for booking in bookings.order_by("check_in")
            ],
        }

        if request.query_params.get("days") in {"1", "true"}:
            grid_start = start or timezone.localdate()
            grid_end = end or grid_start + timedelta(days=DEFAULT_GRID_DAYS)
            if grid_end <= grid_start:
                raise serializers.ValidationError({"end_date": "End date must be after start date."})
            day_status: dict[date, str] = {}
            for block in blocks:
                day = max(block.start_date, grid_start)
                while day < min(block.end_date, grid_end):
                    day_status[day] = block.status
                    day += timedelta(days=1)
            for booking in bookings:
                day = max(booking.check_in, grid_start)
                while day < min(booking.check_out, grid_end):
                    day_status[day] = PropertyAvailability.AvailabilityStatus.BOOKED
                    day += timedelta(days=1)

            days = []
            day = grid_start
            while day < grid_end:
                days.append(
                    {
                        "date": day,
                        "status": day_status.get(day, PropertyAvailability.AvailabilityStatus.AVAILABLE),
                    }
                )
                day += timedelta(days=1)
            payload["days"] = days

        return Response(payload)


class BlockDatesView(PropertyCalendarMixin, APIView):
    def post(self, request, property_id):  # type: ignore
        property_obj = self.get_property()
        serializer = BlockDatesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        with transaction.atomic():
            conflicts = services.find_conflicts(property_obj, data["start_date"], data["end_date"])
            if conflicts:
                return Response(
                    {
                        "detail": "Selected dates overlap existing blocks or bookings.",
                        "conflicts": conflicts,
                    },
                    status=status.HTTP_400_BAD_REQUEST,
                )
            block = PropertyAvailability.objects.create(
                property=property_obj,
                start_date=data["start_date"],
                end_date=data["end_date"],
                status=data["status"],
                reason=data["reason"],
                note=data["note"],
                source=PropertyAvailability.Source.MANUAL,
                created_by=request.user,
            )

        logger.info(
            f"Dates {block.start_date}..{block.end_date} blocked on property {property_obj.id}"
        )
        return Response(PropertyAvailabilitySerializer(block).data, status=status.HTTP_201_CREATED)


class UnblockDatesView(PropertyCalendarMixin, APIView):
    def delete(self, request, property_id, block_id):  # type: ignore
        block = get_object_or_404(PropertyAvailability, pk=block_id, property=self.get_property())
        if block.source == PropertyAvailability.Source.BOOKING:
            return Response(
                {"detail": "Dates reserved by a booking cannot be unblocked."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        block.delete()
        logger.info(f"Block {block_id} removed from property {property_id}")
        return Response({"detail": "Dates unblocked."}, status=status.HTTP_200_OK)


class UpdateDateView(PropertyCalendarMixin, APIView):
    """Set a single night to available, blocked or maintenance."""

    def post(self, request, property_id):  # type: ignore
        property_obj = self.get_property()
        serializer = UpdateDateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        day = serializer.validated_data["date"]
        new_status = serializer.validated_data["status"]
        next_day = day + timedelta(days=1)

        with transaction.atomic():
            covering = services.overlapping_blocks(property_obj, day, next_day)
            if new_status == PropertyAvailability.AvailabilityStatus.AVAILABLE:
                if covering.filter(source=PropertyAvailability.Source.BOOKING).exists():
                    return Response(
                        {"detail": "This date is reserved by a booking."},
                        status=status.HTTP_400_BAD_REQUEST,
                    )
                released = services.release_night(property_obj, day)
                logger.info(f"Night {day} released on property {property_obj.id} ({released} block(s))")
                return Response({"date": day, "status": new_status, "released_blocks": released})

            if services.find_conflicts(property_obj, day, next_day):
                return Response(
                    {"detail": "This date is already blocked or booked."},
                    status=status.HTTP_400_BAD_REQUEST,
                )
            block = PropertyAvailability.objects.create(
                property=property_obj,
                start_date=day,
                end_date=next_day,
                status=new_status,
                reason=(
                    PropertyAvailability.Reason.MAINTENANCE
                    if new_status == PropertyAvailability.AvailabilityStatus.MAINTENANCE
                    else PropertyAvailability.Reason.OTHER
                ),
                note=serializer.validated_data["note"],
                source=PropertyAvailability.Source.MANUAL,
                created_by=request.user,
            )
        return Response(PropertyAvailabilitySerializer(block).data, status=status.HTTP_201_CREATED)


class AvailabilityCheckView(PropertyCalendarMixin, APIView):
    permission_classes = [IsPropertyOwnerOrAdmin]

    def get(self, request, property_id):  # type: ignore
        serializer = DateRangeQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        conflicts = services.find_conflicts(
            self.get_property(),
            serializer.validated_data["start_date"],
            serializer.validated_data["end_date"],
        )
        return Response({"available": not conflicts, "conflicts": conflicts})


class AvailableDatesView(PropertyCalendarMixin, APIView):
    permission_classes = [IsPropertyOwnerOrAdmin]

    def get(self, request, property_id):  # type: ignore
        try:
            months = int(request.query_params.get("months", 3))
        except (TypeError, ValueError):
            months = 3
        months = max(1, min(months, 12))

        start = timezone.localdate()
        end = add_months(start, months)
        available, blocked = services.free_dates(self.get_property(), start, end)
        return Response(
            {
                "property_id": self.get_property().id,
                "start_date": start,
                "end_date": end,
                "available_dates": available,
                "blocked_dates": blocked,
                "total_available_days": len(available),
                "total_blocked_days": len(blocked),
            }
        )
