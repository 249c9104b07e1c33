"""Availability and stay pricing helpers for homestays."""

from __future__ import annotations

import math
from datetime import date, timedelta

from django.db.models import Q  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.models import Booking
from shared.domain.value_objects import DateRange, PriceBreakdown, homestay_price
from .models import Location, Property, PropertyAvailability


class StayValidationError(Exception):
    """Raised when requested dates or guests do not fit a listing."""


def _active_bookings(property_obj: Property):  # type: ignore
    return Booking.objects.filter(
        property=property_obj,
        status__in=Booking.ACTIVE_STATUSES,
    )


def overlapping_blocks(
    property_obj: Property,
    start_date: date,
    end_date: date,
):  # type: ignore
    return PropertyAvailability.objects.filter(
        property=property_obj,
        status__in=PropertyAvailability.BLOCKING_STATUSES,
    ).filter(Q(start_date__lt=end_date) & Q(end_date__gt=start_date))


def release_night(property_obj: Property, day: date) -> int:
    """Free one night from the manual blocks covering it.

    A block starting or ending on ``day`` is shortened, a block around it is
    split in two, and a one-night block is deleted. Returns the number of
    blocks touched. Run inside a transaction.
    """
    next_day = day + timedelta(days=1)
    covering = overlapping_blocks(property_obj, day, next_day).filter(
        source=PropertyAvailability.Source.MANUAL,
    ).select_for_update()
    touched = 0
    for block in covering:
        touched += 1
        if block.start_date == day and block.end_date == next_day:
            block.delete()
        elif block.start_date == day:
            block.start_date = next_day
            block.save(update_fields=["start_date", "updated_at"])
        elif block.end_date == next_day:
            block.end_date = day
            block.save(update_fields=["end_date", "updated_at"])
        else:
            tail_end = block.end_date
            block.end_date = day
            block.save(update_fields=["end_date", "updated_at"])
            PropertyAvailability.objects.create(
                property=property_obj,
                start_date=next_day,
                end_date=tail_end,
                status=block.status,
                reason=block.reason,
                note=block.note,
                source=block.source,
                created_by=block.created_by,
            )
    return touched


def find_conflicts(
    property_obj: Property,
    start_date: date,
    end_date: date,
    exclude_booking_id: int | None = None,
) -> list[dict]:
    """Blocks and bookings that overlap the half-open range [start_date, end_date)."""
    conflicts: list[dict] = []
    blocks = overlapping_blocks(property_obj, start_date, end_date)
    if exclude_booking_id is not None:
        blocks = blocks.exclude(booking_id=exclude_booking_id)
    for block in blocks:
        conflicts.append(
            {
                "type": "block",
                "id": block.id,
                "status": block.status,
                "start_date": block.start_date,
                "end_date": block.end_date,
                "booking_id": block.booking_id,
            }
        )

    reserved_booking_ids = {item["booking_id"] for item in conflicts if item["booking_id"]}
    bookings = _active_bookings(property_obj).filter(
        check_in__lt=end_date,
        check_out__gt=start_date,
    )
    if exclude_booking_id is not None:
        bookings = bookings.exclude(id=exclude_booking_id)
    for booking in bookings:
        if booking.id in reserved_booking_ids:
            continue
        conflicts.append(
            {
                "type": "booking",
                "id": booking.id,
                "status": booking.status,
                "start_date": booking.check_in,
                "end_date": booking.check_out,
                "booking_id": booking.id,
            }
        )
    return conflicts


def is_available(property_obj: Property, start_date: date, end_date: date) -> bool:
    return not find_conflicts(property_obj, start_date, end_date)


def unavailable_dates(property_obj: Property, start_date: date, end_date: date) -> set[date]:
    """Every night inside [start_date, end_date) taken by a block or a booking."""
    taken: set[date] = set()
    window = DateRange(start_date, end_date)
    for item in find_conflicts(property_obj, start_date, end_date):
        for day in DateRange(item["start_date"], item["end_date"]).iter_days():
            if window.contains(day):
                taken.add(day)
    return taken


def validate_stay(
    property_obj: Property,
    check_in: date,
    check_out: date,
    guests: int,
) -> int:
    """Check dates, capacity and stay limits; return the number of nights."""
    if check_out <= check_in:
        raise StayValidationError("Check-out date must be after check-in date.")
    if check_in < timezone.localdate():
        raise StayValidationError("Check-in date cannot be in the past.")
    if guests < 1:
        raise StayValidationError("At least one guest is required.")
    if guests > property_obj.max_guests:
        raise StayValidationError(
            f"This homestay accommodates at most {property_obj.max_guests} guests."
        )

    nights = (check_out - check_in).days
    if nights < property_obj.minimum_stay:
        raise StayValidationError(f"Minimum stay is {property_obj.minimum_stay} nights.")
    if nights > property_obj.maximum_stay:
        raise StayValidationError(f"Maximum stay is {property_obj.maximum_stay} nights.")

    if property_obj.advance_notice_days:
        earliest = timezone.localdate() + timedelta(days=property_obj.advance_notice_days)
        if check_in < earliest:
            raise StayValidationError(
                f"This homestay requires {property_obj.advance_notice_days} days of advance notice."
            )
    return nights


def quote_stay(property_obj: Property, check_in: date, check_out: date) -> PriceBreakdown:
    return homestay_price(
        property_obj.base_price,
        (check_out - check_in).days,
        property_obj.cleaning_fee,
        property_obj.currency,
    )


def location_suggestions(query: str, limit: int = 10) -> list[dict]:
    """Prefix suggestions over the location tree and listing addresses."""
    public = Property.objects.filter(status=Property.Status.APPROVED, is_active=True)
    counts: dict[tuple[str, str], dict] = {}

    def _add(name: str, kind: str, state: str = "") -> None:
        key = (name.lower(), kind)
        if key in counts:
            return
        if kind == "state":
            count = public.filter(state__iexact=name).count()
        else:
            count = public.filter(city__iexact=name).count()
        label = f"{name}, {state}" if state else name
        counts[key] = {
            "name": name,
            "type": kind,
            "state": state,
            "label": f"{label} ({count} {'property' if count == 1 else 'properties'})",
            "property_count": count,
        }

    for location in Location.objects.filter(
        is_active=True,
        name__istartswith=query,
        kind__in=[Location.Kind.STATE, Location.Kind.CITY],
    )[:limit * 2]:
        _add(location.name, location.kind, "" if location.kind == Location.Kind.STATE else location.state_name)

    for city, state in public.filter(city__istartswith=query).values_list("city", "state").distinct():
        _add(city, "city", state)
    for (state,) in public.filter(state__istartswith=query).exclude(state="").values_list("state").distinct():
        _add(state, "state")

    suggestions = sorted(counts.values(), key=lambda item: (-item["property_count"], item["name"]))
    return suggestions[:limit]


def bounding_box(lat: float, lng: float, radius_km: float) -> tuple[float, float, float, float]:
    """Approximate box around a point: one degree of latitude is ~111 km."""
    delta_lat = radius_km / 111
    cos_lat = math.cos(math.radians(lat))
    delta_lng = radius_km / (111 * cos_lat) if cos_lat else 180
    return lat - delta_lat, lat + delta_lat, lng - delta_lng, lng + delta_lng


def free_dates(property_obj: Property, start_date: date, end_date: date) -> tuple[list[date], list[date]]:
    """Split [start_date, end_date) into free and taken days."""
    taken = unavailable_dates(property_obj, start_date, end_date)
    free: list[date] = []
    blocked: list[date] = []
    for day in DateRange(start_date, end_date).iter_days():
        (blocked if day in taken else free).append(day)
    return free, blocked


def unavailable_property_ids(start_date: date, end_date: date) -> set[int]:
    """Listings with a blocking period or an active booking inside the range."""
    blocked = PropertyAvailability.objects.filter(
        start_date__lt=end_date,
        end_date__gt=start_date,
        status__in=PropertyAvailability.BLOCKING_STATUSES,
    ).values_list("property_id", flat=True)
    booked = Booking.objects.filter(
        property__isnull=False,
        check_in__lt=end_date,
        check_out__gt=start_date,
        status__in=Booking.ACTIVE_STATUSES,
    ).values_list("property_id", flat=True)
    return set(blocked) | set(booked)
