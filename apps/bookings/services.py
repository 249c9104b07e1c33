"""Domain services for booking workflows."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore
from django.db.models import Q  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.coupons.services import CouponError, apply_coupon, validate_coupon
from apps.journeys.models import Journey, JourneyDeparture
from apps.properties.models import Property, PropertyAvailability
from apps.properties.services import StayValidationError, quote_stay, validate_stay
from .models import Booking, Traveler

logger = logging.getLogger(__name__)

MAX_TRAVELERS = 20


class BookingConflictError(Exception):
    """Raised when a property is busy for requested dates."""


class BookingRuleError(Exception):
    """Raised when a booking request breaks a business rule."""


@dataclass
class JourneyQuote:
    per_person: Decimal
    travelers: int
    base_amount: Decimal
    add_ons: dict[str, Decimal] = field(default_factory=dict)
    subtotal: Decimal = Decimal("0")
    taxes: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    currency: str = "INR"
    coupon_code: str = ""

    def as_dict(self) -> dict:
        return {
            "per_person": self.per_person,
            "travelers": self.travelers,
            "base_amount": self.base_amount,
            "add_ons": self.add_ons,
            "add_ons_total": sum(self.add_ons.values(), Decimal("0")),
            "subtotal": self.subtotal,
            "taxes": self.taxes,
            "discount": self.discount,
            "total": self.total,
            "currency": self.currency,
            "coupon_code": self.coupon_code,
        }


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def ensure_property_is_available(
    property_obj,
    check_in,
    check_out,
    *,
    exclude_booking_id=None,
) -> None:
    """Ensure the property is free for the given period."""

    overlapping_filter = Q(check_in__lt=check_out) & Q(check_out__gt=check_in)

    bookings_qs = Booking.objects.filter(
        property=property_obj,
        status__in=Booking.ACTIVE_STATUSES,
    ).filter(overlapping_filter)

    if exclude_booking_id is not None:
        bookings_qs = bookings_qs.exclude(pk=exclude_booking_id)

    bookings_qs = _lock_queryset_if_possible(bookings_qs)

    if bookings_qs.exists():
        raise BookingConflictError("The homestay is not available for the selected dates.")

    availability_qs = PropertyAvailability.objects.filter(
        property=property_obj,
        status__in=PropertyAvailability.BLOCKING_STATUSES,
    ).filter(Q(start_date__lt=check_out) & Q(end_date__gt=check_in))

    if exclude_booking_id is not None:
        availability_qs = availability_qs.exclude(booking_id=exclude_booking_id)

    availability_qs = _lock_queryset_if_possible(availability_qs)

    if availability_qs.exists():
        raise BookingConflictError("The homestay is not available for the selected dates.")


@transaction.atomic
def reserve_dates_for_booking(booking: Booking) -> None:
    """Creates a booked availability record for the booking period."""

    PropertyAvailability.objects.update_or_create(
        booking=booking,
        defaults={
            "property": booking.property,
            "start_date": booking.check_in,
            "end_date": booking.check_out,
            "status": PropertyAvailability.AvailabilityStatus.BOOKED,
            "reason": PropertyAvailability.Reason.BOOKED,
            "note": f"Booking {booking.reference}",
            "source": PropertyAvailability.Source.BOOKING,
        },
    )


@transaction.atomic
def release_dates_for_booking(booking: Booking) -> None:
    """Releases availability previously reserved for a booking."""

    if not booking.property_id:
        return
    PropertyAvailability.objects.filter(
        booking=booking,
        source=PropertyAvailability.Source.BOOKING,
    ).delete()


def _round_rupees(amount: Decimal) -> Decimal:
    return amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def quote_journey(
    journey: Journey,
    departure: JourneyDeparture | None,
    travelers: int,
    add_ons: Iterable[str] = (),
    discount: Decimal = Decimal("0"),
) -> JourneyQuote:
    """Journey price: per-person fare, add-ons, GST, minus discount, never below zero."""
    if travelers < 1 or travelers > MAX_TRAVELERS:
        raise BookingRuleError(f"Number of travelers must be between 1 and {MAX_TRAVELERS}.")

    per_person = departure.price_per_person if departure is not None else journey.price
    base_amount = per_person * travelers

    prices = settings.JOURNEY_ADDON_PRICES
    add_on_amounts: dict[str, Decimal] = {}
    for code in dict.fromkeys(add_ons):
        if code not in prices:
            raise BookingRuleError(f"Unknown add-on: {code}.")
        amount, per_traveler = prices[code]
        add_on_amounts[code] = amount * travelers if per_traveler else amount

    subtotal = base_amount + sum(add_on_amounts.values(), Decimal("0"))
    taxes = _round_rupees(subtotal * settings.JOURNEY_GST_RATE)
    total = max(subtotal + taxes - discount, Decimal("0"))
    return JourneyQuote(
        per_person=per_person,
        travelers=travelers,
        base_amount=base_amount,
        add_ons=add_on_amounts,
        subtotal=subtotal,
        taxes=taxes,
        discount=discount,
        total=total,
        currency=journey.currency,
    )


def quote_journey_with_coupon(
    journey: Journey,
    departure: JourneyDeparture | None,
    travelers: int,
    add_ons: Iterable[str] = (),
    coupon_code: str = "",
):  # type: ignore
    """Quote a journey, applying ``coupon_code`` to the pre-tax subtotal."""
    quote = quote_journey(journey, departure, travelers, add_ons)
    coupon = None
    if coupon_code:
        try:
            coupon, discount = validate_coupon(coupon_code, quote.subtotal, journey)
        except CouponError as exc:
            raise BookingRuleError(str(exc))
        quote = quote_journey(journey, departure, travelers, add_ons, discount)
        quote.coupon_code = coupon.code
    return quote, coupon


def _hold_deadline():  # type: ignore
    return timezone.now() + timedelta(minutes=settings.BOOKING_HOLD_MINUTES)


def create_homestay_booking(
    member,
    property_obj: Property,
    check_in: date,
    check_out: date,
    guests: int,
    special_requests: str = "",
) -> Booking:  # type: ignore
    if property_obj.status != Property.Status.APPROVED or not property_obj.is_active:
        raise BookingRuleError("This homestay is not available for booking.")
    if property_obj.host_id == member.id:
        raise BookingRuleError("You cannot book your own homestay.")
    try:
        validate_stay(property_obj, check_in, check_out, guests)
    except StayValidationError as exc:
        raise BookingRuleError(str(exc))

    with transaction.atomic():
        _lock_queryset_if_possible(Property.objects.filter(pk=property_obj.pk)).first()
        ensure_property_is_available(property_obj, check_in, check_out)

        breakdown = quote_stay(property_obj, check_in, check_out)
        instant = property_obj.instant_book
        booking = Booking.objects.create(
            member=member,
            property=property_obj,
            check_in=check_in,
            check_out=check_out,
            guests=guests,
            special_requests=special_requests,
            nightly_rate=breakdown.nightly_rate.amount,
            cleaning_fee=breakdown.cleaning_fee.amount,
            subtotal=breakdown.total.amount,
            total_price=breakdown.total.amount,
            currency=breakdown.total.currency,
            status=Booking.Status.CONFIRMED if instant else Booking.Status.PENDING,
            expires_at=None if instant else _hold_deadline(),
        )
        reserve_dates_for_booking(booking)

    logger.info(
        f"Booking {booking.reference} created for property {property_obj.id} "
        f"by {member.email}, status {booking.status}"
    )
    return booking


def create_journey_booking(
    member,
    journey: Journey,
    departure: JourneyDeparture,
    travelers: list[dict],
    add_ons: Iterable[str] = (),
    room_preference: str = "",
    coupon_code: str = "",
    special_requests: str = "",
) -> Booking:  # type: ignore
    if journey.status != Journey.Status.PUBLISHED:
        raise BookingRuleError("This journey is not open for booking.")
    if departure.journey_id != journey.id:
        raise BookingRuleError("Departure does not belong to the selected journey.")
    if not departure.is_active or departure.start_date <= timezone.localdate():
        raise BookingRuleError("Bookings for this departure are closed.")

    count = len(travelers)
    add_ons = list(dict.fromkeys(add_ons))
    with transaction.atomic():
        _lock_queryset_if_possible(JourneyDeparture.objects.filter(pk=departure.pk)).first()
        if count > departure.seats_left:
            raise BookingRuleError(f"Only {departure.seats_left} seats are left on this departure.")

        quote, coupon = quote_journey_with_coupon(journey, departure, count, add_ons, coupon_code)
        booking = Booking.objects.create(
            member=member,
            journey=journey,
            departure=departure,
            check_in=departure.start_date,
            check_out=departure.end_date,
            guests=count,
            room_preference=room_preference,
            add_ons=add_ons,
            special_requests=special_requests,
            nightly_rate=quote.per_person,
            subtotal=quote.subtotal,
            taxes=quote.taxes,
            discount=quote.discount,
            total_price=quote.total,
            currency=quote.currency,
            coupon=coupon,
            coupon_code=quote.coupon_code,
            status=Booking.Status.PENDING,
            expires_at=_hold_deadline(),
        )
        for traveler in travelers:
            Traveler.objects.create(booking=booking, **traveler)
        if coupon is not None:
            try:
                apply_coupon(coupon)
            except CouponError as exc:
                raise BookingRuleError(str(exc))

    logger.info(
        f"Booking {booking.reference} created for journey {journey.slug} "
        f"({count} travelers) by {member.email}"
    )
    return booking


def cancel_booking(booking: Booking, user, reason: str = "") -> Booking:  # type: ignore
    if booking.status in Booking.FINAL_STATUSES:
        raise BookingRuleError(f"A {booking.get_status_display().lower()} booking cannot be cancelled.")
    with transaction.atomic():
        booking.mark_cancelled(cancelled_by=user, reason=reason)
    logger.info(f"Booking {booking.reference} cancelled by {getattr(user, 'email', 'system')}")
    return booking


def change_status(booking: Booking, new_status: str, user, reason: str = "") -> Booking:  # type: ignore
    if not booking.can_transition_to(new_status):
        raise BookingRuleError(f"Cannot change booking status from {booking.status} to {new_status}.")
    if new_status == Booking.Status.CANCELLED:
        return cancel_booking(booking, user, reason)

    previous = booking.status
    booking.status = new_status
    update_fields = ["status", "updated_at"]
    if new_status == Booking.Status.CONFIRMED:
        booking.expires_at = None
        update_fields.append("expires_at")
    booking.save(update_fields=update_fields)
    logger.info(f"Booking {booking.reference} moved from {previous} to {new_status}")
    return booking


def confirm_payment(booking: Booking) -> Booking:
    if booking.status in Booking.FINAL_STATUSES:
        raise BookingRuleError("Payment cannot be recorded for a closed booking.")
    if booking.payment_status == Booking.PaymentStatus.PAID:
        raise BookingRuleError("This booking is already paid.")
    booking.mark_paid()
    logger.info(f"Payment recorded for booking {booking.reference}")
    return booking
