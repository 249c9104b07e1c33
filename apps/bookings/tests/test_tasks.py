"""Tests for periodic booking tasks and journey pricing."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.core import mail
from django.test import TestCase
from django.utils import timezone

from apps.bookings.models import Booking
from apps.bookings.services import BookingRuleError, quote_journey, reserve_dates_for_booking
from apps.bookings.tasks import (
    complete_finished_bookings,
    expire_pending_bookings,
    send_upcoming_booking_reminders,
    update_in_progress_bookings,
)
from apps.properties.models import PropertyAvailability
from shared.tests.factories import make_departure, make_host, make_journey, make_property, make_user


class BookingTaskTests(TestCase):
    def setUp(self) -> None:
        self.member = make_user()
        self.property = make_property(make_host())
        self.today = timezone.localdate()

    def _booking(self, start_offset: int, nights: int, **extra) -> Booking:  # type: ignore
        check_in = self.today + timedelta(days=start_offset)
        return Booking.objects.create(
            member=self.member,
            property=self.property,
            check_in=check_in,
            check_out=check_in + timedelta(days=nights),
            guests=1,
            **extra,
        )

    def test_expire_pending_bookings_releases_dates(self) -> None:
        stale = self._booking(5, 2, expires_at=timezone.now() - timedelta(minutes=1))
        reserve_dates_for_booking(stale)
        fresh = self._booking(10, 2, expires_at=timezone.now() + timedelta(minutes=20))

        with self.captureOnCommitCallbacks(execute=True):
            result = expire_pending_bookings()

        self.assertEqual(result, {"expired": 1})
        stale.refresh_from_db()
        fresh.refresh_from_db()
        self.assertEqual(stale.status, Booking.Status.EXPIRED)
        self.assertEqual(fresh.status, Booking.Status.PENDING)
        self.assertFalse(PropertyAvailability.objects.filter(booking=stale).exists())
        self.assertEqual(len(mail.outbox), 1)

    def test_paid_pending_booking_is_not_expired(self) -> None:
        self._booking(
            5,
            2,
            expires_at=timezone.now() - timedelta(minutes=1),
            payment_status=Booking.PaymentStatus.PAID,
        )
        self.assertEqual(expire_pending_bookings(), {"expired": 0})

    def test_update_in_progress_bookings(self) -> None:
        started = self._booking(-1, 3, status=Booking.Status.CONFIRMED)
        upcoming = self._booking(2, 3, status=Booking.Status.CONFIRMED)
        self.assertEqual(update_in_progress_bookings(), {"updated": 1})
        started.refresh_from_db()
        upcoming.refresh_from_db()
        self.assertEqual(started.status, Booking.Status.IN_PROGRESS)
        self.assertEqual(upcoming.status, Booking.Status.CONFIRMED)

    def test_complete_finished_bookings(self) -> None:
        finished = self._booking(-4, 3, status=Booking.Status.IN_PROGRESS)
        ongoing = self._booking(-1, 3, status=Booking.Status.IN_PROGRESS)
        self.assertEqual(complete_finished_bookings(), {"completed": 1})
        finished.refresh_from_db()
        ongoing.refresh_from_db()
        self.assertEqual(finished.status, Booking.Status.COMPLETED)
        self.assertEqual(ongoing.status, Booking.Status.IN_PROGRESS)

    def test_reminders_sent_once(self) -> None:
        self._booking(1, 2, status=Booking.Status.CONFIRMED)
        self.assertEqual(send_upcoming_booking_reminders(), {"sent": 1})
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(send_upcoming_booking_reminders(), {"sent": 0})


class JourneyPricingTests(TestCase):
    def setUp(self) -> None:
        self.journey = make_journey()
        self.departure = make_departure(self.journey, price_override=Decimal("24000.00"))

    def test_departure_override_and_add_ons(self) -> None:
        quote = quote_journey(self.journey, self.departure, 3, ["insurance", "airport_transfer", "insurance"])
        self.assertEqual(quote.base_amount, Decimal("72000.00"))
        self.assertEqual(quote.add_ons, {"insurance": Decimal("1500"), "airport_transfer": Decimal("1500")})
        self.assertEqual(quote.subtotal, Decimal("75000.00"))
        self.assertEqual(quote.taxes, Decimal("3750"))
        self.assertEqual(quote.total, Decimal("78750.00"))

    def test_gst_rounds_half_up(self) -> None:
        journey = make_journey(title="Short hop", base_price=Decimal("1010.00"), price=Decimal("1010.00"))
        quote = quote_journey(journey, None, 1)
        # 5% of 1010 is 50.5
        self.assertEqual(quote.taxes, Decimal("51"))

    def test_discount_never_takes_total_below_zero(self) -> None:
        quote = quote_journey(self.journey, None, 1, discount=Decimal("999999"))
        self.assertEqual(quote.total, Decimal("0"))

    def test_rejects_unknown_add_on_and_traveler_bounds(self) -> None:
        with self.assertRaises(BookingRuleError):
            quote_journey(self.journey, None, 1, ["spa"])
        with self.assertRaises(BookingRuleError):
            quote_journey(self.journey, None, 21)
