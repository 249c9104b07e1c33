"""Tests for the statistics services and the overview endpoint."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.analytics.services import booking_stats, host_dashboard_stats, member_stats
from apps.bookings.models import Booking
from apps.notifications.services import create_in_app_notification
from apps.properties.models import Property
from apps.reviews.models import Review
from shared.tests.factories import make_admin, make_host, make_property, make_user


def make_booking(member, property_obj, **extra) -> Booking:  # type: ignore
    check_in = timezone.localdate() + timedelta(days=3)
    values = {
        "check_in": check_in,
        "check_out": check_in + timedelta(days=2),
        "guests": 2,
        "total_price": Decimal("5500.00"),
    }
    values.update(extra)
    return Booking.objects.create(member=member, property=property_obj, **values)


class StatisticsServiceTests(TestCase):
    def setUp(self) -> None:
        self.host = make_host()
        self.member = make_user()
        self.property = make_property(self.host)
        make_property(self.host, title="Draft cottage", status=Property.Status.PENDING_REVIEW)
        self.paid = make_booking(
            self.member,
            self.property,
            status=Booking.Status.COMPLETED,
            payment_status=Booking.PaymentStatus.PAID,
        )
        make_booking(self.member, self.property)

    def test_booking_stats(self) -> None:
        stats = booking_stats(Booking.objects.all())
        self.assertEqual(stats["total"], 2)
        self.assertEqual(stats["by_status"]["completed"], 1)
        self.assertEqual(stats["by_status"]["pending"], 1)
        self.assertEqual(stats["by_status"]["cancelled"], 0)
        self.assertEqual(stats["by_payment_status"]["paid"], 1)
        self.assertEqual(stats["revenue"], Decimal("5500.00"))
        self.assertEqual(stats["this_month"], 2)

    def test_host_dashboard(self) -> None:
        Review.objects.create(
            author=self.member, booking=self.paid, property=self.property, rating=4, comment="Good"
        )
        Review.objects.create(
            author=self.member,
            booking=self.paid,
            review_type=Review.ReviewType.HOST,
            host=self.host,
            rating=5,
            comment="Kind host",
        )
        create_in_app_notification(self.host, "New booking", "Someone booked.")

        stats = host_dashboard_stats(self.host)
        self.assertEqual(stats["properties"], {"total": 2, "active": 1})
        self.assertEqual(stats["bookings"]["total"], 2)
        self.assertEqual(stats["bookings"]["completed"], 1)
        self.assertEqual(stats["total_earnings"], Decimal("5500.00"))
        self.assertEqual(stats["average_rating"], Decimal("4.5"))
        self.assertEqual(stats["total_reviews"], 2)
        self.assertEqual(stats["unread_notifications"], 1)

    def test_member_stats(self) -> None:
        stats = member_stats(self.member)
        self.assertEqual(stats["total_bookings"], 2)
        self.assertEqual(stats["total_spent"], Decimal("5500.00"))
        self.assertEqual(stats["reviews_written"], 0)
        self.assertEqual(stats["wishlists"], 0)


class OverviewAPITests(APITestCase):
    def setUp(self) -> None:
        self.host = make_host()
        self.member = make_user()
        property_obj = make_property(self.host)
        make_property(make_host())
        make_booking(self.member, property_obj, payment_status=Booking.PaymentStatus.PAID)
        make_booking(make_user(), property_obj)

    def _overview(self, user):  # type: ignore
        self.client.force_authenticate(user)
        return self.client.get(reverse("analytics-overview"))

    def test_scoped_by_role(self) -> None:
        admin = self._overview(make_admin()).data
        self.assertEqual((admin["properties"], admin["bookings"]), (2, 2))

        host = self._overview(self.host).data
        self.assertEqual((host["properties"], host["bookings"]), (1, 2))
        self.assertEqual(host["revenue"], Decimal("5500.00"))

        member = self._overview(self.member).data
        self.assertEqual((member["properties"], member["bookings"]), (0, 1))
        self.assertIsNone(member["avg_rating"])

    def test_requires_authentication(self) -> None:
        response = self.client.get(reverse("analytics-overview"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
