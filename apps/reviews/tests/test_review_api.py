"""Tests for writing, listing, replying to and reporting reviews."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.notifications.models import Notification
from apps.reviews.models import Review
from shared.tests.factories import make_host, make_property, make_user


class ReviewAPITests(APITestCase):
    def setUp(self) -> None:
        self.member = make_user()
        self.host = make_host()
        self.property = make_property(self.host)
        self.booking = self._completed_booking(self.member)
        self.client.force_authenticate(self.member)

    def _completed_booking(self, member, status_value=Booking.Status.COMPLETED) -> Booking:  # type: ignore
        check_in = timezone.localdate() - timedelta(days=10)
        return Booking.objects.create(
            member=member,
            property=self.property,
            check_in=check_in,
            check_out=check_in + timedelta(days=2),
            guests=2,
            status=status_value,
        )

    def _review(self, **overrides):  # type: ignore
        payload = {
            "booking": self.booking.id,
            "review_type": "property",
            "rating": 4,
            "comment": "Lovely views and warm hosts.",
            "cleanliness": 5,
        }
        payload.update(overrides)
        return self.client.post(reverse("review-list"), payload, format="json")

    def test_create_review_updates_property_rating(self) -> None:
        response = self._review()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["property_id"], self.property.id)

        other = make_user()
        booking = self._completed_booking(other)
        self.client.force_authenticate(other)
        self._review(booking=booking.id, rating=5)

        self.property.refresh_from_db()
        self.assertEqual(self.property.review_count, 2)
        self.assertEqual(self.property.average_rating, Decimal("4.5"))
        self.assertTrue(Notification.objects.filter(user=self.host, type=Notification.Type.REVIEW).exists())

    def test_host_review_targets_host(self) -> None:
        response = self._review(review_type="host")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(Review.objects.get().host, self.host)
        response = self.client.get(reverse("review-by-host", args=[self.host.id]))
        self.assertEqual(response.data["summary"]["total_reviews"], 1)

    def test_one_review_per_booking_and_type(self) -> None:
        self.assertEqual(self._review().status_code, status.HTTP_201_CREATED)
        self.assertEqual(self._review().status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self._review(review_type="host").status_code, status.HTTP_201_CREATED)

    def test_requires_completed_own_booking(self) -> None:
        pending = self._completed_booking(self.member, Booking.Status.CONFIRMED)
        self.assertEqual(self._review(booking=pending.id).status_code, status.HTTP_400_BAD_REQUEST)

        self.client.force_authenticate(make_user())
        self.assertEqual(self._review().status_code, status.HTTP_400_BAD_REQUEST)

    def test_rating_bounds(self) -> None:
        self.assertEqual(self._review(rating=6).status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self._review(rating=3, value=0).status_code, status.HTTP_400_BAD_REQUEST)

    def test_property_reviews_with_summary(self) -> None:
        self._review()
        self.client.force_authenticate(None)
        response = self.client.get(reverse("review-by-property", args=[self.property.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        summary = response.data["summary"]
        self.assertEqual(summary["total_reviews"], 1)
        self.assertEqual(summary["rating_distribution"]["4"], 1)
        self.assertEqual(summary["aspects"]["cleanliness"], Decimal("5.0"))
        self.assertIsNone(summary["aspects"]["value"])

    def test_host_replies_once(self) -> None:
        review_id = self._review().data["id"]
        url = reverse("review-reply", args=[review_id])

        response = self.client.post(url, {"reply": "Thanks!"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.host)
        self.assertEqual(self.client.post(url, {"reply": "   "}, format="json").status_code, 400)
        response = self.client.post(url, {"reply": "Thank you for staying!"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["host_reply"], "Thank you for staying!")
        self.assertEqual(self.client.post(url, {"reply": "Again"}, format="json").status_code, 400)
        self.assertTrue(Notification.objects.filter(user=self.member, type=Notification.Type.REVIEW).exists())

    def test_report_review(self) -> None:
        review_id = self._review().data["id"]
        url = reverse("review-report", args=[review_id])
        self.assertEqual(self.client.post(url, {"reason": "Mine"}, format="json").status_code, 400)

        self.client.force_authenticate(make_user())
        self.assertEqual(self.client.post(url, {}, format="json").status_code, 400)
        response = self.client.post(url, {"reason": "Contains a phone number"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(Review.objects.get(pk=review_id).is_reported)

    def test_mine_lists_own_reviews(self) -> None:
        self._review()
        response = self.client.get(reverse("review-mine"))
        self.assertEqual(response.data["pagination"]["total"], 1)
