"""Tests for the platform admin API."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.contact.models import ContactMessage
from apps.notifications.models import Notification
from apps.payouts.models import Payout
from apps.properties.models import Property
from apps.reviews.models import Review
from shared.tests.factories import make_admin, make_host, make_property, make_user


class AdminAPITestCase(APITestCase):
    def setUp(self) -> None:
        self.admin = make_admin()
        self.host = make_host()
        self.member = make_user()
        self.client.force_authenticate(self.admin)


class AdminAccessTests(AdminAPITestCase):
    def test_non_admins_are_rejected(self) -> None:
        self.client.force_authenticate(self.host)
        for name in ("admin-user-list", "admin-property-list", "admin-payout-list", "admin-contact-list"):
            with self.subTest(route=name):
                self.assertEqual(self.client.get(reverse(name)).status_code, status.HTTP_403_FORBIDDEN)

    def test_staff_without_admin_role_is_admin(self) -> None:
        self.client.force_authenticate(make_user(is_staff=True))
        self.assertEqual(self.client.get(reverse("admin-user-list")).status_code, status.HTTP_200_OK)


class AdminUserTests(AdminAPITestCase):
    def test_list_filters(self) -> None:
        response = self.client.get(reverse("admin-user-list"), {"role": "host"})
        self.assertEqual([u["id"] for u in response.data["results"]], [self.host.id])

        response = self.client.get(reverse("admin-user-list"), {"search": self.member.email})
        self.assertEqual(response.data["pagination"]["total"], 1)

    def test_status_and_role(self) -> None:
        url = reverse("admin-user-set-status", args=[self.member.id])
        response = self.client.patch(url, {"is_active": False}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertFalse(response.data["is_active"])

        response = self.client.get(reverse("admin-user-list"), {"status": "inactive"})
        self.assertEqual([u["id"] for u in response.data["results"]], [self.member.id])

        response = self.client.patch(
            reverse("admin-user-set-role", args=[self.member.id]), {"role": "host"}, format="json"
        )
        self.assertEqual(response.data["role"], "host")

    def test_admin_cannot_deactivate_self(self) -> None:
        url = reverse("admin-user-set-status", args=[self.admin.id])
        response = self.client.patch(url, {"is_active": False}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class AdminPropertyTests(AdminAPITestCase):
    def setUp(self) -> None:
        super().setUp()
        self.property = make_property(self.host, status=Property.Status.PENDING_REVIEW, is_active=False)

    def test_status_filter_and_search(self) -> None:
        make_property(self.host, title="Lakeside Villa", city="Nainital")
        response = self.client.get(reverse("admin-property-list"), {"status": "pending_review"})
        self.assertEqual([p["id"] for p in response.data["results"]], [self.property.id])
        response = self.client.get(reverse("admin-property-list"), {"search": "nainital"})
        self.assertEqual(response.data["pagination"]["total"], 1)

    def test_approve(self) -> None:
        response = self.client.post(reverse("admin-property-approve", args=[self.property.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.property.refresh_from_db()
        self.assertEqual(self.property.status, Property.Status.APPROVED)
        self.assertTrue(self.property.is_active)
        self.assertTrue(self.property.is_verified)
        self.assertIsNotNone(self.property.verified_at)
        self.assertTrue(Notification.objects.filter(user=self.host, type=Notification.Type.PROPERTY).exists())

    def test_reject_requires_reason(self) -> None:
        url = reverse("admin-property-reject", args=[self.property.id])
        self.assertEqual(self.client.post(url, {"reason": " "}, format="json").status_code, 400)
        response = self.client.post(url, {"reason": "Photos are missing"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["rejection_reason"], "Photos are missing")
        self.assertEqual(response.data["status"], Property.Status.REJECTED)

    def test_hard_delete(self) -> None:
        response = self.client.delete(reverse("admin-property-detail", args=[self.property.id]))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Property.objects.filter(pk=self.property.pk).exists())


class AdminBookingAndReviewTests(AdminAPITestCase):
    def setUp(self) -> None:
        super().setUp()
        self.property = make_property(self.host)
        check_in = timezone.localdate() - timedelta(days=5)
        self.booking = Booking.objects.create(
            member=self.member,
            property=self.property,
            check_in=check_in,
            check_out=check_in + timedelta(days=2),
            guests=1,
            total_price=Decimal("5500.00"),
            status=Booking.Status.COMPLETED,
            payment_status=Booking.PaymentStatus.PAID,
        )

    def test_booking_list_and_stats(self) -> None:
        response = self.client.get(reverse("admin-booking-list"), {"status": "completed"})
        self.assertEqual(response.data["results"][0]["member_email"], self.member.email)
        response = self.client.get(reverse("admin-booking-list"), {"status": "pending"})
        self.assertEqual(response.data["pagination"]["total"], 0)

        stats = self.client.get(reverse("admin-booking-stats")).data
        self.assertEqual(stats["total"], 1)
        self.assertEqual(stats["by_payment_status"]["paid"], 1)
        self.assertEqual(stats["revenue"], Decimal("5500.00"))

    def _reported_review(self, rating: int = 1) -> Review:
        review = Review.objects.create(
            author=self.member, booking=self.booking, property=self.property, rating=rating, comment="Awful"
        )
        review.report("Abusive language")
        return review

    def test_reported_remove_and_dismiss(self) -> None:
        review = self._reported_review()
        response = self.client.get(reverse("admin-review-reported"))
        self.assertEqual([r["id"] for r in response.data["results"]], [review.id])
        self.assertEqual(response.data["results"][0]["report_reason"], "Abusive language")

        response = self.client.post(reverse("admin-review-remove", args=[review.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        review.refresh_from_db()
        self.assertFalse(review.is_visible)
        self.property.refresh_from_db()
        self.assertEqual(self.property.review_count, 0)
        self.assertEqual(self.client.get(reverse("admin-review-reported")).data["pagination"]["total"], 0)

    def test_dismiss_keeps_review(self) -> None:
        review = self._reported_review()
        self.client.post(reverse("admin-review-dismiss", args=[review.id]))
        review.refresh_from_db()
        self.assertFalse(review.is_reported)
        self.assertTrue(review.is_visible)


class AdminPayoutAndContactTests(AdminAPITestCase):
    def setUp(self) -> None:
        super().setUp()
        self.payout = Payout.objects.create(
            host=self.host, amount=Decimal("1200.00"), method=Payout.Method.UPI, details={"upi_id": "h@upi"}
        )

    def test_approve_payout(self) -> None:
        url = reverse("admin-payout-approve", args=[self.payout.id])
        response = self.client.post(url, {"reference_id": "UTR998877"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], Payout.Status.COMPLETED)
        self.assertIsNotNone(response.data["processed_at"])
        self.assertTrue(Notification.objects.filter(user=self.host, type=Notification.Type.PAYMENT).exists())

        response = self.client.post(
            reverse("admin-payout-reject", args=[self.payout.id]), {"reason": "Late"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_reject_payout(self) -> None:
        response = self.client.post(
            reverse("admin-payout-reject", args=[self.payout.id]), {"reason": "Invalid UPI id"}, format="json"
        )
        self.assertEqual(response.data["status"], Payout.Status.FAILED)
        self.assertEqual(response.data["failure_reason"], "Invalid UPI id")

        response = self.client.get(reverse("admin-payout-list"), {"status": "failed"})
        self.assertEqual(response.data["pagination"]["total"], 1)

    def test_contact_list_and_status(self) -> None:
        message = ContactMessage.objects.create(
            name="Ravi", email="ravi@example.com", subject="Hello", message="Is the Ladakh trip running in June?"
        )
        response = self.client.get(reverse("admin-contact-list"), {"status": "new"})
        self.assertEqual(response.data["pagination"]["total"], 1)

        url = reverse("admin-contact-set-status", args=[message.id])
        self.assertEqual(self.client.patch(url, {"status": "archived"}, format="json").status_code, 400)
        response = self.client.patch(url, {"status": "responded"}, format="json")
        self.assertEqual(response.data["status"], ContactMessage.Status.RESPONDED)
