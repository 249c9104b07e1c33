"""Tests for the signed-in user's profile endpoints."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.reviews.models import Review
from apps.wishlists.models import Wishlist
from shared.tests.factories import make_host, make_property, make_user


class ProfileAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = make_user()
        self.client.force_authenticate(self.user)

    def test_get_and_patch(self) -> None:
        response = self.client.get(reverse("profile"))
        self.assertEqual(response.data["email"], self.user.email)

        response = self.client.patch(
            reverse("profile"),
            {"city": "Pune", "phone": "+91 91234 56789", "role": "admin"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["city"], "Pune")
        self.assertEqual(response.data["phone"], "+919123456789")
        self.assertEqual(response.data["role"], "member")

    def test_profile_exposes_preferences(self) -> None:
        response = self.client.get(reverse("profile"))
        self.assertEqual(response.data["interests"], [])
        self.assertTrue(response.data["subscribe_to_newsletter"])

        response = self.client.patch(
            reverse("profile"),
            {"interests": ["trekking", " photography ", "trekking"], "subscribe_to_newsletter": False},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["interests"], ["trekking", "photography"])
        self.assertFalse(response.data["subscribe_to_newsletter"])

    def test_update_preferences(self) -> None:
        for url in (reverse("profile-preferences"), reverse("auth:preferences")):
            with self.subTest(url=url):
                response = self.client.put(url, {"interests": ["culture", "food"]}, format="json")
                self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
                self.assertEqual(response.data["interests"], ["culture", "food"])
                self.assertEqual(response.data["email"], self.user.email)

        response = self.client.put(
            reverse("profile-preferences"), {"subscribe_to_newsletter": False}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.user.refresh_from_db()
        self.assertFalse(self.user.subscribe_to_newsletter)
        self.assertEqual(self.user.interests, ["culture", "food"])

        response = self.client.get(reverse("profile-preferences"))
        self.assertEqual(response.data, {"interests": ["culture", "food"], "subscribe_to_newsletter": False})

    def test_preferences_validation(self) -> None:
        cases = [
            "trekking",
            [1, 2],
            ["x" * 51],
            [f"tag-{index}" for index in range(21)],
        ]
        for interests in cases:
            with self.subTest(interests=interests):
                response = self.client.put(
                    reverse("profile-preferences"), {"interests": interests}, format="json"
                )
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertIn("interests", response.data)

    def test_preferences_require_authentication(self) -> None:
        self.client.force_authenticate(None)
        response = self.client.put(reverse("profile-preferences"), {"interests": []}, format="json")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_delete_deactivates(self) -> None:
        response = self.client.delete(reverse("profile"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertFalse(self.user.is_active)

    def test_change_password(self) -> None:
        url = reverse("profile-change-password")
        same = {"current_password": "StrongPass123", "new_password": "StrongPass123"}
        self.assertEqual(self.client.post(url, same, format="json").status_code, 400)
        wrong = {"current_password": "nope", "new_password": "Another123!"}
        self.assertEqual(self.client.post(url, wrong, format="json").status_code, 400)

        ok = {"current_password": "StrongPass123", "new_password": "Another123!"}
        self.assertEqual(self.client.post(url, ok, format="json").status_code, 200)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("Another123!"))

    def test_update_email(self) -> None:
        self.user.is_email_verified = True
        self.user.save(update_fields=["is_email_verified"])
        taken = make_user().email
        url = reverse("profile-update-email")

        response = self.client.post(url, {"email": taken, "password": "StrongPass123"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post(url, {"email": "new@example.com", "password": "wrong"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(url, {"email": "new@example.com", "password": "StrongPass123"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["email"], "new@example.com")
        self.assertFalse(response.data["is_email_verified"])

    def test_bookings_reviews_and_stats(self) -> None:
        host = make_host()
        property_obj = make_property(host)
        check_in = timezone.localdate() - timedelta(days=7)
        booking = Booking.objects.create(
            member=self.user,
            property=property_obj,
            check_in=check_in,
            check_out=check_in + timedelta(days=3),
            guests=2,
            total_price=Decimal("8000.00"),
            status=Booking.Status.COMPLETED,
            payment_status=Booking.PaymentStatus.PAID,
        )
        Review.objects.create(author=self.user, booking=booking, property=property_obj, rating=5, comment="Superb")
        Wishlist.objects.create(user=self.user)

        response = self.client.get(reverse("profile-bookings"))
        self.assertEqual(response.data["pagination"]["total"], 1)
        self.assertEqual(response.data["results"][0]["reference"], booking.reference)

        response = self.client.get(reverse("profile-reviews"))
        self.assertEqual(response.data["pagination"]["total"], 1)

        stats = self.client.get(reverse("profile-stats")).data
        self.assertEqual(stats["total_bookings"], 1)
        self.assertEqual(stats["bookings_by_status"]["completed"], 1)
        self.assertEqual(stats["total_spent"], Decimal("8000.00"))
        self.assertEqual(stats["reviews_written"], 1)
        self.assertEqual(stats["wishlists"], 1)

        self.client.force_authenticate(host)
        response = self.client.get(reverse("profile-reviews-received"))
        self.assertEqual(response.data["pagination"]["total"], 1)
