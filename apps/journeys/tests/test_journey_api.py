"""Tests for the journey catalogue."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.journeys.models import Journey
from shared.tests.factories import make_admin, make_departure, make_journey, make_user


class JourneyAPITests(APITestCase):
    def setUp(self) -> None:
        self.journey = make_journey()
        self.draft = make_journey(title="Zanskar Frozen River", status=Journey.Status.DRAFT)
        self.admin = make_admin()

    def test_public_list_shows_published_only(self) -> None:
        response = self.client.get(reverse("journey-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([item["slug"] for item in response.data["results"]], [self.journey.slug])
        self.assertNotIn("base_price", response.data["results"][0])

    def test_filters_by_price_and_duration(self) -> None:
        make_journey(title="Weekend in Kasol", duration_days=2, base_price=Decimal("5000"), price=Decimal("6000"))
        response = self.client.get(reverse("journey-list"), {"max_price": "10000"})
        self.assertEqual([item["title"] for item in response.data["results"]], ["Weekend in Kasol"])
        response = self.client.get(reverse("journey-list"), {"min_duration": 5})
        self.assertEqual([item["slug"] for item in response.data["results"]], [self.journey.slug])

    def test_detail_by_slug_with_upcoming_departures(self) -> None:
        make_departure(self.journey, days_ahead=20)
        make_departure(self.journey, days_ahead=-5)
        response = self.client.get(reverse("journey-detail", args=[self.journey.slug]))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(len(response.data["departures"]), 1)
        self.assertEqual(response.data["departures"][0]["seats_left"], 12)

    def test_draft_hidden_from_members(self) -> None:
        self.client.force_authenticate(make_user())
        response = self.client.get(reverse("journey-detail", args=[self.draft.slug]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_admin_sees_margin_and_drafts(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.get(reverse("journey-list"), {"status": "draft"})
        self.assertEqual([item["slug"] for item in response.data["results"]], [self.draft.slug])
        response = self.client.get(reverse("journey-detail", args=[self.journey.slug]))
        self.assertEqual(Decimal(response.data["margin"]), Decimal("5000.00"))

    def test_admin_creates_journey_with_itinerary(self) -> None:
        self.client.force_authenticate(self.admin)
        start = timezone.localdate() + timedelta(days=45)
        payload = {
            "title": "Valley of Flowers Trek",
            "description": "Alpine meadows in bloom.",
            "status": "published",
            "region": "Uttarakhand",
            "duration_days": 6,
            "base_price": "15000.00",
            "itinerary": [
                {"day": 1, "title": "Arrive in Rishikesh"},
                {"day": 2, "title": "Drive to Joshimath"},
            ],
            "departures": [{"start_date": start, "seats_total": 10}],
        }
        response = self.client.post(reverse("journey-list"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        journey = Journey.objects.get(title="Valley of Flowers Trek")
        self.assertEqual(journey.price, Decimal("15000.00"))
        self.assertEqual(journey.duration_nights, 5)
        self.assertEqual(journey.itinerary.count(), 2)
        self.assertEqual(journey.departures.get().end_date, start + timedelta(days=6))

    def test_price_below_cost_rejected(self) -> None:
        self.client.force_authenticate(self.admin)
        payload = {
            "title": "Loss Leader",
            "description": "x",
            "region": "Goa",
            "duration_days": 3,
            "base_price": "9000.00",
            "price": "8000.00",
        }
        response = self.client.post(reverse("journey-list"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("price", response.data)

    def test_duplicate_itinerary_days_rejected(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.patch(
            reverse("journey-detail", args=[self.journey.slug]),
            {"itinerary": [{"day": 1, "title": "A"}, {"day": 1, "title": "B"}]},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_member_cannot_create(self) -> None:
        self.client.force_authenticate(make_user())
        response = self.client.post(reverse("journey-list"), {"title": "x"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_delete_archives(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.delete(reverse("journey-detail", args=[self.journey.slug]))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.journey.refresh_from_db()
        self.assertEqual(self.journey.status, Journey.Status.ARCHIVED)

    def test_departures_action(self) -> None:
        make_departure(self.journey, days_ahead=10)
        make_departure(self.journey, days_ahead=40, price_override=Decimal("27000.00"))
        response = self.client.get(reverse("journey-departures", args=[self.journey.slug]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            [Decimal(item["price_per_person"]) for item in response.data],
            [Decimal("25000.00"), Decimal("27000.00")],
        )
