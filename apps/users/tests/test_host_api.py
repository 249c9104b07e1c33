"""Tests for host onboarding, the public host card and the dashboard."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.properties.models import Property
from apps.users.models import HostProfile, User
from shared.tests.factories import make_host, make_property, make_user

BIO = "I have run a small family homestay in the Kangra valley for ten years."


def make_host_profile(user: User) -> HostProfile:
    return HostProfile.objects.create(user=user, bio=BIO, languages=["English", "Hindi"])


class HostRegisterTests(APITestCase):
    def setUp(self) -> None:
        self.user = make_user()
        self.client.force_authenticate(self.user)
        self.url = reverse("host-register")

    def test_member_becomes_host(self) -> None:
        response = self.client.post(self.url, {"bio": BIO, "languages": ["English"]}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.user.refresh_from_db()
        self.assertTrue(self.user.is_host())
        self.assertTrue(HostProfile.objects.filter(user=self.user).exists())

        response = self.client.post(self.url, {"bio": BIO, "languages": ["English"]}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_profile_validation(self) -> None:
        response = self.client.post(self.url, {"bio": "Too short", "languages": ["English"]}, format="json")
        self.assertIn("bio", response.data)
        response = self.client.post(self.url, {"bio": BIO, "languages": []}, format="json")
        self.assertIn("languages", response.data)
        self.user.refresh_from_db()
        self.assertFalse(self.user.is_host())


class HostEndpointsTests(APITestCase):
    def setUp(self) -> None:
        self.host = make_host()
        make_host_profile(self.host)
        make_property(self.host)
        make_property(self.host, title="Hidden cabin", status=Property.Status.PENDING_REVIEW)

    def test_public_host_card(self) -> None:
        response = self.client.get(reverse("host-public", args=[self.host.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["property_count"], 1)
        self.assertEqual(response.data["languages"], ["English", "Hindi"])

    def test_dashboard_requires_host(self) -> None:
        self.client.force_authenticate(make_user())
        self.assertEqual(self.client.get(reverse("host-dashboard")).status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.host)
        response = self.client.get(reverse("host-dashboard"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["properties"], {"total": 2, "active": 1})

    def test_host_profile_patch(self) -> None:
        self.client.force_authenticate(self.host)
        response = self.client.patch(reverse("host-profile"), {"response_time": "within an hour"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["response_time"], "within an hour")

    def test_host_properties_filtered_by_status(self) -> None:
        self.client.force_authenticate(self.host)
        response = self.client.get(reverse("host-properties"), {"status": Property.Status.PENDING_REVIEW})
        self.assertEqual(response.data["pagination"]["total"], 1)
