"""Tests for the notification inbox and the in-app notification service."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.notifications.models import MESSAGE_MAX_LENGTH, TITLE_MAX_LENGTH, Notification
from apps.notifications.services import create_in_app_notification, notify_user
from shared.tests.factories import make_user


class NotificationAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = make_user()
        self.client.force_authenticate(self.user)
        self.first = create_in_app_notification(self.user, "Booking confirmed", "See you soon.")
        self.second = create_in_app_notification(self.user, "New review", "Someone rated your stay.")
        self.second.mark_read()
        self.foreign = create_in_app_notification(make_user(), "Not yours", "Private.")

    def test_list_shape_and_filter(self) -> None:
        response = self.client.get(reverse("notification-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["success"])
        self.assertEqual(len(response.data["notifications"]), 2)
        self.assertEqual(response.data["unread_count"], 1)
        self.assertEqual(response.data["pagination"]["total"], 2)

        response = self.client.get(reverse("notification-list"), {"filter": "unread"})
        self.assertEqual([n["id"] for n in response.data["notifications"]], [self.first.id])
        response = self.client.get(reverse("notification-list"), {"filter": "read"})
        self.assertEqual([n["id"] for n in response.data["notifications"]], [self.second.id])

    def test_unread_count(self) -> None:
        response = self.client.get(reverse("notification-unread-count"))
        self.assertEqual(response.data["unread_count"], 1)

    def test_mark_read(self) -> None:
        response = self.client.post(reverse("notification-mark-read", args=[self.first.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.first.refresh_from_db()
        self.assertTrue(self.first.is_read)
        self.assertIsNotNone(self.first.read_at)

    def test_mark_all_read(self) -> None:
        response = self.client.post(reverse("notification-mark-all-read"))
        self.assertEqual(response.data["updated"], 1)
        self.assertFalse(Notification.objects.filter(user=self.user, is_read=False).exists())
        self.assertFalse(Notification.objects.get(pk=self.foreign.pk).is_read)

    def test_destroy_own_only(self) -> None:
        response = self.client.delete(reverse("notification-detail", args=[self.foreign.id]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        response = self.client.delete(reverse("notification-detail", args=[self.first.id]))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_delete_read(self) -> None:
        response = self.client.delete(reverse("notification-delete-read"))
        self.assertEqual(response.data["deleted"], 1)
        self.assertEqual(Notification.objects.filter(user=self.user).count(), 1)

    def test_requires_authentication(self) -> None:
        self.client.force_authenticate(None)
        response = self.client.get(reverse("notification-list"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class NotificationServiceTests(APITestCase):
    def test_long_text_is_truncated(self) -> None:
        user = make_user()
        notification = create_in_app_notification(user, "T" * 300, "m" * 900)
        self.assertEqual(len(notification.title), TITLE_MAX_LENGTH)
        self.assertEqual(len(notification.message), MESSAGE_MAX_LENGTH)
        self.assertTrue(notification.message.endswith("..."))

    def test_notify_user_sends_email_and_stores_notification(self) -> None:
        from django.core import mail

        user = make_user()
        result = notify_user(user, "Payout completed", "Your payout has been sent.")
        self.assertEqual(result, {"email": True, "in_app": True})
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, [user.email])
