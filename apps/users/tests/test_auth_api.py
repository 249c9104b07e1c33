"""API tests for registration, login lockout and password reset."""

from __future__ import annotations

from datetime import timedelta

from django.core import mail
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import LOCK_THRESHOLD, PasswordResetToken, User


class RegisterTests(APITestCase):
    def _payload(self, **overrides):  # type: ignore
        payload = {
            "email": "traveller@example.com",
            "phone": "+91 98765 43210",
            "first_name": "Meera",
            "last_name": "Iyer",
            "password": "StrongPass123",
            "password_confirm": "StrongPass123",
        }
        payload.update(overrides)
        return payload

    def test_register_returns_tokens(self) -> None:
        response = self.client.post(reverse("auth:register"), self._payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertIn("access", response.data["tokens"])
        self.assertEqual(response.data["user"]["role"], User.RoleChoices.MEMBER)
        self.assertEqual(User.objects.get().phone, "+919876543210")

    def test_register_validation(self) -> None:
        cases = [
            ("email", {"email": "traveller@example"}),
            ("phone", {"phone": "12345"}),
            ("phone", {"phone": "+91 12345 67890"}),
            ("password", {"password": "short", "password_confirm": "short"}),
            ("password_confirm", {"password_confirm": "Different123"}),
        ]
        for field, overrides in cases:
            with self.subTest(field=field, overrides=overrides):
                response = self.client.post(reverse("auth:register"), self._payload(**overrides), format="json")
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertIn(field, response.data)

    def test_duplicate_email_rejected(self) -> None:
        User.objects.create_user(email="traveller@example.com", password="StrongPass123")
        response = self.client.post(reverse("auth:register"), self._payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("email", response.data)


class LoginTests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(
            email="lock@example.com",
            phone="+919812345678",
            password="CorrectPassword1",
        )
        self.url = reverse("auth:login")

    def test_login_by_email_or_phone(self) -> None:
        for login in (self.user.email, "+91 98123 45678"):
            with self.subTest(login=login):
                response = self.client.post(self.url, {"login": login, "password": "CorrectPassword1"}, format="json")
                self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
                self.assertIn("refresh", response.data["tokens"])

    def test_issued_tokens_refresh_and_verify(self) -> None:
        response = self.client.post(
            self.url, {"login": self.user.email, "password": "CorrectPassword1"}, format="json"
        )
        tokens = response.data["tokens"]
        refreshed = self.client.post(reverse("auth:token_refresh"), {"refresh": tokens["refresh"]}, format="json")
        self.assertEqual(refreshed.status_code, status.HTTP_200_OK, refreshed.data)
        self.assertIn("access", refreshed.data)

        verified = self.client.post(reverse("auth:token_verify"), {"token": tokens["access"]}, format="json")
        self.assertEqual(verified.status_code, status.HTTP_200_OK)
        bogus = self.client.post(reverse("auth:token_verify"), {"token": "not-a-token"}, format="json")
        self.assertEqual(bogus.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_account_locks_after_failed_attempts(self) -> None:
        for _ in range(LOCK_THRESHOLD):
            response = self.client.post(self.url, {"login": self.user.email, "password": "wrong"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        self.user.refresh_from_db()
        self.assertTrue(self.user.is_locked)
        response = self.client.post(
            self.url, {"login": self.user.email, "password": "CorrectPassword1"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        self.user.locked_until = timezone.now() - timedelta(minutes=1)
        self.user.save(update_fields=["locked_until"])
        response = self.client.post(
            self.url, {"login": self.user.email, "password": "CorrectPassword1"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

    def test_inactive_account_cannot_login(self) -> None:
        self.user.is_active = False
        self.user.save(update_fields=["is_active"])
        response = self.client.post(
            self.url, {"login": self.user.email, "password": "CorrectPassword1"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class PasswordResetTests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(email="reset@example.com", password="OldPassword1")
        response = self.client.post(
            reverse("auth:password-reset-request"), {"identifier": self.user.email}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_202_ACCEPTED, response.data)
        self.token = PasswordResetToken.objects.get(user=self.user)

    def _confirm(self, code: str):  # type: ignore
        return self.client.post(
            reverse("auth:password-reset-confirm"),
            {
                "identifier": self.user.email,
                "code": code,
                "new_password": "NewPassword1",
                "new_password_confirm": "NewPassword1",
            },
            format="json",
        )

    def test_code_is_emailed(self) -> None:
        self.assertEqual(len(mail.outbox), 1)
        self.assertIn(self.token.code, mail.outbox[0].body)
        self.assertEqual(len(self.token.code), 6)

    def test_reset_with_valid_code(self) -> None:
        response = self._confirm(self.token.code)
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("NewPassword1"))
        self.token.refresh_from_db()
        self.assertTrue(self.token.is_used)

    def test_wrong_code_consumes_attempts(self) -> None:
        wrong = "000000" if self.token.code != "000000" else "111111"
        for _ in range(3):
            self.assertEqual(self._confirm(wrong).status_code, status.HTTP_400_BAD_REQUEST)
        response = self._confirm(self.token.code)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("OldPassword1"))

    def test_expired_code(self) -> None:
        PasswordResetToken.objects.filter(pk=self.token.pk).update(expires_at=timezone.now() - timedelta(seconds=1))
        self.assertEqual(self._confirm(self.token.code).status_code, status.HTTP_400_BAD_REQUEST)
