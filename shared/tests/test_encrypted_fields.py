"""Encrypted JSON columns keep payout details unreadable at rest."""

from __future__ import annotations

from decimal import Decimal

from django.db import connection
from django.test import TestCase, override_settings

from apps.payouts.models import Payout
from shared.infrastructure.encryption import decrypt_string, encrypt_string
from shared.tests.factories import make_host


class EncryptionTests(TestCase):
    def test_round_trip_and_empty(self) -> None:
        token = encrypt_string("pinehost@okaxis")
        self.assertNotIn("pinehost", token)
        self.assertEqual(decrypt_string(token), "pinehost@okaxis")
        self.assertEqual(encrypt_string(""), "")

    def test_missing_key(self) -> None:
        with override_settings(ENCRYPTION_KEY=""):
            with self.assertRaises(ValueError):
                encrypt_string("secret")


class EncryptedJSONFieldTests(TestCase):
    def test_details_are_encrypted_in_the_database(self) -> None:
        payout = Payout.objects.create(
            host=make_host(),
            amount=Decimal("100.00"),
            method=Payout.Method.UPI,
            details={"upi_id": "pinehost@okaxis"},
        )
        with connection.cursor() as cursor:
            cursor.execute("SELECT details FROM payouts_payout WHERE id = %s", [payout.id])
            raw = cursor.fetchone()[0]
        self.assertNotIn("pinehost", raw)

        payout.refresh_from_db()
        self.assertEqual(payout.details, {"upi_id": "pinehost@okaxis"})

    def test_wrong_key_yields_empty_document(self) -> None:
        payout = Payout.objects.create(
            host=make_host(), amount=Decimal("100.00"), method=Payout.Method.UPI, details={"upi_id": "x@upi"}
        )
        with override_settings(ENCRYPTION_KEY="another-key"):
            payout.refresh_from_db()
        self.assertEqual(payout.details, {})
