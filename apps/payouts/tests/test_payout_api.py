"""Tests for host earnings and payout requests."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.payouts.models import Payout
from apps.payouts.services import PayoutError, approve_payout, host_earnings, reject_payout
from shared.tests.factories import make_host, make_property, make_user

UPI_DETAILS = {"upi_id": "pinehost@okaxis"}


def paid_booking(property_obj, total: str = "10000.00", status=Booking.Status.COMPLETED) -> Booking:  # type: ignore
    check_in = timezone.localdate() - timedelta(days=5)
    return Booking.objects.create(
        member=make_user(),
        property=property_obj,
        check_in=check_in,
        check_out=check_in + timedelta(days=2),
        guests=2,
        total_price=Decimal(total),
        status=status,
        payment_status=Booking.PaymentStatus.PAID,
    )


class HostEarningsTests(TestCase):
    def setUp(self) -> None:
        self.host = make_host()
        self.property = make_property(self.host)
        paid_booking(self.property)

    def test_balance_accounts_for_commission_and_payouts(self) -> None:
        Payout.objects.create(host=self.host, amount=Decimal("2000"), method=Payout.Method.UPI,
                              status=Payout.Status.COMPLETED)
        Payout.objects.create(host=self.host, amount=Decimal("1000"), method=Payout.Method.UPI)

        earnings = host_earnings(self.host)
        self.assertEqual(earnings["gross"], Decimal("10000.00"))
        self.assertEqual(earnings["commission"], Decimal("1000.00"))
        self.assertEqual(earnings["net"], Decimal("9000.00"))
        self.assertEqual(earnings["paid_out"], Decimal("2000"))
        self.assertEqual(earnings["pending"], Decimal("1000"))
        self.assertEqual(earnings["available"], Decimal("6000.00"))

    def test_unpaid_bookings_do_not_count(self) -> None:
        Booking.objects.update(payment_status=Booking.PaymentStatus.PENDING)
        self.assertEqual(host_earnings(self.host)["gross"], Decimal("0.00"))

    def test_upcoming_paid_stays_do_not_count_yet(self) -> None:
        paid_booking(self.property, total="4000.00", status=Booking.Status.CONFIRMED)
        self.assertEqual(host_earnings(self.host)["gross"], Decimal("10000.00"))

    def test_settlement_only_from_open_states(self) -> None:
        payout = Payout.objects.create(host=self.host, amount=Decimal("500"), method=Payout.Method.UPI)
        approve_payout(payout, "UTR123")
        self.assertEqual(payout.status, Payout.Status.COMPLETED)
        self.assertIsNotNone(payout.processed_at)
        with self.assertRaises(PayoutError):
            reject_payout(payout, "Too late")


class PayoutAPITests(APITestCase):
    def setUp(self) -> None:
        self.host = make_host()
        paid_booking(make_property(self.host))
        self.client.force_authenticate(self.host)

    def _request(self, **payload):  # type: ignore
        body = {"amount": "1500.00", "method": "upi", "details": UPI_DETAILS}
        body.update(payload)
        return self.client.post(reverse("payout-request-payout"), body, format="json")

    def test_request_payout(self) -> None:
        response = self._request()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], Payout.Status.PENDING)

        response = self.client.get(reverse("payout-earnings"))
        self.assertEqual(response.data["pending"], Decimal("1500.00"))
        self.assertEqual(response.data["available"], Decimal("7500.00"))

        response = self.client.get(reverse("payout-list"))
        self.assertEqual(response.data["pagination"]["total"], 1)

    def test_amount_limited_to_available_balance(self) -> None:
        self.assertEqual(self._request(amount="9000.01").status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self._request(amount="0").status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self._request(amount="9000.00").status_code, status.HTTP_201_CREATED)

    def test_method_details_required(self) -> None:
        response = self._request(details={})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("details", response.data)
        response = self._request(method="paypal", details={"email": "not-an-email"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_members_cannot_request(self) -> None:
        self.client.force_authenticate(make_user())
        self.assertEqual(self._request().status_code, status.HTTP_403_FORBIDDEN)
