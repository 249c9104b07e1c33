"""Host earnings and payout settlement."""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore
from django.db.models import Sum  # type: ignore

from apps.bookings.models import Booking
from .models import Payout

if TYPE_CHECKING:
    from apps.users.models import CustomUser

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


class PayoutError(Exception):
    """Raised when a payout cannot be requested or settled."""


def _sum(queryset, field: str) -> Decimal:  # type: ignore
    return queryset.aggregate(total=Sum(field))["total"] or Decimal("0.00")


def host_earnings(host: "CustomUser") -> dict[str, Decimal]:
    """Gross, commission, net and the balance still available for payout.

    Only paid stays that are completed count; upcoming stays can still be
    cancelled and refunded.
    """
    gross = _sum(
        Booking.objects.filter(
            property__host=host,
            status=Booking.Status.COMPLETED,
            payment_status=Booking.PaymentStatus.PAID,
        ),
        "total_price",
    )
    commission = (gross * settings.PLATFORM_COMMISSION_RATE).quantize(CENTS, rounding=ROUND_HALF_UP)
    net = gross - commission
    payouts = Payout.objects.filter(host=host)
    paid_out = _sum(payouts.filter(status=Payout.Status.COMPLETED), "amount")
    pending = _sum(payouts.filter(status__in=Payout.OPEN_STATUSES), "amount")
    return {
        "gross": gross,
        "commission": commission,
        "net": net,
        "paid_out": paid_out,
        "pending": pending,
        "available": net - paid_out - pending,
        "currency": "INR",
    }


@transaction.atomic
def request_payout(host: "CustomUser", amount: Decimal, method: str, details: dict) -> Payout:
    """Create a pending payout if ``amount`` fits the available balance."""
    if amount <= 0:
        raise PayoutError("Amount must be greater than zero.")
    # Serialises concurrent requests of the same host.
    type(host).objects.select_for_update().filter(pk=host.pk).first()
    available = host_earnings(host)["available"]
    if amount > available:
        raise PayoutError(f"Requested amount exceeds the available balance of {available}.")
    payout = Payout.objects.create(host=host, amount=amount, method=method, details=details)
    logger.info(f"Payout {payout.id} of {amount} requested by {host.email}")
    return payout


def approve_payout(payout: Payout, reference_id: str) -> Payout:
    if not payout.is_open:
        raise PayoutError(f"A {payout.status} payout cannot be approved.")
    payout.mark_completed(reference_id)
    logger.info(f"Payout {payout.id} completed with reference {reference_id}")
    return payout


def reject_payout(payout: Payout, reason: str) -> Payout:
    if not payout.is_open:
        raise PayoutError(f"A {payout.status} payout cannot be rejected.")
    payout.mark_failed(reason)
    logger.info(f"Payout {payout.id} rejected: {reason}")
    return payout
