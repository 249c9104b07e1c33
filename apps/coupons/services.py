"""Coupon validation and redemption."""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction  # type: ignore
from django.db.models import F, Q  # type: ignore
from django.utils import timezone  # type: ignore

from .models import Coupon

logger = logging.getLogger(__name__)


class CouponError(Exception):
    """Raised when a coupon cannot be used for the requested purchase."""


def available_coupons():  # type: ignore
    now = timezone.now()
    return Coupon.objects.filter(
        is_active=True,
        valid_from__lte=now,
        valid_until__gte=now,
    ).filter(Q(usage_limit__isnull=True) | Q(used_count__lt=F("usage_limit")))


def calculate_discount(coupon: Coupon, subtotal: Decimal) -> Decimal:
    subtotal = Decimal(subtotal)
    if coupon.discount_type == Coupon.DiscountType.PERCENTAGE:
        discount = (subtotal * coupon.discount_value / Decimal("100")).quantize(
            Decimal("1"), rounding=ROUND_HALF_UP
        )
        if coupon.max_discount is not None:
            discount = min(discount, coupon.max_discount)
    else:
        discount = min(coupon.discount_value, subtotal)
    return max(discount, Decimal("0"))


def validate_coupon(code: str, subtotal: Decimal, journey=None) -> tuple[Coupon, Decimal]:  # type: ignore
    """Return the coupon and the discount it grants on ``subtotal``."""
    normalized = (code or "").strip().upper()
    if not normalized:
        raise CouponError("Coupon code is required.")
    try:
        coupon = Coupon.objects.get(code=normalized)
    except Coupon.DoesNotExist:
        raise CouponError("Invalid coupon code.")

    if not coupon.is_active:
        raise CouponError("This coupon is no longer active.")
    now = timezone.now()
    if now < coupon.valid_from:
        raise CouponError("This coupon is not valid yet.")
    if now > coupon.valid_until:
        raise CouponError("This coupon has expired.")
    if coupon.is_exhausted:
        raise CouponError("This coupon has reached its usage limit.")
    if coupon.min_purchase is not None and Decimal(subtotal) < coupon.min_purchase:
        raise CouponError(f"Minimum purchase of {coupon.min_purchase} is required for this coupon.")
    if journey is not None and coupon.applicable_journeys.exists():
        if not coupon.applicable_journeys.filter(pk=journey.pk).exists():
            raise CouponError("This coupon is not valid for the selected journey.")

    return coupon, calculate_discount(coupon, subtotal)


@transaction.atomic
def apply_coupon(coupon: Coupon) -> None:
    """Count one redemption; fails if the limit was reached meanwhile."""
    updated = Coupon.objects.filter(pk=coupon.pk).filter(
        Q(usage_limit__isnull=True) | Q(used_count__lt=F("usage_limit"))
    ).update(used_count=F("used_count") + 1)
    if not updated:
        raise CouponError("This coupon has reached its usage limit.")
    coupon.refresh_from_db(fields=["used_count"])
    logger.info(f"Coupon {coupon.code} redeemed, used {coupon.used_count} times")
