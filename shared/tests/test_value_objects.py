"""Unit tests for money, date ranges and homestay pricing."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase

from shared.domain.value_objects import DateRange, Money, homestay_price


class MoneyTests(SimpleTestCase):
    def test_arithmetic_keeps_currency(self) -> None:
        total = Money(Decimal("100")) + Money(Decimal("50"))
        self.assertEqual(total, Money(Decimal("150"), "INR"))
        self.assertEqual(Money(Decimal("20")) * 3, Money(Decimal("60")))

    def test_mixing_currencies_fails(self) -> None:
        with self.assertRaises(ValueError):
            Money(Decimal("1"), "INR") + Money(Decimal("1"), "USD")

    def test_negative_amount_fails(self) -> None:
        with self.assertRaises(ValueError):
            Money(Decimal("-1"))


class DateRangeTests(SimpleTestCase):
    def test_end_must_follow_start(self) -> None:
        with self.assertRaises(ValueError):
            DateRange(date(2030, 1, 5), date(2030, 1, 5))
        with self.assertRaises(ValueError):
            DateRange(date(2030, 1, 5), date(2030, 1, 4))

    def test_adjacent_ranges_do_not_overlap(self) -> None:
        first = DateRange(date(2030, 1, 1), date(2030, 1, 4))
        self.assertFalse(first.overlaps_with(DateRange(date(2030, 1, 4), date(2030, 1, 6))))
        self.assertTrue(first.overlaps_with(DateRange(date(2030, 1, 3), date(2030, 1, 6))))

    def test_length_is_nights(self) -> None:
        stay = DateRange(date(2030, 1, 1), date(2030, 1, 4))
        self.assertEqual(len(stay), 3)
        self.assertEqual(list(stay.iter_days())[-1], date(2030, 1, 3))
        self.assertFalse(stay.contains(date(2030, 1, 4)))


class HomestayPriceTests(SimpleTestCase):
    def test_total_is_nights_times_base_plus_cleaning(self) -> None:
        breakdown = homestay_price(Decimal("2500"), 3, Decimal("500"))
        self.assertEqual(breakdown.base_total.amount, Decimal("7500"))
        self.assertEqual(breakdown.total.amount, Decimal("8000"))
        self.assertEqual(breakdown.as_dict()["nights"], 3)

    def test_cleaning_fee_is_optional(self) -> None:
        self.assertEqual(homestay_price(Decimal("1200"), 2).total.amount, Decimal("2400"))

    def test_zero_nights_rejected(self) -> None:
        with self.assertRaises(ValueError):
            homestay_price(Decimal("1000"), 0)
