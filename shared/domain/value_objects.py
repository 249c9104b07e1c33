"""Immutable values shared by the pricing and calendar code.

``Money`` keeps an amount together with its currency, ``DateRange`` is a
half-open span of days (the end date is the check-out day and is not
occupied) and ``PriceBreakdown`` is what a homestay quote returns.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterator

SUPPORTED_CURRENCIES = ('INR', 'USD', 'EUR', 'GBP')


@dataclass(frozen=True)
class Money:
    amount: Decimal
    currency: str = 'INR'

    def __post_init__(self):
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Currency {self.currency!r} is not supported")
        if self.amount < 0:
            raise ValueError("Money amount must not be negative")

    def _same_currency(self, other: 'Money', verb: str) -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Cannot {verb} {type(other).__name__} and Money")
        if other.currency != self.currency:
            raise ValueError(f"Cannot {verb} {self.currency} and {other.currency} amounts")

    def __add__(self, other: 'Money') -> 'Money':
        self._same_currency(other, "add")
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: 'Money') -> 'Money':
        self._same_currency(other, "subtract")
        return Money(self.amount - other.amount, self.currency)

    def __mul__(self, factor) -> 'Money':
        if isinstance(factor, bool) or not isinstance(factor, (int, Decimal)):
            raise TypeError("Money can only be multiplied by an int or a Decimal")
        return Money(self.amount * factor, self.currency)

    def __str__(self):
        return f"{self.currency} {self.amount:,.2f}"


@dataclass(frozen=True)
class DateRange:
    """Days from ``start_date`` up to, but not including, ``end_date``.

    Two stays sharing a changeover day do not overlap: a guest leaving on
    the 28th and another arriving on the 28th can both be accepted.
    """

    start_date: date
    end_date: date

    def __post_init__(self):
        if self.end_date <= self.start_date:
            raise ValueError(f"{self.end_date} is not after {self.start_date}")

    def overlaps_with(self, other: 'DateRange') -> bool:
        if not isinstance(other, DateRange):
            raise TypeError("overlaps_with() expects a DateRange")
        return other.start_date < self.end_date and self.start_date < other.end_date

    def contains(self, day: date) -> bool:
        return self.start_date <= day < self.end_date

    def iter_days(self) -> Iterator[date]:
        for offset in range(len(self)):
            yield self.start_date + timedelta(days=offset)

    def __len__(self) -> int:
        return (self.end_date - self.start_date).days

    def __str__(self):
        return f"{self.start_date:%Y-%m-%d} to {self.end_date:%Y-%m-%d}"


@dataclass(frozen=True)
class PriceBreakdown:
    nights: int
    nightly_rate: Money
    base_total: Money
    cleaning_fee: Money
    total: Money

    def as_dict(self) -> dict:
        return {
            "nights": self.nights,
            "base_price": self.nightly_rate.amount,
            "base_total": self.base_total.amount,
            "cleaning_fee": self.cleaning_fee.amount,
            "total": self.total.amount,
            "currency": self.total.currency,
        }


def homestay_price(
    base_price: Decimal,
    nights: int,
    cleaning_fee: Decimal = Decimal("0"),
    currency: str = 'INR',
) -> PriceBreakdown:
    """Nights times the base price, plus a cleaning fee charged once per stay."""
    if nights < 1:
        raise ValueError("A stay must be at least one night")
    nightly = Money(Decimal(base_price), currency)
    fee = Money(Decimal(cleaning_fee or 0), currency)
    base_total = nightly * nights
    return PriceBreakdown(
        nights=nights,
        nightly_rate=nightly,
        base_total=base_total,
        cleaning_fee=fee,
        total=base_total + fee,
    )
