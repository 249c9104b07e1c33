"""Small builders for test data shared across app test suites."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from itertools import count

from django.utils import timezone

from apps.journeys.models import Journey, JourneyDeparture
from apps.properties.models import Property
from apps.users.models import User

_sequence = count(1)


def make_user(role: str = User.RoleChoices.MEMBER, **extra) -> User:  # type: ignore
    n = next(_sequence)
    extra.setdefault("email", f"{role}{n}@example.com")
    extra.setdefault("first_name", role.title())
    return User.objects.create_user(password="StrongPass123", role=role, **extra)


def make_host(**extra) -> User:  # type: ignore
    return make_user(User.RoleChoices.HOST, **extra)


def make_admin(**extra) -> User:  # type: ignore
    return make_user(User.RoleChoices.ADMIN, **extra)


def make_property(host: User, **extra) -> Property:  # type: ignore
    values = {
        "title": "Pine View Homestay",
        "description": "Wooden cottage above the valley.",
        "city": "Manali",
        "state": "Himachal Pradesh",
        "base_price": Decimal("2500.00"),
        "cleaning_fee": Decimal("500.00"),
        "max_guests": 4,
        "status": Property.Status.APPROVED,
    }
    values.update(extra)
    return Property.objects.create(host=host, **values)


def make_journey(**extra) -> Journey:  # type: ignore
    values = {
        "title": "Spiti Valley Circuit",
        "description": "Monasteries and high passes.",
        "region": "Himachal Pradesh",
        "duration_days": 7,
        "base_price": Decimal("20000.00"),
        "price": Decimal("25000.00"),
        "status": Journey.Status.PUBLISHED,
    }
    values.update(extra)
    return Journey.objects.create(**values)


def make_departure(journey: Journey, days_ahead: int = 30, **extra) -> JourneyDeparture:  # type: ignore
    values = {"seats_total": 12}
    values.update(extra)
    return JourneyDeparture.objects.create(
        journey=journey,
        start_date=timezone.localdate() + timedelta(days=days_ahead),
        **values,
    )
