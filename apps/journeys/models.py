"""Journey (guided trip) models."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.core.exceptions import ValidationError  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.db.models import Sum  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.text import slugify  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Journey(models.Model):
    class Status(models.TextChoices):
        DRAFT = "draft", _("Draft")
        PUBLISHED = "published", _("Published")
        ARCHIVED = "archived", _("Archived")

    class Difficulty(models.TextChoices):
        EASY = "easy", _("Easy")
        MODERATE = "moderate", _("Moderate")
        CHALLENGING = "challenging", _("Challenging")

    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, blank=True)
    description = models.TextField()
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    region = models.CharField(max_length=120)
    country = models.CharField(max_length=100, default="India")
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    duration_days = models.PositiveSmallIntegerField(validators=[MinValueValidator(1)])
    duration_nights = models.PositiveSmallIntegerField(default=0, editable=False)
    difficulty = models.CharField(max_length=20, choices=Difficulty.choices, default=Difficulty.MODERATE)
    ideal_for = models.JSONField(default=list, blank=True)
    season = models.JSONField(default=list, blank=True)
    max_group_size = models.PositiveSmallIntegerField(default=10, validators=[MinValueValidator(1)])

    base_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
        help_text=_("Cost per person."),
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        help_text=_("Selling price per person."),
    )
    margin = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"), editable=False)
    currency = models.CharField(max_length=3, default="INR")

    includes = models.JSONField(default=list, blank=True)
    excludes = models.JSONField(default=list, blank=True)
    highlights = models.JSONField(default=list, blank=True)
    cover_image = models.URLField(max_length=500, blank=True)
    images = models.JSONField(default=list, blank=True)
    is_featured = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Journey")
        verbose_name_plural = _("Journeys")
        ordering = ["-is_featured", "-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=models.F("base_price")),
                name="journey_price_covers_cost",
            ),
        ]
        indexes = [
            models.Index(fields=["status"]),
            models.Index(fields=["region"]),
        ]

    def __str__(self) -> str:
        return self.title

    def clean(self) -> None:
        if self.duration_days is not None and self.duration_days < 1:
            raise ValidationError(_("A journey lasts at least one day."))
        if self.price is not None and self.base_price is not None and self.price < self.base_price:
            raise ValidationError(_("Selling price cannot be lower than the base price."))

    def save(self, *args, **kwargs):  # type: ignore
        if not self.slug:
            base_slug = slugify(self.title)[:200] or "journey"
            candidate = base_slug
            counter = 1
            while self.__class__.objects.filter(slug=candidate).exclude(pk=self.pk).exists():
                counter += 1
                candidate = f"{base_slug}-{counter}"
            self.slug = candidate
        if self.price is None:
            self.price = self.base_price
        self.duration_nights = max(self.duration_days - 1, 0)
        self.margin = self.price - self.base_price
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            kwargs["update_fields"] = set(update_fields) | {"duration_nights", "margin"}
        super().save(*args, **kwargs)

    def archive(self) -> None:
        self.status = self.Status.ARCHIVED
        self.save(update_fields=["status", "updated_at"])

    def upcoming_departures(self):  # type: ignore
        return self.departures.filter(is_active=True, start_date__gt=timezone.localdate()).order_by("start_date")


class JourneyDeparture(models.Model):
    """Scheduled start date of a journey with its own seat pool."""

    journey = models.ForeignKey(Journey, on_delete=models.CASCADE, related_name="departures")
    start_date = models.DateField()
    seats_total = models.PositiveSmallIntegerField(validators=[MinValueValidator(1)])
    price_override = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Departure")
        verbose_name_plural = _("Departures")
        ordering = ["start_date"]
        constraints = [
            models.UniqueConstraint(fields=["journey", "start_date"], name="unique_journey_departure"),
        ]

    def __str__(self) -> str:
        return f"{self.journey.title} on {self.start_date}"

    @property
    def price_per_person(self) -> Decimal:
        return self.price_override or self.journey.price

    @property
    def end_date(self):  # type: ignore
        return self.start_date + timedelta(days=self.journey.duration_days)

    @property
    def seats_booked(self) -> int:
        from apps.bookings.models import Booking

        taken = self.bookings.filter(status__in=Booking.ACTIVE_STATUSES + (Booking.Status.COMPLETED,)).aggregate(
            total=Sum("guests")
        )["total"]
        return taken or 0

    @property
    def seats_left(self) -> int:
        return max(self.seats_total - self.seats_booked, 0)


class ItineraryDay(models.Model):
    journey = models.ForeignKey(Journey, on_delete=models.CASCADE, related_name="itinerary")
    day = models.PositiveSmallIntegerField(validators=[MinValueValidator(1)])
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    activities = models.JSONField(default=list, blank=True)
    meals = models.JSONField(default=list, blank=True)
    accommodation = models.CharField(max_length=255, blank=True)
    image_url = models.URLField(max_length=500, blank=True)

    class Meta:
        verbose_name = _("Itinerary day")
        verbose_name_plural = _("Itinerary days")
        ordering = ["day"]
        constraints = [
            models.UniqueConstraint(fields=["journey", "day"], name="unique_itinerary_day"),
        ]

    def __str__(self) -> str:
        return f"Day {self.day}: {self.title}"
