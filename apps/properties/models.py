"""Homestay domain models for QuietSummit.

A homestay (``Property``) is listed by a host, reviewed by the platform
before it becomes visible, and booked by the night. Its calendar is a set
of ``PropertyAvailability`` blocks: manual blocks created by the host and
``booked`` blocks reserved on behalf of bookings.
"""

from __future__ import annotations

import builtins
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.text import slugify  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from .models_location import Location  # noqa: F401


class Amenity(models.Model):
    """Amenity that can be attached to a listing."""

    class Category(models.TextChoices):
        BASIC = "basic", _("Basics")
        FEATURES = "features", _("Features")
        SAFETY = "safety", _("Safety")
        OUTDOOR = "outdoor", _("Outdoor")

    name = models.CharField(max_length=100, unique=True)
    category = models.CharField(
        max_length=20,
        choices=Category.choices,
        default=Category.BASIC,
    )
    icon = models.CharField(
        max_length=100,
        blank=True,
        help_text=_("Icon identifier used by the frontend."),
    )

    class Meta:
        verbose_name = _("Amenity")
        verbose_name_plural = _("Amenities")
        ordering = ["category", "name"]

    def __str__(self) -> str:
        return self.name


class Property(models.Model):
    """Homestay listed for nightly stays."""

    class Status(models.TextChoices):
        DRAFT = "draft", _("Draft")
        PENDING_REVIEW = "pending_review", _("Pending review")
        APPROVED = "approved", _("Approved")
        REJECTED = "rejected", _("Rejected")
        INACTIVE = "inactive", _("Inactive")

    class PropertyType(models.TextChoices):
        HOUSE = "house", _("House")
        APARTMENT = "apartment", _("Apartment")
        VILLA = "villa", _("Villa")
        COTTAGE = "cottage", _("Cottage")
        CABIN = "cabin", _("Cabin")
        HOMESTAY = "homestay", _("Homestay")
        OTHER = "other", _("Other")

    # Changing any of these on an approved listing sends it back to moderation
    MAJOR_FIELDS = (
        "title",
        "description",
        "property_type",
        "street",
        "city",
        "state",
        "country",
        "postal_code",
        "base_price",
        "cleaning_fee",
        "security_deposit",
    )

    host = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="properties",
    )
    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, blank=True)
    description = models.TextField()
    property_type = models.CharField(
        max_length=20,
        choices=PropertyType.choices,
        default=PropertyType.HOMESTAY,
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING_REVIEW,
    )

    street = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100, blank=True)
    country = models.CharField(max_length=100, default="India")
    postal_code = models.CharField(max_length=20, blank=True)
    location = models.ForeignKey(
        Location,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="properties",
    )
    latitude = models.DecimalField(
        max_digits=9,
        decimal_places=6,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("-90")), MaxValueValidator(Decimal("90"))],
    )
    longitude = models.DecimalField(
        max_digits=9,
        decimal_places=6,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("-180")), MaxValueValidator(Decimal("180"))],
    )

    base_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    currency = models.CharField(max_length=3, default="INR")
    cleaning_fee = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    security_deposit = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))

    max_guests = models.PositiveSmallIntegerField(default=2, validators=[MinValueValidator(1)])
    bedrooms = models.PositiveSmallIntegerField(default=1)
    beds = models.PositiveSmallIntegerField(default=1)
    bathrooms = models.PositiveSmallIntegerField(default=1)
    amenities = models.ManyToManyField(Amenity, blank=True, related_name="properties")

    check_in_time = models.TimeField(default=timezone.datetime.strptime("14:00", "%H:%M").time())
    check_out_time = models.TimeField(default=timezone.datetime.strptime("11:00", "%H:%M").time())
    smoking_allowed = models.BooleanField(default=False)
    pets_allowed = models.BooleanField(default=False)
    parties_allowed = models.BooleanField(default=False)
    additional_rules = models.TextField(blank=True)

    instant_book = models.BooleanField(default=False)
    minimum_stay = models.PositiveSmallIntegerField(default=1, validators=[MinValueValidator(1)])
    maximum_stay = models.PositiveSmallIntegerField(default=365, validators=[MinValueValidator(1)])
    advance_notice_days = models.PositiveSmallIntegerField(
        default=0,
        help_text=_("Minimum number of days between booking and arrival."),
    )

    rejection_reason = models.TextField(blank=True)
    is_verified = models.BooleanField(default=False)
    verified_at = models.DateTimeField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    average_rating = models.DecimalField(max_digits=2, decimal_places=1, default=Decimal("0.0"))
    review_count = models.PositiveIntegerField(default=0)
    favorite_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Property")
        verbose_name_plural = _("Properties")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(maximum_stay__gte=models.F("minimum_stay")),
                name="property_stay_limits_valid",
            ),
        ]
        indexes = [
            models.Index(fields=["status", "is_active"]),
            models.Index(fields=["host", "status"]),
            models.Index(fields=["city"]),
        ]

    def __str__(self) -> str:
        return self.title

    @property
    def is_public(self) -> bool:
        return self.status == self.Status.APPROVED and self.is_active

    def approve(self) -> None:
        self.status = self.Status.APPROVED
        self.is_active = True
        self.is_verified = True
        self.verified_at = timezone.now()
        self.rejection_reason = ""
        self.save(update_fields=["status", "is_active", "is_verified", "verified_at", "rejection_reason", "updated_at"])

    def reject(self, reason: str) -> None:
        self.status = self.Status.REJECTED
        self.rejection_reason = reason
        self.is_verified = False
        self.save(update_fields=["status", "rejection_reason", "is_verified", "updated_at"])

    def deactivate(self) -> None:
        self.is_active = False
        self.status = self.Status.INACTIVE
        self.save(update_fields=["is_active", "status", "updated_at"])

    def save(self, *args, **kwargs):  # type: ignore
        if not self.slug:
            base_slug = slugify(self.title)[:200] or "homestay"
            candidate = base_slug
            counter = 1
            while self.__class__.objects.filter(slug=candidate).exclude(pk=self.pk).exists():
                counter += 1
                candidate = f"{base_slug}-{counter}"
            self.slug = candidate
        super().save(*args, **kwargs)


class PropertyPhoto(models.Model):
    """Listing photo hosted on the media CDN."""

    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name="photos")
    url = models.URLField(max_length=500)
    caption = models.CharField(max_length=255, blank=True)
    order = models.PositiveIntegerField(default=0)
    is_primary = models.BooleanField(default=False)
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Property photo")
        verbose_name_plural = _("Property photos")
        ordering = ["-is_primary", "order", "id"]

    def __str__(self) -> str:
        return f"{self.property.title} [{self.order}]"


class PropertyAvailability(models.Model):
    """Calendar block; end_date is exclusive, like a check-out date."""

    class AvailabilityStatus(models.TextChoices):
        AVAILABLE = "available", _("Available")
        BOOKED = "booked", _("Booked")
        BLOCKED = "blocked", _("Blocked by host")
        MAINTENANCE = "maintenance", _("Maintenance")

    class Reason(models.TextChoices):
        BOOKED = "booked", _("Booked")
        MAINTENANCE = "maintenance", _("Maintenance")
        PERSONAL = "personal", _("Personal use")
        OTHER = "other", _("Other")

    class Source(models.TextChoices):
        MANUAL = "manual", _("Manual")
        BOOKING = "booking", _("Booking")

    BLOCKING_STATUSES = (
        AvailabilityStatus.BOOKED,
        AvailabilityStatus.BLOCKED,
        AvailabilityStatus.MAINTENANCE,
    )

    property = models.ForeignKey(
        Property,
        on_delete=models.CASCADE,
        related_name="availability_periods",
    )
    start_date = models.DateField()
    end_date = models.DateField()
    status = models.CharField(max_length=20, choices=AvailabilityStatus.choices)
    reason = models.CharField(max_length=20, choices=Reason.choices, default=Reason.OTHER)
    note = models.CharField(max_length=255, blank=True)
    source = models.CharField(max_length=20, choices=Source.choices, default=Source.MANUAL)
    booking = models.OneToOneField(
        "bookings.Booking",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="reserved_period",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_availability_periods",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Availability period")
        verbose_name_plural = _("Availability periods")
        ordering = ["start_date"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gt=models.F("start_date")),
                name="availability_valid_date_range",
            ),
        ]
        indexes = [
            models.Index(fields=["property", "start_date", "end_date"]),
        ]

    def __str__(self) -> str:
        return f"{self.property.title}: {self.start_date} - {self.end_date} ({self.status})"

    @builtins.property
    def nights(self) -> int:
        return (self.end_date - self.start_date).days
