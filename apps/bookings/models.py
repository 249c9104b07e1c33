"""Booking domain models for QuietSummit."""

from __future__ import annotations

import builtins
import secrets
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore
from django.db import models, transaction  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.validators import (
    validate_email_address,
    validate_phone_number,
    validate_traveler_age,
)


class Booking(models.Model):
    """Reservation of a homestay stay or of seats on a journey departure."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        IN_PROGRESS = "in_progress", _("In progress")
        COMPLETED = "completed", _("Completed")
        CANCELLED = "cancelled", _("Cancelled")
        EXPIRED = "expired", _("Expired")

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        PAID = "paid", _("Paid")
        REFUNDED = "refunded", _("Refunded")
        FAILED = "failed", _("Failed")

    class RoomPreference(models.TextChoices):
        SINGLE = "single", _("Single")
        DOUBLE = "double", _("Double")
        TRIPLE = "triple", _("Triple")

    ACTIVE_STATUSES = (Status.PENDING, Status.CONFIRMED, Status.IN_PROGRESS)
    FINAL_STATUSES = (Status.COMPLETED, Status.CANCELLED, Status.EXPIRED)
    TRANSITIONS = {
        Status.PENDING: (Status.CONFIRMED, Status.CANCELLED),
        Status.CONFIRMED: (Status.IN_PROGRESS, Status.CANCELLED),
        Status.IN_PROGRESS: (Status.COMPLETED, Status.CANCELLED),
    }

    booking_code = models.CharField(max_length=12, unique=True, editable=False)
    member = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    property = models.ForeignKey(
        "properties.Property",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="bookings",
    )
    journey = models.ForeignKey(
        "journeys.Journey",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="bookings",
    )
    departure = models.ForeignKey(
        "journeys.JourneyDeparture",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="bookings",
    )
    check_in = models.DateField()
    check_out = models.DateField()
    guests = models.PositiveSmallIntegerField(default=1)
    room_preference = models.CharField(
        max_length=10,
        choices=RoomPreference.choices,
        blank=True,
    )
    add_ons = models.JSONField(default=list, blank=True)
    special_requests = models.TextField(blank=True)

    nightly_rate = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    nights = models.PositiveSmallIntegerField(default=0)
    cleaning_fee = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    taxes = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    total_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default="INR")
    coupon = models.ForeignKey(
        "coupons.Coupon",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bookings",
    )
    coupon_code = models.CharField(max_length=50, blank=True)

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    cancellation_reason = models.CharField(max_length=500, blank=True)
    cancelled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="cancelled_bookings",
    )
    cancelled_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text=_("Unpaid pending bookings expire after this moment."),
    )
    paid_at = models.DateTimeField(null=True, blank=True)
    reminder_sent_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(check_out__gt=models.F("check_in")),
                name="booking_valid_dates",
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(property__isnull=False, journey__isnull=True)
                    | models.Q(property__isnull=True, journey__isnull=False)
                ),
                name="booking_single_product",
            ),
        ]
        indexes = [
            models.Index(fields=["property", "check_in", "check_out"]),
            models.Index(fields=["booking_code"]),
            models.Index(fields=["status"]),
            models.Index(fields=["member", "status"]),
        ]

    def __str__(self) -> str:
        return f"Booking {self.reference}"

    @builtins.property
    def reference(self) -> str:
        return f"QS{self.booking_code}"

    @builtins.property
    def kind(self) -> str:
        return "journey" if self.journey_id else "property"

    @builtins.property
    def number_of_travelers(self) -> int:
        return self.guests

    @builtins.property
    def listing_title(self) -> str:
        if self.journey_id:
            return self.journey.title
        return self.property.title if self.property_id else ""

    def clean(self) -> None:
        if bool(self.property_id) == bool(self.journey_id):
            raise ValidationError(_("A booking must reference either a homestay or a journey."))
        if self.check_in >= self.check_out:
            raise ValidationError(_("Check-out date must be after check-in date."))
        if self.guests < 1:
            raise ValidationError(_("At least one guest is required."))
        if self.property_id and self.guests > self.property.max_guests:
            raise ValidationError(_("Number of guests exceeds the homestay capacity."))
        if self.departure_id and self.departure.journey_id != self.journey_id:
            raise ValidationError(_("Departure does not belong to the selected journey."))
        self.nights = (self.check_out - self.check_in).days

    def save(self, *args, **kwargs):  # type: ignore
        with transaction.atomic():
            if self._state.adding:
                if not self.booking_code:
                    self.booking_code = self.generate_booking_code()
                self.clean()
            super().save(*args, **kwargs)

    @staticmethod
    def generate_booking_code() -> str:
        return secrets.token_hex(4).upper()

    @builtins.property
    def is_active(self) -> bool:
        return self.status in self.ACTIVE_STATUSES

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in self.TRANSITIONS.get(self.status, ())

    def mark_cancelled(self, cancelled_by=None, reason: str = "") -> None:  # type: ignore
        self.status = self.Status.CANCELLED
        self.cancelled_by = cancelled_by
        self.cancellation_reason = reason
        self.cancelled_at = timezone.now()
        if self.payment_status == self.PaymentStatus.PAID:
            self.payment_status = self.PaymentStatus.REFUNDED
        self.save(
            update_fields=[
                "status",
                "cancelled_by",
                "cancellation_reason",
                "cancelled_at",
                "payment_status",
                "updated_at",
            ]
        )
        from .services import release_dates_for_booking  # local import to avoid circular

        release_dates_for_booking(self)

    def mark_paid(self) -> None:
        self.payment_status = self.PaymentStatus.PAID
        self.paid_at = timezone.now()
        if self.status == self.Status.PENDING:
            self.status = self.Status.CONFIRMED
        self.expires_at = None
        self.save(update_fields=["payment_status", "paid_at", "status", "expires_at", "updated_at"])

    def should_expire(self) -> bool:
        return bool(
            self.expires_at
            and timezone.now() > self.expires_at
            and self.status == self.Status.PENDING
            and self.payment_status != self.PaymentStatus.PAID
        )


class Traveler(models.Model):
    """Person travelling on a booking."""

    class Gender(models.TextChoices):
        MALE = "male", _("Male")
        FEMALE = "female", _("Female")
        OTHER = "other", _("Other")

    booking = models.ForeignKey(Booking, on_delete=models.CASCADE, related_name="travelers")
    name = models.CharField(max_length=150)
    age = models.PositiveSmallIntegerField(validators=[validate_traveler_age])
    gender = models.CharField(max_length=10, choices=Gender.choices, blank=True)
    email = models.EmailField(blank=True, validators=[validate_email_address])
    phone = models.CharField(max_length=20, blank=True, validators=[validate_phone_number])
    emergency_contact_name = models.CharField(max_length=150, blank=True)
    emergency_contact_phone = models.CharField(
        max_length=20,
        blank=True,
        validators=[validate_phone_number],
    )

    class Meta:
        verbose_name = _("Traveler")
        verbose_name_plural = _("Travelers")
        ordering = ["id"]

    def __str__(self) -> str:
        return f"{self.name} ({self.age})"
