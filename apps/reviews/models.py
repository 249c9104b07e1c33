"""Models for the review domain.

A member who completed a homestay booking can review the homestay and,
separately, its host. Each booking carries at most one review of each
type. Hosts may reply once; anyone else may report a review for
moderation.
"""

from __future__ import annotations

import builtins

from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

RATING_VALIDATORS = [MinValueValidator(1), MaxValueValidator(5)]
ASPECT_FIELDS = ("cleanliness", "accuracy", "communication", "location", "check_in", "value")


def _aspect_field(label: str) -> models.PositiveSmallIntegerField:
    return models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=RATING_VALIDATORS,
        help_text=label,
    )


class Review(models.Model):
    """Feedback left by a member after a completed stay."""

    class ReviewType(models.TextChoices):
        PROPERTY = "property", _("Homestay")
        HOST = "host", _("Host")

    author = models.ForeignKey(
        "users.CustomUser", on_delete=models.CASCADE, related_name="reviews"
    )
    booking = models.ForeignKey(
        "bookings.Booking", on_delete=models.CASCADE, related_name="reviews"
    )
    review_type = models.CharField(max_length=10, choices=ReviewType.choices, default=ReviewType.PROPERTY)
    property = models.ForeignKey(
        "properties.Property",
        on_delete=models.CASCADE,
        related_name="reviews",
        null=True,
        blank=True,
    )
    host = models.ForeignKey(
        "users.CustomUser",
        on_delete=models.CASCADE,
        related_name="host_reviews",
        null=True,
        blank=True,
    )
    rating = models.PositiveSmallIntegerField(validators=RATING_VALIDATORS)
    comment = models.TextField(max_length=1000)

    cleanliness = _aspect_field(_("Cleanliness"))
    accuracy = _aspect_field(_("Accuracy of the listing"))
    communication = _aspect_field(_("Communication with the host"))
    location = _aspect_field(_("Location"))
    check_in = _aspect_field(_("Check-in"))
    value = _aspect_field(_("Value for money"))

    host_reply = models.TextField(max_length=1000, blank=True)
    replied_at = models.DateTimeField(null=True, blank=True)

    is_reported = models.BooleanField(default=False)
    report_reason = models.CharField(max_length=500, blank=True)
    reported_at = models.DateTimeField(null=True, blank=True)
    is_visible = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["booking", "review_type"], name="unique_review_per_booking_type"),
        ]
        indexes = [
            models.Index(fields=["property", "-created_at"]),
            models.Index(fields=["host", "-created_at"]),
            models.Index(fields=["is_reported"]),
        ]

    def __str__(self) -> str:
        target = f"property {self.property_id}" if self.property_id else f"host {self.host_id}"
        return f"Review by {self.author_id} for {target} (Rating: {self.rating})"

    @builtins.property
    def reviewed_host_id(self) -> int | None:
        if self.host_id:
            return self.host_id
        return self.property.host_id if self.property_id else None

    def set_reply(self, text: str) -> None:
        self.host_reply = text
        self.replied_at = timezone.now()
        self.save(update_fields=["host_reply", "replied_at", "updated_at"])

    def report(self, reason: str) -> None:
        self.is_reported = True
        self.report_reason = reason
        self.reported_at = timezone.now()
        self.save(update_fields=["is_reported", "report_reason", "reported_at", "updated_at"])

    def dismiss_report(self) -> None:
        self.is_reported = False
        self.report_reason = ""
        self.reported_at = None
        self.save(update_fields=["is_reported", "report_reason", "reported_at", "updated_at"])
