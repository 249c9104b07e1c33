"""Payout domain models."""

from __future__ import annotations

from decimal import Decimal

from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.infrastructure.fields import EncryptedJSONField


class Payout(models.Model):
    """A host's request to withdraw earnings."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        PROCESSING = "processing", _("Processing")
        COMPLETED = "completed", _("Completed")
        FAILED = "failed", _("Failed")

    class Method(models.TextChoices):
        BANK_TRANSFER = "bank_transfer", _("Bank transfer")
        UPI = "upi", _("UPI")
        PAYPAL = "paypal", _("PayPal")

    OPEN_STATUSES = (Status.PENDING, Status.PROCESSING)

    host = models.ForeignKey(
        "users.CustomUser",
        on_delete=models.CASCADE,
        related_name="payouts",
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=3, default="INR")
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    method = models.CharField(max_length=20, choices=Method.choices)
    details = EncryptedJSONField(default=dict, blank=True, help_text=_("Account, UPI id or PayPal e-mail"))
    reference_id = models.CharField(max_length=100, blank=True)
    failure_reason = models.CharField(max_length=500, blank=True)
    processed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(condition=models.Q(amount__gt=Decimal("0")), name="payout_amount_positive"),
        ]

    def __str__(self) -> str:
        return f"Payout {self.id} of {self.amount} {self.currency} to {self.host_id} ({self.status})"

    @property
    def is_open(self) -> bool:
        return self.status in self.OPEN_STATUSES

    def mark_completed(self, reference_id: str) -> None:
        self.status = self.Status.COMPLETED
        self.reference_id = reference_id
        self.failure_reason = ""
        self.processed_at = timezone.now()
        self.save(update_fields=["status", "reference_id", "failure_reason", "processed_at", "updated_at"])

    def mark_failed(self, reason: str) -> None:
        self.status = self.Status.FAILED
        self.failure_reason = reason
        self.processed_at = timezone.now()
        self.save(update_fields=["status", "failure_reason", "processed_at", "updated_at"])
