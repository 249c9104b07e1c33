"""Messages sent through the public contact form."""

from __future__ import annotations

from django.core.validators import MinLengthValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.validators import validate_email_address, validate_phone_number

MESSAGE_MIN_LENGTH = 10
MESSAGE_MAX_LENGTH = 5000


class ContactMessage(models.Model):
    class Status(models.TextChoices):
        NEW = "new", _("New")
        READ = "read", _("Read")
        RESPONDED = "responded", _("Responded")

    name = models.CharField(max_length=100)
    email = models.EmailField(validators=[validate_email_address])
    phone = models.CharField(max_length=20, blank=True, validators=[validate_phone_number])
    subject = models.CharField(max_length=200)
    message = models.TextField(
        max_length=MESSAGE_MAX_LENGTH,
        validators=[MinLengthValidator(MESSAGE_MIN_LENGTH)],
    )
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.NEW)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [models.Index(fields=["status", "-created_at"])]

    def __str__(self) -> str:
        return f"{self.subject} from {self.email}"
