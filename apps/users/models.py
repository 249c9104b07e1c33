"""User domain models for the QuietSummit marketplace.

The platform distinguishes three roles: members who book journeys and
homestays, hosts who list homestays, and platform administrators who
moderate listings, reviews and payouts. Hosts carry an additional public
profile. Accounts are locked for a short period after repeated failed
logins.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from django.contrib.auth.models import AbstractUser, BaseUserManager  # type: ignore
from django.core.validators import MinLengthValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.validators import COUNTRY_PHONE_RULES, validate_phone_number
from shared.infrastructure.fields import EncryptedJSONField

LOCK_THRESHOLD = 5
LOCK_MINUTES = 15
HOST_BIO_MIN_LENGTH = 50


class CustomUserManager(BaseUserManager):
    """User manager that logs people in by e-mail."""

    use_in_migrations = True

    def _create_user(self, email: str, password: str | None, **extra_fields: Any):
        if not email:
            raise ValueError("Email is required to create a user.")
        email = self.normalize_email(email)

        phone = extra_fields.get("phone")
        if phone:
            extra_fields["phone"] = self.normalize_phone(phone)

        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("role", CustomUser.RoleChoices.MEMBER)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", CustomUser.RoleChoices.ADMIN)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self._create_user(email, password, **extra_fields)

    @staticmethod
    def normalize_phone(phone: str) -> str:
        """Strip spaces, dashes and parentheses so phones compare equal."""
        return "".join(ch for ch in phone if ch.isdigit() or ch == "+")


class CustomUser(AbstractUser):
    """Platform account: member, host or administrator."""

    class RoleChoices(models.TextChoices):
        MEMBER = "member", _("Member")
        HOST = "host", _("Host")
        ADMIN = "admin", _("Administrator")

    username = models.CharField(
        _("Display name"),
        max_length=150,
        blank=True,
        help_text=_("Optional, shown in the interface and notifications."),
    )
    email = models.EmailField(_("Email"), unique=True)
    phone = models.CharField(
        _("Phone"),
        max_length=20,
        unique=True,
        null=True,
        blank=True,
        validators=[validate_phone_number],
    )
    phone_country = models.CharField(
        _("Phone country"),
        max_length=2,
        default="IN",
        choices=[(code, code) for code in COUNTRY_PHONE_RULES],
    )
    role = models.CharField(
        _("Role"),
        max_length=20,
        choices=RoleChoices.choices,
        default=RoleChoices.MEMBER,
    )
    avatar = models.ImageField(_("Avatar"), upload_to="avatars/", blank=True, null=True)
    bio = models.TextField(_("About"), blank=True)
    date_of_birth = models.DateField(_("Date of birth"), null=True, blank=True)
    city = models.CharField(_("City"), max_length=100, blank=True)
    interests = models.JSONField(_("Interests"), default=list, blank=True)
    subscribe_to_newsletter = models.BooleanField(_("Newsletter"), default=True)
    is_email_verified = models.BooleanField(_("Email verified"), default=False)
    failed_login_attempts = models.PositiveIntegerField(default=0)
    locked_until = models.DateTimeField(_("Locked until"), null=True, blank=True)
    last_activity_at = models.DateTimeField(_("Last activity"), null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    class Meta:
        verbose_name = _("User")
        verbose_name_plural = _("Users")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.email} ({self.get_role_display()})"

    @property
    def display_name(self) -> str:
        full_name = self.get_full_name()
        return full_name or self.username or self.email

    # --- Domain helpers ------------------------------------------------------
    def is_host(self) -> bool:
        return self.role == self.RoleChoices.HOST

    def is_platform_admin(self) -> bool:
        return self.role == self.RoleChoices.ADMIN or self.is_staff or self.is_superuser

    @property
    def is_locked(self) -> bool:
        return bool(self.locked_until and self.locked_until > timezone.now())

    def lock(self, minutes: int = LOCK_MINUTES) -> None:
        self.locked_until = timezone.now() + timedelta(minutes=minutes)
        self.failed_login_attempts = 0
        self.save(update_fields=["locked_until", "failed_login_attempts"])

    def unlock(self) -> None:
        self.locked_until = None
        self.failed_login_attempts = 0
        self.save(update_fields=["locked_until", "failed_login_attempts"])

    def register_failed_attempt(self, threshold: int = LOCK_THRESHOLD) -> None:
        self.failed_login_attempts += 1
        if self.failed_login_attempts >= threshold:
            self.lock()
            return
        self.save(update_fields=["failed_login_attempts"])

    def touch_last_activity(self) -> None:
        self.last_activity_at = timezone.now()
        self.save(update_fields=["last_activity_at"])


class HostProfile(models.Model):
    """Public profile of a member who lists homestays."""

    class PayoutMethod(models.TextChoices):
        BANK_TRANSFER = "bank_transfer", _("Bank transfer")
        UPI = "upi", _("UPI")
        PAYPAL = "paypal", _("PayPal")

    user = models.OneToOneField(
        CustomUser,
        on_delete=models.CASCADE,
        related_name="host_profile",
    )
    bio = models.TextField(validators=[MinLengthValidator(HOST_BIO_MIN_LENGTH)])
    languages = models.JSONField(default=list)
    response_rate = models.PositiveSmallIntegerField(default=100)
    response_time = models.CharField(max_length=50, default="within a day")
    is_superhost = models.BooleanField(default=False)
    is_verified = models.BooleanField(default=False)
    payout_method = models.CharField(
        max_length=20,
        choices=PayoutMethod.choices,
        blank=True,
    )
    payout_details = EncryptedJSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Host profile")
        verbose_name_plural = _("Host profiles")

    def __str__(self) -> str:
        return f"Host {self.user.email}"


class PasswordResetToken(models.Model):
    """Time-boxed password reset code with a limited number of attempts."""

    user = models.ForeignKey(
        CustomUser,
        on_delete=models.CASCADE,
        related_name="password_reset_tokens",
    )
    code = models.CharField(max_length=6)
    expires_at = models.DateTimeField()
    attempts_left = models.PositiveSmallIntegerField(default=3)
    is_used = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Password reset token")
        verbose_name_plural = _("Password reset tokens")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["code", "expires_at"]),
        ]

    def __str__(self) -> str:
        return f"Reset token for {self.user_id}"

    @property
    def is_expired(self) -> bool:
        return timezone.now() >= self.expires_at

    def mark_used(self) -> None:
        self.is_used = True
        self.save(update_fields=["is_used"])

    def decrement_attempt(self) -> None:
        if self.attempts_left > 0:
            self.attempts_left -= 1
            self.save(update_fields=["attempts_left"])


User = CustomUser
