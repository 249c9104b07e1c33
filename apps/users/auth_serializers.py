"""Serializers for authentication flows (register, login, password reset)."""

from __future__ import annotations

import logging
import secrets
from datetime import timedelta
from typing import Any

from django.contrib.auth import get_user_model  # type: ignore
from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework import serializers  # type: ignore

from apps.notifications.services import send_email_notification
from shared.domain.validators import (
    COUNTRY_PHONE_RULES,
    is_valid_email,
    is_valid_phone,
    validate_phone_for_country,
)
from .models import PasswordResetToken

logger = logging.getLogger(__name__)

User = get_user_model()

RESET_CODE_TTL = timedelta(minutes=15)


def _find_user(identifier: str):  # type: ignore
    identifier = identifier.strip()
    if "@" in identifier:
        return User.objects.get(email__iexact=identifier)
    return User.objects.get(phone=User.objects.normalize_phone(identifier))


class RegisterSerializer(serializers.Serializer):
    email = serializers.CharField()
    phone = serializers.CharField()
    phone_country = serializers.ChoiceField(
        choices=list(COUNTRY_PHONE_RULES), required=False, default="IN"
    )
    password = serializers.CharField(min_length=8, write_only=True)
    password_confirm = serializers.CharField(min_length=8, write_only=True)
    first_name = serializers.CharField(required=False, allow_blank=True)
    last_name = serializers.CharField(required=False, allow_blank=True)
    username = serializers.CharField(required=False, allow_blank=True)

    def validate_email(self, value: str) -> str:  # type: ignore
        if not is_valid_email(value):
            raise serializers.ValidationError("Enter a valid email address.")
        return User.objects.normalize_email(value.strip())

    def validate_phone(self, value: str) -> str:  # type: ignore
        if not is_valid_phone(value):
            raise serializers.ValidationError("Enter a valid phone number (10 to 13 digits).")
        return User.objects.normalize_phone(value)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        if attrs.get("password") != attrs.get("password_confirm"):
            raise serializers.ValidationError({"password_confirm": "Passwords do not match."})
        if not validate_phone_for_country(attrs["phone"], attrs["phone_country"]):
            raise serializers.ValidationError(
                {"phone": f"Invalid phone number for {attrs['phone_country']}."}
            )
        if User.objects.filter(email__iexact=attrs["email"]).exists():
            raise serializers.ValidationError({"email": "A user with this email already exists."})
        if User.objects.filter(phone=attrs["phone"]).exists():
            raise serializers.ValidationError({"phone": "A user with this phone already exists."})
        return attrs

    @transaction.atomic
    def create(self, validated_data: dict[str, Any]):  # type: ignore
        password = validated_data.pop("password")
        validated_data.pop("password_confirm", None)
        user = User.objects.create_user(password=password, **validated_data)
        logger.info(f"Registered member {user.email}")
        return user


class LoginSerializer(serializers.Serializer):
    login = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        try:
            user = _find_user(attrs.get("login", ""))
        except User.DoesNotExist:
            raise serializers.ValidationError({"login": "Invalid login or password."})

        if not user.is_active:
            raise serializers.ValidationError({"login": "This account has been deactivated."})

        if user.is_locked:
            raise serializers.ValidationError(
                {"non_field_errors": ["Account is temporarily locked. Try again later."]}
            )

        if not user.check_password(attrs.get("password", "")):
            user.register_failed_attempt()
            if user.is_locked:
                logger.warning(f"Account {user.email} locked after repeated failed logins")
            raise serializers.ValidationError({"login": "Invalid login or password."})

        user.unlock()
        user.touch_last_activity()
        attrs["user"] = user
        return attrs


class PasswordResetRequestSerializer(serializers.Serializer):
    identifier = serializers.CharField()

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        try:
            attrs["user"] = _find_user(attrs.get("identifier", ""))
        except User.DoesNotExist:
            raise serializers.ValidationError({"identifier": "User not found."})
        return attrs

    @transaction.atomic
    def create(self, validated_data: dict[str, Any]):  # type: ignore
        user = validated_data["user"]
        PasswordResetToken.objects.filter(user=user, is_used=False).update(is_used=True)

        code = f"{secrets.randbelow(1_000_000):06d}"
        token = PasswordResetToken.objects.create(
            user=user,
            code=code,
            expires_at=timezone.now() + RESET_CODE_TTL,
            attempts_left=3,
        )

        send_email_notification(
            user.email,
            "Your QuietSummit password reset code",
            f"Your password reset code is {code}. It expires in 15 minutes.",
        )
        return token


class PasswordResetConfirmSerializer(serializers.Serializer):
    identifier = serializers.CharField()
    code = serializers.CharField()
    new_password = serializers.CharField(min_length=8)
    new_password_confirm = serializers.CharField(min_length=8)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        if attrs.get("new_password") != attrs.get("new_password_confirm"):
            raise serializers.ValidationError({"new_password_confirm": "Passwords do not match."})
        try:
            attrs["user"] = _find_user(attrs.get("identifier", ""))
        except User.DoesNotExist:
            raise serializers.ValidationError({"identifier": "User not found."})
        return attrs

    def create(self, validated_data: dict[str, Any]):  # type: ignore
        user = validated_data["user"]
        code = validated_data["code"]

        try:
            token = PasswordResetToken.objects.filter(user=user, is_used=False).latest("created_at")
        except PasswordResetToken.DoesNotExist:
            raise serializers.ValidationError({"code": "No active code. Request a new one."})

        if token.is_expired:
            token.mark_used()
            raise serializers.ValidationError({"code": "The code has expired."})

        if token.attempts_left == 0:
            token.mark_used()
            raise serializers.ValidationError({"code": "Too many attempts. Request a new code."})

        if token.code != code:
            token.decrement_attempt()
            raise serializers.ValidationError({"code": "Invalid code."})

        with transaction.atomic():
            user.set_password(validated_data["new_password"])
            user.save(update_fields=["password"])
            token.mark_used()
        user.unlock()
        logger.info(f"Password reset completed for {user.email}")
        return user
