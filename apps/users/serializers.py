"""Serializers for user, profile and host endpoints."""

from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model  # type: ignore
from django.contrib.auth.password_validation import validate_password  # type: ignore
from rest_framework import serializers  # type: ignore

from shared.domain.validators import is_valid_email, validate_phone_for_country
from .models import HOST_BIO_MIN_LENGTH, HostProfile

User = get_user_model()

MAX_INTERESTS = 20
INTEREST_MAX_LENGTH = 50


def clean_interests(value: Any) -> list[str]:
    """Trimmed, de-duplicated list of short interest tags."""
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise serializers.ValidationError("Interests must be a list of strings.")
    cleaned: list[str] = []
    for item in value:
        item = item.strip()
        if not item or item in cleaned:
            continue
        if len(item) > INTEREST_MAX_LENGTH:
            raise serializers.ValidationError(
                f"Each interest must be at most {INTEREST_MAX_LENGTH} characters."
            )
        cleaned.append(item)
    if len(cleaned) > MAX_INTERESTS:
        raise serializers.ValidationError(f"At most {MAX_INTERESTS} interests are allowed.")
    return cleaned


class UserSerializer(serializers.ModelSerializer):
    """Main user representation."""

    is_host = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "username",
            "first_name",
            "last_name",
            "phone",
            "phone_country",
            "role",
            "is_host",
            "avatar",
            "bio",
            "date_of_birth",
            "city",
            "interests",
            "subscribe_to_newsletter",
            "is_email_verified",
            "last_activity_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "email",
            "role",
            "is_email_verified",
            "last_activity_at",
            "created_at",
            "updated_at",
        ]

    def get_is_host(self, obj) -> bool:  # type: ignore
        return obj.is_host()


class UserShortSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source="display_name", read_only=True)

    class Meta:
        model = User
        fields = ["id", "name", "email", "avatar"]


class ProfileUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            "username",
            "first_name",
            "last_name",
            "phone",
            "phone_country",
            "avatar",
            "bio",
            "date_of_birth",
            "city",
            "interests",
            "subscribe_to_newsletter",
        ]

    def validate_interests(self, value):  # type: ignore
        return clean_interests(value)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        phone = attrs.get("phone")
        country = attrs.get("phone_country") or self.instance.phone_country
        if phone:
            phone = User.objects.normalize_phone(phone)
            if not validate_phone_for_country(phone, country):
                raise serializers.ValidationError({"phone": f"Invalid phone number for {country}."})
            if User.objects.filter(phone=phone).exclude(pk=self.instance.pk).exists():
                raise serializers.ValidationError({"phone": "This phone number is already in use."})
            attrs["phone"] = phone
        return attrs


class PreferencesSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["interests", "subscribe_to_newsletter"]

    def validate_interests(self, value):  # type: ignore
        return clean_interests(value)


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(min_length=8, write_only=True)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        user = self.context["request"].user
        if not user.check_password(attrs["current_password"]):
            raise serializers.ValidationError({"current_password": "Current password is incorrect."})
        if attrs["current_password"] == attrs["new_password"]:
            raise serializers.ValidationError(
                {"new_password": "New password must differ from the current one."}
            )
        validate_password(attrs["new_password"], user)
        return attrs

    def save(self, **kwargs: Any):  # type: ignore
        user = self.context["request"].user
        user.set_password(self.validated_data["new_password"])
        user.save(update_fields=["password"])
        return user


class UpdateEmailSerializer(serializers.Serializer):
    email = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate_email(self, value: str) -> str:  # type: ignore
        if not is_valid_email(value):
            raise serializers.ValidationError("Enter a valid email address.")
        value = User.objects.normalize_email(value.strip())
        user = self.context["request"].user
        if User.objects.filter(email__iexact=value).exclude(pk=user.pk).exists():
            raise serializers.ValidationError("This email is already registered.")
        return value

    def validate_password(self, value: str) -> str:  # type: ignore
        if not self.context["request"].user.check_password(value):
            raise serializers.ValidationError("Password is incorrect.")
        return value

    def save(self, **kwargs: Any):  # type: ignore
        user = self.context["request"].user
        user.email = self.validated_data["email"]
        user.is_email_verified = False
        user.save(update_fields=["email", "is_email_verified"])
        return user


class HostProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = HostProfile
        fields = [
            "id",
            "bio",
            "languages",
            "response_rate",
            "response_time",
            "is_superhost",
            "is_verified",
            "payout_method",
            "payout_details",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "response_rate",
            "is_superhost",
            "is_verified",
            "created_at",
            "updated_at",
        ]

    def validate_bio(self, value: str) -> str:  # type: ignore
        if len(value.strip()) < HOST_BIO_MIN_LENGTH:
            raise serializers.ValidationError(
                f"Bio must be at least {HOST_BIO_MIN_LENGTH} characters."
            )
        return value.strip()

    def validate_languages(self, value):  # type: ignore
        if not isinstance(value, list) or not value:
            raise serializers.ValidationError("Add at least one language.")
        if not all(isinstance(item, str) and item.strip() for item in value):
            raise serializers.ValidationError("Languages must be non-empty strings.")
        return [item.strip() for item in value]


class PublicHostSerializer(serializers.ModelSerializer):
    """Host profile as seen by travellers."""

    name = serializers.CharField(source="user.display_name", read_only=True)
    avatar = serializers.ImageField(source="user.avatar", read_only=True)
    city = serializers.CharField(source="user.city", read_only=True)
    member_since = serializers.DateTimeField(source="user.created_at", read_only=True)
    property_count = serializers.IntegerField(read_only=True)
    average_rating = serializers.FloatField(read_only=True, allow_null=True)
    review_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = HostProfile
        fields = [
            "id",
            "name",
            "avatar",
            "city",
            "bio",
            "languages",
            "response_rate",
            "response_time",
            "is_superhost",
            "is_verified",
            "member_since",
            "property_count",
            "average_rating",
            "review_count",
        ]
