"""Serializers for contact messages."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import MESSAGE_MIN_LENGTH, ContactMessage


class ContactMessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = ContactMessage
        fields = ["id", "name", "email", "phone", "subject", "message", "status", "created_at"]
        read_only_fields = ["status", "created_at"]

    def validate_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required.")
        return value

    def validate_message(self, value: str) -> str:
        value = value.strip()
        if len(value) < MESSAGE_MIN_LENGTH:
            raise serializers.ValidationError(
                f"Message must be at least {MESSAGE_MIN_LENGTH} characters."
            )
        return value


class ContactStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ContactMessage.Status.choices)
