"""Serializers for payouts."""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers  # type: ignore

from shared.domain.validators import is_valid_email
from .models import Payout

REQUIRED_DETAILS = {
    Payout.Method.BANK_TRANSFER: ("account_holder", "account_number", "ifsc"),
    Payout.Method.UPI: ("upi_id",),
    Payout.Method.PAYPAL: ("email",),
}


class PayoutSerializer(serializers.ModelSerializer):
    host_id = serializers.ReadOnlyField(source="host.id")
    host_email = serializers.ReadOnlyField(source="host.email")

    class Meta:
        model = Payout
        fields = [
            "id",
            "host_id",
            "host_email",
            "amount",
            "currency",
            "status",
            "method",
            "details",
            "reference_id",
            "failure_reason",
            "processed_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PayoutRequestSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"))
    method = serializers.ChoiceField(choices=Payout.Method.choices)
    details = serializers.DictField(child=serializers.CharField(allow_blank=True))

    def validate(self, attrs):  # type: ignore
        details = {key: value.strip() for key, value in attrs["details"].items()}
        missing = [key for key in REQUIRED_DETAILS[attrs["method"]] if not details.get(key)]
        if missing:
            raise serializers.ValidationError(
                {"details": f"Missing payout details: {', '.join(missing)}."}
            )
        if attrs["method"] == Payout.Method.PAYPAL:
            if not is_valid_email(details["email"]):
                raise serializers.ValidationError({"details": "Enter a valid PayPal e-mail address."})
        attrs["details"] = details
        return attrs


class PayoutApproveSerializer(serializers.Serializer):
    reference_id = serializers.CharField(max_length=100)


class PayoutRejectSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=500)

    def validate_reason(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("A reason is required.")
        return value
