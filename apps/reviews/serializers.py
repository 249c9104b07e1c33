"""Serializers for reviews.

The author, the reviewed homestay and the reviewed host are derived from
the booking, so a create request only names the booking and the type.
"""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.bookings.models import Booking
from .models import ASPECT_FIELDS, Review


class ReviewSerializer(serializers.ModelSerializer):
    """Read serializer for reviews including related ids."""

    author_id = serializers.ReadOnlyField(source="author.id")
    author_name = serializers.ReadOnlyField(source="author.display_name")
    property_id = serializers.ReadOnlyField(source="property.id")
    property_title = serializers.ReadOnlyField(source="property.title")
    host_id = serializers.ReadOnlyField(source="host.id")
    booking_reference = serializers.ReadOnlyField(source="booking.reference")

    class Meta:
        model = Review
        fields = [
            "id",
            "review_type",
            "author_id",
            "author_name",
            "property_id",
            "property_title",
            "host_id",
            "booking_reference",
            "rating",
            "comment",
            *ASPECT_FIELDS,
            "host_reply",
            "replied_at",
            "is_reported",
            "is_visible",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ReviewCreateSerializer(serializers.ModelSerializer):
    """Serializer for creating a new review."""

    booking = serializers.PrimaryKeyRelatedField(
        queryset=Booking.objects.select_related("property"),
    )

    class Meta:
        model = Review
        fields = ["booking", "review_type", "rating", "comment", *ASPECT_FIELDS]

    def validate_comment(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Comment cannot be empty.")
        return value

    def validate(self, attrs):  # type: ignore
        user = self.context["request"].user
        booking: Booking = attrs["booking"]
        review_type = attrs.get("review_type", Review.ReviewType.PROPERTY)

        if booking.member_id != user.id:
            raise serializers.ValidationError({"booking": "You can only review your own bookings."})
        if booking.status != Booking.Status.COMPLETED:
            raise serializers.ValidationError({"booking": "Reviews are accepted after the stay is completed."})
        if not booking.property_id:
            raise serializers.ValidationError({"booking": "Only homestay bookings can be reviewed."})
        if Review.objects.filter(booking=booking, review_type=review_type).exists():
            raise serializers.ValidationError({"booking": "You have already reviewed this booking."})

        attrs["review_type"] = review_type
        if review_type == Review.ReviewType.PROPERTY:
            attrs["property"] = booking.property
        else:
            attrs["host"] = booking.property.host
        return attrs

    def to_representation(self, instance):  # type: ignore
        return ReviewSerializer(instance, context=self.context).data


class ReviewReplySerializer(serializers.Serializer):
    reply = serializers.CharField(max_length=1000)

    def validate_reply(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Reply cannot be empty.")
        return value


class ReviewReportSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=500)

    def validate_reason(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("A reason is required.")
        return value
