"""Serializers for the platform admin API."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.bookings.serializers import BookingSerializer
from apps.properties.serializers import PropertyListSerializer
from apps.reviews.serializers import ReviewSerializer
from apps.users.models import CustomUser


class AdminUserSerializer(serializers.ModelSerializer):
    role_display = serializers.CharField(source="get_role_display", read_only=True)
    properties_count = serializers.SerializerMethodField()
    bookings_count = serializers.SerializerMethodField()

    class Meta:
        model = CustomUser
        fields = [
            "id",
            "email",
            "first_name",
            "last_name",
            "phone",
            "role",
            "role_display",
            "is_active",
            "is_staff",
            "is_email_verified",
            "properties_count",
            "bookings_count",
            "date_joined",
            "last_login",
        ]
        read_only_fields = fields

    def get_properties_count(self, obj: CustomUser) -> int:
        return obj.properties.count()

    def get_bookings_count(self, obj: CustomUser) -> int:
        return obj.bookings.count()


class UserStatusSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()


class UserRoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=CustomUser.RoleChoices.choices)


class AdminPropertySerializer(PropertyListSerializer):
    """Listing card plus the moderation fields."""

    host_email = serializers.ReadOnlyField(source="host.email")

    class Meta(PropertyListSerializer.Meta):
        fields = PropertyListSerializer.Meta.fields + [
            "host_email",
            "is_active",
            "is_verified",
            "verified_at",
            "rejection_reason",
            "updated_at",
        ]


class AdminBookingSerializer(BookingSerializer):
    member_email = serializers.ReadOnlyField(source="member.email")

    class Meta(BookingSerializer.Meta):
        fields = BookingSerializer.Meta.fields + ["member_email"]
        read_only_fields = fields


class AdminReviewSerializer(ReviewSerializer):
    class Meta(ReviewSerializer.Meta):
        fields = ReviewSerializer.Meta.fields + ["report_reason", "reported_at"]
        read_only_fields = fields
