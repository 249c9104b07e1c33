"""Serializers for wishlists."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.properties.models import Property
from apps.properties.serializers import PropertyListSerializer
from .models import Wishlist


class WishlistSerializer(serializers.ModelSerializer):
    """Wishlist with the saved homestays rendered as cards."""

    user_id = serializers.ReadOnlyField(source="user.id")
    properties = PropertyListSerializer(many=True, read_only=True)
    property_count = serializers.SerializerMethodField()

    class Meta:
        model = Wishlist
        fields = [
            "id",
            "user_id",
            "name",
            "description",
            "is_public",
            "share_token",
            "property_count",
            "properties",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["share_token", "created_at", "updated_at"]
        extra_kwargs = {"name": {"required": False}}

    def get_property_count(self, obj: Wishlist) -> int:
        return len(obj.properties.all())

    def validate_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name cannot be empty.")
        return value


class WishlistPropertySerializer(serializers.Serializer):
    """Names the homestay to add or remove."""

    property_id = serializers.PrimaryKeyRelatedField(
        queryset=Property.objects.all(),
        source="property",
    )
