"""Serializers for the properties domain."""

from __future__ import annotations

from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework import serializers  # type: ignore

from apps.users.serializers import UserShortSerializer
from .models import Amenity, Property, PropertyAvailability, PropertyPhoto


class AmenitySerializer(serializers.ModelSerializer):
    class Meta:
        model = Amenity
        fields = ["id", "name", "category", "icon"]


class PropertyPhotoSerializer(serializers.ModelSerializer):
    class Meta:
        model = PropertyPhoto
        fields = ["id", "url", "caption", "order", "is_primary", "uploaded_at"]
        read_only_fields = ["uploaded_at"]


class PropertyAvailabilitySerializer(serializers.ModelSerializer):
    created_by = serializers.ReadOnlyField(source="created_by_id")
    status_display = serializers.ReadOnlyField(source="get_status_display")

    class Meta:
        model = PropertyAvailability
        fields = [
            "id",
            "start_date",
            "end_date",
            "status",
            "status_display",
            "reason",
            "note",
            "source",
            "booking",
            "created_by",
            "created_at",
        ]
        read_only_fields = fields


class BlockDatesSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    status = serializers.ChoiceField(
        choices=[
            PropertyAvailability.AvailabilityStatus.BLOCKED,
            PropertyAvailability.AvailabilityStatus.MAINTENANCE,
        ],
        default=PropertyAvailability.AvailabilityStatus.BLOCKED,
    )
    reason = serializers.ChoiceField(
        choices=PropertyAvailability.Reason.choices,
        default=PropertyAvailability.Reason.OTHER,
    )
    note = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")

    def validate(self, attrs):  # type: ignore
        if attrs["end_date"] <= attrs["start_date"]:
            raise serializers.ValidationError({"end_date": "End date must be after start date."})
        if attrs["start_date"] < timezone.localdate():
            raise serializers.ValidationError({"start_date": "Cannot block dates in the past."})
        return attrs


class UpdateDateSerializer(serializers.Serializer):
    date = serializers.DateField()
    status = serializers.ChoiceField(
        choices=[
            PropertyAvailability.AvailabilityStatus.AVAILABLE,
            PropertyAvailability.AvailabilityStatus.BLOCKED,
            PropertyAvailability.AvailabilityStatus.MAINTENANCE,
        ]
    )
    note = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")

    def validate_date(self, value):  # type: ignore
        if value < timezone.localdate():
            raise serializers.ValidationError("Cannot change dates in the past.")
        return value


class DateRangeQuerySerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()

    def validate(self, attrs):  # type: ignore
        if attrs["end_date"] <= attrs["start_date"]:
            raise serializers.ValidationError({"end_date": "End date must be after start date."})
        return attrs


class CalendarWindowQuerySerializer(serializers.Serializer):
    """Optional bounds for the calendar view; either side may be left open."""

    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):  # type: ignore
        start, end = attrs.get("start_date"), attrs.get("end_date")
        if start and end and end <= start:
            raise serializers.ValidationError({"end_date": "End date must be after start date."})
        return attrs


class SearchDatesQuerySerializer(serializers.Serializer):
    check_in = serializers.DateField(required=False)
    check_out = serializers.DateField(required=False)

    def validate(self, attrs):  # type: ignore
        check_in, check_out = attrs.get("check_in"), attrs.get("check_out")
        if check_in and check_out and check_out <= check_in:
            raise serializers.ValidationError({"check_out": "Check-out must be after check-in."})
        return attrs


class StayQuoteSerializer(serializers.Serializer):
    check_in = serializers.DateField()
    check_out = serializers.DateField()
    guests = serializers.IntegerField(min_value=1, default=1)


class PropertyListSerializer(serializers.ModelSerializer):
    """Compact card used by lists, search results and dashboards."""

    primary_photo = serializers.SerializerMethodField()
    host_id = serializers.ReadOnlyField(source="host.id")

    class Meta:
        model = Property
        fields = [
            "id",
            "host_id",
            "title",
            "slug",
            "property_type",
            "status",
            "city",
            "state",
            "country",
            "latitude",
            "longitude",
            "base_price",
            "currency",
            "max_guests",
            "bedrooms",
            "bathrooms",
            "instant_book",
            "average_rating",
            "review_count",
            "favorite_count",
            "primary_photo",
            "created_at",
        ]

    def get_primary_photo(self, obj: Property) -> str | None:
        photos = list(obj.photos.all())
        if not photos:
            return None
        primary = next((photo for photo in photos if photo.is_primary), photos[0])
        return primary.url


class PropertySerializer(serializers.ModelSerializer):
    """Read serializer with nested relations."""

    host = UserShortSerializer(read_only=True)
    amenities = AmenitySerializer(many=True, read_only=True)
    photos = PropertyPhotoSerializer(many=True, read_only=True)

    class Meta:
        model = Property
        fields = [
            "id",
            "host",
            "title",
            "slug",
            "description",
            "property_type",
            "status",
            "street",
            "city",
            "state",
            "country",
            "postal_code",
            "location",
            "latitude",
            "longitude",
            "base_price",
            "currency",
            "cleaning_fee",
            "security_deposit",
            "max_guests",
            "bedrooms",
            "beds",
            "bathrooms",
            "amenities",
            "photos",
            "check_in_time",
            "check_out_time",
            "smoking_allowed",
            "pets_allowed",
            "parties_allowed",
            "additional_rules",
            "instant_book",
            "minimum_stay",
            "maximum_stay",
            "advance_notice_days",
            "rejection_reason",
            "is_verified",
            "verified_at",
            "is_active",
            "average_rating",
            "review_count",
            "favorite_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PropertyPhotoWriteSerializer(serializers.Serializer):
    url = serializers.URLField(max_length=500)
    caption = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    is_primary = serializers.BooleanField(required=False, default=False)


class PropertyWriteSerializer(serializers.ModelSerializer):
    """Serializer for create/update operations."""

    amenities = serializers.PrimaryKeyRelatedField(
        many=True,
        queryset=Amenity.objects.all(),
        required=False,
    )
    photos = PropertyPhotoWriteSerializer(many=True, required=False)

    class Meta:
        model = Property
        fields = [
            "title",
            "description",
            "property_type",
            "street",
            "city",
            "state",
            "country",
            "postal_code",
            "location",
            "latitude",
            "longitude",
            "base_price",
            "currency",
            "cleaning_fee",
            "security_deposit",
            "max_guests",
            "bedrooms",
            "beds",
            "bathrooms",
            "amenities",
            "photos",
            "check_in_time",
            "check_out_time",
            "smoking_allowed",
            "pets_allowed",
            "parties_allowed",
            "additional_rules",
            "instant_book",
            "minimum_stay",
            "maximum_stay",
            "advance_notice_days",
        ]

    def validate_base_price(self, value):  # type: ignore
        if value <= 0:
            raise serializers.ValidationError("Base price must be greater than zero.")
        return value

    def validate_max_guests(self, value: int) -> int:
        if value < 1:
            raise serializers.ValidationError("At least one guest must be allowed.")
        return value

    def validate(self, attrs):  # type: ignore
        instance = self.instance
        minimum = attrs.get("minimum_stay", getattr(instance, "minimum_stay", 1))
        maximum = attrs.get("maximum_stay", getattr(instance, "maximum_stay", 365))
        if minimum > maximum:
            raise serializers.ValidationError(
                {"maximum_stay": "Maximum stay cannot be shorter than minimum stay."}
            )
        return attrs

    @staticmethod
    def _replace_photos(property_obj: Property, photos: list[dict]) -> None:
        property_obj.photos.all().delete()
        has_primary = any(photo.get("is_primary") for photo in photos)
        for index, photo in enumerate(photos):
            PropertyPhoto.objects.create(
                property=property_obj,
                url=photo["url"],
                caption=photo.get("caption", ""),
                order=index,
                is_primary=photo.get("is_primary", False) or (not has_primary and index == 0),
            )

    @transaction.atomic
    def create(self, validated_data):  # type: ignore
        amenities = validated_data.pop("amenities", [])
        photos = validated_data.pop("photos", [])
        property_instance = Property.objects.create(
            host=self.context["request"].user,
            status=Property.Status.PENDING_REVIEW,
            **validated_data,
        )
        if amenities:
            property_instance.amenities.set(amenities)
        if photos:
            self._replace_photos(property_instance, photos)
        return property_instance

    @transaction.atomic
    def update(self, instance: Property, validated_data):  # type: ignore
        amenities = validated_data.pop("amenities", None)
        photos = validated_data.pop("photos", None)

        major_change = any(
            field in validated_data and validated_data[field] != getattr(instance, field)
            for field in Property.MAJOR_FIELDS
        )
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if major_change and instance.status == Property.Status.APPROVED:
            instance.status = Property.Status.PENDING_REVIEW
            instance.is_verified = False
        instance.save()

        if amenities is not None:
            instance.amenities.set(amenities)
        if photos is not None:
            self._replace_photos(instance, photos)
        return instance

    def to_representation(self, instance):  # type: ignore
        return PropertySerializer(instance, context=self.context).data


class PropertyRejectSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=1000)

    def validate_reason(self, value: str) -> str:
        if not value.strip():
            raise serializers.ValidationError("A rejection reason is required.")
        return value.strip()
