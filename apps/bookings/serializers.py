"""Serializers for the booking domain."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from rest_framework import serializers  # type: ignore

from apps.journeys.models import Journey, JourneyDeparture
from apps.properties.models import Property
from apps.users.serializers import UserShortSerializer
from .models import Booking, Traveler
from .services import (
    MAX_TRAVELERS,
    BookingConflictError,
    BookingRuleError,
    create_homestay_booking,
    create_journey_booking,
)


def _rule_error(exc: Exception) -> serializers.ValidationError:
    return serializers.ValidationError({"non_field_errors": [str(exc)]})


class TravelerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Traveler
        fields = [
            "id",
            "name",
            "age",
            "gender",
            "email",
            "phone",
            "emergency_contact_name",
            "emergency_contact_phone",
        ]

    def validate_name(self, value: str) -> str:
        if not value.strip():
            raise serializers.ValidationError("Traveler name is required.")
        return value.strip()


class BookingSerializer(serializers.ModelSerializer):
    """Detailed booking representation."""

    member = UserShortSerializer(read_only=True)
    property_id = serializers.ReadOnlyField(source="property.id")
    property_title = serializers.ReadOnlyField(source="property.title")
    journey_id = serializers.ReadOnlyField(source="journey.id")
    journey_title = serializers.ReadOnlyField(source="journey.title")
    travelers = TravelerSerializer(many=True, read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "booking_code",
            "reference",
            "kind",
            "member",
            "property_id",
            "property_title",
            "journey_id",
            "journey_title",
            "departure",
            "check_in",
            "check_out",
            "nights",
            "guests",
            "number_of_travelers",
            "room_preference",
            "add_ons",
            "special_requests",
            "travelers",
            "nightly_rate",
            "cleaning_fee",
            "subtotal",
            "taxes",
            "discount",
            "total_price",
            "currency",
            "coupon_code",
            "status",
            "payment_status",
            "cancellation_reason",
            "cancelled_at",
            "expires_at",
            "paid_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class AddOnsField(serializers.ListField):
    child = serializers.CharField(max_length=50)

    def to_internal_value(self, data):  # type: ignore
        codes = super().to_internal_value(data)
        unknown = [code for code in codes if code not in settings.JOURNEY_ADDON_PRICES]
        if unknown:
            raise serializers.ValidationError(f"Unknown add-ons: {', '.join(unknown)}.")
        return list(dict.fromkeys(codes))


class BookingCreateSerializer(serializers.Serializer):
    """Booking request for either a homestay stay or a journey departure."""

    property = serializers.PrimaryKeyRelatedField(queryset=Property.objects.all(), required=False)
    journey = serializers.PrimaryKeyRelatedField(queryset=Journey.objects.all(), required=False)
    departure = serializers.PrimaryKeyRelatedField(
        queryset=JourneyDeparture.objects.select_related("journey"),
        required=False,
    )
    check_in = serializers.DateField(required=False)
    check_out = serializers.DateField(required=False)
    guests = serializers.IntegerField(min_value=1, required=False)
    number_of_travelers = serializers.IntegerField(min_value=1, max_value=MAX_TRAVELERS, required=False)
    travelers = TravelerSerializer(many=True, required=False)
    add_ons = AddOnsField(required=False, default=list)
    room_preference = serializers.ChoiceField(
        choices=Booking.RoomPreference.choices,
        required=False,
        allow_blank=True,
        default="",
    )
    coupon_code = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    special_requests = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):  # type: ignore
        property_obj = attrs.get("property")
        journey = attrs.get("journey")
        if bool(property_obj) == bool(journey):
            raise serializers.ValidationError("Choose either a homestay or a journey to book.")

        if property_obj:
            if not attrs.get("check_in") or not attrs.get("check_out"):
                raise serializers.ValidationError({"check_in": "Check-in and check-out dates are required."})
            if attrs["check_out"] <= attrs["check_in"]:
                raise serializers.ValidationError({"check_out": "Check-out date must be after check-in date."})
            attrs.setdefault("guests", 1)
            if attrs["guests"] > property_obj.max_guests:
                raise serializers.ValidationError(
                    {"guests": f"This homestay accommodates at most {property_obj.max_guests} guests."}
                )
            return attrs

        departure = attrs.get("departure")
        if departure is None:
            raise serializers.ValidationError({"departure": "A departure date is required."})
        if departure.journey_id != journey.id:
            raise serializers.ValidationError({"departure": "Departure does not belong to the selected journey."})

        travelers = attrs.get("travelers") or []
        count = attrs.get("number_of_travelers", len(travelers))
        if count < 1 or count > MAX_TRAVELERS:
            raise serializers.ValidationError(
                {"number_of_travelers": f"Number of travelers must be between 1 and {MAX_TRAVELERS}."}
            )
        if len(travelers) != count:
            raise serializers.ValidationError(
                {"travelers": f"Provide details for all {count} travelers."}
            )
        attrs["number_of_travelers"] = count
        return attrs

    def create(self, validated_data):  # type: ignore
        member = self.context["request"].user
        try:
            if validated_data.get("property"):
                return create_homestay_booking(
                    member,
                    validated_data["property"],
                    validated_data["check_in"],
                    validated_data["check_out"],
                    validated_data["guests"],
                    special_requests=validated_data["special_requests"],
                )
            return create_journey_booking(
                member,
                validated_data["journey"],
                validated_data["departure"],
                validated_data["travelers"],
                add_ons=validated_data["add_ons"],
                room_preference=validated_data["room_preference"],
                coupon_code=validated_data["coupon_code"],
                special_requests=validated_data["special_requests"],
            )
        except (BookingConflictError, BookingRuleError) as exc:
            raise _rule_error(exc)


class BookingCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[
            Booking.Status.CONFIRMED,
            Booking.Status.IN_PROGRESS,
            Booking.Status.COMPLETED,
            Booking.Status.CANCELLED,
        ]
    )
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")


class PriceCalculationSerializer(serializers.Serializer):
    property = serializers.PrimaryKeyRelatedField(
        queryset=Property.objects.filter(status=Property.Status.APPROVED, is_active=True),
        required=False,
    )
    check_in = serializers.DateField(required=False)
    check_out = serializers.DateField(required=False)
    guests = serializers.IntegerField(min_value=1, required=False, default=1)
    journey = serializers.PrimaryKeyRelatedField(
        queryset=Journey.objects.filter(status=Journey.Status.PUBLISHED),
        required=False,
    )
    departure = serializers.PrimaryKeyRelatedField(
        queryset=JourneyDeparture.objects.select_related("journey"),
        required=False,
        allow_null=True,
    )
    travelers = serializers.IntegerField(min_value=1, max_value=MAX_TRAVELERS, required=False, default=1)
    add_ons = AddOnsField(required=False, default=list)
    coupon_code = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")

    def validate(self, attrs):  # type: ignore
        if bool(attrs.get("property")) == bool(attrs.get("journey")):
            raise serializers.ValidationError("Provide either a property or a journey.")
        if attrs.get("property") and (not attrs.get("check_in") or not attrs.get("check_out")):
            raise serializers.ValidationError({"check_in": "Check-in and check-out dates are required."})
        departure = attrs.get("departure")
        if attrs.get("journey") and departure is not None and departure.journey_id != attrs["journey"].id:
            raise serializers.ValidationError({"departure": "Departure does not belong to the selected journey."})
        return attrs
