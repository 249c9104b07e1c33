"""Serializers for journeys, departures and itineraries."""

from __future__ import annotations

from django.db import transaction  # type: ignore
from rest_framework import serializers  # type: ignore

from .models import ItineraryDay, Journey, JourneyDeparture


class ItineraryDaySerializer(serializers.ModelSerializer):
    class Meta:
        model = ItineraryDay
        fields = ["id", "day", "title", "description", "activities", "meals", "accommodation", "image_url"]


class JourneyDepartureSerializer(serializers.ModelSerializer):
    price_per_person = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    end_date = serializers.DateField(read_only=True)
    seats_left = serializers.IntegerField(read_only=True)

    class Meta:
        model = JourneyDeparture
        fields = [
            "id",
            "start_date",
            "end_date",
            "seats_total",
            "seats_left",
            "price_override",
            "price_per_person",
            "is_active",
        ]


class JourneyListSerializer(serializers.ModelSerializer):
    class Meta:
        model = Journey
        fields = [
            "id",
            "title",
            "slug",
            "status",
            "region",
            "country",
            "duration_days",
            "duration_nights",
            "difficulty",
            "max_group_size",
            "price",
            "currency",
            "cover_image",
            "highlights",
            "is_featured",
        ]


class JourneyDetailSerializer(serializers.ModelSerializer):
    itinerary = ItineraryDaySerializer(many=True, read_only=True)
    departures = serializers.SerializerMethodField()

    class Meta:
        model = Journey
        fields = [
            "id",
            "title",
            "slug",
            "description",
            "status",
            "region",
            "country",
            "latitude",
            "longitude",
            "duration_days",
            "duration_nights",
            "difficulty",
            "ideal_for",
            "season",
            "max_group_size",
            "price",
            "currency",
            "includes",
            "excludes",
            "highlights",
            "cover_image",
            "images",
            "is_featured",
            "itinerary",
            "departures",
            "created_at",
            "updated_at",
        ]

    def get_departures(self, obj: Journey) -> list[dict]:
        return JourneyDepartureSerializer(obj.upcoming_departures(), many=True).data


class JourneyAdminSerializer(JourneyDetailSerializer):
    """Adds cost and margin for administrators."""

    class Meta(JourneyDetailSerializer.Meta):
        fields = JourneyDetailSerializer.Meta.fields + ["base_price", "margin"]


class DepartureWriteSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    seats_total = serializers.IntegerField(min_value=1)
    price_override = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    is_active = serializers.BooleanField(default=True)


class JourneyWriteSerializer(serializers.ModelSerializer):
    itinerary = ItineraryDaySerializer(many=True, required=False)
    departures = DepartureWriteSerializer(many=True, required=False)

    class Meta:
        model = Journey
        fields = [
            "title",
            "description",
            "status",
            "region",
            "country",
            "latitude",
            "longitude",
            "duration_days",
            "difficulty",
            "ideal_for",
            "season",
            "max_group_size",
            "base_price",
            "price",
            "currency",
            "includes",
            "excludes",
            "highlights",
            "cover_image",
            "images",
            "is_featured",
            "itinerary",
            "departures",
        ]

    def validate_duration_days(self, value: int) -> int:
        if value < 1:
            raise serializers.ValidationError("A journey lasts at least one day.")
        return value

    def validate_itinerary(self, value: list[dict]) -> list[dict]:
        days = [item["day"] for item in value]
        if len(days) != len(set(days)):
            raise serializers.ValidationError("Itinerary day numbers must be unique.")
        return value

    def validate(self, attrs):  # type: ignore
        base_price = attrs.get("base_price", getattr(self.instance, "base_price", None))
        price = attrs.get("price", getattr(self.instance, "price", None))
        if base_price is not None and price is not None and price < base_price:
            raise serializers.ValidationError({"price": "Selling price cannot be lower than the base price."})
        return attrs

    @staticmethod
    def _write_children(journey: Journey, itinerary, departures) -> None:  # type: ignore
        if itinerary is not None:
            journey.itinerary.all().delete()
            for item in itinerary:
                ItineraryDay.objects.create(journey=journey, **item)
        if departures is not None:
            for item in departures:
                JourneyDeparture.objects.update_or_create(
                    journey=journey,
                    start_date=item["start_date"],
                    defaults={
                        "seats_total": item["seats_total"],
                        "price_override": item.get("price_override"),
                        "is_active": item.get("is_active", True),
                    },
                )

    @transaction.atomic
    def create(self, validated_data):  # type: ignore
        itinerary = validated_data.pop("itinerary", None)
        departures = validated_data.pop("departures", None)
        journey = Journey.objects.create(**validated_data)
        self._write_children(journey, itinerary, departures)
        return journey

    @transaction.atomic
    def update(self, instance: Journey, validated_data):  # type: ignore
        itinerary = validated_data.pop("itinerary", None)
        departures = validated_data.pop("departures", None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()
        self._write_children(instance, itinerary, departures)
        return instance

    def to_representation(self, instance):  # type: ignore
        return JourneyAdminSerializer(instance, context=self.context).data
