"""Admin registrations for the homestay domain."""

from __future__ import annotations

from django.contrib import admin  # type: ignore
from mptt.admin import MPTTModelAdmin  # type: ignore

from .models import Amenity, Location, Property, PropertyAvailability, PropertyPhoto


@admin.register(Amenity)
class AmenityAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "icon")
    list_filter = ("category",)
    search_fields = ("name",)


class PropertyPhotoInline(admin.TabularInline):
    model = PropertyPhoto
    extra = 0
    fields = ("url", "caption", "order", "is_primary")


class PropertyAvailabilityInline(admin.TabularInline):
    model = PropertyAvailability
    extra = 0
    fields = ("start_date", "end_date", "status", "reason", "source", "booking")
    raw_id_fields = ("booking",)


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "city",
        "state",
        "property_type",
        "status",
        "base_price",
        "max_guests",
        "host",
        "average_rating",
    )
    list_filter = ("status", "property_type", "instant_book", "is_verified", "state")
    search_fields = ("title", "city", "state", "host__email")
    raw_id_fields = ("host", "location")
    inlines = (PropertyPhotoInline, PropertyAvailabilityInline)
    filter_horizontal = ("amenities",)
    readonly_fields = ("slug", "average_rating", "review_count", "favorite_count", "created_at", "updated_at")


@admin.register(PropertyAvailability)
class PropertyAvailabilityAdmin(admin.ModelAdmin):
    list_display = ("property", "start_date", "end_date", "status", "source")
    list_filter = ("status", "source")
    search_fields = ("property__title",)


@admin.register(Location)
class LocationAdmin(MPTTModelAdmin):
    list_display = ("name", "kind", "parent", "is_active")
    list_filter = ("kind", "is_active")
    search_fields = ("name", "slug")
    prepopulated_fields = {"slug": ("name",)}
    mptt_level_indent = 20
