from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import ItineraryDay, Journey, JourneyDeparture


class ItineraryDayInline(admin.TabularInline):
    model = ItineraryDay
    extra = 0
    fields = ("day", "title", "accommodation")


class JourneyDepartureInline(admin.TabularInline):
    model = JourneyDeparture
    extra = 0
    fields = ("start_date", "seats_total", "price_override", "is_active")


@admin.register(Journey)
class JourneyAdmin(admin.ModelAdmin):
    list_display = ("title", "region", "status", "duration_days", "base_price", "price", "margin", "is_featured")
    list_filter = ("status", "difficulty", "is_featured")
    search_fields = ("title", "region")
    readonly_fields = ("duration_nights", "margin", "created_at", "updated_at")
    inlines = (ItineraryDayInline, JourneyDepartureInline)
