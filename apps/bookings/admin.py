"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Booking, Traveler


class TravelerInline(admin.TabularInline):
    model = Traveler
    extra = 0


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "booking_code",
        "member",
        "property",
        "journey",
        "status",
        "payment_status",
        "check_in",
        "check_out",
        "total_price",
        "created_at",
    )
    list_filter = ("status", "payment_status", "check_in")
    search_fields = ("booking_code", "property__title", "journey__title", "member__email")
    raw_id_fields = ("member", "property", "journey", "departure", "coupon", "cancelled_by")
    inlines = [TravelerInline]
    readonly_fields = (
        "booking_code",
        "created_at",
        "updated_at",
        "nights",
        "nightly_rate",
        "subtotal",
        "taxes",
        "discount",
        "total_price",
    )
