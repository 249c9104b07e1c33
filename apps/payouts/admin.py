from django.contrib import admin  # type: ignore

from .models import Payout


@admin.register(Payout)
class PayoutAdmin(admin.ModelAdmin):
    list_display = ("id", "host", "amount", "currency", "method", "status", "created_at", "processed_at")
    list_filter = ("status", "method")
    search_fields = ("host__email", "reference_id")
    readonly_fields = ("created_at", "updated_at", "processed_at")
