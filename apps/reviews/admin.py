from django.contrib import admin  # type: ignore

from .models import Review


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("id", "review_type", "author", "property", "host", "rating", "is_reported", "is_visible")
    list_filter = ("review_type", "rating", "is_reported", "is_visible")
    search_fields = ("comment", "author__email", "property__title")
    raw_id_fields = ("author", "booking", "property", "host")
