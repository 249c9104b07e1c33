from django.contrib import admin  # type: ignore

from .models import Wishlist


@admin.register(Wishlist)
class WishlistAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "user", "is_public", "updated_at")
    list_filter = ("is_public",)
    search_fields = ("name", "user__email")
    filter_horizontal = ("properties",)
    readonly_fields = ("share_token", "created_at", "updated_at")
