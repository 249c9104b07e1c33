"""Admin registrations for the users domain."""

from __future__ import annotations

from django.contrib import admin  # type: ignore
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from .models import CustomUser, HostProfile, PasswordResetToken


class HostProfileInline(admin.StackedInline):
    model = HostProfile
    can_delete = False
    extra = 0


@admin.register(CustomUser)
class CustomUserAdmin(BaseUserAdmin):
    inlines = [HostProfileInline]
    fieldsets = (
        (None, {"fields": ("email", "password")}),
        (
            _("Personal info"),
            {
                "fields": (
                    "username",
                    "first_name",
                    "last_name",
                    "phone",
                    "phone_country",
                    "avatar",
                    "bio",
                    "date_of_birth",
                    "city",
                    "interests",
                    "subscribe_to_newsletter",
                )
            },
        ),
        (_("Verification"), {"fields": ("is_email_verified",)}),
        (_("Role"), {"fields": ("role",)}),
        (_("Security"), {"fields": ("failed_login_attempts", "locked_until")}),
        (
            _("Permissions"),
            {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")},
        ),
        (_("Important dates"), {"fields": ("last_login", "date_joined", "created_at", "updated_at")}),
    )
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": (
                    "email",
                    "password1",
                    "password2",
                    "first_name",
                    "last_name",
                    "phone",
                    "role",
                    "is_staff",
                    "is_superuser",
                ),
            },
        ),
    )
    list_display = (
        "email",
        "role",
        "phone",
        "is_active",
        "is_staff",
        "is_email_verified",
        "is_locked",
    )
    list_filter = ("role", "is_active", "is_staff", "is_email_verified")
    search_fields = ("email", "phone", "first_name", "last_name")
    ordering = ("email",)
    readonly_fields = ("created_at", "updated_at", "date_joined")


@admin.register(PasswordResetToken)
class PasswordResetTokenAdmin(admin.ModelAdmin):
    list_display = ("user", "expires_at", "attempts_left", "is_used", "created_at")
    list_filter = ("is_used", "expires_at")
    search_fields = ("user__email", "user__phone")


@admin.register(HostProfile)
class HostProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "payout_method", "is_verified", "is_superhost", "response_rate")
    list_filter = ("is_verified", "is_superhost", "payout_method")
    search_fields = ("user__email", "user__first_name", "user__last_name")
    readonly_fields = ("created_at", "updated_at")
    actions = ["mark_verified"]

    @admin.action(description=_("Mark selected hosts as verified"))
    def mark_verified(self, request, queryset):  # type: ignore
        updated = queryset.update(is_verified=True)
        self.message_user(request, _("%d host(s) verified.") % updated)
