"""Role based permission classes shared across the API."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


def is_platform_admin(user) -> bool:  # type: ignore
    if not user or not user.is_authenticated:
        return False
    if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
        return True
    return hasattr(user, "is_platform_admin") and user.is_platform_admin()


class IsPlatformAdmin(permissions.BasePermission):
    """
    Only platform administrators.

    Staff and superusers count as administrators even when their role
    field says otherwise.
    """

    def has_permission(self, request, view) -> bool:  # type: ignore
        return is_platform_admin(request.user)


class IsPlatformAdminOrReadOnly(permissions.BasePermission):
    """Anyone can read, only administrators can write."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return is_platform_admin(request.user)


class IsHostOrAdmin(permissions.BasePermission):
    """Hosts and administrators; used for listing management."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if is_platform_admin(user):
            return True
        return hasattr(user, "is_host") and user.is_host()
