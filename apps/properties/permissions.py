from __future__ import annotations

from rest_framework import permissions  # type: ignore

from apps.users.api.permissions import is_platform_admin
from .models import Property


class IsPropertyOwnerOrAdmin(permissions.BasePermission):
    """Allows managing a listing to its host and to platform administrators."""

    def has_permission(self, request, view):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        user = request.user
        if not user.is_authenticated:
            return False
        if is_platform_admin(user):
            return True
        if getattr(view, "action", None) == "create":
            return user.is_host()
        return True

    def has_object_permission(self, request, view, obj: Property):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        user = request.user
        if not user.is_authenticated:
            return False
        if is_platform_admin(user):
            return True
        return obj.host_id == user.id
