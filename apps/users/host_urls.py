"""URL routing for host endpoints."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .host_views import (
    HostBookingsView,
    HostDashboardView,
    HostProfileView,
    HostPropertiesView,
    HostRegisterView,
    PublicHostView,
)

urlpatterns = [
    path("register/", HostRegisterView.as_view(), name="host-register"),
    path("profile/", HostProfileView.as_view(), name="host-profile"),
    path("dashboard/", HostDashboardView.as_view(), name="host-dashboard"),
    path("properties/", HostPropertiesView.as_view(), name="host-properties"),
    path("bookings/", HostBookingsView.as_view(), name="host-bookings"),
    path("<int:pk>/", PublicHostView.as_view(), name="host-public"),
]
