"""URL routing for the current user's profile."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .profile_views import (
    ChangePasswordView,
    PreferencesView,
    ProfileBookingsView,
    ProfilePropertiesView,
    ProfileReviewsView,
    ProfileStatsView,
    ProfileView,
    ReviewsReceivedView,
    UpdateEmailView,
)

urlpatterns = [
    path("", ProfileView.as_view(), name="profile"),
    path("preferences/", PreferencesView.as_view(), name="profile-preferences"),
    path("change-password/", ChangePasswordView.as_view(), name="profile-change-password"),
    path("update-email/", UpdateEmailView.as_view(), name="profile-update-email"),
    path("bookings/", ProfileBookingsView.as_view(), name="profile-bookings"),
    path("properties/", ProfilePropertiesView.as_view(), name="profile-properties"),
    path("reviews/", ProfileReviewsView.as_view(), name="profile-reviews"),
    path("reviews-received/", ReviewsReceivedView.as_view(), name="profile-reviews-received"),
    path("stats/", ProfileStatsView.as_view(), name="profile-stats"),
]
