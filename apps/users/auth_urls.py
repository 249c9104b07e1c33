"""Authentication routes, mounted under /api/v1/auth/ with namespace ``auth``."""

from __future__ import annotations

from django.urls import path  # type: ignore
from rest_framework_simplejwt.views import TokenRefreshView, TokenVerifyView  # type: ignore

from . import auth_views
from .profile_views import PreferencesView

app_name = "auth"

urlpatterns = [
    path("register/", auth_views.RegisterView.as_view(), name="register"),
    path("login/", auth_views.LoginView.as_view(), name="login"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("token/verify/", TokenVerifyView.as_view(), name="token_verify"),
    path(
        "password-reset/request/",
        auth_views.PasswordResetRequestView.as_view(),
        name="password-reset-request",
    ),
    path(
        "password-reset/confirm/",
        auth_views.PasswordResetConfirmView.as_view(),
        name="password-reset-confirm",
    ),
    path("preferences/", PreferencesView.as_view(), name="preferences"),
]
