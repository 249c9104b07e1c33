"""Views for authentication flows (register, login, password reset).

Token refresh and verification are served by simplejwt's own views.
"""

from __future__ import annotations

import logging

from rest_framework import generics, status  # type: ignore
from rest_framework.permissions import AllowAny  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework_simplejwt.tokens import RefreshToken  # type: ignore

from .auth_serializers import (
    LoginSerializer,
    PasswordResetConfirmSerializer,
    PasswordResetRequestSerializer,
    RegisterSerializer,
)
from .serializers import UserSerializer

logger = logging.getLogger(__name__)


class PublicAuthView(generics.GenericAPIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def session_payload(self, user) -> dict:  # type: ignore
        refresh = RefreshToken.for_user(user)
        return {
            "user": UserSerializer(user).data,
            "tokens": {"refresh": str(refresh), "access": str(refresh.access_token)},
        }


class RegisterView(PublicAuthView):
    serializer_class = RegisterSerializer

    def post(self, request):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response(self.session_payload(user), status=status.HTTP_201_CREATED)


class LoginView(PublicAuthView):
    serializer_class = LoginSerializer

    def post(self, request):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]
        logger.info(f"User {user.email} logged in")
        return Response(self.session_payload(user))


class PasswordResetRequestView(PublicAuthView):
    """Always answers 202 once the identifier resolves; the code goes by e-mail."""

    serializer_class = PasswordResetRequestSerializer

    def post(self, request):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(
            {"detail": "A reset code has been sent to your e-mail."},
            status=status.HTTP_202_ACCEPTED,
        )


class PasswordResetConfirmView(PublicAuthView):
    serializer_class = PasswordResetConfirmSerializer

    def post(self, request):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({"detail": "Your password has been updated. Please log in."})
