"""API views for wishlists.

Endpoints:
- GET/POST /api/v1/wishlists/ - my wishlists
- GET/PATCH/DELETE /api/v1/wishlists/{id}/
- POST /api/v1/wishlists/{id}/add-property/
- POST /api/v1/wishlists/{id}/remove-property/
- GET /api/v1/wishlists/check/{property_id}/
- GET /api/v1/wishlists/shared/{token}/ - public, no auth
"""

from __future__ import annotations

import logging

from django.shortcuts import get_object_or_404  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from .models import Wishlist
from .serializers import WishlistPropertySerializer, WishlistSerializer
from . import services

logger = logging.getLogger(__name__)


class WishlistViewSet(viewsets.ModelViewSet):
    """Members manage their own wishlists."""

    serializer_class = WishlistSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):  # type: ignore
        return (
            Wishlist.objects.filter(user=self.request.user)
            .select_related("user")
            .prefetch_related("properties__photos", "properties__host")
        )

    def get_serializer_class(self):  # type: ignore
        if self.action in ("add_property", "remove_property"):
            return WishlistPropertySerializer
        return WishlistSerializer

    def perform_create(self, serializer):  # type: ignore
        wishlist = serializer.save(user=self.request.user)
        logger.info(f"Wishlist {wishlist.id} created by {self.request.user.email}")

    def perform_destroy(self, instance: Wishlist) -> None:  # type: ignore
        services.delete_wishlist(instance)

    def _change(self, request, handler):  # type: ignore
        wishlist = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        changed = handler(wishlist, serializer.validated_data["property"])
        wishlist = self.get_queryset().get(pk=wishlist.pk)
        return Response(
            {
                "changed": changed,
                "wishlist": WishlistSerializer(wishlist, context=self.get_serializer_context()).data,
            },
            status=status.HTTP_200_OK,
        )

    @action(detail=True, methods=["post"], url_path="add-property")
    def add_property(self, request, pk=None):  # type: ignore
        return self._change(request, services.add_property)

    @action(detail=True, methods=["post"], url_path="remove-property")
    def remove_property(self, request, pk=None):  # type: ignore
        return self._change(request, services.remove_property)

    @action(detail=False, methods=["get"], url_path=r"check/(?P<property_id>\d+)")
    def check(self, request, property_id=None):  # type: ignore
        wishlist_ids = list(
            Wishlist.objects.filter(user=request.user, properties__id=property_id)
            .order_by("id")
            .values_list("id", flat=True)
        )
        return Response({"in_wishlist": bool(wishlist_ids), "wishlist_ids": wishlist_ids})

    @action(
        detail=False,
        methods=["get"],
        url_path=r"shared/(?P<token>[\w-]+)",
        permission_classes=[permissions.AllowAny],
    )
    def shared(self, request, token=None):  # type: ignore
        wishlist = get_object_or_404(
            Wishlist.objects.prefetch_related("properties__photos", "properties__host"),
            share_token=token,
            is_public=True,
        )
        return Response(WishlistSerializer(wishlist, context=self.get_serializer_context()).data)
