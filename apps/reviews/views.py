"""API views for managing reviews."""

from __future__ import annotations

import logging

from django.db import transaction  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.notifications.models import Notification
from apps.notifications.services import create_in_app_notification
from .models import Review
from .serializers import (
    ReviewCreateSerializer,
    ReviewReplySerializer,
    ReviewReportSerializer,
    ReviewSerializer,
)
from .services import rating_summary, recalculate_property_rating

logger = logging.getLogger(__name__)


class ReviewViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Public reviews, writing after a completed stay, host replies and reports."""

    queryset = Review.objects.select_related("author", "property", "host", "booking")
    permission_classes = [permissions.IsAuthenticatedOrReadOnly]

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return ReviewCreateSerializer
        if self.action == "reply":
            return ReviewReplySerializer
        if self.action == "report":
            return ReviewReportSerializer
        return ReviewSerializer

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if self.action == "mine":
            return qs.filter(author=self.request.user)
        return qs.filter(is_visible=True)

    def perform_create(self, serializer):  # type: ignore
        with transaction.atomic():
            review = serializer.save(author=self.request.user)
            if review.property_id:
                recalculate_property_rating(review.property)

        host = review.host if review.host_id else review.property.host
        target = review.property.title if review.property_id else "you as a host"
        create_in_app_notification(
            host,
            "New review",
            f"{review.author.display_name} rated {target} {review.rating}/5.",
            type=Notification.Type.REVIEW,
            data={"review_id": review.id},
        )
        logger.info(f"Review {review.id} ({review.review_type}) created by {self.request.user.email}")

    def _paginated_with_summary(self, queryset):  # type: ignore
        summary = rating_summary(queryset)
        page = self.paginate_queryset(queryset)
        serializer = ReviewSerializer(page, many=True, context=self.get_serializer_context())
        response = self.get_paginated_response(serializer.data)
        response.data["summary"] = summary
        return response

    @action(detail=False, methods=["get"], url_path=r"property/(?P<property_id>\d+)")
    def by_property(self, request, property_id=None):  # type: ignore
        queryset = self.get_queryset().filter(
            property_id=property_id,
            review_type=Review.ReviewType.PROPERTY,
        )
        return self._paginated_with_summary(queryset)

    @action(detail=False, methods=["get"], url_path=r"host/(?P<host_id>\d+)")
    def by_host(self, request, host_id=None):  # type: ignore
        queryset = self.get_queryset().filter(host_id=host_id, review_type=Review.ReviewType.HOST)
        return self._paginated_with_summary(queryset)

    @action(detail=False, methods=["get"], permission_classes=[permissions.IsAuthenticated])
    def mine(self, request):  # type: ignore
        page = self.paginate_queryset(self.get_queryset())
        serializer = ReviewSerializer(page, many=True, context=self.get_serializer_context())
        return self.get_paginated_response(serializer.data)

    @action(detail=True, methods=["post"], permission_classes=[permissions.IsAuthenticated])
    def reply(self, request, pk=None):  # type: ignore
        review: Review = self.get_object()
        if review.reviewed_host_id != request.user.id:
            return Response(
                {"detail": "Only the reviewed host can reply to this review."},
                status=status.HTTP_403_FORBIDDEN,
            )
        if review.host_reply:
            return Response(
                {"detail": "This review already has a reply."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        review.set_reply(serializer.validated_data["reply"])

        create_in_app_notification(
            review.author,
            "The host replied to your review",
            review.host_reply,
            type=Notification.Type.REVIEW,
            data={"review_id": review.id},
        )
        return Response(ReviewSerializer(review, context=self.get_serializer_context()).data)

    @action(detail=True, methods=["post"], permission_classes=[permissions.IsAuthenticated])
    def report(self, request, pk=None):  # type: ignore
        review: Review = self.get_object()
        if review.author_id == request.user.id:
            return Response(
                {"detail": "You cannot report your own review."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        review.report(serializer.validated_data["reason"])
        logger.info(f"Review {review.id} reported by {request.user.email}")
        return Response({"detail": "Review reported.", "is_reported": True})
