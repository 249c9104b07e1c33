"""API views for platform administration.

Endpoints (all under /api/v1/admin/, administrators only):
- users/ - list, PATCH {id}/status/, PATCH {id}/role/
- properties/ - list, POST {id}/approve/, POST {id}/reject/, DELETE {id}/
- bookings/ - list, GET stats/
- reviews/ - GET reported/, POST {id}/remove/, POST {id}/dismiss/
- payouts/ - list, POST {id}/approve/, POST {id}/reject/
- contact/ - list, PATCH {id}/status/
"""

from __future__ import annotations

import logging

from django.db.models import Q  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.analytics.services import booking_stats
from apps.bookings.models import Booking
from apps.contact.models import ContactMessage
from apps.contact.serializers import ContactMessageSerializer, ContactStatusSerializer
from apps.notifications.models import Notification
from apps.notifications.services import notify_user
from apps.payouts.models import Payout
from apps.payouts.serializers import PayoutApproveSerializer, PayoutRejectSerializer, PayoutSerializer
from apps.payouts.services import PayoutError, approve_payout, reject_payout
from apps.properties.models import Property
from apps.properties.serializers import PropertyRejectSerializer
from apps.reviews.models import Review
from apps.reviews.services import hide_review
from apps.users.models import CustomUser
from .permissions import IsPlatformAdmin
from .serializers import (
    AdminBookingSerializer,
    AdminPropertySerializer,
    AdminReviewSerializer,
    AdminUserSerializer,
    UserRoleSerializer,
    UserStatusSerializer,
)

logger = logging.getLogger(__name__)


class AdminViewSetMixin:
    permission_classes = [permissions.IsAuthenticated, IsPlatformAdmin]

    def filter_by_status(self, queryset, field: str = "status"):  # type: ignore
        value = self.request.query_params.get("status")  # type: ignore
        if value:
            queryset = queryset.filter(**{field: value})
        return queryset


class AdminUserViewSet(AdminViewSetMixin, mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """Accounts of every role."""

    serializer_class = AdminUserSerializer

    def get_queryset(self):  # type: ignore
        qs = CustomUser.objects.all()
        params = self.request.query_params
        role = params.get("role")
        if role:
            qs = qs.filter(role=role)
        account_status = params.get("status")
        if account_status in ("active", "inactive"):
            qs = qs.filter(is_active=account_status == "active")
        search = params.get("search")
        if search:
            qs = qs.filter(
                Q(email__icontains=search)
                | Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
                | Q(phone__icontains=search)
            )
        return qs

    @action(detail=True, methods=["patch", "post"], url_path="status")
    def set_status(self, request, pk=None):  # type: ignore
        user = self.get_object()
        serializer = UserStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        is_active = serializer.validated_data["is_active"]
        if user.pk == request.user.pk and not is_active:
            return Response(
                {"detail": "You cannot deactivate your own account."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        user.is_active = is_active
        user.save(update_fields=["is_active", "updated_at"])
        logger.info(f"User {user.email} {'activated' if is_active else 'deactivated'} by {request.user.email}")
        return Response(AdminUserSerializer(user).data)

    @action(detail=True, methods=["patch", "post"], url_path="role")
    def set_role(self, request, pk=None):  # type: ignore
        user = self.get_object()
        serializer = UserRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user.role = serializer.validated_data["role"]
        user.save(update_fields=["role", "updated_at"])
        logger.info(f"User {user.email} role changed to {user.role} by {request.user.email}")
        return Response(AdminUserSerializer(user).data)


class AdminPropertyViewSet(
    AdminViewSetMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Listing moderation."""

    serializer_class = AdminPropertySerializer

    def get_queryset(self):  # type: ignore
        qs = self.filter_by_status(Property.objects.select_related("host").prefetch_related("photos"))
        search = self.request.query_params.get("search")
        if search:
            qs = qs.filter(
                Q(title__icontains=search) | Q(city__icontains=search) | Q(host__email__icontains=search)
            )
        return qs

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):  # type: ignore
        property_obj: Property = self.get_object()
        property_obj.approve()
        notify_user(
            property_obj.host,
            "Your homestay is live",
            f"{property_obj.title} has been approved and is now visible to travellers.",
            type=Notification.Type.PROPERTY,
            data={"property_id": property_obj.id},
        )
        logger.info(f"Property {property_obj.id} approved by {request.user.email}")
        return Response(AdminPropertySerializer(property_obj).data)

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):  # type: ignore
        property_obj: Property = self.get_object()
        serializer = PropertyRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        reason = serializer.validated_data["reason"]
        property_obj.reject(reason)
        notify_user(
            property_obj.host,
            "Your homestay needs changes",
            f"{property_obj.title} was not approved: {reason}",
            type=Notification.Type.PROPERTY,
            data={"property_id": property_obj.id},
        )
        logger.info(f"Property {property_obj.id} rejected by {request.user.email}")
        return Response(AdminPropertySerializer(property_obj).data)

    def perform_destroy(self, instance: Property) -> None:  # type: ignore
        logger.warning(f"Property {instance.id} deleted by {self.request.user.email}")
        instance.delete()


class AdminBookingViewSet(AdminViewSetMixin, mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    serializer_class = AdminBookingSerializer

    def get_queryset(self):  # type: ignore
        qs = Booking.objects.select_related("member", "property", "journey", "departure").prefetch_related(
            "travelers"
        )
        qs = self.filter_by_status(qs)
        payment_status = self.request.query_params.get("payment_status")
        if payment_status:
            qs = qs.filter(payment_status=payment_status)
        return qs

    @action(detail=False, methods=["get"])
    def stats(self, request):  # type: ignore
        return Response(booking_stats(Booking.objects.all()))


class AdminReviewViewSet(AdminViewSetMixin, mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    serializer_class = AdminReviewSerializer
    queryset = Review.objects.select_related("author", "property", "host", "booking")

    @action(detail=False, methods=["get"])
    def reported(self, request):  # type: ignore
        queryset = self.get_queryset().filter(is_reported=True, is_visible=True).order_by("-reported_at")
        page = self.paginate_queryset(queryset)
        return self.get_paginated_response(self.get_serializer(page, many=True).data)

    @action(detail=True, methods=["post"])
    def remove(self, request, pk=None):  # type: ignore
        review = hide_review(self.get_object())
        return Response(self.get_serializer(review).data)

    @action(detail=True, methods=["post"])
    def dismiss(self, request, pk=None):  # type: ignore
        review: Review = self.get_object()
        review.dismiss_report()
        logger.info(f"Report on review {review.id} dismissed by {request.user.email}")
        return Response(self.get_serializer(review).data)


class AdminPayoutViewSet(AdminViewSetMixin, mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    serializer_class = PayoutSerializer

    def get_queryset(self):  # type: ignore
        return self.filter_by_status(Payout.objects.select_related("host"))

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):  # type: ignore
        payout: Payout = self.get_object()
        serializer = PayoutApproveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            approve_payout(payout, serializer.validated_data["reference_id"])
        except PayoutError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        notify_user(
            payout.host,
            "Payout sent",
            f"Your payout of {payout.amount} {payout.currency} was sent (reference {payout.reference_id}).",
            type=Notification.Type.PAYMENT,
            data={"payout_id": payout.id},
        )
        return Response(PayoutSerializer(payout).data)

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):  # type: ignore
        payout: Payout = self.get_object()
        serializer = PayoutRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            reject_payout(payout, serializer.validated_data["reason"])
        except PayoutError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        notify_user(
            payout.host,
            "Payout rejected",
            f"Your payout of {payout.amount} {payout.currency} was rejected: {payout.failure_reason}",
            type=Notification.Type.PAYMENT,
            data={"payout_id": payout.id},
        )
        return Response(PayoutSerializer(payout).data)


class AdminContactViewSet(AdminViewSetMixin, mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    serializer_class = ContactMessageSerializer

    def get_queryset(self):  # type: ignore
        return self.filter_by_status(ContactMessage.objects.all())

    @action(detail=True, methods=["patch", "post"], url_path="status")
    def set_status(self, request, pk=None):  # type: ignore
        message: ContactMessage = self.get_object()
        serializer = ContactStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        message.status = serializer.validated_data["status"]
        message.save(update_fields=["status"])
        return Response(ContactMessageSerializer(message).data)
