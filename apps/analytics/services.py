"""Statistics shared by the analytics, host, profile and admin endpoints.

All amounts come from bookings whose payment status is ``paid``; refunded
bookings are excluded from revenue.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any

from django.db.models import Avg, Count, Q, Sum  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.models import Booking
from apps.notifications.models import Notification
from apps.properties.models import Property
from apps.reviews.models import Review

if TYPE_CHECKING:
    from apps.users.models import CustomUser


def _revenue(queryset) -> Decimal:  # type: ignore
    return (
        queryset.filter(payment_status=Booking.PaymentStatus.PAID)
        .aggregate(total=Sum("total_price"))["total"]
        or Decimal("0.00")
    )


def _average(queryset) -> Decimal | None:  # type: ignore
    value = queryset.aggregate(avg=Avg("rating"))["avg"]
    return round(Decimal(str(value)), 1) if value is not None else None


def booking_stats(queryset) -> dict[str, Any]:  # type: ignore
    """Counts per status and payment status, revenue and this month's bookings."""
    by_status = {choice: 0 for choice in Booking.Status.values}
    for row in queryset.order_by().values("status").annotate(count=Count("id")):
        by_status[row["status"]] = row["count"]

    by_payment_status = {choice: 0 for choice in Booking.PaymentStatus.values}
    for row in queryset.order_by().values("payment_status").annotate(count=Count("id")):
        by_payment_status[row["payment_status"]] = row["count"]

    month_start = timezone.localdate().replace(day=1)
    return {
        "total": queryset.count(),
        "by_status": by_status,
        "by_payment_status": by_payment_status,
        "revenue": _revenue(queryset),
        "this_month": queryset.filter(created_at__date__gte=month_start).count(),
    }


def _host_reviews(user: "CustomUser"):  # type: ignore
    return Review.objects.filter(
        Q(property__host=user, review_type=Review.ReviewType.PROPERTY)
        | Q(host=user, review_type=Review.ReviewType.HOST),
        is_visible=True,
    )


def host_dashboard_stats(user: "CustomUser") -> dict[str, Any]:
    properties = Property.objects.filter(host=user)
    bookings = Booking.objects.filter(property__host=user)
    counts = bookings.aggregate(
        total=Count("id"),
        pending=Count("id", filter=Q(status=Booking.Status.PENDING)),
        confirmed=Count("id", filter=Q(status=Booking.Status.CONFIRMED)),
        completed=Count("id", filter=Q(status=Booking.Status.COMPLETED)),
    )
    reviews = _host_reviews(user)
    return {
        "properties": {
            "total": properties.count(),
            "active": properties.filter(status=Property.Status.APPROVED, is_active=True).count(),
        },
        "bookings": counts,
        "total_earnings": _revenue(bookings),
        "average_rating": _average(reviews),
        "total_reviews": reviews.count(),
        "unread_notifications": Notification.objects.filter(user=user, is_read=False).count(),
    }


def member_stats(user: "CustomUser") -> dict[str, Any]:
    bookings = Booking.objects.filter(member=user)
    by_status = {choice: 0 for choice in Booking.Status.values}
    for row in bookings.order_by().values("status").annotate(count=Count("id")):
        by_status[row["status"]] = row["count"]
    return {
        "total_bookings": bookings.count(),
        "bookings_by_status": by_status,
        "total_spent": _revenue(bookings),
        "reviews_written": Review.objects.filter(author=user).count(),
        "wishlists": user.wishlists.count(),
    }


def overview(user: "CustomUser") -> dict[str, Any]:
    """Platform totals for admins, own listings for hosts, own trips for members."""
    from apps.users.api.permissions import is_platform_admin

    if is_platform_admin(user):
        properties = Property.objects.all()
        bookings = Booking.objects.all()
        reviews = Review.objects.filter(is_visible=True)
    elif user.is_host():
        properties = Property.objects.filter(host=user)
        bookings = Booking.objects.filter(property__host=user)
        reviews = _host_reviews(user)
    else:
        properties = Property.objects.none()
        bookings = Booking.objects.filter(member=user)
        reviews = Review.objects.filter(author=user)

    return {
        "properties": properties.count(),
        "bookings": bookings.count(),
        "revenue": _revenue(bookings),
        "avg_rating": _average(reviews),
    }
