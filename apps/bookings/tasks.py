"""Celery tasks for bookings.

The sweeps run from the beat schedule in ``config/celery.py``; the
``notify_*`` tasks are queued by the booking services and views once a
transaction commits.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Callable

from celery import shared_task  # type: ignore
from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from .models import Booking
from .services import release_dates_for_booking

logger = logging.getLogger(__name__)

BOOKING_RELATED = ("member", "property", "property__host", "journey", "departure")


def _sweep(queryset, handle: Callable[[Booking], None], label: str) -> int:  # type: ignore
    """Apply ``handle`` to each booking; one failure does not stop the rest."""
    done = 0
    for booking in queryset:
        try:
            handle(booking)
        except Exception as e:
            logger.error(f"Could not {label} booking {booking.id}: {e}", exc_info=True)
            continue
        done += 1
    if done:
        logger.info(f"{label}: {done} booking(s)")
    return done


def _load(booking_id: int, purpose: str) -> Booking | None:
    try:
        return Booking.objects.select_related(*BOOKING_RELATED).get(id=booking_id)
    except Booking.DoesNotExist:
        logger.error(f"Booking {booking_id} not found ({purpose} notification)")
        return None


def _set_status(booking: Booking, status: str) -> None:
    booking.status = status
    booking.save(update_fields=["status", "updated_at"])


@shared_task(name="bookings.expire_pending_bookings")
def expire_pending_bookings() -> dict[str, int]:
    """Expire unpaid pending bookings whose hold ran out and free their dates."""
    now = timezone.now()

    def expire(booking: Booking) -> None:
        with transaction.atomic():
            booking.status = Booking.Status.EXPIRED
            booking.payment_status = Booking.PaymentStatus.FAILED
            booking.cancellation_reason = "Payment window expired."
            booking.cancelled_at = now
            booking.save(
                update_fields=["status", "payment_status", "cancellation_reason", "cancelled_at", "updated_at"]
            )
            release_dates_for_booking(booking)
            transaction.on_commit(lambda booking_id=booking.id: notify_booking_expired.delay(booking_id))
        logger.info(f"Booking {booking.reference} of {booking.member.email} expired")

    stale = (
        Booking.objects.filter(status=Booking.Status.PENDING, expires_at__lte=now)
        .exclude(payment_status=Booking.PaymentStatus.PAID)
        .select_related(*BOOKING_RELATED)
    )
    return {"expired": _sweep(stale, expire, "expire")}


@shared_task(name="bookings.update_in_progress_bookings")
def update_in_progress_bookings() -> dict[str, int]:
    """Confirmed stays that have begun become in_progress."""
    today = timezone.localdate()
    started = Booking.objects.filter(
        status=Booking.Status.CONFIRMED,
        check_in__lte=today,
        check_out__gt=today,
    )
    count = _sweep(started, lambda booking: _set_status(booking, Booking.Status.IN_PROGRESS), "start")
    return {"updated": count}


@shared_task(name="bookings.complete_finished_bookings")
def complete_finished_bookings() -> dict[str, int]:
    today = timezone.localdate()

    def complete(booking: Booking) -> None:
        _set_status(booking, Booking.Status.COMPLETED)
        notify_booking_status_changed.delay(booking.id)

    finished = Booking.objects.filter(
        status__in=(Booking.Status.CONFIRMED, Booking.Status.IN_PROGRESS),
        check_out__lte=today,
    )
    return {"completed": _sweep(finished, complete, "complete")}


@shared_task(name="bookings.send_upcoming_booking_reminders")
def send_upcoming_booking_reminders() -> dict[str, int]:
    """Remind members whose confirmed booking starts tomorrow, once."""

    def remind(booking: Booking) -> None:
        notify_booking_reminder.delay(booking.id)
        booking.reminder_sent_at = timezone.now()
        booking.save(update_fields=["reminder_sent_at", "updated_at"])

    tomorrow = timezone.localdate() + timedelta(days=1)
    due = Booking.objects.filter(
        status=Booking.Status.CONFIRMED,
        check_in=tomorrow,
        reminder_sent_at__isnull=True,
    )
    return {"sent": _sweep(due, remind, "remind")}


@shared_task(name="bookings.notify_booking_created")
def notify_booking_created(booking_id: int) -> bool:
    """Tell the member, and the host for homestays, about a new booking."""
    booking = _load(booking_id, "creation")
    if booking is None:
        return False

    from apps.notifications.models import Notification
    from apps.notifications.services import (
        create_in_app_notification,
        send_booking_created_email,
        send_new_booking_to_host_email,
    )

    data = {"booking_id": booking.id, "reference": booking.reference}
    send_booking_created_email(booking)
    create_in_app_notification(
        booking.member,
        f"Booking {booking.reference} {booking.get_status_display().lower()}",
        f"Your booking for {booking.listing_title} from {booking.check_in:%d %b %Y} was received.",
        type=Notification.Type.BOOKING,
        data=data,
    )

    if booking.property_id:
        send_new_booking_to_host_email(booking)
        create_in_app_notification(
            booking.property.host,
            f"New booking {booking.reference}",
            f"{booking.member.display_name} booked {booking.property.title} "
            f"from {booking.check_in:%d %b %Y} to {booking.check_out:%d %b %Y}.",
            type=Notification.Type.BOOKING,
            data=data,
        )

    logger.info(f"Creation notices sent for booking {booking.reference}")
    return True


@shared_task(name="bookings.notify_booking_cancelled")
def notify_booking_cancelled(booking_id: int) -> bool:
    """Tell the other party (member or host) that a booking was cancelled."""
    booking = _load(booking_id, "cancellation")
    if booking is None:
        return False

    from apps.notifications.models import Notification
    from apps.notifications.services import create_in_app_notification, send_booking_cancelled_email

    recipients = [booking.member]
    if booking.property_id:
        recipients.append(booking.property.host)

    for recipient in recipients:
        if booking.cancelled_by_id == recipient.id:
            continue
        send_booking_cancelled_email(booking, recipient)
        create_in_app_notification(
            recipient,
            f"Booking {booking.reference} cancelled",
            f"The booking for {booking.listing_title} was cancelled. "
            f"{booking.cancellation_reason}".strip(),
            type=Notification.Type.BOOKING,
            data={"booking_id": booking.id, "reference": booking.reference},
        )

    logger.info(f"Cancellation notices sent for booking {booking.reference}")
    return True


@shared_task(name="bookings.notify_booking_status_changed")
def notify_booking_status_changed(booking_id: int) -> bool:
    booking = _load(booking_id, "status")
    if booking is None:
        return False

    from apps.notifications.models import Notification
    from apps.notifications.services import create_in_app_notification, send_booking_status_email

    status_label = booking.get_status_display().lower()
    send_booking_status_email(booking)
    create_in_app_notification(
        booking.member,
        f"Booking {booking.reference} is {status_label}",
        f"Your booking for {booking.listing_title} is now {status_label}.",
        type=Notification.Type.BOOKING,
        data={"booking_id": booking.id, "status": booking.status},
    )
    logger.info(f"Status notice ({booking.status}) sent for booking {booking.reference}")
    return True


@shared_task(name="bookings.notify_booking_reminder")
def notify_booking_reminder(booking_id: int) -> bool:
    booking = _load(booking_id, "reminder")
    if booking is None:
        return False

    from apps.notifications.models import Notification
    from apps.notifications.services import create_in_app_notification, send_booking_reminder_email

    send_booking_reminder_email(booking)
    create_in_app_notification(
        booking.member,
        "Your trip starts tomorrow",
        f"{booking.listing_title} starts on {booking.check_in:%d %b %Y}.",
        type=Notification.Type.BOOKING,
        data={"booking_id": booking.id},
    )
    return True


@shared_task(name="bookings.notify_booking_expired")
def notify_booking_expired(booking_id: int) -> bool:
    booking = _load(booking_id, "expiry")
    if booking is None:
        return False

    from apps.notifications.models import Notification
    from apps.notifications.services import create_in_app_notification, send_booking_expired_email

    send_booking_expired_email(booking)
    create_in_app_notification(
        booking.member,
        f"Booking {booking.reference} expired",
        f"The payment window for {booking.listing_title} closed and the booking was released.",
        type=Notification.Type.BOOKING,
        data={"booking_id": booking.id},
    )
    return True
