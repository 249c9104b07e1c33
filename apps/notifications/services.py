"""Notification services for e-mail and in-app messages."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.utils.html import strip_tags  # type: ignore

from .models import MESSAGE_MAX_LENGTH, TITLE_MAX_LENGTH, Notification

if TYPE_CHECKING:  # pragma: no cover
    from apps.bookings.models import Booking
    from apps.users.models import CustomUser

logger = logging.getLogger(__name__)

SIGNATURE = "<p>Warm regards,<br>The QuietSummit team</p>"



def send_email_notification(
    recipient_email: str,
    subject: str,
    message: str = "",
    *,
    html_message: str | None = None,
) -> bool:
    """
    Send a single e-mail.

    Args:
        recipient_email: address of the recipient
        subject: subject line
        message: plain text body, derived from ``html_message`` when empty
        html_message: optional HTML body

    Returns:
        bool: True when the message was handed to the mail backend
    """
    if not recipient_email:
        logger.warning(f"Skipping e-mail without recipient: {subject}")
        return False
    try:
        text_message = message or (strip_tags(html_message) if html_message else "")
        send_mail(
            subject=subject,
            message=text_message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            html_message=html_message,
            fail_silently=False,
        )
        logger.info(f"Email sent successfully to {recipient_email}: {subject}")
        return True
    except Exception as e:
        logger.error(f"Failed to send email to {recipient_email}: {e}", exc_info=True)
        return False


def _booking_details(booking: "Booking") -> str:
    rows = [
        ("Reference", booking.reference),
        ("Stay" if booking.property_id else "Journey", booking.listing_title),
        ("From", booking.check_in.strftime("%d %b %Y")),
        ("To", booking.check_out.strftime("%d %b %Y")),
        ("Guests" if booking.property_id else "Travelers", booking.guests),
        ("Total", f"{booking.total_price} {booking.currency}"),
    ]
    items = "".join(f"<li><strong>{label}:</strong> {value}</li>" for label, value in rows)
    return f"<ul>{items}</ul>"


def send_booking_created_email(booking: "Booking") -> bool:
    """Booking receipt for the member."""
    member = booking.member
    if booking.status == booking.Status.CONFIRMED:
        subject = f"Booking {booking.reference} confirmed"
        lead = "Your booking is confirmed."
    else:
        subject = f"Booking {booking.reference} received"
        lead = "We have received your booking. It will be confirmed once payment is recorded."

    html_message = f"""
    <html>
    <body>
        <h2>Hello {member.display_name},</h2>
        <p>{lead}</p>
        {_booking_details(booking)}
        {SIGNATURE}
    </body>
    </html>
    """
    return send_email_notification(member.email, subject, html_message=html_message)


def send_new_booking_to_host_email(booking: "Booking") -> bool:
    """New booking alert for the host of a homestay."""
    if not booking.property_id:
        return False
    host = booking.property.host
    member = booking.member
    html_message = f"""
    <html>
    <body>
        <h2>Hello {host.display_name},</h2>
        <p>{member.display_name} booked your homestay.</p>
        {_booking_details(booking)}
        <p>Guest phone: {member.phone or "not provided"}</p>
        {SIGNATURE}
    </body>
    </html>
    """
    return send_email_notification(
        host.email, f"New booking {booking.reference}", html_message=html_message
    )


def send_booking_cancelled_email(booking: "Booking", recipient: "CustomUser") -> bool:
    reason = booking.cancellation_reason or "No reason was given."
    refund = ""
    if booking.payment_status == booking.PaymentStatus.REFUNDED:
        refund = "<p>The amount paid will be refunded to the original payment method.</p>"
    html_message = f"""
    <html>
    <body>
        <h2>Hello {recipient.display_name},</h2>
        <p>Booking {booking.reference} for {booking.listing_title} was cancelled.</p>
        <p>Reason: {reason}</p>
        {refund}
        {SIGNATURE}
    </body>
    </html>
    """
    return send_email_notification(
        recipient.email, f"Booking {booking.reference} cancelled", html_message=html_message
    )


def send_booking_status_email(booking: "Booking") -> bool:
    member = booking.member
    status_label = booking.get_status_display().lower()
    html_message = f"""
    <html>
    <body>
        <h2>Hello {member.display_name},</h2>
        <p>Your booking {booking.reference} is now {status_label}.</p>
        {_booking_details(booking)}
        {SIGNATURE}
    </body>
    </html>
    """
    return send_email_notification(
        member.email, f"Booking {booking.reference} is {status_label}", html_message=html_message
    )


def send_booking_reminder_email(booking: "Booking") -> bool:
    """Reminder one day before arrival."""
    member = booking.member
    if booking.property_id:
        prop = booking.property
        arrival = f"Check-in opens at {prop.check_in_time.strftime('%H:%M')} at {prop.street}, {prop.city}."
    else:
        arrival = "Your trip leader will contact you with the meeting point."
    html_message = f"""
    <html>
    <body>
        <h2>Hello {member.display_name},</h2>
        <p>Your trip to <strong>{booking.listing_title}</strong> starts tomorrow.</p>
        <p>{arrival}</p>
        {_booking_details(booking)}
        {SIGNATURE}
    </body>
    </html>
    """
    return send_email_notification(
        member.email, f"Reminder: {booking.listing_title} starts tomorrow", html_message=html_message
    )


def send_booking_expired_email(booking: "Booking") -> bool:
    """Unpaid hold ran out."""
    member = booking.member
    html_message = f"""
    <html>
    <body>
        <h2>Hello {member.display_name},</h2>
        <p>The payment window for booking {booking.reference} closed, so the booking was released.</p>
        <p>You are welcome to book {booking.listing_title} again at any time.</p>
        {SIGNATURE}
    </body>
    </html>
    """
    return send_email_notification(
        member.email, f"Booking {booking.reference} expired", html_message=html_message
    )



def _truncate(value: str, limit: int) -> str:
    value = value or ""
    if len(value) <= limit:
        return value
    return value[: limit - 3].rstrip() + "..."


def create_in_app_notification(
    user: "CustomUser",
    title: str,
    message: str,
    *,
    type: str = Notification.Type.SYSTEM,
    data: dict[str, Any] | None = None,
) -> Notification | None:
    """Store a notification for ``user``; long text is cut to the column limits."""
    try:
        notification = Notification.objects.create(
            user=user,
            type=type,
            title=_truncate(title, TITLE_MAX_LENGTH),
            message=_truncate(message, MESSAGE_MAX_LENGTH),
            data=data or {},
        )
    except Exception as e:
        logger.error(f"Failed to create notification for user {user.pk}: {e}", exc_info=True)
        return None
    logger.info(f"In-app notification created for user {user.pk}: {notification.title}")
    return notification


def notify_user(
    user: "CustomUser",
    title: str,
    message: str,
    *,
    type: str = Notification.Type.SYSTEM,
    data: dict[str, Any] | None = None,
    email: bool = True,
) -> dict[str, bool]:
    """Deliver a message through e-mail and the in-app inbox."""
    results = {"email": False, "in_app": False}
    if email:
        results["email"] = send_email_notification(user.email, title, message)
    results["in_app"] = create_in_app_notification(user, title, message, type=type, data=data) is not None
    return results
