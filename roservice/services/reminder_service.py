"""
Due-service reminders
Finds completed bookings whose service is old enough to repeat and tells
the admins, the technician and the customer, once per booking
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ..config import REMINDER_AFTER_DAYS
from ..domain.bookings.repository import BookingRepository
from ..models import Booking, Role, User
from .notification_service import NotificationService

logger = logging.getLogger(__name__)


def _service_label(booking: Booking) -> str:
    return booking.service_type.value.lower()


def send_due_service_reminders(
    db: Session,
    notifier: NotificationService,
    now: Optional[datetime] = None,
    after_days: int = REMINDER_AFTER_DAYS,
) -> dict:
    """
    Notify everyone involved in completed bookings serviced ``after_days`` ago
    Should be run as a scheduled job (daily cron)

    A booking is reminded once: ``reminder_sent_at`` is committed together
    with its in-app notifications before any email goes out, so a failure
    later in the run can lose an email but never repeat one.

    Returns:
        dict: Summary of the run
    """
    now = now or datetime.utcnow()
    cutoff = now - timedelta(days=after_days)

    summary = {"due": 0, "reminded": 0, "notifications": 0, "emails_sent": 0}

    due_bookings = BookingRepository.get_completed_before(db, cutoff, only_unreminded=True)
    summary["due"] = len(due_bookings)

    if not due_bookings:
        logger.info(f"✅ No {after_days}-day due services today")
        return summary

    admins = db.query(User).filter(User.role == Role.ADMIN).all()

    for booking in due_bookings:
        customer = booking.user
        label = _service_label(booking)
        staff_message = (
            f"{after_days} days have passed since the last {label} for {customer.name} "
            f"(Booking ID: {booking.id}). Time to schedule a new service."
        )
        customer_message = (
            f"It's been {after_days} days since your last {label} (Booking ID: {booking.id}). "
            f"Please contact us to schedule your next visit."
        )
        recipients = [(admin, "Service Due Reminder", staff_message) for admin in admins]

        technician = booking.technician
        if technician is not None and technician.user is not None:
            recipients.append((technician.user, "Service Due Reminder", staff_message))
        recipients.append((customer, "It's Time for Your Next Service", customer_message))

        emails = [(admin, f"{after_days}-Day Service Reminder", staff_message) for admin in admins]
        emails.append(
            (
                customer,
                "Time for Your Next Service",
                f"Hi {customer.name},\n\n"
                f"It's been {after_days} days since your last {label}. "
                f"Please contact us to schedule your next visit.\n\n"
                f"Booking ID: {booking.id}\n"
                f"Date of last service: {booking.service_date:%a %b %d %Y}\n\n"
                f"Thank you,\nTeam RO Services",
            )
        )

        for user, title, message in recipients:
            notifier.notify(user, title, message, booking_id=booking.id)
        booking.reminder_sent_at = now
        db.commit()

        sent = sum(1 for user, subject, body in emails if notifier.send_email(user, subject, body))

        summary["reminded"] += 1
        summary["notifications"] += len(recipients)
        summary["emails_sent"] += sent
        logger.info(f"🔔 Reminder sent for booking {booking.id} ({len(recipients)} notifications, {sent} emails)")

    logger.info(f"✅ Due-service reminders complete: {summary}")
    return summary
