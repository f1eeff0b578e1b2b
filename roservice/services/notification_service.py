"""
Unified Notification Service
Stores in-app notifications and mirrors them to email for workflow events
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..email_service import Mailer
from ..models import Notification, User

logger = logging.getLogger(__name__)


class NotificationService:
    """Writes Notification rows on the caller's session; the caller commits"""

    def __init__(self, db: Session, mailer: Optional[Mailer] = None):
        self.db = db
        self.mailer = mailer

    def notify(
        self,
        user: User,
        title: str,
        message: str,
        booking_id: Optional[int] = None,
        email_subject: Optional[str] = None,
        email_body: Optional[str] = None,
    ) -> dict:
        """
        Create an in-app notification and optionally email the user

        Args:
            user: Recipient
            title: Notification title
            message: Notification text
            booking_id: Booking the notification is about, if any
            email_subject: Send an email with this subject when set
            email_body: Email text (defaults to message)

        Returns:
            Dict with the notification and email_sent status
        """
        notification = Notification(
            user_id=user.id,
            booking_id=booking_id,
            title=title,
            message=message,
        )
        self.db.add(notification)

        result = {"notification": notification, "email_sent": False}
        if email_subject:
            result["email_sent"] = self.send_email(user, email_subject, email_body or message)
        return result

    def send_email(self, user: User, subject: str, body: str) -> bool:
        """Email a user directly; no notification row is written"""
        if self.mailer is None:
            logger.debug(f"⚠️ No mailer configured, skipping '{subject}' to {user.email}")
            return False
        if not user.email:
            logger.debug(f"⚠️ No email address for user {user.id}")
            return False
        # Mailer.send never raises; a failed delivery must not block the workflow
        return self.mailer.send(user.email, subject, body)

    def notify_booking_assigned(self, booking, technician) -> None:
        if technician.user is not None:
            self.notify(
                technician.user,
                "New Service Assigned",
                f"You have been assigned booking #{booking.id} "
                f"({booking.service_type.value.lower()}) on {booking.service_date:%d %b %Y}.",
                booking_id=booking.id,
            )
        self.notify(
            booking.user,
            "Technician Assigned",
            f"{technician.name} ({technician.phone}) will handle your "
            f"{booking.service_type.value.lower()} booking #{booking.id}.",
            booking_id=booking.id,
            email_subject="Your service technician has been assigned",
        )

    def notify_status_changed(self, booking) -> None:
        self.notify(
            booking.user,
            "Booking Status Updated",
            f"Your booking #{booking.id} is now {booking.status.value.replace('_', ' ').lower()}.",
            booking_id=booking.id,
        )
