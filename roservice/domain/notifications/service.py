"""Notification inbox - listing and read state for the calling user"""

import logging

from sqlalchemy.orm import Session

from ...errors import NotFound, Unauthorized
from ...models import Notification, User

logger = logging.getLogger(__name__)


class NotificationInbox:
    def __init__(self, db: Session):
        self.db = db

    def list_mine(self, user: User) -> list[Notification]:
        return (
            self.db.query(Notification)
            .filter(Notification.user_id == user.id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .all()
        )

    def mark_read(self, notification_id: int, user: User) -> Notification:
        notification = self.db.query(Notification).filter(Notification.id == notification_id).first()
        if not notification:
            raise NotFound("Notification not found")
        if notification.user_id != user.id:
            raise Unauthorized("Not your notification")

        notification.is_read = True
        self.db.commit()
        self.db.refresh(notification)
        return notification

    def mark_all_read(self, user: User) -> int:
        updated = (
            self.db.query(Notification)
            .filter(Notification.user_id == user.id, Notification.is_read.is_(False))
            .update({Notification.is_read: True}, synchronize_session="fetch")
        )
        self.db.commit()
        logger.debug(f"User {user.id} marked {updated} notification(s) read")
        return updated
