"""Notification router - the caller's in-app notifications"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import MarkAllReadResponse, NotificationResponse
from .service import NotificationInbox

router = APIRouter(prefix="/notifications", tags=["Notifications"])


def get_inbox(db: Session = Depends(get_db)) -> NotificationInbox:
    return NotificationInbox(db)


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    user: User = Depends(get_current_user),
    inbox: NotificationInbox = Depends(get_inbox),
):
    return inbox.list_mine(user)


# Declared before /{notification_id}/read
@router.patch("/mark-all-read", response_model=MarkAllReadResponse)
async def mark_all_read(
    user: User = Depends(get_current_user),
    inbox: NotificationInbox = Depends(get_inbox),
):
    return MarkAllReadResponse(updated=inbox.mark_all_read(user))


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: int,
    user: User = Depends(get_current_user),
    inbox: NotificationInbox = Depends(get_inbox),
):
    return inbox.mark_read(notification_id, user)
