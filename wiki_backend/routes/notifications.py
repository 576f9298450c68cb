"""
Notification routes: the caller's notification list and read state.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from ..auth import CurrentUser
from ..config import get_db
from ..database import Database
from ..exceptions import require_notification
from ..schemas import NotificationListResponse, NotificationResponse

router = APIRouter(
    prefix="/notifications",
    tags=["notifications"],
)


@router.get("")
async def list_notifications(
    db: Annotated[Database, Depends(get_db)],
    user: CurrentUser,
    unread_only: bool = False,
) -> NotificationListResponse:
    """Caller's notifications, newest first, with the unread count."""
    notifications = db.notifications.get_for_user(user.id, unread_only=unread_only)
    return NotificationListResponse(
        notifications=[NotificationResponse.from_db(n) for n in notifications],
        unread_count=db.get_unread_count(user.id),
    )


@router.post("/read-all")
async def mark_all_read(
    db: Annotated[Database, Depends(get_db)],
    user: CurrentUser,
) -> dict:
    marked = db.notifications.mark_all_read(user.id)
    return {"success": True, "marked": marked, "unread_count": 0}


@router.post("/{notification_id}/read")
async def mark_read(
    notification_id: str,
    db: Annotated[Database, Depends(get_db)],
    user: CurrentUser,
) -> dict:
    """Mark one notification read. Repeating the call is harmless."""
    notification = db.notifications.get(notification_id)
    # Other users' notifications are indistinguishable from missing ones
    if notification is not None and notification.user_id != user.id:
        notification = None
    require_notification(notification)
    db.notifications.mark_read(user.id, notification_id)
    return {"success": True, "unread_count": db.get_unread_count(user.id)}
