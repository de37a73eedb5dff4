"""
Notification Routes
Approval alerts for the signed-in staff member
"""
from fastapi import APIRouter, Depends

from leave_portal.models.notification import NotificationListResponse, NotificationResponse
from leave_portal.models.session import SessionContext
from leave_portal.api.routes.auth import get_current_session
from leave_portal.services import notifications

router = APIRouter()


@router.get("/", response_model=NotificationListResponse)
async def get_my_notifications(
    unread_only: bool = False,
    session: SessionContext = Depends(get_current_session)
):
    """Latest notifications for the current user"""
    notes = await notifications.list_for_recipient(session.user_id, unread_only)
    return {
        "unread": await notifications.count_unread(session.user_id),
        "notifications": [NotificationResponse.model_validate(n) for n in notes],
    }


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_as_read(
    notification_id: str,
    session: SessionContext = Depends(get_current_session)
):
    """Mark one notification as read"""
    notif = await notifications.mark_read(session.user_id, notification_id)
    return NotificationResponse.model_validate(notif)
