"""
Workflow notifications
In-app notifications and emails sent after a leave request changes hands
"""
import logging
from typing import List

from beanie import PydanticObjectId
from bson.errors import InvalidId
from pymongo.errors import PyMongoError

from leave_portal.exceptions import NotFound, StoreUnavailable
from leave_portal.models.leave import LeaveRequest, LeaveStatus
from leave_portal.models.notification import Notification, NotificationType
from leave_portal.models.staff import Staff
from leave_portal.services.approval_workflow import active_step
from leave_portal.services.email import email_service

logger = logging.getLogger(__name__)


async def _notify(recipient_id: str, title: str, message: str, type: NotificationType, leave: LeaveRequest, link: str):
    notif = Notification(
        recipient_id=recipient_id,
        title=title,
        message=message,
        type=type,
        leave_id=str(leave.id),
        link=link,
    )
    await notif.insert()
    return await Staff.find_one(Staff.staff_id == recipient_id)


async def notify_next_approver(leave: LeaveRequest, forwarded: bool = False):
    """Notify whoever holds the active step of a pending request"""
    step = active_step(leave.approval_status)
    if step is None:
        return

    title = "Leave Request Forwarded" if forwarded else "New Leave Request"
    try:
        approver = await _notify(
            step.id,
            title,
            f"{leave.name} applied for {leave.leave_type.label} ({leave.no_of_days} days).",
            NotificationType.LEAVE_FORWARDED if forwarded else NotificationType.LEAVE_APPLIED,
            leave,
            "/approvals",
        )
    except PyMongoError as e:
        logger.error("Failed to notify approver %s for leave %s: %s", step.id, leave.id, e)
        return

    if approver:
        await email_service.send_approval_request(approver.email, approver.full_name, leave)


async def notify_applicant(leave: LeaveRequest):
    """Notify the applicant once the request reaches a terminal status"""
    if leave.status == LeaveStatus.PENDING:
        return

    approved = leave.status == LeaveStatus.APPROVED
    try:
        applicant = await _notify(
            leave.staff_id,
            f"Leave Request {leave.status.value.capitalize()}",
            f"Your {leave.leave_type.label} request has been {leave.status.value.lower()}.",
            NotificationType.LEAVE_APPROVED if approved else NotificationType.LEAVE_DISAPPROVED,
            leave,
            "/leaves",
        )
    except PyMongoError as e:
        logger.error("Failed to notify applicant %s for leave %s: %s", leave.staff_id, leave.id, e)
        return

    if applicant:
        await email_service.send_leave_status_notification(applicant.email, leave)


async def list_for_recipient(recipient_id: str, unread_only: bool = False, limit: int = 20) -> List[Notification]:
    """Newest notifications for one staff member"""
    query = {"recipient_id": recipient_id}
    if unread_only:
        query["is_read"] = False
    try:
        return await Notification.find(query).sort("-created_at").limit(limit).to_list()
    except PyMongoError as e:
        logger.error("Failed to load notifications for %s: %s", recipient_id, e)
        raise StoreUnavailable() from e


async def count_unread(recipient_id: str) -> int:
    try:
        return await Notification.find(
            Notification.recipient_id == recipient_id,
            Notification.is_read == False,  # noqa: E712
        ).count()
    except PyMongoError as e:
        logger.error("Failed to count notifications for %s: %s", recipient_id, e)
        raise StoreUnavailable() from e


async def mark_read(recipient_id: str, notification_id: str) -> Notification:
    """Mark one of the recipient's own notifications as read"""
    try:
        notif = await Notification.get(PydanticObjectId(notification_id))
    except InvalidId:
        notif = None
    except PyMongoError as e:
        logger.error("Failed to load notification %s: %s", notification_id, e)
        raise StoreUnavailable() from e
    if notif is None or notif.recipient_id != recipient_id:
        raise NotFound(f"Notification {notification_id} not found")

    notif.is_read = True
    try:
        await notif.save()
    except PyMongoError as e:
        logger.error("Failed to update notification %s: %s", notification_id, e)
        raise StoreUnavailable() from e
    return notif
