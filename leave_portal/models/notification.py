"""
Notification Model
In-app alerts raised as a leave request moves along its approval chain
"""
from beanie import Document, PydanticObjectId
from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional
from enum import Enum


class NotificationType(str, Enum):
    LEAVE_APPLIED = "leave_applied"
    LEAVE_FORWARDED = "leave_forwarded"
    LEAVE_APPROVED = "leave_approved"
    LEAVE_DISAPPROVED = "leave_disapproved"


class Notification(Document):
    """One alert for one staff member"""
    recipient_id: str
    title: str
    message: str
    type: NotificationType
    leave_id: Optional[str] = None
    link: Optional[str] = None
    is_read: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "notifications"
        indexes = [
            "recipient_id",
            "leave_id",
        ]


class NotificationResponse(BaseModel):
    id: PydanticObjectId
    title: str
    message: str
    type: NotificationType
    leave_id: Optional[str] = None
    link: Optional[str] = None
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class NotificationListResponse(BaseModel):
    """Latest notifications plus the caller's unread count"""
    unread: int
    notifications: List[NotificationResponse]
