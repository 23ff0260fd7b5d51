"""Notification domain schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

NotificationStatus = Literal["PENDING", "SENT", "READ", "DISMISSED"]


class NotificationUpdate(BaseModel):
    """Either {markAllAsRead: true} or {id, status}"""

    markAllAsRead: bool = False
    id: Optional[int] = None
    status: Optional[NotificationStatus] = None


class NotificationResponse(BaseModel):
    id: int
    type: str
    title: str
    content: str
    status: str
    scheduledFor: Optional[datetime] = None
    sentAt: Optional[datetime] = None
    readAt: Optional[datetime] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, notification) -> "NotificationResponse":
        return cls(
            id=notification.id,
            type=notification.type,
            title=notification.title,
            content=notification.content,
            status=notification.status,
            scheduledFor=notification.scheduled_for,
            sentAt=notification.sent_at,
            readAt=notification.read_at,
            createdAt=notification.created_at,
        )


class NotificationRunResponse(BaseModel):
    message: str
    count: int
    errors: Optional[list[str]] = None


class ReminderRunResponse(BaseModel):
    message: str
    sessionsFound: int
    emailsSent: int
    errors: Optional[list[str]] = None
