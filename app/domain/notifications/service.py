"""Notification service - reading and acknowledging notifications"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Notification, User
from ...shared.timeutils import local_now
from .repository import NotificationRepository
from .schemas import NotificationUpdate

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepository()

    def get_notifications(self, user: User, status: Optional[str] = None, limit: int = 20) -> list[Notification]:
        return self.repo.get_notifications(self.db, user.id, status, limit)

    def update_notifications(self, data: NotificationUpdate, user: User) -> dict | Notification:
        if data.markAllAsRead:
            updated = self.repo.mark_all_read(self.db, user.id)
            logger.info(f"📬 Marked {updated} notification(s) as read for user {user.id}")
            return {"message": "All notifications marked as read"}

        if data.id is not None and data.status:
            notification = self.repo.get_notification_by_id(self.db, data.id, user.id)
            if not notification:
                raise HTTPException(status_code=404, detail="Notification not found")
            notification.status = data.status
            if data.status == "READ":
                notification.read_at = local_now()
            self.db.commit()
            self.db.refresh(notification)
            return notification

        raise HTTPException(status_code=400, detail="Missing parameters")
