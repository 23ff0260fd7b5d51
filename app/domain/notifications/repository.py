"""Notification repository - Database operations for in-app notifications"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Notification, NotificationSetting, User
from ...shared.timeutils import local_now


class NotificationRepository:
    """Repository for notification database operations"""

    @staticmethod
    def get_notifications(
        db: Session, user_id: int, status: Optional[str] = None, limit: int = 20
    ) -> list[Notification]:
        query = db.query(Notification).filter(Notification.user_id == user_id)
        if status:
            query = query.filter(Notification.status == status)
        return query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()

    @staticmethod
    def get_notification_by_id(db: Session, notification_id: int, user_id: int) -> Optional[Notification]:
        return (
            db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .first()
        )

    @staticmethod
    def mark_all_read(db: Session, user_id: int) -> int:
        updated = (
            db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.status.in_(("PENDING", "SENT")))
            .update({"status": "READ", "read_at": local_now()}, synchronize_session=False)
        )
        db.commit()
        return updated

    @staticmethod
    def add_notification(db: Session, user_id: int, **notification_data) -> Notification:
        """Stage a notification in the current transaction; the caller commits"""
        notification = Notification(user_id=user_id, **notification_data)
        db.add(notification)
        return notification

    @staticmethod
    def get_users_with_enabled_settings(db: Session) -> list[User]:
        return (
            db.query(User)
            .filter(User.notification_settings.any(NotificationSetting.enabled.is_(True)))
            .order_by(User.id.asc())
            .all()
        )
