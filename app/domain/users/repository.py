"""User repository - Database operations for users and their notification settings"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import NotificationSetting, User

DEFAULT_CHANNELS = ("email", "push")


class UserRepository:
    """Repository for user database operations"""

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def create_user(db: Session, **user_data) -> User:
        """Create a user together with enabled settings for every default channel"""
        user = User(**user_data)
        db.add(user)
        db.flush()
        for channel in DEFAULT_CHANNELS:
            db.add(
                NotificationSetting(
                    user_id=user.id,
                    channel=channel,
                    enabled=True,
                    morning_time="08:00",
                    evening_time="20:00",
                )
            )
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_user(db: Session, user: User, **updates) -> User:
        for key, value in updates.items():
            if hasattr(user, key):
                setattr(user, key, value)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def get_notification_settings(db: Session, user_id: int) -> list[NotificationSetting]:
        return (
            db.query(NotificationSetting)
            .filter(NotificationSetting.user_id == user_id)
            .order_by(NotificationSetting.id.asc())
            .all()
        )

    @staticmethod
    def upsert_notification_setting(
        db: Session, user_id: int, channel: str, **values
    ) -> NotificationSetting:
        """Update the user's setting for a channel, creating it if missing; the caller commits"""
        setting = (
            db.query(NotificationSetting)
            .filter(NotificationSetting.user_id == user_id, NotificationSetting.channel == channel)
            .first()
        )
        if not setting:
            setting = NotificationSetting(user_id=user_id, channel=channel)
            db.add(setting)
        for key, value in values.items():
            setattr(setting, key, value)
        return setting
