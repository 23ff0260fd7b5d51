"""User service - registration, login, profile and notification preferences"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...auth import create_access_token, hash_password, verify_password
from ...models import NotificationSetting, User
from ...shared.validators import clean_optional
from .repository import UserRepository
from .schemas import LoginRequest, NotificationSettingsUpdate, ProfileUpdate, RegisterRequest

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for user accounts"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    def register(self, data: RegisterRequest) -> User:
        logger.info(f"📥 Registration attempt for {data.email}")
        if self.repo.get_user_by_email(self.db, data.email):
            logger.warning(f"⚠️ Registration rejected, email already exists: {data.email}")
            raise HTTPException(status_code=400, detail="A user with this email already exists")

        try:
            user = self.repo.create_user(
                self.db,
                name=data.name,
                email=data.email,
                hashed_password=hash_password(data.password),
                phone=data.phone,
                license=data.license,
            )
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"⚠️ Concurrent registration for {data.email}: {e}")
            raise HTTPException(status_code=400, detail="A user with this email already exists") from e

        logger.info(f"✅ User {user.id} registered")
        return user

    def login(self, data: LoginRequest) -> tuple[str, User]:
        user = self.repo.get_user_by_email(self.db, data.email)
        if not user or not verify_password(data.password, user.hashed_password):
            logger.warning(f"⚠️ Failed login for {data.email}")
            raise HTTPException(status_code=401, detail="Invalid email or password")
        return create_access_token(user.id), user

    def update_profile(self, user: User, data: ProfileUpdate) -> User:
        # Blank name keeps the current one; blank phone or license clears the field
        updates = {
            "phone": data.phone,
            "license": clean_optional(data.license),
        }
        name = clean_optional(data.name)
        if name:
            updates["name"] = name
        return self.repo.update_user(self.db, user, **updates)

    def get_notification_settings(self, user: User) -> list[NotificationSetting]:
        return self.repo.get_notification_settings(self.db, user.id)

    def update_notification_settings(
        self, user: User, data: NotificationSettingsUpdate
    ) -> list[NotificationSetting]:
        shared = {"morning_time": data.morningTime, "evening_time": data.eveningTime}
        if data.debtThresholdDays is not None:
            shared["debt_threshold_days"] = data.debtThresholdDays
        if "monthlyReminderDay" in data.model_fields_set:
            shared["monthly_reminder_day"] = data.monthlyReminderDay

        self.repo.upsert_notification_setting(
            self.db, user.id, "email", enabled=data.emailEnabled, **shared
        )
        self.repo.upsert_notification_setting(
            self.db, user.id, "push", enabled=data.pushEnabled, **shared
        )
        self.db.commit()
        logger.info(f"🔔 Notification settings updated for user {user.id}")
        return self.repo.get_notification_settings(self.db, user.id)
