"""Notification router - the therapist's notification feed"""

from typing import Optional, Union

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...schemas import MessageResponse
from .schemas import NotificationResponse, NotificationStatus, NotificationUpdate
from .service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    """Dependency injection for NotificationService"""
    return NotificationService(db)


@router.get("", response_model=list[NotificationResponse])
async def get_notifications(
    status: Optional[NotificationStatus] = Query(None),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    """Newest notifications first"""
    return [
        NotificationResponse.from_model(n)
        for n in service.get_notifications(current_user, status, limit)
    ]


@router.put("", response_model=Union[NotificationResponse, MessageResponse])
async def update_notifications(
    data: NotificationUpdate,
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    """Mark everything as read, or set the status of a single notification"""
    result = service.update_notifications(data, current_user)
    if isinstance(result, dict):
        return result
    return NotificationResponse.from_model(result)
