"""Batch endpoints called by an external scheduler"""

import hmac
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from .. import config
from ..database import get_db
from ..domain.notifications.schemas import NotificationRunResponse, ReminderRunResponse
from ..services.notification_service import (
    generate_daily_notifications,
    generate_notifications,
    send_session_reminders,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Cron"])


def verify_cron_secret(authorization: Optional[str] = Header(None)) -> None:
    """Require `Authorization: Bearer <CRON_SECRET>` when a secret is configured"""
    if not config.CRON_SECRET:
        return
    expected = f"Bearer {config.CRON_SECRET}"
    if not authorization or not hmac.compare_digest(authorization, expected):
        logger.warning("⚠️ Rejected cron call with a missing or wrong secret")
        raise HTTPException(status_code=401, detail="Unauthorized")


@router.get(
    "/cron/notifications",
    response_model=NotificationRunResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(verify_cron_secret)],
)
async def run_notifications(db: Session = Depends(get_db)):
    """Generate the daily summaries and payment reminders for all therapists"""
    return generate_notifications(db)


@router.get(
    "/cron/reminders",
    response_model=ReminderRunResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(verify_cron_secret)],
)
async def run_reminders(db: Session = Depends(get_db)):
    """Send 48-hour session reminder e-mails"""
    return await send_session_reminders(db)


@router.post(
    "/notifications/daily",
    response_model=NotificationRunResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(verify_cron_secret)],
)
async def run_daily_notifications(db: Session = Depends(get_db)):
    return generate_daily_notifications(db)
