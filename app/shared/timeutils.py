"""Time helpers - every stored datetime is a naive wall-clock time in APP_TIMEZONE"""

from datetime import date, datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from ..config import APP_TIMEZONE

APP_TZ = ZoneInfo(APP_TIMEZONE)


def local_now() -> datetime:
    return datetime.now(APP_TZ).replace(tzinfo=None)


def to_local(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize an incoming datetime to naive local time"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(APP_TZ).replace(tzinfo=None)


def start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(value: datetime) -> datetime:
    """Weeks start on Sunday"""
    # weekday(): Monday=0 .. Sunday=6
    days_since_sunday = (value.weekday() + 1) % 7
    return start_of_day(value) - timedelta(days=days_since_sunday)


def start_of_month(value: datetime) -> datetime:
    return start_of_day(value).replace(day=1)


def format_date(value: datetime | date) -> str:
    """Israeli short date, e.g. 19.10.2026"""
    return f"{value.day}.{value.month}.{value.year}"


def format_time(value: datetime) -> str:
    return value.strftime("%H:%M")
