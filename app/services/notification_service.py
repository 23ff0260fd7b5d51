"""
Notification generation and session reminders

Batch jobs run by the cron endpoints and the arq worker:
- generate_notifications: morning/evening summaries and payment reminders for every therapist
- generate_daily_notifications: the evening-summary and overdue-payment subset
- send_session_reminders: e-mails clients whose session starts in about 48 hours

Per-user and per-session failures are logged and collected; one failure never stops the batch.
"""

import logging
from datetime import timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ..domain.notifications.repository import NotificationRepository
from ..domain.payments.repository import PaymentRepository
from ..domain.payments.service import format_amount
from ..domain.sessions.repository import SessionRepository
from ..domain.tasks.repository import TaskRepository
from ..email_service import send_session_reminder_email
from ..email_templates import DEFAULT_THERAPIST_NAME
from ..models import NotificationSetting, TherapySession, User
from ..shared.timeutils import format_date, format_time, local_now, start_of_day

logger = logging.getLogger(__name__)

DEFAULT_DEBT_THRESHOLD_DAYS = 30
EVENING_TASKS_SHOWN = 5
EVENING_TASKS_FETCHED = 10
REMINDER_WINDOW_START = timedelta(hours=47)
REMINDER_WINDOW_END = timedelta(hours=49)


def _sessions_list(sessions: list[TherapySession]) -> str:
    return "\n".join(f"• {s.client.name} - {format_time(s.start_time)}" for s in sessions)


def _first_setting(user: User) -> Optional[NotificationSetting]:
    return user.notification_settings[0] if user.notification_settings else None


def _add(db: Session, user: User, now, notification_type: str, title: str, content: str) -> None:
    NotificationRepository.add_notification(
        db,
        user.id,
        type=notification_type,
        title=title,
        content=content,
        status="PENDING",
        scheduled_for=now,
    )


def _morning_summary(db: Session, user: User, now) -> int:
    today = start_of_day(now)
    sessions = SessionRepository.get_scheduled_between(db, today, today + timedelta(days=1), user.id)
    if not sessions:
        return 0

    _add(
        db,
        user,
        now,
        "MORNING_SUMMARY",
        f"תזכורת בוקר - {format_date(today)}",
        f"יש לך {len(sessions)} פגישות היום:\n{_sessions_list(sessions)}",
    )
    return 1


def _evening_summary(db: Session, user: User, now) -> int:
    tomorrow = start_of_day(now) + timedelta(days=1)
    sessions = SessionRepository.get_scheduled_between(db, tomorrow, tomorrow + timedelta(days=1), user.id)
    tasks = TaskRepository.get_open_tasks(db, user.id, limit=EVENING_TASKS_FETCHED)
    if not sessions and not tasks:
        return 0

    tasks_list = "\n".join(f"• {t.title}" for t in tasks[:EVENING_TASKS_SHOWN])
    content = (
        f"פגישות מחר ({len(sessions)}):\n{_sessions_list(sessions) or 'אין פגישות מתוכננות'}\n\n"
        f"משימות פתוחות ({len(tasks)}):\n{tasks_list or 'אין משימות'}"
    )
    if len(tasks) > EVENING_TASKS_SHOWN:
        content += f"\n\n...ועוד {len(tasks) - EVENING_TASKS_SHOWN} משימות"

    _add(db, user, now, "EVENING_SUMMARY", f"סיכום ליום מחר - {format_date(tomorrow)}", content)
    return 1


def _overdue_payments(db: Session, user: User, now, setting: Optional[NotificationSetting]) -> int:
    threshold_days = (setting.debt_threshold_days if setting else None) or DEFAULT_DEBT_THRESHOLD_DAYS
    payments = PaymentRepository.get_pending_payments(db, user.id, now - timedelta(days=threshold_days))
    if not payments:
        return 0

    total = sum(p.amount for p in payments)
    _add(
        db,
        user,
        now,
        "PAYMENT_REMINDER",
        f"תזכורת: {len(payments)} תשלומים ממתינים",
        f"יש לך {len(payments)} תשלומים שממתינים מעל {threshold_days} ימים בסך {format_amount(total)}",
    )
    return 1


def _monthly_collection(db: Session, user: User, now, setting: Optional[NotificationSetting]) -> int:
    if not setting or not setting.monthly_reminder_day or setting.monthly_reminder_day != now.day:
        return 0
    payments = PaymentRepository.get_pending_payments(db, user.id)
    if not payments:
        return 0

    total = sum(p.amount for p in payments)
    _add(
        db,
        user,
        now,
        "PAYMENT_REMINDER",
        "תזכורת גבייה חודשית",
        f"סוף החודש מתקרב! יש לגבות {len(payments)} תשלומים בסך {format_amount(total)}",
    )
    return 1


def _run_for_users(db: Session, build, label: str) -> dict:
    now = local_now()
    created = 0
    errors = []

    for user in NotificationRepository.get_users_with_enabled_settings(db):
        try:
            count = build(db, user, now)
            db.commit()
            created += count
        except Exception as e:
            db.rollback()
            logger.error(f"❌ {label} failed for user {user.id}: {e}")
            errors.append(f"User {user.id}: {e}")

    logger.info(f"🔔 {label}: {created} notification(s) created")
    result = {"message": "Notifications generated", "count": created}
    if errors:
        result["errors"] = errors
    return result


def generate_notifications(db: Session) -> dict:
    """Full daily run: morning and evening summaries plus payment reminders"""

    def build(db: Session, user: User, now) -> int:
        setting = _first_setting(user)
        if setting is None:
            return 0
        return (
            _morning_summary(db, user, now)
            + _evening_summary(db, user, now)
            + _overdue_payments(db, user, now, setting)
            + _monthly_collection(db, user, now, setting)
        )

    return _run_for_users(db, build, "Notification generation")


def generate_daily_notifications(db: Session) -> dict:
    """Evening summary and overdue-payment reminders only"""

    def build(db: Session, user: User, now) -> int:
        setting = _first_setting(user)
        return _evening_summary(db, user, now) + _overdue_payments(db, user, now, setting)

    return _run_for_users(db, build, "Daily notifications")


async def send_session_reminders(db: Session) -> dict:
    """E-mail a reminder to every client whose session starts 47-49 hours from now"""
    now = local_now()
    sessions = SessionRepository.get_scheduled_between(
        db, now + REMINDER_WINDOW_START, now + REMINDER_WINDOW_END
    )
    logger.info(f"⏰ Found {len(sessions)} session(s) in the reminder window")

    emails_sent = 0
    errors = []

    for session in sessions:
        client = session.client
        if not client.email:
            continue

        try:
            await send_session_reminder_email(
                to=client.email,
                client_name=client.name,
                therapist_name=session.therapist.name or DEFAULT_THERAPIST_NAME,
                session_start=session.start_time,
                session_type=session.type,
            )
        except Exception as e:
            logger.error(f"❌ Reminder for session {session.id} failed: {e}")
            errors.append(f"Failed to send to {client.email}: {e}")
            continue

        emails_sent += 1
        NotificationRepository.add_notification(
            db,
            session.therapist_id,
            type="SESSION_REMINDER",
            title=f"תזכורת נשלחה ל{client.name}",
            content=f"תזכורת לפגישה ב-{format_date(session.start_time)} נשלחה בהצלחה",
            status="SENT",
            sent_at=local_now(),
        )
        db.commit()

    result = {"message": "Reminders processed", "sessionsFound": len(sessions), "emailsSent": emails_sent}
    if errors:
        result["errors"] = errors
    return result
