"""Recurring pattern service - weekly slots and filling the calendar from them"""

import logging
from datetime import timedelta

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import RecurringPattern, User
from ...shared.timeutils import local_now, start_of_week
from ...shared.validators import parse_time_of_day
from ..clients.repository import ClientRepository
from ..sessions.repository import SessionRepository
from .repository import RecurringPatternRepository
from .schemas import RecurringPatternCreate, RecurringPatternUpdate

logger = logging.getLogger(__name__)

DEFAULT_SESSION_PRICE = 300


class RecurringPatternService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = RecurringPatternRepository()

    def _require_client(self, client_id: int, user: User) -> None:
        if not ClientRepository.get_client_by_id(self.db, client_id, user.id):
            raise HTTPException(status_code=404, detail="Client not found")

    def get_patterns(self, user: User) -> list[RecurringPattern]:
        return self.repo.get_patterns(self.db, user.id)

    def get_pattern(self, pattern_id: int, user: User) -> RecurringPattern:
        pattern = self.repo.get_pattern_by_id(self.db, pattern_id, user.id)
        if not pattern:
            raise HTTPException(status_code=404, detail="Recurring pattern not found")
        return pattern

    def create_pattern(self, data: RecurringPatternCreate, user: User) -> RecurringPattern:
        if data.clientId is not None:
            self._require_client(data.clientId, user)
        return self.repo.create_pattern(
            self.db,
            user.id,
            day_of_week=data.dayOfWeek,
            time=data.time,
            duration=data.duration,
            client_id=data.clientId,
            is_active=True,
        )

    def update_pattern(self, pattern_id: int, data: RecurringPatternUpdate, user: User) -> RecurringPattern:
        pattern = self.get_pattern(pattern_id, user)
        fields = data.model_dump(exclude_unset=True)

        if fields.get("clientId") is not None:
            self._require_client(fields["clientId"], user)

        field_map = {
            "dayOfWeek": "day_of_week",
            "time": "time",
            "duration": "duration",
            "clientId": "client_id",
            "isActive": "is_active",
        }
        updates = {
            field_map[key]: value
            for key, value in fields.items()
            if value is not None or key == "clientId"
        }
        return self.repo.update_pattern(self.db, pattern, **updates)

    def delete_pattern(self, pattern_id: int, user: User) -> dict:
        pattern = self.get_pattern(pattern_id, user)
        self.repo.delete_pattern(self.db, pattern)
        return {"message": "Recurring pattern deleted"}

    def apply_patterns(self, user: User, weeks_ahead: int = 4) -> dict:
        """Create SCHEDULED sessions for the active patterns over the coming weeks.

        A slot is skipped when its day has already started, when the pattern has no
        client, or when the therapist already has a session starting at that exact time.
        """
        patterns = self.repo.get_patterns(self.db, user.id, active_only=True)
        if not patterns:
            return {"message": "No active patterns", "created": 0}

        latest = SessionRepository.get_latest_session(self.db, user.id)
        default_price = latest.price if latest and latest.price else DEFAULT_SESSION_PRICE

        now = local_now()
        week_start = start_of_week(now)
        created = 0

        for week in range(weeks_ahead):
            current_week_start = week_start + timedelta(weeks=week)
            for pattern in patterns:
                session_date = current_week_start + timedelta(days=pattern.day_of_week)
                if session_date < now:
                    continue

                hours, minutes = parse_time_of_day(pattern.time)
                start_time = session_date.replace(hour=hours, minute=minutes)
                end_time = start_time + timedelta(minutes=pattern.duration)

                if SessionRepository.session_exists_at(self.db, user.id, start_time):
                    continue
                if not pattern.client_id:
                    continue

                SessionRepository.add_session(
                    self.db,
                    user.id,
                    client_id=pattern.client_id,
                    start_time=start_time,
                    end_time=end_time,
                    status="SCHEDULED",
                    type="IN_PERSON",
                    price=default_price,
                    is_recurring=True,
                )
                # flush so the next existence check sees this slot
                self.db.flush()
                created += 1

        self.db.commit()
        logger.info(f"🔁 Applied {len(patterns)} pattern(s) for user {user.id}: {created} session(s) created")
        return {"message": f"{created} sessions created", "created": created}
