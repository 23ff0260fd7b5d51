"""Session service - scheduling, conflict detection and session notes"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import SessionNote, TherapySession, User
from ...shared.timeutils import format_date, format_time
from ..clients.repository import ClientRepository
from ..tasks.repository import TaskRepository
from .repository import SessionRepository
from .schemas import SessionCreate, SessionNoteCreate, SessionNoteUpdate, SessionUpdate

logger = logging.getLogger(__name__)


class SessionService:
    """Service layer for therapy session business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SessionRepository()

    def get_sessions(
        self,
        user: User,
        client_id: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> list[TherapySession]:
        return self.repo.get_sessions(self.db, user.id, client_id, start_date, end_date)

    def get_session(self, session_id: int, user: User) -> TherapySession:
        session = self.repo.get_session_by_id(self.db, session_id, user.id)
        if not session:
            raise HTTPException(status_code=404, detail="Session not found")
        return session

    def get_session_detail(self, session_id: int, user: User) -> TherapySession:
        session = self.repo.get_session_detail(self.db, session_id, user.id)
        if not session:
            raise HTTPException(status_code=404, detail="Session not found")
        return session

    def _check_times(
        self, user: User, start_time: datetime, end_time: datetime, exclude_id: Optional[int] = None
    ) -> None:
        if end_time <= start_time:
            raise HTTPException(status_code=400, detail="End time must be after start time")

        conflict = self.repo.find_conflict(self.db, user.id, start_time, end_time, exclude_id)
        if conflict:
            logger.info(f"⚠️ Session conflict for therapist {user.id} with session {conflict.id}")
            raise HTTPException(
                status_code=400,
                detail=(
                    "Time slot conflicts with an existing session at "
                    f"{format_date(conflict.start_time)} {format_time(conflict.start_time)}"
                ),
            )

    def create_session(self, data: SessionCreate, user: User) -> TherapySession:
        """Schedule a session and open a WRITE_SUMMARY task for it"""
        client = ClientRepository.get_client_by_id(self.db, data.clientId, user.id)
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")

        self._check_times(user, data.startTime, data.endTime)

        session = self.repo.add_session(
            self.db,
            user.id,
            client_id=client.id,
            start_time=data.startTime,
            end_time=data.endTime,
            status="SCHEDULED",
            type=data.type,
            price=data.price,
            notes=data.notes,
            location=data.location,
            is_recurring=data.isRecurring,
        )
        self.db.flush()

        TaskRepository.add_task(
            self.db,
            user.id,
            type="WRITE_SUMMARY",
            title=f"כתיבת סיכום פגישה - {client.name}",
            description=f"פגישה מתאריך {format_date(data.startTime)} בשעה {format_time(data.startTime)}",
            priority="MEDIUM",
            due_date=data.endTime,
            related_entity_id=session.id,
            related_entity="TherapySession",
        )
        self.db.commit()
        self.db.refresh(session)

        logger.info(f"📅 Session {session.id} scheduled for client {client.id}")
        return session

    def update_session(self, session_id: int, data: SessionUpdate, user: User) -> TherapySession:
        session = self.get_session(session_id, user)

        field_map = {
            "startTime": "start_time",
            "endTime": "end_time",
            "status": "status",
            "type": "type",
            "price": "price",
            "notes": "notes",
            "location": "location",
        }
        updates = {}
        for key, value in data.model_dump(exclude_unset=True).items():
            if value is None and key not in ("notes", "location"):
                continue
            updates[field_map[key]] = value

        if "start_time" in updates or "end_time" in updates:
            self._check_times(
                user,
                updates.get("start_time", session.start_time),
                updates.get("end_time", session.end_time),
                exclude_id=session.id,
            )

        return self.repo.update_session(self.db, session, **updates)

    def delete_session(self, session_id: int, user: User) -> dict:
        session = self.get_session(session_id, user)
        self.repo.delete_session(self.db, session)
        logger.info(f"🗑️ Session {session_id} deleted by therapist {user.id}")
        return {"message": "Session deleted"}

    def create_note(self, session_id: int, data: SessionNoteCreate, user: User) -> SessionNote:
        """Write the session summary; closes the session's WRITE_SUMMARY tasks"""
        session = self.get_session(session_id, user)
        if session.note:
            raise HTTPException(status_code=400, detail="Session already has a note")

        note = self.repo.add_note(self.db, session.id, data.content, data.isPrivate)
        completed = TaskRepository.complete_related_tasks(
            self.db, user.id, "WRITE_SUMMARY", session.id
        )
        self.db.commit()
        self.db.refresh(note)

        logger.info(f"📝 Note added to session {session.id}, {completed} summary task(s) completed")
        return note

    def update_note(self, session_id: int, data: SessionNoteUpdate, user: User) -> SessionNote:
        session = self.get_session(session_id, user)
        note = session.note
        if not note:
            raise HTTPException(status_code=404, detail="Note not found")

        if data.content is not None:
            note.content = data.content
        if data.isPrivate is not None:
            note.is_private = data.isPrivate
        self.db.commit()
        self.db.refresh(note)
        return note
