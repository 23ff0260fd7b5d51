"""Session repository - Database operations for therapy sessions and notes"""

from datetime import datetime
from typing import Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session, joinedload

from ...models import Recording, SessionNote, TherapySession, Transcription


class SessionRepository:
    """Repository for therapy session database operations"""

    @staticmethod
    def get_sessions(
        db: Session,
        therapist_id: int,
        client_id: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> list[TherapySession]:
        query = (
            db.query(TherapySession)
            .options(joinedload(TherapySession.client))
            .filter(TherapySession.therapist_id == therapist_id)
        )
        if client_id:
            query = query.filter(TherapySession.client_id == client_id)
        if start_date and end_date:
            query = query.filter(
                TherapySession.start_time >= start_date, TherapySession.start_time <= end_date
            )
        return query.order_by(TherapySession.start_time.asc()).all()

    @staticmethod
    def get_session_by_id(db: Session, session_id: int, therapist_id: int) -> Optional[TherapySession]:
        return (
            db.query(TherapySession)
            .filter(TherapySession.id == session_id, TherapySession.therapist_id == therapist_id)
            .first()
        )

    @staticmethod
    def get_session_detail(db: Session, session_id: int, therapist_id: int) -> Optional[TherapySession]:
        return (
            db.query(TherapySession)
            .options(
                joinedload(TherapySession.client),
                joinedload(TherapySession.note),
                joinedload(TherapySession.payment),
                joinedload(TherapySession.recordings)
                .joinedload(Recording.transcription)
                .joinedload(Transcription.analysis),
            )
            .filter(TherapySession.id == session_id, TherapySession.therapist_id == therapist_id)
            .first()
        )

    @staticmethod
    def find_conflict(
        db: Session,
        therapist_id: int,
        start_time: datetime,
        end_time: datetime,
        exclude_id: Optional[int] = None,
    ) -> Optional[TherapySession]:
        """First non-cancelled session of the therapist that overlaps [start_time, end_time]"""
        query = db.query(TherapySession).filter(
            TherapySession.therapist_id == therapist_id,
            TherapySession.status != "CANCELLED",
            or_(
                and_(TherapySession.start_time <= start_time, TherapySession.end_time > start_time),
                and_(TherapySession.start_time < end_time, TherapySession.end_time >= end_time),
                and_(TherapySession.start_time >= start_time, TherapySession.end_time <= end_time),
            ),
        )
        if exclude_id is not None:
            query = query.filter(TherapySession.id != exclude_id)
        return query.first()

    @staticmethod
    def get_scheduled_between(
        db: Session, start: datetime, end: datetime, therapist_id: Optional[int] = None
    ) -> list[TherapySession]:
        """SCHEDULED sessions starting in [start, end), optionally for one therapist"""
        query = (
            db.query(TherapySession)
            .options(joinedload(TherapySession.client), joinedload(TherapySession.therapist))
            .filter(
                TherapySession.status == "SCHEDULED",
                TherapySession.start_time >= start,
                TherapySession.start_time < end,
            )
        )
        if therapist_id is not None:
            query = query.filter(TherapySession.therapist_id == therapist_id)
        return query.order_by(TherapySession.start_time.asc()).all()

    @staticmethod
    def session_exists_at(db: Session, therapist_id: int, start_time: datetime) -> bool:
        return (
            db.query(TherapySession.id)
            .filter(TherapySession.therapist_id == therapist_id, TherapySession.start_time == start_time)
            .first()
            is not None
        )

    @staticmethod
    def get_latest_session(db: Session, therapist_id: int) -> Optional[TherapySession]:
        """The therapist's most recently created session"""
        return (
            db.query(TherapySession)
            .filter(TherapySession.therapist_id == therapist_id)
            .order_by(TherapySession.created_at.desc(), TherapySession.id.desc())
            .first()
        )

    @staticmethod
    def add_session(db: Session, therapist_id: int, **session_data) -> TherapySession:
        """Stage a session in the current transaction; the caller commits"""
        session = TherapySession(therapist_id=therapist_id, **session_data)
        db.add(session)
        return session

    @staticmethod
    def update_session(db: Session, session: TherapySession, **updates) -> TherapySession:
        for key, value in updates.items():
            if hasattr(session, key):
                setattr(session, key, value)
        db.commit()
        db.refresh(session)
        return session

    @staticmethod
    def delete_session(db: Session, session: TherapySession) -> None:
        db.delete(session)
        db.commit()

    @staticmethod
    def add_note(db: Session, session_id: int, content: str, is_private: bool) -> SessionNote:
        note = SessionNote(session_id=session_id, content=content, is_private=is_private)
        db.add(note)
        return note
