"""Report repository - counting and aggregation queries"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ...models import Client, TherapySession


class ReportRepository:
    @staticmethod
    def count_clients(
        db: Session,
        therapist_id: int,
        status: Optional[str] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
    ) -> int:
        query = db.query(Client).filter(Client.therapist_id == therapist_id)
        if status:
            query = query.filter(Client.status == status)
        if created_from:
            query = query.filter(Client.created_at >= created_from)
        if created_to:
            query = query.filter(Client.created_at < created_to)
        return query.count()

    @staticmethod
    def count_sessions(
        db: Session,
        therapist_id: int,
        start_from: datetime,
        start_to: Optional[datetime] = None,
        status: Optional[str] = None,
    ) -> int:
        query = db.query(TherapySession).filter(
            TherapySession.therapist_id == therapist_id, TherapySession.start_time >= start_from
        )
        if start_to:
            query = query.filter(TherapySession.start_time < start_to)
        if status:
            query = query.filter(TherapySession.status == status)
        return query.count()

    @staticmethod
    def sessions_between(db: Session, therapist_id: int, start: datetime, end: datetime) -> list[TherapySession]:
        """Sessions of any status starting in [start, end)"""
        return (
            db.query(TherapySession)
            .options(joinedload(TherapySession.client))
            .filter(
                TherapySession.therapist_id == therapist_id,
                TherapySession.start_time >= start,
                TherapySession.start_time < end,
            )
            .order_by(TherapySession.start_time.asc())
            .all()
        )

    @staticmethod
    def session_type_counts(db: Session, therapist_id: int, start: datetime, end: datetime) -> list[tuple[str, int]]:
        return (
            db.query(TherapySession.type, func.count(TherapySession.id))
            .filter(
                TherapySession.therapist_id == therapist_id,
                TherapySession.start_time >= start,
                TherapySession.start_time < end,
            )
            .group_by(TherapySession.type)
            .all()
        )

    @staticmethod
    def client_status_counts(db: Session, therapist_id: int) -> list[tuple[str, int]]:
        return (
            db.query(Client.status, func.count(Client.id))
            .filter(Client.therapist_id == therapist_id)
            .group_by(Client.status)
            .all()
        )
