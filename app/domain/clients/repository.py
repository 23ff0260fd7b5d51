"""Client repository - Database operations for clients"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ...models import Client, Document, Payment, Recording, TherapySession, Transcription


class ClientRepository:
    """Repository for client database operations"""

    @staticmethod
    def get_clients_with_counts(db: Session, therapist_id: int) -> list[tuple[Client, int, int]]:
        """All clients ordered by name, with their session and payment counts"""
        session_counts = (
            db.query(TherapySession.client_id, func.count(TherapySession.id).label("count"))
            .filter(TherapySession.therapist_id == therapist_id)
            .group_by(TherapySession.client_id)
            .subquery()
        )
        payment_counts = (
            db.query(Payment.client_id, func.count(Payment.id).label("count"))
            .join(Client, Payment.client_id == Client.id)
            .filter(Client.therapist_id == therapist_id)
            .group_by(Payment.client_id)
            .subquery()
        )
        rows = (
            db.query(
                Client,
                func.coalesce(session_counts.c.count, 0),
                func.coalesce(payment_counts.c.count, 0),
            )
            .outerjoin(session_counts, session_counts.c.client_id == Client.id)
            .outerjoin(payment_counts, payment_counts.c.client_id == Client.id)
            .filter(Client.therapist_id == therapist_id)
            .order_by(Client.name.asc())
            .all()
        )
        return [(client, int(sessions), int(payments)) for client, sessions, payments in rows]

    @staticmethod
    def get_client_by_id(db: Session, client_id: int, therapist_id: int) -> Optional[Client]:
        """Get a specific client owned by the therapist"""
        return (
            db.query(Client)
            .filter(Client.id == client_id, Client.therapist_id == therapist_id)
            .first()
        )

    @staticmethod
    def get_recent_sessions(db: Session, client_id: int, limit: int = 10) -> list[TherapySession]:
        return (
            db.query(TherapySession)
            .options(joinedload(TherapySession.note))
            .filter(TherapySession.client_id == client_id)
            .order_by(TherapySession.start_time.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_recent_payments(db: Session, client_id: int, limit: int = 10) -> list[Payment]:
        return (
            db.query(Payment)
            .filter(Payment.client_id == client_id)
            .order_by(Payment.created_at.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_recent_recordings(db: Session, client_id: int, limit: int = 5) -> list[Recording]:
        return (
            db.query(Recording)
            .options(joinedload(Recording.transcription).joinedload(Transcription.analysis))
            .filter(Recording.client_id == client_id)
            .order_by(Recording.created_at.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_documents(db: Session, client_id: int) -> list[Document]:
        return (
            db.query(Document)
            .filter(Document.client_id == client_id)
            .order_by(Document.created_at.desc())
            .all()
        )

    @staticmethod
    def create_client(db: Session, therapist_id: int, **client_data) -> Client:
        """Create a new client"""
        client = Client(therapist_id=therapist_id, **client_data)
        db.add(client)
        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def update_client(db: Session, client: Client, **updates) -> Client:
        """Update a client with provided fields (None clears a field)"""
        for key, value in updates.items():
            if hasattr(client, key):
                setattr(client, key, value)

        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def delete_client(db: Session, client: Client) -> None:
        """Delete a client and everything recorded for them"""
        db.delete(client)
        db.commit()
