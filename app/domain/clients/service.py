"""Client service - Business logic for client operations"""

import logging
from datetime import date, datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Client, User
from ...storage import get_storage, key_from_url
from ..documents.schemas import DocumentResponse
from ..payments.schemas import PaymentResponse
from ..recordings.schemas import RecordingResponse
from ..sessions.schemas import SessionResponse
from .repository import ClientRepository
from .schemas import ClientCreate, ClientDetailResponse, ClientResponse, ClientUpdate

logger = logging.getLogger(__name__)


def _as_datetime(value: Optional[date]) -> Optional[datetime]:
    return datetime(value.year, value.month, value.day) if value else None


class ClientService:
    """Service layer for client business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ClientRepository()

    def get_clients(self, user: User) -> list[ClientResponse]:
        """Get all clients for a therapist with activity counts"""
        return [
            ClientResponse.from_model(client, sessionCount=sessions, paymentCount=payments)
            for client, sessions, payments in self.repo.get_clients_with_counts(self.db, user.id)
        ]

    def get_client(self, client_id: int, user: User) -> Client:
        """Get a specific client"""
        client = self.repo.get_client_by_id(self.db, client_id, user.id)
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")
        return client

    def get_client_detail(self, client_id: int, user: User) -> ClientDetailResponse:
        client = self.get_client(client_id, user)
        base = ClientResponse.from_model(client).model_dump()
        return ClientDetailResponse(
            **base,
            sessions=[
                SessionResponse.from_model(s, include_note=True)
                for s in self.repo.get_recent_sessions(self.db, client.id)
            ],
            payments=[
                PaymentResponse.from_model(p) for p in self.repo.get_recent_payments(self.db, client.id)
            ],
            recordings=[
                RecordingResponse.from_model(r)
                for r in self.repo.get_recent_recordings(self.db, client.id)
            ],
            documents=[DocumentResponse.from_model(d) for d in self.repo.get_documents(self.db, client.id)],
        )

    def create_client(self, data: ClientCreate, user: User) -> Client:
        """Create a new client"""
        logger.info(f"📥 Creating client for therapist {user.id}")
        client = self.repo.create_client(
            self.db,
            user.id,
            name=data.name,
            phone=data.phone,
            email=data.email,
            birth_date=_as_datetime(data.birthDate),
            address=data.address,
            notes=data.notes,
            status=data.status,
            medical_history=data.medicalHistory,
        )
        logger.info(f"✅ Client {client.id} created")
        return client

    def update_client(self, client_id: int, data: ClientUpdate, user: User) -> Client:
        """Replace the client's profile fields as submitted by the edit form"""
        client = self.get_client(client_id, user)

        updates = {
            "name": data.name or client.name,
            "phone": data.phone,
            "email": data.email,
            "birth_date": _as_datetime(data.birthDate),
            "address": data.address,
            "notes": data.notes,
            "status": data.status or client.status,
        }
        fields_set = data.model_fields_set
        if "intakeNotes" in fields_set:
            updates["intake_notes"] = data.intakeNotes
        if "medicalHistory" in fields_set:
            updates["medical_history"] = data.medicalHistory

        return self.repo.update_client(self.db, client, **updates)

    def delete_client(self, client_id: int, user: User) -> dict:
        """Delete a client and their stored files"""
        client = self.get_client(client_id, user)

        file_urls = [r.audio_url for r in client.recordings] + [d.file_url for d in client.documents]
        self.repo.delete_client(self.db, client)

        storage = get_storage()
        for url in file_urls:
            try:
                storage.delete(key_from_url(url))
            except Exception as e:
                logger.warning(f"⚠️ Could not delete file {url} of client {client_id}: {e}")

        logger.info(f"🗑️ Client {client_id} deleted by therapist {user.id}")
        return {"message": "Client deleted"}
