"""Client domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import clean_optional, validate_email, validate_phone
from ..documents.schemas import DocumentResponse
from ..payments.schemas import PaymentResponse
from ..recordings.schemas import RecordingResponse
from ..sessions.schemas import SessionResponse

ClientStatus = Literal["ACTIVE", "INACTIVE", "ARCHIVED"]


class ClientCreate(BaseModel):
    """Schema for creating a new client"""

    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    birthDate: Optional[date] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    status: ClientStatus = "ACTIVE"
    medicalHistory: Optional[dict[str, Any]] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Client name is required")
        return v

    @field_validator("phone")
    @classmethod
    def validate_phone_field(cls, v):
        return validate_phone(v)

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)

    @field_validator("address", "notes")
    @classmethod
    def clean_text(cls, v):
        return clean_optional(v)


class ClientUpdate(BaseModel):
    """Schema for updating an existing client (a full form submission)"""

    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    birthDate: Optional[date] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[ClientStatus] = None
    intakeNotes: Optional[str] = None
    medicalHistory: Optional[dict[str, Any]] = None

    @field_validator("phone")
    @classmethod
    def validate_phone_field(cls, v):
        return validate_phone(v)

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)

    @field_validator("name", "address", "notes")
    @classmethod
    def clean_text(cls, v):
        return clean_optional(v)


class ClientResponse(BaseModel):
    """Schema for client response"""

    id: int
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    birthDate: Optional[date] = None
    address: Optional[str] = None
    status: str
    medicalHistory: Optional[dict[str, Any]] = None
    notes: Optional[str] = None
    intakeNotes: Optional[str] = None
    createdAt: Optional[datetime] = None
    sessionCount: Optional[int] = None
    paymentCount: Optional[int] = None

    @classmethod
    def from_model(cls, client, **extra) -> "ClientResponse":
        return cls(
            id=client.id,
            name=client.name,
            phone=client.phone,
            email=client.email,
            birthDate=client.birth_date.date() if client.birth_date else None,
            address=client.address,
            status=client.status,
            medicalHistory=client.medical_history,
            notes=client.notes,
            intakeNotes=client.intake_notes,
            createdAt=client.created_at,
            **extra,
        )


class ClientDetailResponse(ClientResponse):
    """Client with recent activity for the client page"""

    sessions: list[SessionResponse] = []
    payments: list[PaymentResponse] = []
    recordings: list[RecordingResponse] = []
    documents: list[DocumentResponse] = []
