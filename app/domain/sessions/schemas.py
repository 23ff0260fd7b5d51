"""Session domain schemas - therapy sessions and their notes"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.timeutils import to_local
from ...shared.validators import clean_optional
from ..payments.schemas import PaymentResponse
from ..recordings.schemas import RecordingResponse

SessionStatus = Literal["SCHEDULED", "COMPLETED", "CANCELLED", "NO_SHOW"]
SessionType = Literal["IN_PERSON", "ONLINE", "PHONE"]


class SessionCreate(BaseModel):
    clientId: int
    startTime: datetime
    endTime: datetime
    type: SessionType = "IN_PERSON"
    price: float = Field(0, ge=0)
    notes: Optional[str] = None
    location: Optional[str] = None
    isRecurring: bool = False

    @field_validator("startTime", "endTime")
    @classmethod
    def normalize_times(cls, v):
        return to_local(v)

    @field_validator("notes", "location")
    @classmethod
    def clean_text(cls, v):
        return clean_optional(v)


class SessionUpdate(BaseModel):
    startTime: Optional[datetime] = None
    endTime: Optional[datetime] = None
    status: Optional[SessionStatus] = None
    type: Optional[SessionType] = None
    price: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None
    location: Optional[str] = None

    @field_validator("startTime", "endTime")
    @classmethod
    def normalize_times(cls, v):
        return to_local(v)


class SessionNoteCreate(BaseModel):
    content: str = Field(..., min_length=1)
    isPrivate: bool = False


class SessionNoteUpdate(BaseModel):
    content: Optional[str] = Field(None, min_length=1)
    isPrivate: Optional[bool] = None


class SessionNoteResponse(BaseModel):
    id: int
    sessionId: int
    content: str
    isPrivate: bool
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, note) -> "SessionNoteResponse":
        return cls(
            id=note.id,
            sessionId=note.session_id,
            content=note.content,
            isPrivate=note.is_private,
            createdAt=note.created_at,
            updatedAt=note.updated_at,
        )


class SessionResponse(BaseModel):
    id: int
    clientId: int
    clientName: Optional[str] = None
    startTime: datetime
    endTime: datetime
    status: str
    type: str
    price: float
    notes: Optional[str] = None
    location: Optional[str] = None
    isRecurring: bool
    createdAt: Optional[datetime] = None
    note: Optional[SessionNoteResponse] = None

    @classmethod
    def from_model(cls, session, include_note: bool = False) -> "SessionResponse":
        return cls(
            id=session.id,
            clientId=session.client_id,
            clientName=session.client.name if session.client else None,
            startTime=session.start_time,
            endTime=session.end_time,
            status=session.status,
            type=session.type,
            price=session.price,
            notes=session.notes,
            location=session.location,
            isRecurring=session.is_recurring,
            createdAt=session.created_at,
            note=(
                SessionNoteResponse.from_model(session.note)
                if include_note and session.note
                else None
            ),
        )


class SessionDetailResponse(SessionResponse):
    clientEmail: Optional[str] = None
    clientPhone: Optional[str] = None
    payment: Optional[PaymentResponse] = None
    recordings: list[RecordingResponse] = []

    @classmethod
    def from_model(cls, session, include_note: bool = True) -> "SessionDetailResponse":
        base = SessionResponse.from_model(session, include_note=True).model_dump()
        return cls(
            **base,
            clientEmail=session.client.email if session.client else None,
            clientPhone=session.client.phone if session.client else None,
            payment=PaymentResponse.from_model(session.payment) if session.payment else None,
            recordings=[RecordingResponse.from_model(r) for r in session.recordings],
        )
