"""Document domain schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

DocumentType = Literal["CONSENT_FORM", "INTAKE_FORM", "TREATMENT_PLAN", "REPORT", "OTHER"]


class DocumentUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[DocumentType] = None
    signed: Optional[bool] = None
    clientId: Optional[int] = None


class DocumentResponse(BaseModel):
    id: int
    name: str
    type: str
    fileUrl: str
    signed: bool
    signedAt: Optional[datetime] = None
    clientId: Optional[int] = None
    clientName: Optional[str] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, document) -> "DocumentResponse":
        return cls(
            id=document.id,
            name=document.name,
            type=document.type,
            fileUrl=document.file_url,
            signed=document.signed,
            signedAt=document.signed_at,
            clientId=document.client_id,
            clientName=document.client.name if document.client else None,
            createdAt=document.created_at,
        )
