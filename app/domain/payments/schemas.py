"""Payment domain schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.timeutils import to_local
from ...shared.validators import clean_optional

PaymentMethod = Literal["CASH", "CREDIT_CARD", "BANK_TRANSFER", "CHECK", "OTHER"]
PaymentStatus = Literal["PENDING", "PAID", "CANCELLED", "REFUNDED"]


class PaymentCreate(BaseModel):
    clientId: int
    amount: float = Field(..., gt=0)
    method: PaymentMethod = "CASH"
    status: PaymentStatus = "PENDING"
    sessionId: Optional[int] = None
    notes: Optional[str] = None
    receiptUrl: Optional[str] = None

    @field_validator("notes", "receiptUrl")
    @classmethod
    def clean_text(cls, v):
        return clean_optional(v)


class PaymentUpdate(BaseModel):
    status: Optional[PaymentStatus] = None
    method: Optional[PaymentMethod] = None
    notes: Optional[str] = None
    paidAt: Optional[datetime] = None
    receiptUrl: Optional[str] = None

    @field_validator("paidAt")
    @classmethod
    def normalize_paid_at(cls, v):
        return to_local(v)


class PaymentResponse(BaseModel):
    id: int
    clientId: int
    clientName: Optional[str] = None
    sessionId: Optional[int] = None
    amount: float
    method: str
    status: str
    receiptUrl: Optional[str] = None
    notes: Optional[str] = None
    paidAt: Optional[datetime] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, payment) -> "PaymentResponse":
        return cls(
            id=payment.id,
            clientId=payment.client_id,
            clientName=payment.client.name if payment.client else None,
            sessionId=payment.session_id,
            amount=payment.amount,
            method=payment.method,
            status=payment.status,
            receiptUrl=payment.receipt_url,
            notes=payment.notes,
            paidAt=payment.paid_at,
            createdAt=payment.created_at,
        )
