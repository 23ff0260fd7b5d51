"""Recurring pattern schemas - weekly slots used to pre-fill the calendar"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_time_of_day


class RecurringPatternCreate(BaseModel):
    dayOfWeek: int = Field(..., ge=0, le=6, description="0 = Sunday")
    time: str = Field(..., description="HH:MM")
    duration: int = Field(50, ge=1, le=600, description="Minutes")
    clientId: Optional[int] = None

    @field_validator("time")
    @classmethod
    def validate_time(cls, v):
        return validate_time_of_day(v)


class RecurringPatternUpdate(BaseModel):
    dayOfWeek: Optional[int] = Field(None, ge=0, le=6)
    time: Optional[str] = None
    duration: Optional[int] = Field(None, ge=1, le=600)
    clientId: Optional[int] = None
    isActive: Optional[bool] = None

    @field_validator("time")
    @classmethod
    def validate_time(cls, v):
        return validate_time_of_day(v)


class ApplyPatternsRequest(BaseModel):
    weeksAhead: int = Field(4, ge=1, le=52)


class ApplyPatternsResponse(BaseModel):
    message: str
    created: int


class RecurringPatternResponse(BaseModel):
    id: int
    dayOfWeek: int
    time: str
    duration: int
    clientId: Optional[int] = None
    clientName: Optional[str] = None
    isActive: bool
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, pattern) -> "RecurringPatternResponse":
        return cls(
            id=pattern.id,
            dayOfWeek=pattern.day_of_week,
            time=pattern.time,
            duration=pattern.duration,
            clientId=pattern.client_id,
            clientName=pattern.client.name if pattern.client else None,
            isActive=pattern.is_active,
            createdAt=pattern.created_at,
        )
