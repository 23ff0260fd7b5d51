"""Intake questionnaire template schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class IntakeQuestion(BaseModel):
    question: str = Field(..., min_length=1)
    type: str = "text"


class IntakeTemplateCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    questions: list[IntakeQuestion] = Field(..., min_length=1)
    isDefault: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Template name is required")
        return v


class IntakeTemplateResponse(BaseModel):
    id: int
    name: str
    questions: list[IntakeQuestion]
    isDefault: bool
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, template) -> "IntakeTemplateResponse":
        return cls(
            id=template.id,
            name=template.name,
            questions=template.questions or [],
            isDefault=template.is_default,
            createdAt=template.created_at,
        )


class DefaultQuestionsResponse(BaseModel):
    questions: list[str]
