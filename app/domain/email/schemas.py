"""Schemas for e-mailing a client"""

from pydantic import BaseModel, Field, field_validator


class SendEmailRequest(BaseModel):
    clientId: int
    subject: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)

    @field_validator("subject", "content")
    @classmethod
    def not_blank(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Field must not be blank")
        return v
