"""User domain schemas - accounts, profile and notification settings"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import clean_optional, validate_email, validate_phone, validate_time_of_day


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str
    password: str = Field(..., min_length=6, max_length=128)
    phone: Optional[str] = None
    license: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        v = validate_email(v)
        if not v:
            raise ValueError("Email is required")
        return v

    @field_validator("phone")
    @classmethod
    def validate_phone_field(cls, v):
        return validate_phone(v)

    @field_validator("license")
    @classmethod
    def clean_license(cls, v):
        return clean_optional(v)


class RegisterResponse(BaseModel):
    message: str
    userId: int


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    license: Optional[str] = None
    image: Optional[str] = None

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    accessToken: str
    tokenType: str = "bearer"
    user: UserResponse


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    license: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def validate_phone_field(cls, v):
        return validate_phone(v)


class NotificationSettingResponse(BaseModel):
    id: int
    channel: str
    enabled: bool
    morningTime: str
    eveningTime: str
    debtThresholdDays: int
    monthlyReminderDay: Optional[int] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, setting) -> "NotificationSettingResponse":
        return cls(
            id=setting.id,
            channel=setting.channel,
            enabled=setting.enabled,
            morningTime=setting.morning_time,
            eveningTime=setting.evening_time,
            debtThresholdDays=setting.debt_threshold_days,
            monthlyReminderDay=setting.monthly_reminder_day,
            updatedAt=setting.updated_at,
        )


class NotificationSettingsUpdate(BaseModel):
    emailEnabled: bool = True
    pushEnabled: bool = True
    morningTime: str = "08:00"
    eveningTime: str = "20:00"
    debtThresholdDays: Optional[int] = Field(None, ge=1, le=365)
    monthlyReminderDay: Optional[int] = Field(None, ge=1, le=31)

    @field_validator("morningTime", "eveningTime")
    @classmethod
    def validate_times(cls, v):
        return validate_time_of_day(v)
