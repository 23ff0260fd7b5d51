"""Shared validation utilities"""

import re
from typing import Optional

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def clean_optional(value: Optional[str]) -> Optional[str]:
    """Trim a free-text field; blank strings become None"""
    if value is None:
        return None
    value = value.strip()
    return value or None


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address, or None for a blank value

    Raises:
        ValueError: If email format is invalid
    """
    email = clean_optional(email)
    if not email:
        return None

    email = email.lower()

    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate a phone number loosely: digits with optional +, spaces, dashes and parentheses.

    Israeli local numbers (050-1234567) and international numbers (+972 50 123 4567)
    are both accepted; the original formatting is preserved.
    """
    phone = clean_optional(phone)
    if not phone:
        return None

    if not re.match(r"^\+?[\d\s\-()]+$", phone):
        raise ValueError("Phone number may contain only digits, spaces, dashes and parentheses")

    digits = re.sub(r"\D", "", phone)
    if not 7 <= len(digits) <= 15:
        raise ValueError("Phone number must have between 7 and 15 digits")

    return phone


def validate_time_of_day(value: Optional[str]) -> Optional[str]:
    """Validate a 24h HH:MM time string"""
    if value is None:
        return value
    value = value.strip()
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM format")
    return value


def parse_time_of_day(value: str) -> tuple[int, int]:
    """Split a validated HH:MM string into (hour, minute)"""
    hours, minutes = value.split(":")
    return int(hours), int(minutes)
