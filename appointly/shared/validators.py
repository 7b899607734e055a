"""Shared validation utilities"""

import re
from datetime import date, time
from typing import Optional

PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{1,14}$")
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
SERVICE_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9\s\-&']+$")

MIN_CLIENT_AGE_YEARS = 13
SLOT_GRANULARITY_MINUTES = 15


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        raise ValueError("Email is required")

    email = email.strip().lower()

    if not EMAIL_PATTERN.match(email):
        raise ValueError("Invalid email format")

    return email


def validate_phone(phone: Optional[str]) -> str:
    """
    Validate an international phone number (E.164 digits, optional leading +).

    Raises:
        ValueError: If phone number is missing or invalid
    """
    if not phone or not phone.strip():
        raise ValueError("Phone number is required")

    # Allow common separators, validate the digits
    normalized = re.sub(r"[\s\-().]", "", phone)
    if not PHONE_PATTERN.match(normalized):
        raise ValueError("Invalid phone number format")

    return normalized


def validate_strong_password(password: str) -> str:
    """
    Registration password policy.

    Raises:
        ValueError: With the first rule the password breaks
    """
    if not password:
        raise ValueError("Password is required")
    if len(password) < 12:
        raise ValueError("Password must be at least 12 characters")
    if not re.search(r"[A-Z]", password):
        raise ValueError("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        raise ValueError("Password must contain at least one lowercase letter")
    if not re.search(r"[0-9]", password):
        raise ValueError("Password must contain at least one number")
    if not re.search(r"[\W_]", password):
        raise ValueError("Password must contain at least one special character")
    return password


def validate_full_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValueError("Full name is required")
    if len(name) < 2:
        raise ValueError("Full name must be at least 2 characters")
    if len(name) > 100:
        raise ValueError("Full name cannot exceed 100 characters")
    return name


def validate_date_of_birth(date_of_birth: Optional[date], today: Optional[date] = None) -> Optional[date]:
    """Clients must be at least 13 years old"""
    if date_of_birth is None:
        return None

    today = today or date.today()
    try:
        cutoff = today.replace(year=today.year - MIN_CLIENT_AGE_YEARS)
    except ValueError:
        # Feb 29 on a non-leap target year
        cutoff = today.replace(year=today.year - MIN_CLIENT_AGE_YEARS, day=28)

    if date_of_birth >= cutoff:
        raise ValueError(f"Must be at least {MIN_CLIENT_AGE_YEARS} years old")
    return date_of_birth


def validate_slot_time(value: time) -> time:
    """Bookings start on a 15-minute boundary"""
    if value.tzinfo is not None:
        raise ValueError("Booking time must be given in UTC without an offset.")
    if value.minute % SLOT_GRANULARITY_MINUTES != 0 or value.second or value.microsecond:
        raise ValueError("Bookings must start on a 15-minute boundary (e.g. 09:00, 09:15).")
    return value


def validate_service_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValueError("Service name is required.")
    if len(name) < 3:
        raise ValueError("Service name must be at least 3 characters.")
    if len(name) > 100:
        raise ValueError("Service name cannot exceed 100 characters.")
    if not SERVICE_NAME_PATTERN.match(name):
        raise ValueError("Service name contains invalid characters.")
    return name
