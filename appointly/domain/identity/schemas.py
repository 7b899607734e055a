"""Identity domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import (
    validate_date_of_birth,
    validate_email,
    validate_full_name,
    validate_phone,
    validate_strong_password,
)

MIN_LOGIN_PASSWORD_LENGTH = 8


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v):
        return validate_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if not v or len(v) < MIN_LOGIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_LOGIN_PASSWORD_LENGTH} characters")
        return v


class RefreshTokenRequest(BaseModel):
    refreshToken: str

    @field_validator("refreshToken")
    @classmethod
    def validate_token(cls, v):
        if not v or not v.strip():
            raise ValueError("Refresh token is required")
        return v.strip()


class RegisterBaseRequest(BaseModel):
    """Fields every account registration carries"""

    email: str
    password: str
    fullName: str
    phone: str

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v):
        return validate_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return validate_strong_password(v)

    @field_validator("fullName")
    @classmethod
    def validate_name(cls, v):
        return validate_full_name(v)

    @field_validator("phone")
    @classmethod
    def validate_phone_number(cls, v):
        return validate_phone(v)


class RegisterClientRequest(RegisterBaseRequest):
    dateOfBirth: Optional[date] = None

    @field_validator("dateOfBirth")
    @classmethod
    def validate_age(cls, v):
        return validate_date_of_birth(v)


class RegisterStaffRequest(RegisterBaseRequest):
    pass


class LoginResponse(BaseModel):
    """Token pair plus the profile the front-end keeps in session"""

    accessToken: str
    refreshToken: str
    expiration: datetime
    role: str
    userId: str
    fullName: str
    email: str


class UserProfileResponse(BaseModel):
    userId: str
    email: str
    fullName: str
    role: str
    phone: Optional[str] = None
    isAuthenticated: bool = True
