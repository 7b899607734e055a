"""
Security Utilities
Password hashing, JWT access tokens and opaque refresh tokens
"""

import base64
import hashlib
import logging
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import ExpiredSignatureError, JWTError
from jose import jwt as jose_jwt

# Password hashing
from passlib.context import CryptContext

from .config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    JWT_ALGORITHM,
    JWT_AUDIENCE,
    JWT_ISSUER,
    SECRET_KEY,
)

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class TokenError(Exception):
    """Access token could not be verified"""

    def __init__(self, message: str, expired: bool = False):
        super().__init__(message)
        self.expired = expired


# ============================================================================
# PASSWORD SECURITY
# ============================================================================


def hash_password_bcrypt(password: str) -> str:
    """Hash password using bcrypt (slower but very secure)"""
    return pwd_context.hash(password)


def verify_password_bcrypt(plain_password: str, hashed_password: str) -> bool:
    """Verify password against bcrypt hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except Exception as e:
        logger.error(f"Password verification error: {e}")
        return False


# ============================================================================
# ACCESS TOKENS (JWT)
# ============================================================================


def create_access_token(
    user_id: str,
    email: str,
    role: str,
    now: Optional[datetime] = None,
    expires_delta: Optional[timedelta] = None,
) -> tuple[str, datetime]:
    """
    Create a signed JWT access token

    Returns:
        (token, expiration) - expiration is timezone-aware UTC
    """
    issued_at = now or datetime.now(timezone.utc)
    expire = issued_at + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))

    to_encode = {
        "sub": user_id,
        "email": email,
        "role": role,
        "jti": str(uuid.uuid4()),
        "iss": JWT_ISSUER,
        "aud": JWT_AUDIENCE,
        "iat": issued_at,
        "exp": expire,
    }
    encoded_jwt = jose_jwt.encode(to_encode, SECRET_KEY, algorithm=JWT_ALGORITHM)
    return encoded_jwt, expire


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify and decode a JWT access token

    Raises:
        TokenError: If the signature, issuer, audience or expiry is invalid
    """
    try:
        return jose_jwt.decode(
            token,
            SECRET_KEY,
            algorithms=[JWT_ALGORITHM],
            audience=JWT_AUDIENCE,
            issuer=JWT_ISSUER,
        )
    except ExpiredSignatureError as e:
        raise TokenError("Token has expired. Please refresh your session.", expired=True) from e
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        raise TokenError("Invalid token") from e


# ============================================================================
# REFRESH TOKENS
# ============================================================================


def generate_refresh_token() -> str:
    """64 random bytes, URL-safe base64"""
    return base64.urlsafe_b64encode(secrets.token_bytes(64)).decode()


def hash_token(token: str) -> str:
    """SHA-256 of a refresh token; only the hash is stored"""
    digest = hashlib.sha256(token.encode("utf-8")).digest()
    return base64.b64encode(digest).decode()


# ============================================================================
# AUDIT LOGGING
# ============================================================================


def log_security_event(
    event_type: str,
    user_id: Optional[str] = None,
    ip_address: Optional[str] = None,
    details: Optional[dict[str, Any]] = None,
):
    """
    Log security-related events for audit trail

    Args:
        event_type: Type of security event (login, logout, failed_auth, etc.)
        user_id: User identifier
        ip_address: Client IP address
        details: Additional event details
    """
    log_entry = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event_type": event_type,
        "user_id": user_id,
        "ip_address": ip_address,
        "details": details or {},
    }

    logger.info(f"SECURITY_EVENT: {log_entry}")
