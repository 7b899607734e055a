"""Authentication service - accounts, login lockout and refresh token rotation"""

import logging
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...config import (
    LOCKOUT_MINUTES,
    MAX_FAILED_LOGIN_ATTEMPTS,
    REFRESH_TOKEN_EXPIRE_DAYS,
)
from ...exceptions import AuthenticationError, ConflictError
from ...models import RefreshToken, User, UserRole
from ...security_utils import (
    create_access_token,
    generate_refresh_token,
    hash_password_bcrypt,
    hash_token,
    log_security_event,
    verify_password_bcrypt,
)
from ...shared.clock import SystemClock, utc_naive
from .repository import RefreshTokenRepository, UserRepository
from .schemas import LoginResponse

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    """Service layer for authentication"""

    def __init__(self, db: Session, clock=None):
        self.db = db
        self.clock = clock or SystemClock()
        self.users = UserRepository()
        self.tokens = RefreshTokenRepository()

    # ========================================================================
    # REGISTRATION
    # ========================================================================

    def register_client(
        self,
        email: str,
        password: str,
        full_name: str,
        phone: str,
        date_of_birth: Optional[date] = None,
    ) -> str:
        user = self._create_user(
            UserRole.CLIENT, email, password, full_name, phone, date_of_birth=date_of_birth
        )
        return user.id

    def register_staff(self, email: str, password: str, full_name: str, phone: str) -> str:
        user = self._create_user(UserRole.STAFF, email, password, full_name, phone)
        return user.id

    def seed_admin(self, email: str, password: str, full_name: str = "Administrator") -> Optional[User]:
        """Create the admin account unless it already exists"""
        if self.users.get_user_by_email(self.db, email):
            logger.info(f"Admin account already present: {email}")
            return None

        user = self._create_user(UserRole.ADMIN, email, password, full_name, phone="+10000000000")
        logger.info(f"👤 Admin account seeded: {email}")
        return user

    def _create_user(
        self,
        role: UserRole,
        email: str,
        password: str,
        full_name: str,
        phone: str,
        date_of_birth: Optional[date] = None,
    ) -> User:
        logger.info(f"📥 Registering {role.value}: {email}")

        if self.users.get_user_by_email(self.db, email):
            logger.warning(f"⚠️ Registration rejected, email in use: {email}")
            raise ConflictError("A user with this email already exists.")

        user = self.users.create_user(
            self.db,
            email=email.lower(),
            password_hash=hash_password_bcrypt(password),
            full_name=full_name,
            phone=phone,
            role=role,
            date_of_birth=date_of_birth,
            is_active=True,
            failed_login_count=0,
        )
        logger.info(f"✅ {role.value} registered: {user.id}")
        return user

    # ========================================================================
    # LOGIN / TOKENS
    # ========================================================================

    def login(self, email: str, password: str, ip_address: Optional[str] = None) -> LoginResponse:
        now = utc_naive(self.clock.now())
        user = self.users.get_user_by_email(self.db, email)

        if not user or not user.is_active:
            log_security_event("login_failed", ip_address=ip_address, details={"reason": "unknown_user"})
            raise AuthenticationError(INVALID_CREDENTIALS)

        if user.lockout_end and user.lockout_end > now:
            log_security_event("login_locked", user_id=user.id, ip_address=ip_address)
            raise AuthenticationError("Account is locked. Please try again later.")

        if not verify_password_bcrypt(password, user.password_hash):
            self._record_failed_login(user, now)
            log_security_event(
                "login_failed",
                user_id=user.id,
                ip_address=ip_address,
                details={"failed_count": user.failed_login_count},
            )
            raise AuthenticationError(INVALID_CREDENTIALS)

        user.failed_login_count = 0
        user.lockout_end = None

        response = self._issue_tokens(user)
        log_security_event("login_success", user_id=user.id, ip_address=ip_address)
        return response

    def _record_failed_login(self, user: User, now) -> None:
        user.failed_login_count = (user.failed_login_count or 0) + 1
        if user.failed_login_count >= MAX_FAILED_LOGIN_ATTEMPTS:
            user.lockout_end = now + timedelta(minutes=LOCKOUT_MINUTES)
            user.failed_login_count = 0
            logger.warning(f"🔒 Account locked for {LOCKOUT_MINUTES} minutes: {user.email}")
        self.users.commit(self.db)

    def refresh(self, refresh_token: str, ip_address: Optional[str] = None) -> LoginResponse:
        """Exchange a refresh token for a new pair; the presented token is revoked"""
        now = utc_naive(self.clock.now())
        stored = self.tokens.get_by_hash(self.db, hash_token(refresh_token))

        if not stored or stored.is_revoked or stored.expires_at <= now:
            log_security_event("refresh_failed", ip_address=ip_address)
            raise AuthenticationError("Invalid or expired refresh token")

        user = self.users.get_user_by_id(self.db, stored.user_id)
        if not user or not user.is_active:
            raise AuthenticationError("User not found")

        response = self._issue_tokens(user, replacing=stored)
        log_security_event("token_refreshed", user_id=user.id, ip_address=ip_address)
        return response

    def revoke_all(self, user_id: str) -> int:
        """Revoke every active refresh token of the user (logout everywhere)"""
        now = utc_naive(self.clock.now())
        active = self.tokens.get_active_for_user(self.db, user_id)
        for token in active:
            self.tokens.revoke(token, now)
        self.tokens.commit(self.db)

        log_security_event("tokens_revoked", user_id=user_id, details={"count": len(active)})
        return len(active)

    def _issue_tokens(self, user: User, replacing: Optional[RefreshToken] = None) -> LoginResponse:
        issued_at = self.clock.now()
        access_token, expiration = create_access_token(
            user.id, user.email, user.role.value, now=issued_at
        )

        refresh_token = generate_refresh_token()
        refresh_hash = hash_token(refresh_token)
        self.tokens.add(
            self.db,
            RefreshToken(
                user_id=user.id,
                token_hash=refresh_hash,
                expires_at=utc_naive(issued_at + timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS)),
                created_at=utc_naive(issued_at),
                is_revoked=False,
            ),
        )
        if replacing is not None:
            self.tokens.revoke(replacing, utc_naive(issued_at), replaced_by=refresh_hash)

        self.tokens.commit(self.db)

        return LoginResponse(
            accessToken=access_token,
            refreshToken=refresh_token,
            expiration=expiration,
            role=user.role.value,
            userId=user.id,
            fullName=user.full_name,
            email=user.email,
        )
