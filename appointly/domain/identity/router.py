"""Auth router - login, token refresh and account registration"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_roles
from ...database import get_db
from ...models import User, UserRole
from ...rate_limiter import create_rate_limiter, get_client_ip
from ...shared.responses import ServiceResponse
from .schemas import (
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    RegisterClientRequest,
    RegisterStaffRequest,
    UserProfileResponse,
)
from .service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

# Brute-force protection on the anonymous credential endpoints
rate_limit_login = create_rate_limiter(limit=10, window_seconds=60, key_prefix="login")
rate_limit_refresh = create_rate_limiter(limit=30, window_seconds=60, key_prefix="refresh")
rate_limit_register = create_rate_limiter(limit=5, window_seconds=300, key_prefix="register")


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    """Dependency injection for AuthService"""
    return AuthService(db)


@router.post("/login", response_model=ServiceResponse[LoginResponse])
async def login(
    data: LoginRequest,
    request: Request,
    _: None = Depends(rate_limit_login),
    service: AuthService = Depends(get_auth_service),
):
    """Login with email and password"""
    result = service.login(data.email, data.password, ip_address=get_client_ip(request))
    return ServiceResponse.ok(data=result, message="Login successful", id=result.userId)


@router.post("/refresh", response_model=ServiceResponse[LoginResponse])
async def refresh_token(
    data: RefreshTokenRequest,
    request: Request,
    _: None = Depends(rate_limit_refresh),
    service: AuthService = Depends(get_auth_service),
):
    """Rotate a refresh token into a new token pair"""
    result = service.refresh(data.refreshToken, ip_address=get_client_ip(request))
    return ServiceResponse.ok(data=result, message="Token refreshed successfully", id=result.userId)


@router.post("/revoke", response_model=ServiceResponse)
async def revoke_tokens(
    current_user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    """Revoke all refresh tokens of the current user (logout from all devices)"""
    revoked = service.revoke_all(current_user.id)
    return ServiceResponse.ok(data=revoked, message="All tokens revoked successfully")


@router.post("/register/client", response_model=ServiceResponse)
async def register_client(
    data: RegisterClientRequest,
    _: None = Depends(rate_limit_register),
    service: AuthService = Depends(get_auth_service),
):
    user_id = service.register_client(
        data.email, data.password, data.fullName, data.phone, data.dateOfBirth
    )
    return ServiceResponse.ok(message="Client registered successfully", id=user_id)


@router.post("/register/staff", response_model=ServiceResponse)
async def register_staff(
    data: RegisterStaffRequest,
    current_user: User = Depends(require_roles(UserRole.ADMIN)),
    service: AuthService = Depends(get_auth_service),
):
    """Create a staff account (admin only)"""
    user_id = service.register_staff(data.email, data.password, data.fullName, data.phone)
    return ServiceResponse.ok(message="Staff registered successfully", id=user_id)


@router.get("/me", response_model=UserProfileResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    return UserProfileResponse(
        userId=current_user.id,
        email=current_user.email,
        fullName=current_user.full_name,
        role=current_user.role.value,
        phone=current_user.phone,
    )
