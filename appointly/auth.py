import logging

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .database import get_db
from .models import User, UserRole
from .security_utils import TokenError, decode_access_token

logger = logging.getLogger(__name__)

security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current user from a Bearer access token"""

    if not credentials:
        logger.error("❌ No credentials provided")
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    token = credentials.credentials

    # Basic token format validation before processing
    if len(token.split(".")) != 3:
        logger.warning(f"⚠️ Malformed token received, token length: {len(token)}")
        raise HTTPException(
            status_code=401, detail="Invalid token format. Expected a valid JWT token."
        )

    try:
        payload = decode_access_token(token)
    except TokenError as e:
        headers = {"X-Token-Expired": "true"} if e.expired else None
        raise HTTPException(status_code=401, detail=str(e), headers=headers) from e

    user_id = payload.get("sub")
    if not user_id:
        logger.error(f"❌ Token missing user ID claim. Available claims: {list(payload.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims")

    user = db.query(User).filter(User.id == user_id).first()
    if not user or not user.is_active:
        logger.warning(f"⚠️ Token for unknown or inactive user {user_id}")
        raise HTTPException(status_code=401, detail="Authentication failed")

    logger.debug(f"✅ User authenticated: {user.email}")
    return user


def require_roles(*roles: UserRole):
    """
    Create a dependency that only lets users with one of the given roles through

    Example usage:
        @router.post("/{booking_id}/confirm")
        async def confirm(user: User = Depends(require_roles(UserRole.STAFF))):
            ...
    """
    allowed = set(roles)

    async def role_checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            logger.warning(
                f"⚠️ User {user.email} ({user.role.value}) denied - requires one of "
                f"{sorted(r.value for r in allowed)}"
            )
            raise HTTPException(
                status_code=403,
                detail="You do not have permission to perform this action.",
            )
        return user

    return role_checker
