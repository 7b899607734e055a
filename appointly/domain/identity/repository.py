"""Identity repository - Database operations for users and refresh tokens"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import RefreshToken, User


class UserRepository:
    """Repository for user database operations"""

    @staticmethod
    def get_user_by_id(db: Session, user_id: str) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(func.lower(User.email) == email.lower()).first()

    @staticmethod
    def create_user(db: Session, **user_data) -> User:
        user = User(**user_data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def commit(db: Session) -> None:
        db.commit()


class RefreshTokenRepository:
    """Repository for refresh token database operations"""

    @staticmethod
    def add(db: Session, token: RefreshToken) -> None:
        db.add(token)

    @staticmethod
    def get_by_hash(db: Session, token_hash: str) -> Optional[RefreshToken]:
        return db.query(RefreshToken).filter(RefreshToken.token_hash == token_hash).first()

    @staticmethod
    def get_active_for_user(db: Session, user_id: str) -> list[RefreshToken]:
        return (
            db.query(RefreshToken)
            .filter(RefreshToken.user_id == user_id, RefreshToken.is_revoked.is_(False))
            .all()
        )

    @staticmethod
    def revoke(token: RefreshToken, revoked_at: datetime, replaced_by: Optional[str] = None) -> None:
        token.is_revoked = True
        token.revoked_at = revoked_at
        if replaced_by:
            token.replaced_by_token_hash = replaced_by

    @staticmethod
    def commit(db: Session) -> None:
        db.commit()
