"""Tests for AuthService - registration, lockout and refresh token rotation"""

from datetime import date, datetime, timedelta, timezone

import pytest

from appointly.config import LOCKOUT_MINUTES, MAX_FAILED_LOGIN_ATTEMPTS
from appointly.domain.identity.service import AuthService
from appointly.exceptions import AuthenticationError, ConflictError
from appointly.models import RefreshToken, User, UserRole
from appointly.security_utils import decode_access_token, hash_token, verify_password_bcrypt
from appointly.shared.clock import FixedClock
from tests.conftest import DEFAULT_PASSWORD

START = datetime(2026, 5, 1, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def auth_service(db_session):
    return AuthService(db_session)


class TestRegistration:
    def test_register_client(self, auth_service, db_session):
        user_id = auth_service.register_client(
            "New.Client@Example.com", DEFAULT_PASSWORD, "New Client", "+15550001111", date(1990, 5, 1)
        )

        user = db_session.get(User, user_id)
        assert user.role == UserRole.CLIENT
        assert user.email == "new.client@example.com"
        assert user.date_of_birth == date(1990, 5, 1)
        assert user.password_hash != DEFAULT_PASSWORD
        assert verify_password_bcrypt(DEFAULT_PASSWORD, user.password_hash)

    def test_register_staff(self, auth_service, db_session):
        user_id = auth_service.register_staff("pat@example.com", DEFAULT_PASSWORD, "Pat Staff", "+15550002222")

        assert db_session.get(User, user_id).role == UserRole.STAFF

    def test_duplicate_email_is_conflict(self, auth_service, client_user):
        with pytest.raises(ConflictError):
            auth_service.register_client(client_user.email.upper(), DEFAULT_PASSWORD, "Copy Cat", "+15550003333")

    def test_seed_admin_once(self, auth_service):
        first = auth_service.seed_admin("root@example.com", DEFAULT_PASSWORD)
        second = auth_service.seed_admin("root@example.com", DEFAULT_PASSWORD)

        assert first is not None
        assert first.role == UserRole.ADMIN
        assert second is None


class TestLogin:
    def test_login_returns_token_pair(self, auth_service, client_user):
        result = auth_service.login(client_user.email, DEFAULT_PASSWORD)

        assert result.userId == client_user.id
        assert result.role == "Client"
        assert result.refreshToken

        claims = decode_access_token(result.accessToken)
        assert claims["sub"] == client_user.id
        assert claims["role"] == "Client"
        assert claims["email"] == client_user.email

    def test_login_stores_only_refresh_hash(self, auth_service, db_session, client_user):
        result = auth_service.login(client_user.email, DEFAULT_PASSWORD)

        tokens = db_session.query(RefreshToken).filter_by(user_id=client_user.id).all()
        assert len(tokens) == 1
        assert tokens[0].token_hash == hash_token(result.refreshToken)
        assert tokens[0].token_hash != result.refreshToken

    def test_unknown_email(self, auth_service):
        with pytest.raises(AuthenticationError, match="Invalid email or password"):
            auth_service.login("nobody@example.com", DEFAULT_PASSWORD)

    def test_wrong_password(self, auth_service, client_user):
        with pytest.raises(AuthenticationError, match="Invalid email or password"):
            auth_service.login(client_user.email, "Wrong-Password-1!")

    def test_inactive_user(self, auth_service, make_user):
        user = make_user(UserRole.CLIENT, is_active=False)

        with pytest.raises(AuthenticationError):
            auth_service.login(user.email, DEFAULT_PASSWORD)

    def test_lockout_after_repeated_failures(self, db_session, client_user):
        service = AuthService(db_session, clock=FixedClock(START))

        for _ in range(MAX_FAILED_LOGIN_ATTEMPTS):
            with pytest.raises(AuthenticationError, match="Invalid email or password"):
                service.login(client_user.email, "Wrong-Password-1!")

        # Even the right password is refused while locked
        with pytest.raises(AuthenticationError, match="locked"):
            service.login(client_user.email, DEFAULT_PASSWORD)

        after_lockout = AuthService(
            db_session, clock=FixedClock(START + timedelta(minutes=LOCKOUT_MINUTES, seconds=1))
        )
        result = after_lockout.login(client_user.email, DEFAULT_PASSWORD)
        assert result.userId == client_user.id

    def test_success_resets_failed_count(self, auth_service, db_session, client_user):
        with pytest.raises(AuthenticationError):
            auth_service.login(client_user.email, "Wrong-Password-1!")
        assert client_user.failed_login_count == 1

        auth_service.login(client_user.email, DEFAULT_PASSWORD)

        db_session.refresh(client_user)
        assert client_user.failed_login_count == 0
        assert client_user.lockout_end is None


class TestRefreshRotation:
    def test_refresh_rotates_token(self, auth_service, db_session, client_user):
        first = auth_service.login(client_user.email, DEFAULT_PASSWORD)

        second = auth_service.refresh(first.refreshToken)

        assert second.refreshToken != first.refreshToken
        old = db_session.query(RefreshToken).filter_by(token_hash=hash_token(first.refreshToken)).one()
        assert old.is_revoked is True
        assert old.revoked_at is not None
        assert old.replaced_by_token_hash == hash_token(second.refreshToken)

        new = db_session.query(RefreshToken).filter_by(token_hash=hash_token(second.refreshToken)).one()
        assert new.is_revoked is False

    def test_rotated_token_cannot_be_reused(self, auth_service, client_user):
        first = auth_service.login(client_user.email, DEFAULT_PASSWORD)
        auth_service.refresh(first.refreshToken)

        with pytest.raises(AuthenticationError):
            auth_service.refresh(first.refreshToken)

    def test_unknown_refresh_token(self, auth_service):
        with pytest.raises(AuthenticationError):
            auth_service.refresh("not-a-real-token")

    def test_expired_refresh_token(self, db_session, client_user):
        issued = AuthService(db_session, clock=FixedClock(START)).login(client_user.email, DEFAULT_PASSWORD)

        later = AuthService(db_session, clock=FixedClock(START + timedelta(days=8)))
        with pytest.raises(AuthenticationError, match="expired"):
            later.refresh(issued.refreshToken)

    def test_revoke_all(self, auth_service, db_session, client_user):
        first = auth_service.login(client_user.email, DEFAULT_PASSWORD)
        second = auth_service.login(client_user.email, DEFAULT_PASSWORD)

        assert auth_service.revoke_all(client_user.id) == 2

        for token in (first.refreshToken, second.refreshToken):
            with pytest.raises(AuthenticationError):
                auth_service.refresh(token)
