"""Shared fixtures: in-memory database, seeded users and catalog, API client"""

import os

# Configure before the application modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "production"
os.environ.pop("REDIS_URL", None)
os.environ.pop("ADMIN_EMAIL", None)
os.environ.pop("ADMIN_PASSWORD", None)

from datetime import date, datetime, time, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from appointly.database import Base, get_db
from appointly.domain.bookings.service import BookingService
from appointly.main import create_app
from appointly.models import Booking, BookingStatus, Category, Service, User, UserRole
from appointly.security_utils import create_access_token, hash_password_bcrypt
from appointly.shared.clock import FixedClock

DEFAULT_PASSWORD = "Sup3r-Secret-Pass!"
# bcrypt is slow on purpose; hash once for every seeded user
DEFAULT_PASSWORD_HASH = hash_password_bcrypt(DEFAULT_PASSWORD)

NOW = datetime(2026, 1, 10, 9, 0, tzinfo=timezone.utc)
SLOT_DATE = date(2030, 1, 1)
SLOT_TIME = time(10, 0)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make_user(role=UserRole.CLIENT, email=None, full_name=None, is_active=True):
        counter["n"] += 1
        user = User(
            email=email or f"{role.value.lower()}{counter['n']}@example.com",
            password_hash=DEFAULT_PASSWORD_HASH,
            full_name=full_name or f"{role.value} {counter['n']}",
            phone="+15551234567",
            role=role,
            is_active=is_active,
            failed_login_count=0,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMIN, email="admin@example.com", full_name="Ada Admin")


@pytest.fixture
def staff(make_user):
    return make_user(UserRole.STAFF, email="stylist@example.com", full_name="Sam Stylist")


@pytest.fixture
def other_staff(make_user):
    return make_user(UserRole.STAFF, email="barber@example.com", full_name="Bo Barber")


@pytest.fixture
def client_user(make_user):
    return make_user(UserRole.CLIENT, email="carol@example.com", full_name="Carol Client")


@pytest.fixture
def other_client(make_user):
    return make_user(UserRole.CLIENT, email="dave@example.com", full_name="Dave Client")


@pytest.fixture
def category(db_session):
    category = Category(name="Hair", is_active=True)
    db_session.add(category)
    db_session.commit()
    return category


@pytest.fixture
def make_service(db_session, category):
    def _make_service(staff_user, name="Classic Haircut", price="45.00", duration=60):
        service = Service(
            name=name,
            description="Wash, cut and style",
            price=Decimal(price),
            duration=duration,
            staff_id=staff_user.id,
            category_id=category.id,
        )
        db_session.add(service)
        db_session.commit()
        return service

    return _make_service


@pytest.fixture
def service(make_service, staff):
    return make_service(staff)


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def booking_service(db_session, clock):
    return BookingService(db_session, clock=clock)


@pytest.fixture
def make_booking(db_session):
    """Insert a booking directly, bypassing the lifecycle rules"""

    def _make_booking(service, client, status=BookingStatus.PENDING, booking_date=SLOT_DATE, booking_time=SLOT_TIME):
        booking = Booking(
            service_id=service.id,
            client_id=client.id,
            date=booking_date,
            time=booking_time,
            status=status,
        )
        db_session.add(booking)
        db_session.commit()
        return booking

    return _make_booking


# ============================================================================
# API
# ============================================================================


@pytest.fixture
def app(session_factory):
    app = create_app(is_development=False)

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def api(app):
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        token, _ = create_access_token(user.id, user.email, user.role.value)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
