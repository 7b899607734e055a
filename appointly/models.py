import enum
import uuid

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Time,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_id():
    """Generate an opaque unique identifier for a new row"""
    return str(uuid.uuid4())


class UserRole(str, enum.Enum):
    ADMIN = "Admin"
    STAFF = "Staff"
    CLIENT = "Client"


class BookingStatus(str, enum.Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    # Declared but reserved: no transition leads here
    REJECTED = "Rejected"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=False)
    role = Column(
        Enum(UserRole, native_enum=False, length=20, values_callable=_enum_values),
        nullable=False,
        index=True,
    )
    date_of_birth = Column(Date, nullable=True)  # Clients only
    is_active = Column(Boolean, default=True, nullable=False)
    # Lockout tracking for repeated failed logins
    failed_login_count = Column(Integer, default=0, nullable=False)
    lockout_end = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    services = relationship("Service", back_populates="staff")
    bookings = relationship("Booking", back_populates="client")
    refresh_tokens = relationship(
        "RefreshToken", back_populates="user", cascade="all, delete-orphan"
    )


class Category(Base):
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(100), unique=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    services = relationship("Service", back_populates="category")


class Service(Base):
    __tablename__ = "services"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(Integer, nullable=False)  # Minutes
    price = Column(Numeric(10, 2), nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False)
    staff_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    staff = relationship("User", back_populates="services")
    category = relationship("Category", back_populates="services")
    bookings = relationship("Booking", back_populates="service")


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (Index("ix_bookings_date_time", "date", "time"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    service_id = Column(String(36), ForeignKey("services.id"), nullable=False, index=True)
    client_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    time = Column(Time, nullable=False)
    status = Column(
        Enum(BookingStatus, native_enum=False, length=20, values_callable=_enum_values),
        default=BookingStatus.PENDING,
        nullable=False,
        index=True,
    )
    # Optimistic concurrency: concurrent updates of the same row raise StaleDataError
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    service = relationship("Service", back_populates="bookings")
    client = relationship("User", back_populates="bookings")

    __mapper_args__ = {"version_id_col": version}

    @property
    def staff_id(self):
        """Staff is reached through the booked service"""
        return self.service.staff_id if self.service else None


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    token_hash = Column(String(64), unique=True, index=True, nullable=False)  # SHA-256, base64
    expires_at = Column(DateTime, nullable=False)
    is_revoked = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, nullable=False)
    revoked_at = Column(DateTime, nullable=True)
    replaced_by_token_hash = Column(String(64), nullable=True)

    user = relationship("User", back_populates="refresh_tokens")
