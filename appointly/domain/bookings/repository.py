"""Booking repository - Database operations for bookings"""

from datetime import date, time
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Booking, BookingStatus, Service


def _with_details(query):
    """Eager-load what booking responses display"""
    return query.options(
        joinedload(Booking.service).joinedload(Service.staff),
        joinedload(Booking.client),
    )


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def add(db: Session, booking: Booking) -> None:
        db.add(booking)

    @staticmethod
    def get(db: Session, booking_id: str) -> Optional[Booking]:
        """Get a booking by ID with its service loaded"""
        return _with_details(db.query(Booking)).filter(Booking.id == booking_id).first()

    @staticmethod
    def update(db: Session, booking: Booking) -> None:
        # Loaded instances are tracked by the session; re-adding covers detached ones
        db.add(booking)

    @staticmethod
    def list_by_client(db: Session, client_id: str) -> list[Booking]:
        return (
            _with_details(db.query(Booking))
            .filter(Booking.client_id == client_id)
            .order_by(Booking.date.asc(), Booking.time.asc())
            .all()
        )

    @staticmethod
    def list_by_staff(db: Session, staff_id: str) -> list[Booking]:
        """Bookings of every service the staff member is assigned to"""
        return (
            _with_details(db.query(Booking))
            .join(Service, Booking.service_id == Service.id)
            .filter(Service.staff_id == staff_id)
            .order_by(Booking.date.asc(), Booking.time.asc())
            .all()
        )

    @staticmethod
    def list_all(
        db: Session,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        status: Optional[BookingStatus] = None,
    ) -> list[Booking]:
        """All bookings with optional inclusive date range and status filters"""
        query = _with_details(db.query(Booking))

        if date_from is not None:
            query = query.filter(Booking.date >= date_from)
        if date_to is not None:
            query = query.filter(Booking.date <= date_to)
        if status is not None:
            query = query.filter(Booking.status == status)

        return query.order_by(Booking.date.asc(), Booking.time.asc()).all()

    @staticmethod
    def exists_for_slot(
        db: Session,
        staff_id: str,
        slot_date: date,
        slot_time: time,
        exclude_cancelled: bool = False,
    ) -> bool:
        """Whether the staff member already has a booking at this date and time"""
        query = (
            db.query(Booking.id)
            .join(Service, Booking.service_id == Service.id)
            .filter(
                Service.staff_id == staff_id,
                Booking.date == slot_date,
                Booking.time == slot_time,
            )
        )
        if exclude_cancelled:
            query = query.filter(Booking.status != BookingStatus.CANCELLED)

        return db.query(query.exists()).scalar()

    @staticmethod
    def commit(db: Session) -> None:
        db.commit()
