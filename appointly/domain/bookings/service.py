"""Booking service - lifecycle of a booking from request to completion"""

import logging
from datetime import date, time
from typing import Optional, Union

from sqlalchemy.orm import Session

from ...config import SLOT_CHECK_EXCLUDES_CANCELLED
from ...exceptions import (
    BusinessRuleError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    TimeSlotUnavailableError,
)
from ...models import Booking, BookingStatus, UserRole
from ...shared.clock import SystemClock
from ..catalog.repository import ServiceRepository
from ..identity.repository import UserRepository
from . import rules
from .repository import BookingRepository

logger = logging.getLogger(__name__)


class BookingService:
    """
    Service layer for the booking lifecycle.

    Pending -> Approved -> Completed, with Cancelled reachable from Pending
    or Approved. Every rule violation raises a typed DomainError.
    """

    def __init__(
        self,
        db: Session,
        clock=None,
        exclude_cancelled_from_slot_check: bool = SLOT_CHECK_EXCLUDES_CANCELLED,
    ):
        self.db = db
        self.clock = clock or SystemClock()
        self.exclude_cancelled_from_slot_check = exclude_cancelled_from_slot_check
        self.repo = BookingRepository()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create(
        self,
        service_id: str,
        staff_id: str,
        client_id: str,
        booking_date: date,
        booking_time: time,
    ) -> str:
        """Create a Pending booking and return its id"""
        booking_date, booking_time = rules.to_utc_slot(booking_date, booking_time)
        logger.info(
            f"📥 Creating booking - Client: {client_id}, Service: {service_id}, "
            f"Date: {booking_date:%Y-%m-%d}, Time: {booking_time:%H:%M}"
        )

        if not rules.is_in_future(booking_date, booking_time, self.clock.now()):
            raise BusinessRuleError("Booking must be scheduled for a future date and time.")

        service = ServiceRepository.get_service_by_id(self.db, service_id)
        if not service:
            raise NotFoundError("Service", service_id)

        if service.staff_id != staff_id:
            raise BusinessRuleError("The selected staff member does not provide this service.")

        client = UserRepository.get_user_by_id(self.db, client_id)
        if not client or client.role != UserRole.CLIENT:
            raise NotFoundError("Client", client_id)

        if self.repo.exists_for_slot(
            self.db,
            staff_id,
            booking_date,
            booking_time,
            exclude_cancelled=self.exclude_cancelled_from_slot_check,
        ):
            logger.warning(
                f"⚠️ Slot taken for staff {staff_id} on {booking_date:%Y-%m-%d} {booking_time:%H:%M}"
            )
            raise TimeSlotUnavailableError(booking_date, booking_time)

        booking = Booking(
            service_id=service_id,
            client_id=client_id,
            date=booking_date,
            time=booking_time,
            status=BookingStatus.PENDING,
        )
        self.repo.add(self.db, booking)
        self.repo.commit(self.db)

        logger.info(f"✅ Booking created: {booking.id}")
        return booking.id

    def cancel(
        self, booking_id: str, requester_id: str, requester_role: Union[UserRole, str]
    ) -> bool:
        """Cancel a booking on behalf of its client or the assigned staff member"""
        logger.info(f"🗑️ Cancelling booking: {booking_id}")

        booking = self._get_or_raise(booking_id)
        is_owner = requester_role == UserRole.CLIENT and booking.client_id == requester_id
        is_assigned_staff = (
            requester_role == UserRole.STAFF and booking.service.staff_id == requester_id
        )

        if not is_owner and not is_assigned_staff:
            logger.warning(f"⚠️ {requester_role} {requester_id} may not cancel booking {booking_id}")
            raise ForbiddenError("You do not have permission to cancel this booking.")

        if not rules.can_cancel(booking.status):
            raise InvalidTransitionError(booking.status.value, BookingStatus.CANCELLED.value)

        self._set_status(booking, BookingStatus.CANCELLED)
        logger.info(f"✅ Booking cancelled: {booking.id}")
        return True

    def confirm(self, booking_id: str) -> bool:
        """Approve a pending booking"""
        logger.info(f"Confirming booking: {booking_id}")

        booking = self._get_or_raise(booking_id)
        if not rules.can_confirm(booking.status):
            raise InvalidTransitionError(booking.status.value, BookingStatus.APPROVED.value)

        self._set_status(booking, BookingStatus.APPROVED)
        logger.info(f"✅ Booking confirmed: {booking.id}")
        return True

    def complete(self, booking_id: str) -> bool:
        """Mark an approved booking as completed"""
        logger.info(f"Completing booking: {booking_id}")

        booking = self._get_or_raise(booking_id)
        if not rules.can_complete(booking.status):
            raise InvalidTransitionError(booking.status.value, BookingStatus.COMPLETED.value)

        self._set_status(booking, BookingStatus.COMPLETED)
        logger.info(f"✅ Booking completed: {booking.id}")
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, booking_id: str) -> Booking:
        return self._get_or_raise(booking_id)

    def list_for_client(self, client_id: str) -> list[Booking]:
        logger.info(f"Fetching bookings for client: {client_id}")
        return self.repo.list_by_client(self.db, client_id)

    def list_for_staff(self, staff_id: str) -> list[Booking]:
        logger.info(f"Fetching bookings for staff: {staff_id}")
        return self.repo.list_by_staff(self.db, staff_id)

    def list_all(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        status: Optional[BookingStatus] = None,
    ) -> list[Booking]:
        logger.info(f"Fetching all bookings - From: {date_from}, To: {date_to}, Status: {status}")

        if date_from is not None and date_to is not None and date_from > date_to:
            raise BusinessRuleError("'From' date cannot be later than 'To' date.")

        return self.repo.list_all(self.db, date_from, date_to, status)

    # ------------------------------------------------------------------

    def _get_or_raise(self, booking_id: str) -> Booking:
        booking = self.repo.get(self.db, booking_id)
        if not booking:
            raise NotFoundError("Booking", booking_id)
        return booking

    def _set_status(self, booking: Booking, status: BookingStatus) -> None:
        booking.status = status
        self.repo.update(self.db, booking)
        self.repo.commit(self.db)
