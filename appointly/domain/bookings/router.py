"""Booking router - FastAPI endpoints for the booking lifecycle"""

import datetime as dt
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_roles
from ...database import get_db
from ...exceptions import ForbiddenError
from ...models import Booking, BookingStatus, User, UserRole
from ...shared.responses import ServiceResponse
from .schemas import BookingCreate, BookingResponse
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bookings", tags=["Bookings"])


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db)


def _to_response(booking: Booking) -> BookingResponse:
    service = booking.service
    staff = service.staff if service else None
    return BookingResponse(
        id=booking.id,
        serviceId=booking.service_id,
        serviceName=service.name if service else None,
        staffId=service.staff_id if service else None,
        staffName=staff.full_name if staff else None,
        clientId=booking.client_id,
        clientName=booking.client.full_name if booking.client else None,
        date=booking.date,
        time=booking.time,
        status=booking.status.value,
        price=service.price if service else None,
        duration=service.duration if service else None,
        createdAt=booking.created_at,
    )


def _parse_status(value: Optional[str]) -> Optional[BookingStatus]:
    """Match a status name case-insensitively; anything unrecognised means no filter"""
    if not value:
        return None
    for member in BookingStatus:
        if member.value.lower() == value.strip().lower():
            return member
    logger.debug(f"Ignoring unknown booking status filter: {value}")
    return None


def _ensure_self_or_admin(user: User, target_id: str) -> None:
    if user.role != UserRole.ADMIN and user.id != target_id:
        raise ForbiddenError("You can only view your own bookings.")


# ============================================================================
# LIFECYCLE COMMANDS
# ============================================================================


@router.post("", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    data: BookingCreate,
    current_user: User = Depends(require_roles(UserRole.CLIENT, UserRole.ADMIN)),
    service: BookingService = Depends(get_booking_service),
):
    """Book a service slot (clients book for themselves, admins for anyone)"""
    if current_user.role == UserRole.CLIENT and data.clientId != current_user.id:
        raise ForbiddenError("Clients can only create bookings for themselves.")

    booking_id = service.create(
        data.serviceId, data.staffId, data.clientId, data.date, data.time
    )
    return ServiceResponse.ok(message="Booking created successfully.", id=booking_id)


@router.post("/{booking_id}/cancel", response_model=ServiceResponse)
async def cancel_booking(
    booking_id: str,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Cancel a booking as its client or the staff member providing the service"""
    service.cancel(booking_id, current_user.id, current_user.role)
    return ServiceResponse.ok(message="Booking cancelled successfully.", id=booking_id)


@router.post("/{booking_id}/confirm", response_model=ServiceResponse)
async def confirm_booking(
    booking_id: str,
    current_user: User = Depends(require_roles(UserRole.STAFF)),
    service: BookingService = Depends(get_booking_service),
):
    """Approve a pending booking"""
    service.confirm(booking_id)
    return ServiceResponse.ok(message="Booking confirmed successfully.", id=booking_id)


@router.post("/{booking_id}/complete", response_model=ServiceResponse)
async def complete_booking(
    booking_id: str,
    current_user: User = Depends(require_roles(UserRole.STAFF)),
    service: BookingService = Depends(get_booking_service),
):
    """Mark an approved booking as completed"""
    service.complete(booking_id)
    return ServiceResponse.ok(message="Booking completed successfully.", id=booking_id)


# ============================================================================
# QUERIES
# ============================================================================


@router.get("/client/{client_id}", response_model=ServiceResponse[list[BookingResponse]])
async def get_client_bookings(
    client_id: str,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    _ensure_self_or_admin(current_user, client_id)
    bookings = service.list_for_client(client_id)
    return ServiceResponse.ok(data=[_to_response(b) for b in bookings])


@router.get("/staff/{staff_id}", response_model=ServiceResponse[list[BookingResponse]])
async def get_staff_bookings(
    staff_id: str,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    _ensure_self_or_admin(current_user, staff_id)
    bookings = service.list_for_staff(staff_id)
    return ServiceResponse.ok(data=[_to_response(b) for b in bookings])


@router.get("", response_model=ServiceResponse[list[BookingResponse]])
async def get_all_bookings(
    date_from: Optional[dt.date] = Query(None, alias="from"),
    date_to: Optional[dt.date] = Query(None, alias="to"),
    status_filter: Optional[str] = Query(None, alias="status"),
    current_user: User = Depends(require_roles(UserRole.ADMIN)),
    service: BookingService = Depends(get_booking_service),
):
    """All bookings with optional date range and status filters"""
    bookings = service.list_all(date_from, date_to, _parse_status(status_filter))
    return ServiceResponse.ok(data=[_to_response(b) for b in bookings])
