"""Booking lifecycle rules - pure functions over status and time"""

from datetime import date, datetime, time, timezone

from ...models import BookingStatus

CANCELLABLE_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.APPROVED})


def slot_start(booking_date: date, booking_time: time) -> datetime:
    """The UTC instant a booking starts; naive times are already UTC"""
    start = datetime.combine(booking_date, booking_time)
    if start.tzinfo is None:
        return start.replace(tzinfo=timezone.utc)
    return start.astimezone(timezone.utc)


def to_utc_slot(booking_date: date, booking_time: time) -> tuple[date, time]:
    """Date and naive time of the slot in UTC, as stored"""
    start = slot_start(booking_date, booking_time)
    return start.date(), start.time()


def is_in_future(booking_date: date, booking_time: time, now: datetime) -> bool:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return slot_start(booking_date, booking_time) > now


def can_cancel(status: BookingStatus) -> bool:
    return status in CANCELLABLE_STATUSES


def can_confirm(status: BookingStatus) -> bool:
    return status == BookingStatus.PENDING


def can_complete(status: BookingStatus) -> bool:
    return status == BookingStatus.APPROVED
