"""Service catalog rules"""

from decimal import Decimal
from typing import Optional

from ...models import User, UserRole

MIN_DURATION_MINUTES = 30
MAX_DURATION_MINUTES = 480
MIN_NAME_LENGTH = 5


def is_valid_price(price: Decimal) -> bool:
    return price is not None and price > 0


def is_valid_duration(duration_minutes: int) -> bool:
    return duration_minutes is not None and MIN_DURATION_MINUTES <= duration_minutes <= MAX_DURATION_MINUTES


def is_valid_name(name: Optional[str]) -> bool:
    return bool(name and name.strip()) and len(name) >= MIN_NAME_LENGTH


def can_be_assigned_to_staff(user: Optional[User]) -> bool:
    """Only active staff members can provide a service"""
    return user is not None and user.is_active and user.role == UserRole.STAFF


def broken_rule(name: str, price: Decimal, duration: int) -> Optional[str]:
    """The message for the first rule the values break, or None"""
    if not is_valid_name(name):
        return f"Service name must be at least {MIN_NAME_LENGTH} characters."
    if not is_valid_price(price):
        return "Price must be greater than zero."
    if not is_valid_duration(duration):
        return f"Duration must be between {MIN_DURATION_MINUTES} and {MAX_DURATION_MINUTES} minutes."
    return None
