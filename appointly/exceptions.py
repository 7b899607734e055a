"""
Domain exceptions

Services raise these when a business rule is violated. They are translated
to HTTP responses in one place (see errors.py), so routers never catch them.
"""

from datetime import date, time


class DomainError(Exception):
    """Base class for all domain-specific errors"""

    error_type = "DomainError"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(DomainError):
    error_type = "NotFound"
    status_code = 404

    def __init__(self, entity: str, entity_id=None, message: str | None = None):
        if message is None:
            message = f"{entity} with id '{entity_id}' was not found."
        super().__init__(message)
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(DomainError):
    """An entity already exists (duplicate)"""

    error_type = "Conflict"
    status_code = 409


class TimeSlotUnavailableError(ConflictError):
    error_type = "TimeSlotUnavailable"

    def __init__(self, slot_date: date, slot_time: time):
        super().__init__(
            f"The time slot on {slot_date:%Y-%m-%d} at {slot_time:%H:%M} is already booked."
        )
        self.slot_date = slot_date
        self.slot_time = slot_time


class BusinessRuleError(DomainError):
    error_type = "BusinessRuleViolation"
    status_code = 422


class ForbiddenError(DomainError):
    error_type = "Forbidden"
    status_code = 403

    def __init__(self, message: str = "You are not authorized to perform this action."):
        super().__init__(message)


class InvalidTransitionError(DomainError):
    error_type = "InvalidStateTransition"
    status_code = 422

    def __init__(self, from_status: str, to_status: str):
        super().__init__(f"Cannot transition booking from '{from_status}' to '{to_status}'.")
        self.from_status = from_status
        self.to_status = to_status


class AuthenticationError(DomainError):
    """Credentials or refresh token rejected"""

    error_type = "Unauthorized"
    status_code = 401
