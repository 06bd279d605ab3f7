"""
Domain-specific exception hierarchy for the availability engine.
"""


class SlotResolverError(Exception):
    """Base class for all application-level errors."""

    code = "UNEXPECTED_ERROR"


class BusinessNotFoundError(SlotResolverError):
    """Raised when a business id does not resolve."""

    code = "BUSINESS_NOT_FOUND"

    def __init__(self, business_id: str):
        super().__init__(f"Business not found with id: {business_id}")
        self.business_id = business_id


class ReservationNotFoundError(SlotResolverError):
    """Raised when a reservation id does not resolve."""

    code = "RESERVATION_NOT_FOUND"

    def __init__(self, reservation_id: str):
        super().__init__(f"Reservation not found with id: {reservation_id}")
        self.reservation_id = reservation_id


class ReservationConflictError(SlotResolverError):
    """Raised when the employee already holds an overlapping reservation."""

    code = "RESERVATION_CONFLICT"


class ReservationPastDateError(SlotResolverError):
    """Raised when booking a date or time slot that has already passed."""

    code = "RESERVATION_PAST_DATE"


class BookingWindowError(SlotResolverError):
    """Raised when a booking falls outside the business's advance-booking window."""

    code = "BOOKING_WINDOW_VIOLATION"


class ReservationsClosedError(SlotResolverError):
    """Raised when the business does not accept reservations."""

    code = "RESERVATIONS_CLOSED"


class EmployeeNotAvailableError(SlotResolverError):
    """Raised when no active employee can be assigned to a booking."""

    code = "EMPLOYEE_NOT_AVAILABLE"


class InvalidDateRangeError(SlotResolverError):
    """Raised when a requested date range is malformed or too long."""

    code = "INVALID_DATE_RANGE"
