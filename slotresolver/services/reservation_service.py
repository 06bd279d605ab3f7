"""
Booking flow: validation, employee assignment and cancellation.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import List, Optional

from pendulum import DateTime

from ..domain.clock import Clock, wall_time
from ..domain.exceptions import (
    BookingWindowError,
    BusinessNotFoundError,
    EmployeeNotAvailableError,
    ReservationConflictError,
    ReservationNotFoundError,
    ReservationPastDateError,
    ReservationsClosedError,
)
from ..domain.models import Business, Reservation, ReservationSettings, TimeSlot
from ..domain.reservation_index import ReservationIndex
from .protocols import BusinessStore, ReservationStore
from .settings_service import ReservationSettingsService

logger = logging.getLogger(__name__)


class ReservationService:
    """
    Creates and cancels reservations for one employee per time slot.

    The final conflict check is repeated by the store inside
    ``add_reservation`` so that two concurrent bookings of the same employee
    and slot cannot both be persisted.
    """

    def __init__(
        self,
        business_store: BusinessStore,
        reservation_store: ReservationStore,
        settings_service: ReservationSettingsService,
        clock: Clock,
    ) -> None:
        self._business_store = business_store
        self._reservation_store = reservation_store
        self._settings_service = settings_service
        self._clock = clock

    def create_reservation(
        self,
        *,
        user_id: str,
        business_id: str,
        day: date,
        time_slot: TimeSlot,
        assigned_employee_user_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Reservation:
        """
        Book ``time_slot`` on ``day`` with one employee of the business.

        Without an explicit employee, the first active employee in roster
        order who is free for the slot is assigned.

        Raises:
            BusinessNotFoundError: If the business does not exist
            ReservationsClosedError: If the business does not accept reservations
            ReservationPastDateError: If the slot has already started or passed
            BookingWindowError: If the slot is too soon or too far ahead
            EmployeeNotAvailableError: If no suitable active employee exists
            ReservationConflictError: If the employee is already booked
        """
        logger.info(
            "Creating reservation for user %s and business %s with employee %s",
            user_id,
            business_id,
            assigned_employee_user_id,
        )

        business = self._business_store.get_business(business_id)
        if business is None:
            raise BusinessNotFoundError(business_id)

        settings = self._settings_service.get_or_create_default_settings(business_id)
        now = self._clock.now()

        self._validate_booking_window(settings, day, time_slot, now)

        employee_id = self._resolve_employee(business, day, time_slot, assigned_employee_user_id)

        reservation = Reservation(
            id=uuid.uuid4().hex,
            user_id=user_id,
            business_id=business_id,
            date=day,
            time_slot=time_slot,
            assigned_employee_user_id=employee_id,
            is_confirmed=settings.auto_confirm,
            notes=notes,
            created_at=now,
            updated_at=now,
        )

        saved = self._reservation_store.add_reservation(reservation)
        logger.info("Reservation %s created for employee %s at %s %s", saved.id, employee_id, day, time_slot)
        return saved

    def cancel_reservation(self, reservation_id: str, reason: Optional[str] = None) -> Reservation:
        """
        Mark a reservation cancelled; it is kept but stops blocking its slot.

        Raises:
            ReservationNotFoundError: If the reservation does not exist
        """
        logger.info("Cancelling reservation %s", reservation_id)

        reservation = self._reservation_store.get_reservation(reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(reservation_id)

        reservation.is_cancelled = True
        reservation.cancellation_reason = reason
        reservation.updated_at = self._clock.now()

        return self._reservation_store.save_reservation(reservation)

    def list_reservations(self, business_id: str, day: date) -> List[Reservation]:
        """Return the non-cancelled reservations of the business on ``day``."""
        if self._business_store.get_business(business_id) is None:
            raise BusinessNotFoundError(business_id)
        return self._reservation_store.find_reservations(business_id, day)

    def _validate_booking_window(
        self,
        settings: ReservationSettings,
        day: date,
        time_slot: TimeSlot,
        now: DateTime,
    ) -> None:
        if not settings.accept_reservations:
            raise ReservationsClosedError(
                f"Business {settings.business_id} does not accept reservations"
            )

        today = now.date()
        if day < today or (day == today and time_slot.start < wall_time(now)):
            raise ReservationPastDateError("Cannot create reservation for past date")

        slot_start = now.set(
            year=day.year,
            month=day.month,
            day=day.day,
            hour=time_slot.start.hour,
            minute=time_slot.start.minute,
            second=0,
            microsecond=0,
        )
        earliest = now.add(hours=settings.min_advance_booking_hours)
        if slot_start < earliest:
            raise BookingWindowError(
                f"Reservations must be made at least {settings.min_advance_booking_hours} hour(s) in advance"
            )

        latest_day = today.add(days=settings.max_advance_booking_days)
        if day > latest_day:
            raise BookingWindowError(
                f"Reservations can be made at most {settings.max_advance_booking_days} day(s) in advance"
            )

    def _resolve_employee(
        self,
        business: Business,
        day: date,
        time_slot: TimeSlot,
        requested_user_id: Optional[str],
    ) -> str:
        index = ReservationIndex.for_date(
            self._reservation_store.find_reservations(business.id, day),
            day,
        )

        if requested_user_id and requested_user_id.strip():
            if business.find_active_employee(requested_user_id) is None:
                raise EmployeeNotAvailableError(
                    "Requested employee is not found or not active in this business"
                )
            if index.is_employee_booked(requested_user_id, time_slot):
                raise ReservationConflictError(
                    "Selected employee is not available at the requested time slot"
                )
            return requested_user_id

        active = business.active_employees()
        if not active:
            raise EmployeeNotAvailableError("No active employees found in business")

        for employee in active:
            if not index.is_employee_booked(employee.user_id, time_slot):
                return employee.user_id

        raise ReservationConflictError("All employees are booked at the requested time slot")
