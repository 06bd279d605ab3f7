"""
Protocols describing the data-store behaviour needed by the services.

Any storage backend satisfying these can be plugged in; the bundled
``InMemoryStore`` implements all of them.
"""

from __future__ import annotations

from datetime import date
from typing import Callable, List, Optional, Protocol

from ..domain.models import (
    AvailabilityRule,
    Business,
    Reservation,
    ReservationSettings,
    Weekday,
)


class BusinessStore(Protocol):
    def get_business(self, business_id: str) -> Optional[Business]:
        """Return the business with its embedded employee roster, or None."""


class SettingsStore(Protocol):
    def get_settings(self, business_id: str) -> Optional[ReservationSettings]:
        """Return stored settings for the business, or None."""

    def save_settings(self, settings: ReservationSettings) -> ReservationSettings:
        """Insert or replace the settings of a business."""

    def get_or_create_settings(
        self,
        business_id: str,
        factory: Callable[[str], ReservationSettings],
    ) -> ReservationSettings:
        """Return stored settings, creating them with ``factory`` when absent."""


class RuleStore(Protocol):
    def find_weekly_rules(self, business_id: str, day_of_week: Weekday) -> List[AvailabilityRule]:
        """Active weekly recurring rules for the weekday."""

    def find_specific_date_rules(self, business_id: str, day: date) -> List[AvailabilityRule]:
        """Active specific-date rules for the date."""

    def find_date_range_rules(self, business_id: str, day: date) -> List[AvailabilityRule]:
        """Active date-range rules whose inclusive span contains the date."""


class ReservationStore(Protocol):
    def find_reservations(self, business_id: str, day: date) -> List[Reservation]:
        """Non-cancelled reservations of the business on the date."""

    def get_reservation(self, reservation_id: str) -> Optional[Reservation]:
        """Return the reservation, or None."""

    def add_reservation(self, reservation: Reservation) -> Reservation:
        """
        Persist a new reservation.

        Must reject, atomically with the insert, a reservation whose employee
        already holds an overlapping non-cancelled reservation on that date by
        raising ``ReservationConflictError``.
        """

    def save_reservation(self, reservation: Reservation) -> Reservation:
        """Replace an existing reservation."""
