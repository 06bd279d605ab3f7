"""
In-memory store backed by a YAML data file.

Implements every store protocol used by the services. Writes go through a
single lock so that check-then-insert operations (settings creation and
reservation conflicts) are atomic within one process.
"""

from __future__ import annotations

import logging
import threading
from datetime import date
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

import yaml
from pydantic import ValidationError

from ..domain.exceptions import ReservationConflictError
from ..domain.models import (
    AvailabilityRule,
    AvailabilityType,
    Business,
    Reservation,
    ReservationSettings,
    Weekday,
)
from .records import (
    BusinessRecord,
    DataFile,
    ReservationRecord,
    RuleRecord,
    SettingsRecord,
)

logger = logging.getLogger(__name__)

SAMPLE_DATA_FILE = Path(__file__).parent / "sample_data.yaml"


class InMemoryStore:
    """
    Dictionary-backed store for businesses, settings, rules and reservations.
    """

    def __init__(
        self,
        businesses: Iterable[Business] = (),
        settings: Iterable[ReservationSettings] = (),
        rules: Iterable[AvailabilityRule] = (),
        reservations: Iterable[Reservation] = (),
    ):
        self._lock = threading.Lock()
        self._businesses: Dict[str, Business] = {business.id: business for business in businesses}
        self._settings: Dict[str, ReservationSettings] = {item.business_id: item for item in settings}
        self._rules: List[AvailabilityRule] = list(rules)
        self._reservations: Dict[str, Reservation] = {item.id: item for item in reservations}

    @classmethod
    def from_yaml(cls, data_path: Path) -> "InMemoryStore":
        """
        Load a store from a YAML data file.

        Raises:
            FileNotFoundError: If the data file doesn't exist
            ValueError: If the data file is invalid
        """
        if not data_path.exists():
            raise FileNotFoundError(f"Data file not found: {data_path}")

        try:
            with open(data_path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {data_path}: {exc}") from exc

        if not isinstance(raw, dict):
            raise ValueError("Data file must contain a mapping at the root level.")

        try:
            data = DataFile(**raw)
        except ValidationError as exc:
            raise ValueError(f"Invalid data file {data_path}: {exc}") from exc

        logger.debug(
            "Loaded %d businesses, %d rules and %d reservations from %s",
            len(data.businesses),
            len(data.rules),
            len(data.reservations),
            data_path,
        )

        return cls(
            businesses=[record.to_domain() for record in data.businesses],
            settings=[record.to_domain() for record in data.settings],
            rules=[record.to_domain() for record in data.rules],
            reservations=[record.to_domain() for record in data.reservations],
        )

    def save_to_yaml(self, data_path: Path) -> None:
        """Write the full store contents back to a YAML data file."""
        with self._lock:
            data = DataFile(
                businesses=[BusinessRecord.from_domain(item) for item in self._businesses.values()],
                settings=[SettingsRecord.from_domain(item) for item in self._settings.values()],
                rules=[RuleRecord.from_domain(item) for item in self._rules],
                reservations=[ReservationRecord.from_domain(item) for item in self._reservations.values()],
            )

        with open(data_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data.model_dump(mode="json"), f, sort_keys=False, allow_unicode=True)

    # Businesses

    def get_business(self, business_id: str) -> Optional[Business]:
        return self._businesses.get(business_id)

    def list_businesses(self) -> List[Business]:
        return list(self._businesses.values())

    def add_business(self, business: Business) -> Business:
        with self._lock:
            self._businesses[business.id] = business
        return business

    # Settings

    def get_settings(self, business_id: str) -> Optional[ReservationSettings]:
        return self._settings.get(business_id)

    def save_settings(self, settings: ReservationSettings) -> ReservationSettings:
        with self._lock:
            self._settings[settings.business_id] = settings
        return settings

    def get_or_create_settings(
        self,
        business_id: str,
        factory: Callable[[str], ReservationSettings],
    ) -> ReservationSettings:
        with self._lock:
            settings = self._settings.get(business_id)
            if settings is None:
                settings = factory(business_id)
                self._settings[business_id] = settings
            return settings

    # Rules

    def add_rule(self, rule: AvailabilityRule) -> AvailabilityRule:
        with self._lock:
            self._rules.append(rule)
        return rule

    def find_weekly_rules(self, business_id: str, day_of_week: Weekday) -> List[AvailabilityRule]:
        return [
            rule for rule in self._active_rules(business_id, AvailabilityType.WEEKLY_RECURRING)
            if rule.scope.day_of_week == day_of_week
        ]

    def find_specific_date_rules(self, business_id: str, day: date) -> List[AvailabilityRule]:
        return [
            rule for rule in self._active_rules(business_id, AvailabilityType.SPECIFIC_DATE)
            if rule.applies_to(day)
        ]

    def find_date_range_rules(self, business_id: str, day: date) -> List[AvailabilityRule]:
        return [
            rule for rule in self._active_rules(business_id, AvailabilityType.DATE_RANGE)
            if rule.applies_to(day)
        ]

    def _active_rules(self, business_id: str, kind: AvailabilityType) -> List[AvailabilityRule]:
        return [
            rule for rule in self._rules
            if rule.business_id == business_id and rule.kind is kind and rule.is_active
        ]

    # Reservations

    def find_reservations(self, business_id: str, day: date) -> List[Reservation]:
        return [
            reservation for reservation in self._reservations.values()
            if reservation.business_id == business_id
            and reservation.date == day
            and not reservation.is_cancelled
        ]

    def get_reservation(self, reservation_id: str) -> Optional[Reservation]:
        return self._reservations.get(reservation_id)

    def add_reservation(self, reservation: Reservation) -> Reservation:
        """
        Insert a reservation unless its employee is already booked.

        The overlap check and the insert happen under the same lock, acting
        as a uniqueness constraint on business, date, employee and slot.
        """
        with self._lock:
            employee_id = reservation.assigned_employee_user_id
            if employee_id is not None:
                for existing in self._reservations.values():
                    if (
                        existing.business_id == reservation.business_id
                        and existing.date == reservation.date
                        and existing.conflicts_with(employee_id, reservation.time_slot)
                    ):
                        raise ReservationConflictError(
                            f"Employee {employee_id} already has reservation {existing.id} "
                            f"at {existing.time_slot} on {existing.date}"
                        )
            self._reservations[reservation.id] = reservation
        return reservation

    def save_reservation(self, reservation: Reservation) -> Reservation:
        with self._lock:
            self._reservations[reservation.id] = reservation
        return reservation
