"""
Application service computing per-slot availability for a business.

The service fetches every input fresh from the stores for each requested
date and delegates the decisions to the domain-level generator, classifier
and aggregator. No state survives between calls.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

import pendulum

from ..domain.clock import Clock
from ..domain.day_aggregator import DayAggregator
from ..domain.exceptions import BusinessNotFoundError
from ..domain.models import DayAvailability
from ..domain.reservation_index import ReservationIndex
from ..domain.slot_classifier import SlotClassifier
from ..domain.slot_generator import SlotGenerator
from .protocols import BusinessStore, ReservationStore
from .rule_resolver import RuleResolver
from .settings_service import ReservationSettingsService

logger = logging.getLogger(__name__)

WEEK_DAYS = 7
MONTH_DAYS = 30


class AvailabilityService:
    """
    Orchestrates the single-day pipeline and its repetition over ranges.

    Pipeline per date:
    settings -> candidate slots, rules, reservations -> classification ->
    aggregation.
    """

    def __init__(
        self,
        business_store: BusinessStore,
        reservation_store: ReservationStore,
        settings_service: ReservationSettingsService,
        rule_resolver: RuleResolver,
        clock: Clock,
        slot_generator: Optional[SlotGenerator] = None,
        week_days: int = WEEK_DAYS,
        month_days: int = MONTH_DAYS,
    ) -> None:
        self._business_store = business_store
        self._reservation_store = reservation_store
        self._settings_service = settings_service
        self._rule_resolver = rule_resolver
        self._clock = clock
        self._slot_generator = slot_generator or SlotGenerator()
        self._classifier = SlotClassifier(clock=clock)
        self._aggregator = DayAggregator()
        self.week_days = week_days
        self.month_days = month_days

    def get_available_slots(self, business_id: str, day: date) -> DayAvailability:
        """
        Compute the availability of every candidate slot on one date.

        Raises:
            BusinessNotFoundError: If the business does not exist
        """
        logger.info("Getting available slots for business %s on %s", business_id, day)

        business = self._business_store.get_business(business_id)
        if business is None:
            raise BusinessNotFoundError(business_id)

        employees = business.active_employees()
        settings = self._settings_service.get_or_create_default_settings(business_id)
        slots = self._slot_generator.generate(settings)
        rules = self._rule_resolver.resolve(business_id, day)
        reservations = ReservationIndex.for_date(
            self._reservation_store.find_reservations(business_id, day),
            day,
        )
        logger.debug(
            "Business %s on %s: %d active employees, %d reservations",
            business_id,
            day,
            len(employees),
            len(reservations),
        )

        slot_infos = self._classifier.classify_day(
            day=day,
            slots=slots,
            rules=rules,
            reservations=reservations,
            employees=employees,
        )

        return self._aggregator.aggregate(business_id, day, slot_infos)

    def get_available_slots_for_range(
        self,
        business_id: str,
        start_date: date,
        end_date: date,
    ) -> List[DayAvailability]:
        """
        Run the single-day pipeline for every date in [start_date, end_date].

        Returns an empty list when the range is inverted.
        """
        logger.info(
            "Getting available slots for business %s from %s to %s",
            business_id,
            start_date,
            end_date,
        )

        responses: List[DayAvailability] = []
        current = pendulum.date(start_date.year, start_date.month, start_date.day)

        while current <= end_date:
            responses.append(self.get_available_slots(business_id, current))
            current = current.add(days=1)

        return responses

    def get_available_slots_for_today(self, business_id: str) -> DayAvailability:
        return self.get_available_slots(business_id, self._today())

    def get_available_slots_for_tomorrow(self, business_id: str) -> DayAvailability:
        return self.get_available_slots(business_id, self._today().add(days=1))

    def get_available_slots_for_next_week(self, business_id: str) -> List[DayAvailability]:
        today = self._today()
        return self.get_available_slots_for_range(business_id, today, today.add(days=self.week_days))

    def get_available_slots_for_next_month(self, business_id: str) -> List[DayAvailability]:
        today = self._today()
        return self.get_available_slots_for_range(business_id, today, today.add(days=self.month_days))

    def _today(self) -> pendulum.Date:
        return self._clock.now().date()
