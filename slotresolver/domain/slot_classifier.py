"""
Core business logic for classifying candidate slots.

This is the heart of the engine - pure domain logic without any external
dependencies. The only implicit input, the current time, comes from the
injected clock.
"""

from datetime import date
from typing import List, Optional, Sequence

from pendulum import DateTime

from .clock import Clock, wall_time
from .models import (
    AvailabilityRule,
    BusinessEmployee,
    SlotInfo,
    SlotStatus,
    TimeSlot,
)
from .reservation_index import ReservationIndex

DEFAULT_BLOCK_REASON = "Blocked by business"
DATE_PASSED_REASON = "date has already passed"
TIME_PASSED_REASON = "time slot has already passed"
NO_EMPLOYEES_REASON = "no active employees available"
EMPLOYEES_RESERVED_REASON = "employee(s) have existing reservations"
NOT_IN_AVAILABLE_SLOTS_REASON = "not in available time slots"


class SlotClassifier:
    """
    Derives the status of each candidate slot.

    Checks run in strict priority order, each assuming the earlier ones
    left the slot undecided:
    1. Rule blocks (even on past dates)
    2. Expiry of past dates and of today's elapsed slots
    3. No active employees
    4. Per-employee partition into available and reserved
    5. Allow-list, once any rule carries available slots for the date
    """

    def __init__(self, clock: Clock):
        self.clock = clock

    def classify_day(
        self,
        day: date,
        slots: Sequence[TimeSlot],
        rules: Sequence[AvailabilityRule],
        reservations: ReservationIndex,
        employees: Sequence[BusinessEmployee],
    ) -> List[SlotInfo]:
        """
        Classify every candidate slot of a day.

        Args:
            day: Date being queried
            slots: Candidate slots from the generator
            rules: Rules applicable to ``day``
            reservations: Index of the day's active reservations
            employees: Active employees of the business

        Returns:
            One SlotInfo per candidate slot, in candidate order
        """
        now = self.clock.now()
        return [
            self.classify(slot, day, rules, reservations, employees, now=now)
            for slot in slots
        ]

    def classify(
        self,
        slot: TimeSlot,
        day: date,
        rules: Sequence[AvailabilityRule],
        reservations: ReservationIndex,
        employees: Sequence[BusinessEmployee],
        now: Optional[DateTime] = None,
    ) -> SlotInfo:
        """Classify a single candidate slot."""
        now = now or self.clock.now()

        blocking_rule = _find_blocking_rule(rules, slot)
        if blocking_rule is not None:
            return _unbookable(
                slot,
                SlotStatus.BLOCKED,
                blocking_rule.block_reason or DEFAULT_BLOCK_REASON,
            )

        today = now.date()
        if day < today:
            return _unbookable(slot, SlotStatus.EXPIRED, DATE_PASSED_REASON)
        if day == today and slot.start < wall_time(now):
            return _unbookable(slot, SlotStatus.EXPIRED, TIME_PASSED_REASON)

        if not employees:
            return _unbookable(slot, SlotStatus.BLOCKED, NO_EMPLOYEES_REASON)

        available_ids: List[str] = []
        reserved_ids: List[str] = []
        for employee in employees:
            if reservations.is_employee_booked(employee.user_id, slot):
                reserved_ids.append(employee.user_id)
            else:
                available_ids.append(employee.user_id)

        if not available_ids:
            return SlotInfo(
                time_slot=slot,
                status=SlotStatus.BOOKED,
                reason=EMPLOYEES_RESERVED_REASON,
                is_bookable=False,
                reserved_employee_user_ids=reserved_ids,
            )

        if not _is_allow_listed(rules, slot):
            return _unbookable(slot, SlotStatus.BLOCKED, NOT_IN_AVAILABLE_SLOTS_REASON)

        return SlotInfo(
            time_slot=slot,
            status=SlotStatus.AVAILABLE,
            reason=None,
            is_bookable=True,
            available_employee_user_ids=available_ids,
            reserved_employee_user_ids=reserved_ids,
        )


def _find_blocking_rule(
    rules: Sequence[AvailabilityRule],
    slot: TimeSlot,
) -> Optional[AvailabilityRule]:
    for rule in rules:
        if rule.blocking_slot(slot) is not None:
            return rule
    return None


def _is_allow_listed(rules: Sequence[AvailabilityRule], slot: TimeSlot) -> bool:
    """
    Check the slot against the union of the rules' available slots.

    Without any available slots on the day's rules, everything is allowed.
    """
    allow_rules = [rule for rule in rules if rule.available_slots]
    if not allow_rules:
        return True
    return any(rule.allows(slot) for rule in allow_rules)


def _unbookable(slot: TimeSlot, status: SlotStatus, reason: str) -> SlotInfo:
    return SlotInfo(time_slot=slot, status=status, reason=reason, is_bookable=False)
