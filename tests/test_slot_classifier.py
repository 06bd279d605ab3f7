"""
Tests for the slot classifier's priority order.
"""

from datetime import date, time

import pendulum

from slotresolver.domain.clock import FixedClock
from slotresolver.domain.models import (
    AvailabilityRule,
    BusinessEmployee,
    Reservation,
    SlotStatus,
    SpecificDate,
    TimeSlot,
    WeeklyRecurring,
    Weekday,
)
from slotresolver.domain.reservation_index import ReservationIndex
from slotresolver.domain.slot_classifier import SlotClassifier

TODAY = date(2026, 10, 19)
FUTURE = date(2026, 10, 24)
YESTERDAY = date(2026, 10, 18)
EMPLOYEES = [BusinessEmployee(user_id="emp-a"), BusinessEmployee(user_id="emp-b")]


def _slot(start: str, end: str) -> TimeSlot:
    return TimeSlot(start=time.fromisoformat(start), end=time.fromisoformat(end))


def _classifier() -> SlotClassifier:
    return SlotClassifier(clock=FixedClock(pendulum.datetime(2026, 10, 19, 11, 15, tz="UTC")))


def _reservation(employee: str, start: str, end: str, day: date = FUTURE, cancelled: bool = False) -> Reservation:
    return Reservation(
        id=f"{employee}-{start}",
        user_id="customer",
        business_id="biz",
        date=day,
        time_slot=_slot(start, end),
        assigned_employee_user_id=employee,
        is_cancelled=cancelled,
    )


def _rule(blocked=(), available=(), reason=None, day: date = FUTURE) -> AvailabilityRule:
    return AvailabilityRule(
        id="rule",
        business_id="biz",
        scope=SpecificDate(date=day),
        blocked_slots=list(blocked),
        available_slots=list(available),
        block_reason=reason,
    )


def _classify(slot, day=FUTURE, rules=(), reservations=(), employees=EMPLOYEES):
    return _classifier().classify(slot, day, list(rules), ReservationIndex(reservations), list(employees))


class TestRuleBlocks:
    """Rule blocks are checked first."""

    def test_blocked_slot_uses_rule_reason(self):
        """A lunch block wins even when employees are free."""
        rule = _rule(blocked=[_slot("12:00", "13:00")], reason="lunch")

        for start, end in [("12:00", "12:30"), ("12:30", "13:00")]:
            info = _classify(_slot(start, end), rules=[rule])

            assert info.status is SlotStatus.BLOCKED
            assert info.reason == "lunch"
            assert info.is_bookable is False
            assert info.available_employee_user_ids == []

        assert _classify(_slot("13:00", "13:30"), rules=[rule]).status is SlotStatus.AVAILABLE

    def test_default_block_reason(self):
        """A rule without reason uses the default."""
        rule = _rule(blocked=[_slot("09:00", "10:00")])

        info = _classify(_slot("09:00", "09:30"), rules=[rule])

        assert info.status is SlotStatus.BLOCKED
        assert info.reason == "Blocked by business"

    def test_block_wins_over_expiry(self):
        """A rule-blocked slot on a past date stays BLOCKED, not EXPIRED."""
        rule = _rule(blocked=[_slot("12:00", "13:00")], reason="lunch", day=YESTERDAY)

        info = _classify(_slot("12:00", "12:30"), day=YESTERDAY, rules=[rule])

        assert info.status is SlotStatus.BLOCKED
        assert info.reason == "lunch"

    def test_block_wins_without_staff(self):
        """A rule-blocked slot keeps the rule reason when nobody is employed."""
        rule = _rule(blocked=[_slot("12:00", "13:00")], reason="lunch")

        info = _classify(_slot("12:00", "12:30"), rules=[rule], employees=[])

        assert info.reason == "lunch"


class TestExpiry:
    """Past dates and elapsed slots expire."""

    def test_past_date_expires_every_slot(self):
        """Yesterday's slots are EXPIRED."""
        info = _classify(_slot("16:00", "16:30"), day=YESTERDAY)

        assert info.status is SlotStatus.EXPIRED
        assert info.reason == "date has already passed"
        assert info.is_bookable is False

    def test_today_elapsed_slot_expires(self):
        """A slot that started before now is EXPIRED."""
        info = _classify(_slot("11:00", "11:30"), day=TODAY)

        assert info.status is SlotStatus.EXPIRED
        assert info.reason == "time slot has already passed"

    def test_today_later_slot_is_available(self):
        """A slot starting after now is still open."""
        assert _classify(_slot("11:30", "12:00"), day=TODAY).status is SlotStatus.AVAILABLE

    def test_expiry_wins_over_missing_staff(self):
        """Expired slots report expiry even without employees."""
        info = _classify(_slot("09:00", "09:30"), day=YESTERDAY, employees=[])

        assert info.status is SlotStatus.EXPIRED


class TestEmployees:
    """Staffing and per-employee partition."""

    def test_no_active_employees_blocks(self):
        """Zero active employees blocks the slot."""
        info = _classify(_slot("10:00", "10:30"), employees=[])

        assert info.status is SlotStatus.BLOCKED
        assert info.reason == "no active employees available"

    def test_all_employees_free(self):
        """With no reservations, every employee is listed as available."""
        info = _classify(_slot("10:00", "10:30"))

        assert info.status is SlotStatus.AVAILABLE
        assert info.is_bookable is True
        assert info.reason is None
        assert info.available_employee_user_ids == ["emp-a", "emp-b"]
        assert info.reserved_employee_user_ids == []

    def test_partial_booking_stays_available(self):
        """One booked employee leaves the slot available."""
        info = _classify(
            _slot("10:00", "10:30"),
            reservations=[_reservation("emp-a", "10:00", "10:30")],
        )

        assert info.status is SlotStatus.AVAILABLE
        assert info.available_employee_user_ids == ["emp-b"]
        assert info.reserved_employee_user_ids == ["emp-a"]

    def test_fully_booked_slot(self):
        """Every employee booked makes the slot BOOKED."""
        info = _classify(
            _slot("10:00", "10:30"),
            reservations=[
                _reservation("emp-a", "10:00", "10:30"),
                _reservation("emp-b", "09:45", "10:15"),
            ],
        )

        assert info.status is SlotStatus.BOOKED
        assert info.is_bookable is False
        assert info.reason == "employee(s) have existing reservations"
        assert info.available_employee_user_ids == []
        assert info.reserved_employee_user_ids == ["emp-a", "emp-b"]

    def test_cancelled_reservation_is_ignored(self):
        """Cancelled reservations do not hold an employee."""
        info = _classify(
            _slot("10:00", "10:30"),
            reservations=[_reservation("emp-a", "10:00", "10:30", cancelled=True)],
        )

        assert info.available_employee_user_ids == ["emp-a", "emp-b"]

    def test_adjacent_reservation_does_not_conflict(self):
        """A reservation ending at slot start does not overlap."""
        info = _classify(
            _slot("10:30", "11:00"),
            reservations=[_reservation("emp-a", "10:00", "10:30")],
        )

        assert info.available_employee_user_ids == ["emp-a", "emp-b"]


class TestAllowList:
    """Explicit available slots turn rules into an allow-list."""

    def test_slot_outside_available_slots_is_blocked(self):
        """Once any rule lists available slots, other slots are blocked."""
        rule = _rule(available=[_slot("09:00", "12:00")])

        inside = _classify(_slot("11:30", "12:00"), rules=[rule])
        outside = _classify(_slot("12:00", "12:30"), rules=[rule])

        assert inside.status is SlotStatus.AVAILABLE
        assert outside.status is SlotStatus.BLOCKED
        assert outside.reason == "not in available time slots"

    def test_available_slots_are_unioned_across_rules(self):
        """Any rule's available slots admit a candidate."""
        morning = _rule(available=[_slot("09:00", "12:00")])
        evening = AvailabilityRule(
            id="weekly",
            business_id="biz",
            scope=WeeklyRecurring(day_of_week=Weekday.SATURDAY),
            available_slots=[_slot("16:00", "17:00")],
        )

        assert _classify(_slot("16:00", "16:30"), rules=[morning, evening]).status is SlotStatus.AVAILABLE
        assert _classify(_slot("14:00", "14:30"), rules=[morning, evening]).status is SlotStatus.BLOCKED

    def test_rules_without_available_slots_allow_everything(self):
        """Block-only rules do not switch on the allow-list."""
        rule = _rule(blocked=[_slot("12:00", "13:00")])

        assert _classify(_slot("15:00", "15:30"), rules=[rule]).status is SlotStatus.AVAILABLE

    def test_booked_slot_outside_allow_list_stays_booked(self):
        """The allow-list only applies to slots not already decided as BOOKED."""
        rule = _rule(available=[_slot("09:00", "10:00")])

        info = _classify(
            _slot("14:00", "14:30"),
            rules=[rule],
            reservations=[
                _reservation("emp-a", "14:00", "14:30"),
                _reservation("emp-b", "14:00", "14:30"),
            ],
        )

        assert info.status is SlotStatus.BOOKED


class TestClassifyDay:
    """Whole-day classification."""

    def test_one_result_per_candidate(self):
        """classify_day keeps candidate order and count."""
        slots = [_slot("10:00", "10:30"), _slot("11:00", "11:30"), _slot("12:00", "12:30")]

        infos = _classifier().classify_day(TODAY, slots, [], ReservationIndex([]), EMPLOYEES)

        assert [info.time_slot for info in infos] == slots
        assert [info.status for info in infos] == [
            SlotStatus.EXPIRED,
            SlotStatus.EXPIRED,
            SlotStatus.AVAILABLE,
        ]
