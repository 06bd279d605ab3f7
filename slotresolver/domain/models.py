"""
Domain models for slot generation, availability rules and reservations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class TimeSlot:
    """
    Represents a half-open wall-clock interval within one day.

    Invariant: start must be before end.
    """
    start: time
    end: time

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return _to_minutes(self.end) - _to_minutes(self.start)

    def overlaps(self, other: "TimeSlot") -> bool:
        """Check if this slot overlaps with another."""
        return self.start < other.end and self.end > other.start

    def to_dict(self) -> Dict[str, str]:
        return {
            "startTime": self.start.strftime("%H:%M"),
            "endTime": self.end.strftime("%H:%M"),
        }

    def __str__(self) -> str:
        return f"{self.start.strftime('%H:%M')}-{self.end.strftime('%H:%M')}"


def _to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


@dataclass
class ReservationSettings:
    """
    Per-business configuration governing slot generation and booking limits.
    """
    business_id: str
    default_start: time = time(8, 0)
    default_end: time = time(0, 0)  # Midnight
    slot_duration_minutes: int = 30
    max_advance_booking_days: int = 30
    min_advance_booking_hours: int = 2
    accept_reservations: bool = True
    auto_confirm: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Weekday(str, Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @classmethod
    def from_date(cls, day: date) -> "Weekday":
        """Map a calendar date to its weekday (date.weekday(): 0=Monday)."""
        return list(cls)[day.weekday()]


class AvailabilityType(str, Enum):
    WEEKLY_RECURRING = "WEEKLY_RECURRING"
    SPECIFIC_DATE = "SPECIFIC_DATE"
    DATE_RANGE = "DATE_RANGE"


@dataclass(frozen=True)
class WeeklyRecurring:
    """Rule scope repeating every week on one weekday."""
    day_of_week: Weekday

    kind = AvailabilityType.WEEKLY_RECURRING

    def applies_to(self, day: date) -> bool:
        return Weekday.from_date(day) == self.day_of_week


@dataclass(frozen=True)
class SpecificDate:
    """Rule scope for exactly one calendar date."""
    date: date

    kind = AvailabilityType.SPECIFIC_DATE

    def applies_to(self, day: date) -> bool:
        return day == self.date


@dataclass(frozen=True)
class DateRange:
    """Rule scope covering an inclusive span of dates."""
    start: date
    end: date

    kind = AvailabilityType.DATE_RANGE

    def applies_to(self, day: date) -> bool:
        return self.start <= day <= self.end


RuleScope = Union[WeeklyRecurring, SpecificDate, DateRange]


@dataclass
class AvailabilityRule:
    """
    A business-authored constraint scoped by recurrence, date or date range.

    Rules are unioned, never ranked: every active rule matching a date
    contributes its blocked and available slots.
    """
    id: str
    business_id: str
    scope: RuleScope
    available_slots: List[TimeSlot] = field(default_factory=list)
    blocked_slots: List[TimeSlot] = field(default_factory=list)
    is_active: bool = True
    block_reason: Optional[str] = None

    @property
    def kind(self) -> AvailabilityType:
        return self.scope.kind

    def applies_to(self, day: date) -> bool:
        """Check if the rule is active and its scope covers the given date."""
        return self.is_active and self.scope.applies_to(day)

    def blocking_slot(self, slot: TimeSlot) -> Optional[TimeSlot]:
        """Return the first blocked slot overlapping ``slot``, if any."""
        for blocked in self.blocked_slots:
            if blocked.overlaps(slot):
                return blocked
        return None

    def allows(self, slot: TimeSlot) -> bool:
        """Check if any of the rule's available slots overlaps ``slot``."""
        return any(available.overlaps(slot) for available in self.available_slots)


@dataclass
class BusinessEmployee:
    """A staff member of a business who can be individually booked."""
    user_id: str
    active: bool = True
    joined_at: Optional[datetime] = None


@dataclass
class Business:
    id: str
    name: str = ""
    employees: List[BusinessEmployee] = field(default_factory=list)

    def active_employees(self) -> List[BusinessEmployee]:
        """Return active employees in roster order."""
        return [employee for employee in self.employees if employee.active]

    def find_active_employee(self, user_id: str) -> Optional[BusinessEmployee]:
        for employee in self.active_employees():
            if employee.user_id == user_id:
                return employee
        return None


@dataclass
class Reservation:
    """
    A booking of one time slot with one employee.

    Cancelled reservations are kept but excluded from conflict checks.
    """
    id: str
    user_id: str
    business_id: str
    date: date
    time_slot: TimeSlot
    assigned_employee_user_id: Optional[str] = None
    is_cancelled: bool = False
    is_confirmed: bool = False
    cancellation_reason: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def conflicts_with(self, employee_user_id: str, slot: TimeSlot) -> bool:
        """Check if this reservation holds ``employee_user_id`` during ``slot``."""
        return (
            not self.is_cancelled
            and self.assigned_employee_user_id == employee_user_id
            and self.time_slot.overlaps(slot)
        )


class SlotStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    BOOKED = "BOOKED"
    BLOCKED = "BLOCKED"
    EXPIRED = "EXPIRED"


@dataclass
class SlotInfo:
    """Classification result for one candidate slot."""
    time_slot: TimeSlot
    status: SlotStatus
    reason: Optional[str] = None
    is_bookable: bool = False
    available_employee_user_ids: List[str] = field(default_factory=list)
    reserved_employee_user_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timeSlot": self.time_slot.to_dict(),
            "status": self.status.value,
            "reason": self.reason,
            "isBookable": self.is_bookable,
            "availableEmployeeUserIds": list(self.available_employee_user_ids),
            "reservedEmployeeUserIds": list(self.reserved_employee_user_ids),
        }


@dataclass
class DayAvailability:
    """
    Availability of one business on one date, partitioned by status.

    Every candidate slot appears in exactly one status list and once in
    ``all_slots_sorted``.
    """
    business_id: str
    date: date
    available_slots: List[SlotInfo] = field(default_factory=list)
    blocked_slots: List[SlotInfo] = field(default_factory=list)
    booked_slots: List[SlotInfo] = field(default_factory=list)
    expired_slots: List[SlotInfo] = field(default_factory=list)
    all_slots_sorted: List[SlotInfo] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "businessId": self.business_id,
            "date": self.date.isoformat(),
            "availableSlots": [slot.to_dict() for slot in self.available_slots],
            "blockedSlots": [slot.to_dict() for slot in self.blocked_slots],
            "bookedSlots": [slot.to_dict() for slot in self.booked_slots],
            "expiredSlots": [slot.to_dict() for slot in self.expired_slots],
            "allSlotsSorted": [slot.to_dict() for slot in self.all_slots_sorted],
        }
