"""
Pydantic records describing the YAML data file of the in-memory store.

Records validate the raw file contents and convert to and from the domain
dataclasses.
"""

from __future__ import annotations

from datetime import date as Date, datetime, time
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from ..config import WallTime
from ..domain.models import (
    AvailabilityRule,
    AvailabilityType,
    Business,
    BusinessEmployee,
    DateRange,
    Reservation,
    ReservationSettings,
    SpecificDate,
    TimeSlot,
    WeeklyRecurring,
    Weekday,
)


class TimeSlotRecord(BaseModel):
    start: WallTime
    end: WallTime

    @model_validator(mode="after")
    def validate_order(self) -> "TimeSlotRecord":
        if self.start >= self.end:
            raise ValueError(f"Slot start {self.start} must be before end {self.end}")
        return self

    def to_domain(self) -> TimeSlot:
        return TimeSlot(start=self.start, end=self.end)

    @classmethod
    def from_domain(cls, slot: TimeSlot) -> "TimeSlotRecord":
        return cls(start=slot.start, end=slot.end)


class EmployeeRecord(BaseModel):
    user_id: str
    active: bool = True
    joined_at: Optional[datetime] = None

    def to_domain(self) -> BusinessEmployee:
        return BusinessEmployee(user_id=self.user_id, active=self.active, joined_at=self.joined_at)

    @classmethod
    def from_domain(cls, employee: BusinessEmployee) -> "EmployeeRecord":
        return cls(user_id=employee.user_id, active=employee.active, joined_at=employee.joined_at)


class BusinessRecord(BaseModel):
    id: str
    name: str = ""
    employees: List[EmployeeRecord] = Field(default_factory=list)

    def to_domain(self) -> Business:
        return Business(
            id=self.id,
            name=self.name,
            employees=[employee.to_domain() for employee in self.employees],
        )

    @classmethod
    def from_domain(cls, business: Business) -> "BusinessRecord":
        return cls(
            id=business.id,
            name=business.name,
            employees=[EmployeeRecord.from_domain(employee) for employee in business.employees],
        )


class SettingsRecord(BaseModel):
    business_id: str
    default_start: WallTime = time(8, 0)
    default_end: WallTime = time(0, 0)
    slot_duration_minutes: int = 30
    max_advance_booking_days: int = 30
    min_advance_booking_hours: int = 2
    accept_reservations: bool = True
    auto_confirm: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_domain(self) -> ReservationSettings:
        return ReservationSettings(**self.model_dump())

    @classmethod
    def from_domain(cls, settings: ReservationSettings) -> "SettingsRecord":
        return cls(**vars(settings))


class RuleRecord(BaseModel):
    """
    One availability rule; which scope fields are required depends on type.
    """
    id: str
    business_id: str
    type: AvailabilityType
    day_of_week: Optional[Weekday] = None
    specific_date: Optional[Date] = None
    start_date: Optional[Date] = None
    end_date: Optional[Date] = None
    available_slots: List[TimeSlotRecord] = Field(default_factory=list)
    blocked_slots: List[TimeSlotRecord] = Field(default_factory=list)
    is_active: bool = True
    block_reason: Optional[str] = None

    @model_validator(mode="after")
    def validate_scope(self) -> "RuleRecord":
        if self.type is AvailabilityType.WEEKLY_RECURRING and self.day_of_week is None:
            raise ValueError(f"Rule {self.id}: day_of_week is required for WEEKLY_RECURRING")
        if self.type is AvailabilityType.SPECIFIC_DATE and self.specific_date is None:
            raise ValueError(f"Rule {self.id}: specific_date is required for SPECIFIC_DATE")
        if self.type is AvailabilityType.DATE_RANGE:
            if self.start_date is None or self.end_date is None:
                raise ValueError(f"Rule {self.id}: start_date and end_date are required for DATE_RANGE")
            if self.start_date > self.end_date:
                raise ValueError(f"Rule {self.id}: start_date must not be after end_date")
        return self

    def to_domain(self) -> AvailabilityRule:
        if self.type is AvailabilityType.WEEKLY_RECURRING:
            scope = WeeklyRecurring(day_of_week=self.day_of_week)
        elif self.type is AvailabilityType.SPECIFIC_DATE:
            scope = SpecificDate(date=self.specific_date)
        else:
            scope = DateRange(start=self.start_date, end=self.end_date)

        return AvailabilityRule(
            id=self.id,
            business_id=self.business_id,
            scope=scope,
            available_slots=[slot.to_domain() for slot in self.available_slots],
            blocked_slots=[slot.to_domain() for slot in self.blocked_slots],
            is_active=self.is_active,
            block_reason=self.block_reason,
        )

    @classmethod
    def from_domain(cls, rule: AvailabilityRule) -> "RuleRecord":
        scope = rule.scope
        return cls(
            id=rule.id,
            business_id=rule.business_id,
            type=rule.kind,
            day_of_week=scope.day_of_week if isinstance(scope, WeeklyRecurring) else None,
            specific_date=scope.date if isinstance(scope, SpecificDate) else None,
            start_date=scope.start if isinstance(scope, DateRange) else None,
            end_date=scope.end if isinstance(scope, DateRange) else None,
            available_slots=[TimeSlotRecord.from_domain(slot) for slot in rule.available_slots],
            blocked_slots=[TimeSlotRecord.from_domain(slot) for slot in rule.blocked_slots],
            is_active=rule.is_active,
            block_reason=rule.block_reason,
        )


class ReservationRecord(BaseModel):
    id: str
    user_id: str
    business_id: str
    date: Date
    time_slot: TimeSlotRecord
    assigned_employee_user_id: Optional[str] = None
    is_cancelled: bool = False
    is_confirmed: bool = False
    cancellation_reason: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_domain(self) -> Reservation:
        data = self.model_dump(exclude={"time_slot"})
        return Reservation(time_slot=self.time_slot.to_domain(), **data)

    @classmethod
    def from_domain(cls, reservation: Reservation) -> "ReservationRecord":
        data = dict(vars(reservation))
        data["time_slot"] = TimeSlotRecord.from_domain(reservation.time_slot)
        return cls(**data)


class DataFile(BaseModel):
    """Root of the YAML data file."""
    businesses: List[BusinessRecord] = Field(default_factory=list)
    settings: List[SettingsRecord] = Field(default_factory=list)
    rules: List[RuleRecord] = Field(default_factory=list)
    reservations: List[ReservationRecord] = Field(default_factory=list)
