"""
Domain layer - Pure availability logic without external dependencies.
"""

from .clock import Clock, FixedClock, SystemClock
from .day_aggregator import DayAggregator
from .models import (
    AvailabilityRule,
    AvailabilityType,
    Business,
    BusinessEmployee,
    DateRange,
    DayAvailability,
    Reservation,
    ReservationSettings,
    SlotInfo,
    SlotStatus,
    SpecificDate,
    TimeSlot,
    WeeklyRecurring,
    Weekday,
)
from .reservation_index import ReservationIndex
from .slot_classifier import SlotClassifier
from .slot_generator import MAX_SLOTS_PER_DAY, SlotGenerator

__all__ = [
    "AvailabilityRule",
    "AvailabilityType",
    "Business",
    "BusinessEmployee",
    "Clock",
    "DateRange",
    "DayAggregator",
    "DayAvailability",
    "FixedClock",
    "MAX_SLOTS_PER_DAY",
    "Reservation",
    "ReservationIndex",
    "ReservationSettings",
    "SlotClassifier",
    "SlotGenerator",
    "SlotInfo",
    "SlotStatus",
    "SpecificDate",
    "SystemClock",
    "TimeSlot",
    "WeeklyRecurring",
    "Weekday",
]
