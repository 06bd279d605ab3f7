"""
Service layer helpers that orchestrate stores and domain logic.
"""

from .availability_service import AvailabilityService
from .protocols import BusinessStore, ReservationStore, RuleStore, SettingsStore
from .reservation_service import ReservationService
from .rule_resolver import RuleResolver
from .settings_service import ReservationSettingsService

__all__ = [
    "AvailabilityService",
    "BusinessStore",
    "ReservationService",
    "ReservationSettingsService",
    "ReservationStore",
    "RuleResolver",
    "RuleStore",
    "SettingsStore",
]
