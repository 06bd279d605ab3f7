"""
Shared fixtures: a frozen clock and a small in-memory business.
"""

from dataclasses import dataclass
from datetime import time

import pendulum
import pytest

from slotresolver.adapters.memory_store import InMemoryStore
from slotresolver.domain.clock import FixedClock
from slotresolver.domain.models import Business, BusinessEmployee, ReservationSettings
from slotresolver.services.availability_service import AvailabilityService
from slotresolver.services.reservation_service import ReservationService
from slotresolver.services.rule_resolver import RuleResolver
from slotresolver.services.settings_service import ReservationSettingsService

# Monday
NOW = pendulum.datetime(2026, 10, 19, 11, 15, tz="UTC")


@dataclass
class Services:
    availability: AvailabilityService
    reservations: ReservationService
    settings: ReservationSettingsService


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore(
        businesses=[
            Business(
                id="biz",
                name="Test Shop",
                employees=[
                    BusinessEmployee(user_id="emp-a"),
                    BusinessEmployee(user_id="emp-b"),
                    BusinessEmployee(user_id="emp-gone", active=False),
                ],
            ),
            Business(id="empty", name="No Staff"),
        ],
        settings=[
            ReservationSettings(
                business_id="biz",
                default_start=time(9, 0),
                default_end=time(17, 0),
                slot_duration_minutes=30,
            ),
        ],
    )


@pytest.fixture
def services(store: InMemoryStore, clock: FixedClock) -> Services:
    settings_service = ReservationSettingsService(
        settings_store=store,
        business_store=store,
        clock=clock,
    )
    availability = AvailabilityService(
        business_store=store,
        reservation_store=store,
        settings_service=settings_service,
        rule_resolver=RuleResolver(store),
        clock=clock,
    )
    reservations = ReservationService(
        business_store=store,
        reservation_store=store,
        settings_service=settings_service,
        clock=clock,
    )
    return Services(availability=availability, reservations=reservations, settings=settings_service)
