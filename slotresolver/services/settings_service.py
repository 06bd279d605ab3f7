"""
Reservation settings lookup with lazy creation of defaults.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, Optional

from ..domain.clock import Clock
from ..domain.exceptions import BusinessNotFoundError
from ..domain.models import ReservationSettings
from .protocols import BusinessStore, SettingsStore

logger = logging.getLogger(__name__)

SETTINGS_FIELDS = (
    "default_start",
    "default_end",
    "slot_duration_minutes",
    "max_advance_booking_days",
    "min_advance_booking_hours",
    "accept_reservations",
    "auto_confirm",
)


class ReservationSettingsService:
    """
    Owns the per-business settings record.

    A business without settings gets defaults instead of an error.
    """

    def __init__(
        self,
        settings_store: SettingsStore,
        business_store: BusinessStore,
        clock: Clock,
        defaults_factory: Optional[Callable[[str], ReservationSettings]] = None,
    ) -> None:
        self._settings_store = settings_store
        self._business_store = business_store
        self._clock = clock
        self._defaults_factory = defaults_factory or _default_settings

    def get_or_create_default_settings(self, business_id: str) -> ReservationSettings:
        """Return stored settings, creating the defaults on first access."""
        return self._settings_store.get_or_create_settings(business_id, self._build_defaults)

    def get_settings(self, business_id: str) -> Optional[ReservationSettings]:
        self._require_business(business_id)
        return self._settings_store.get_settings(business_id)

    def create_or_update_settings(self, business_id: str, **changes: Any) -> ReservationSettings:
        """
        Create settings from defaults if absent, then apply the given changes.

        Only keyword arguments that are not None are applied, so callers can
        pass a partially filled request.

        Raises:
            BusinessNotFoundError: If the business does not exist
            ValueError: If an unknown settings field is given
        """
        self._require_business(business_id)

        unknown = set(changes) - set(SETTINGS_FIELDS)
        if unknown:
            raise ValueError(f"Unknown settings field(s): {', '.join(sorted(unknown))}")

        logger.info("Creating/updating reservation settings for business %s", business_id)

        current = self._settings_store.get_settings(business_id) or self._build_defaults(business_id)
        updates = {name: value for name, value in changes.items() if value is not None}
        updated = replace(current, updated_at=self._clock.now(), **updates)

        return self._settings_store.save_settings(updated)

    def _build_defaults(self, business_id: str) -> ReservationSettings:
        logger.info("Creating default reservation settings for business %s", business_id)
        now = self._clock.now()
        return replace(self._defaults_factory(business_id), created_at=now, updated_at=now)

    def _require_business(self, business_id: str) -> None:
        if self._business_store.get_business(business_id) is None:
            raise BusinessNotFoundError(business_id)


def _default_settings(business_id: str) -> ReservationSettings:
    return ReservationSettings(business_id=business_id)
