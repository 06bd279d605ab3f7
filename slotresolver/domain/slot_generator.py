"""
Candidate slot generation from a business's daily operating window.

Pure function of the reservation settings: rules and reservations are not
consulted here.
"""

import logging
from datetime import time
from typing import List

from .models import ReservationSettings, TimeSlot

logger = logging.getLogger(__name__)

MAX_SLOTS_PER_DAY = 48
MINUTES_PER_DAY = 24 * 60
LAST_MINUTE_OF_DAY = time(23, 59)


class SlotGenerator:
    """
    Splits the operating window into contiguous, equally sized slots.

    Algorithm:
    1. Clamp the closing time to 23:59 when it is midnight or earlier than
       the opening time (overnight schedules are not modelled)
    2. Emit [cursor, cursor + duration) and advance the cursor to its end
    3. Stop when the cursor reaches the closing time, when a slot would wrap
       past midnight or overrun the closing time, or at the slot cap

    A trailing slot shorter than the duration is dropped, never shortened.
    """

    def __init__(self, max_slots: int = MAX_SLOTS_PER_DAY):
        self.max_slots = max_slots

    def generate(self, settings: ReservationSettings) -> List[TimeSlot]:
        """
        Generate the ordered candidate slots for one day.

        Args:
            settings: Reservation settings of the business

        Returns:
            List of TimeSlot objects, earliest first
        """
        duration = settings.slot_duration_minutes
        cursor = _to_minutes(settings.default_start)
        end = _to_minutes(self.effective_end(settings))

        slots: List[TimeSlot] = []

        while cursor < end and len(slots) < self.max_slots:
            slot_end = cursor + duration

            # Non-positive durations and midnight wrap-around end the day
            if slot_end <= cursor or slot_end >= MINUTES_PER_DAY:
                break

            if slot_end > end:
                break

            slots.append(TimeSlot(start=_from_minutes(cursor), end=_from_minutes(slot_end)))
            cursor = slot_end

        if not slots:
            logger.warning(
                "Settings for business %s produce no slots (%s-%s, %s min)",
                settings.business_id,
                settings.default_start,
                settings.default_end,
                duration,
            )
        else:
            logger.debug("Generated %d slots for business %s", len(slots), settings.business_id)

        return slots

    @staticmethod
    def effective_end(settings: ReservationSettings) -> time:
        """Return the closing time, clamped to the last minute of the day."""
        end = settings.default_end
        if end == time(0, 0) or end < settings.default_start:
            return LAST_MINUTE_OF_DAY
        return end


def _to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def _from_minutes(minutes: int) -> time:
    return time(hour=minutes // 60, minute=minutes % 60)
