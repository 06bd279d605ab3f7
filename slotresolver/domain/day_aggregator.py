"""
Partitioning of classified slots into per-status buckets.
"""

from datetime import date
from typing import Dict, Iterable, List

from .models import DayAvailability, SlotInfo, SlotStatus


class DayAggregator:
    """Builds the day response; no slot is dropped or duplicated."""

    def aggregate(
        self,
        business_id: str,
        day: date,
        slot_infos: Iterable[SlotInfo],
    ) -> DayAvailability:
        buckets: Dict[SlotStatus, List[SlotInfo]] = {status: [] for status in SlotStatus}
        all_slots: List[SlotInfo] = []

        for info in slot_infos:
            buckets[info.status].append(info)
            all_slots.append(info)

        for bucket in buckets.values():
            bucket.sort(key=_start_time)
        all_slots.sort(key=_start_time)

        return DayAvailability(
            business_id=business_id,
            date=day,
            available_slots=buckets[SlotStatus.AVAILABLE],
            blocked_slots=buckets[SlotStatus.BLOCKED],
            booked_slots=buckets[SlotStatus.BOOKED],
            expired_slots=buckets[SlotStatus.EXPIRED],
            all_slots_sorted=all_slots,
        )


def _start_time(info: SlotInfo):
    return info.time_slot.start
