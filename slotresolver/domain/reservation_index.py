"""
Per-request index of the active reservations of one business on one date.
"""

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List

from .models import Reservation, TimeSlot


class ReservationIndex:
    """
    Groups non-cancelled reservations by assigned employee for overlap tests.

    Built fresh for every request; nothing is cached across calls.
    """

    def __init__(self, reservations: Iterable[Reservation]):
        self._by_employee: Dict[str, List[TimeSlot]] = defaultdict(list)
        self._count = 0

        for reservation in reservations:
            if reservation.is_cancelled or reservation.assigned_employee_user_id is None:
                continue
            self._by_employee[reservation.assigned_employee_user_id].append(reservation.time_slot)
            self._count += 1

    @classmethod
    def for_date(cls, reservations: Iterable[Reservation], day: date) -> "ReservationIndex":
        """Build an index from reservations, keeping only those on ``day``."""
        return cls(reservation for reservation in reservations if reservation.date == day)

    def is_employee_booked(self, employee_user_id: str, slot: TimeSlot) -> bool:
        """Check if the employee holds a reservation overlapping ``slot``."""
        return any(
            booked.overlaps(slot)
            for booked in self._by_employee.get(employee_user_id, ())
        )

    def __len__(self) -> int:
        return self._count
