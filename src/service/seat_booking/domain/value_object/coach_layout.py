"""Coach layout snapshot value object."""

from collections import Counter
from typing import Mapping

import attrs

from src.service.seat_booking.domain.enum import SeatStatus


def _freeze_seats(seats: Mapping[str, SeatStatus | str]) -> dict[str, SeatStatus]:
    return {seat_id: SeatStatus(status) for seat_id, status in seats.items()}


@attrs.define(frozen=True)
class CoachLayout:
    """Seat id → occupancy, as last reported by the allocation service"""

    seats: dict[str, SeatStatus] = attrs.field(factory=dict, converter=_freeze_seats)

    @property
    def total_seats(self) -> int:
        return len(self.seats)

    def status_counts(self) -> dict[SeatStatus, int]:
        counts = Counter(self.seats.values())
        return {status: counts.get(status, 0) for status in SeatStatus}

    def seats_with_status(self, status: SeatStatus) -> list[str]:
        return sorted(seat_id for seat_id, seat_status in self.seats.items() if seat_status == status)
