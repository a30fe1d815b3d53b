from typing import Optional, Tuple

import attrs

from src.service.seat_booking.domain.enum import BookingStatus


@attrs.define(frozen=True)
class BookingStatusRecord:
    """
    One answer from the status endpoint

    `confirmed` carries the allocated seats, `failed` carries the error text,
    `pending` carries neither.
    """

    status: BookingStatus
    allocated_seats: Tuple[str, ...] = attrs.field(default=(), converter=tuple)
    error: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal
