"""Booking status reported by the allocation service"""

from enum import StrEnum


class BookingStatus(StrEnum):
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    FAILED = 'failed'

    @property
    def is_terminal(self) -> bool:
        return self is not BookingStatus.PENDING
