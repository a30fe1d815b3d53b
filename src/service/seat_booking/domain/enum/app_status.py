"""Client-side booking lifecycle status"""

from enum import StrEnum


class AppStatus(StrEnum):
    IDLE = 'idle'
    BOOKING = 'booking'
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    FAILED = 'failed'

    @property
    def is_terminal(self) -> bool:
        return self in (AppStatus.CONFIRMED, AppStatus.FAILED)

    @property
    def is_in_flight(self) -> bool:
        """Submit entry point is disabled while a request is being created or resolved"""
        return self in (AppStatus.BOOKING, AppStatus.PENDING)
