from enum import StrEnum


class SeatStatus(StrEnum):
    AVAILABLE = 'available'
    BOOKED = 'booked'
    LOCKED = 'locked'
    PROCESSING = 'processing'
