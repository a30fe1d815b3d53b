import attrs

from src.service.seat_booking.domain.enum import BookingStatus


@attrs.define(frozen=True)
class BookingResponse:
    """Acceptance receipt issued by the allocation service"""

    request_id: str
    status: BookingStatus = BookingStatus.PENDING
