from datetime import datetime, timezone
from typing import Optional, Tuple
from uuid import UUID

import attrs

from src.service.seat_booking.domain.enum import BookingStatus, PreferenceType


@attrs.define(frozen=True)
class HistoryRecord:
    """
    Append-only booking history row owned by the user who submitted it

    Written once at submission time with status `pending`. `allocated_seats`
    and `error_message` are filled in by the backend and only ever read here.
    """

    user_id: UUID
    request_id: str
    num_seats: int
    seat_preference: Optional[PreferenceType]
    status: BookingStatus = BookingStatus.PENDING
    created_at: datetime = attrs.field(factory=lambda: datetime.now(timezone.utc))
    allocated_seats: Tuple[str, ...] = attrs.field(default=(), converter=tuple)
    error_message: Optional[str] = None

    @classmethod
    def for_submission(
        cls,
        *,
        user_id: UUID,
        request_id: str,
        num_seats: int,
        seat_preference: Optional[PreferenceType],
    ) -> 'HistoryRecord':
        return cls(
            user_id=user_id,
            request_id=request_id,
            num_seats=num_seats,
            seat_preference=seat_preference,
            status=BookingStatus.PENDING,
        )
