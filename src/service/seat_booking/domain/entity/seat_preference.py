from datetime import datetime
from typing import Optional
from uuid import UUID

import attrs

from src.service.seat_booking.domain.enum import PreferenceType


@attrs.define(frozen=True)
class SeatPreference:
    preference_type: PreferenceType = attrs.field(
        default=PreferenceType.ANY, converter=PreferenceType
    )
    user_id: Optional[UUID] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def default(cls) -> 'SeatPreference':
        return cls(preference_type=PreferenceType.ANY)
