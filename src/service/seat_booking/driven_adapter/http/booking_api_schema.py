"""Wire models for the allocation service (camelCase JSON)"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, RootModel, model_validator
from pydantic.alias_generators import to_camel

from src.service.seat_booking.domain.enum import BookingStatus, SeatStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BookingCreateRequest(_CamelModel):
    num_seats: int

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={'example': {'numSeats': 3}},
    )


class BookingCreatedResponse(_CamelModel):
    request_id: str
    status: BookingStatus = BookingStatus.PENDING


class BookingStatusResponse(_CamelModel):
    status: BookingStatus
    allocated_seats: Optional[List[str]] = None
    error: Optional[str] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            'examples': [
                {'status': 'pending'},
                {'status': 'confirmed', 'allocatedSeats': ['A1', 'A2', 'A3']},
                {'status': 'failed', 'error': 'capacity exceeded'},
            ]
        },
    )

    @model_validator(mode='after')
    def _confirmed_has_seats(self) -> 'BookingStatusResponse':
        if self.status == BookingStatus.CONFIRMED and not self.allocated_seats:
            raise ValueError('confirmed status without allocatedSeats')
        return self


class SeatStatusResponse(BaseModel):
    status: SeatStatus


class CoachLayoutResponse(RootModel[dict[str, SeatStatusResponse]]):
    pass
