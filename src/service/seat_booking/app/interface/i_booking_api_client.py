"""
Booking API Client Interface

Driven port for the remote allocation service (priority + aging queue).
"""

from abc import ABC, abstractmethod

from src.service.seat_booking.domain.entity import (
    BookingRequest,
    BookingResponse,
    BookingStatusRecord,
)
from src.service.seat_booking.domain.value_object import CoachLayout


class IBookingApiClient(ABC):
    @abstractmethod
    async def request_booking(self, *, request: BookingRequest) -> BookingResponse:
        """
        POST /request-booking

        Raises:
            TransportError: network failure, non-2xx response or malformed body
        """
        pass

    @abstractmethod
    async def get_booking_status(self, *, request_id: str) -> BookingStatusRecord:
        """
        GET /booking-status/{request_id}

        Raises:
            PollTransientError: the query failed; the caller should keep polling
        """
        pass

    @abstractmethod
    async def get_coach_layout(self) -> CoachLayout:
        """
        GET /coach-layout

        Raises:
            TransportError: network failure, non-2xx response or malformed body
        """
        pass
