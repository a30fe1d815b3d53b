"""Seat Booking Entities"""

from src.service.seat_booking.domain.entity.booking_request import BookingRequest
from src.service.seat_booking.domain.entity.booking_response import BookingResponse
from src.service.seat_booking.domain.entity.booking_status_record import BookingStatusRecord
from src.service.seat_booking.domain.entity.history_record import HistoryRecord
from src.service.seat_booking.domain.entity.seat_preference import SeatPreference

__all__ = [
    'BookingRequest',
    'BookingResponse',
    'BookingStatusRecord',
    'HistoryRecord',
    'SeatPreference',
]
