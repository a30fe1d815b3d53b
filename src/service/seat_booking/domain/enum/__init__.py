"""Seat Booking Enums"""

from src.service.seat_booking.domain.enum.app_status import AppStatus
from src.service.seat_booking.domain.enum.booking_status import BookingStatus
from src.service.seat_booking.domain.enum.preference_type import PreferenceType
from src.service.seat_booking.domain.enum.seat_status import SeatStatus

__all__ = ['AppStatus', 'BookingStatus', 'PreferenceType', 'SeatStatus']
