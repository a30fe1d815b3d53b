"""Seat Booking Value Objects"""

from src.service.seat_booking.domain.value_object.coach_layout import CoachLayout
from src.service.seat_booking.domain.value_object.current_user_info import CurrentUserInfo

__all__ = ['CoachLayout', 'CurrentUserInfo']
