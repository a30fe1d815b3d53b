"""Seat Booking Interfaces"""

from src.service.seat_booking.app.interface.i_booking_api_client import IBookingApiClient
from src.service.seat_booking.app.interface.i_booking_history_repo import IBookingHistoryRepo
from src.service.seat_booking.app.interface.i_notifier import INotifier
from src.service.seat_booking.app.interface.i_seat_preference_repo import ISeatPreferenceRepo

__all__ = ['IBookingApiClient', 'IBookingHistoryRepo', 'INotifier', 'ISeatPreferenceRepo']
