from src.service.seat_booking.driven_adapter.model.booking_history_model import BookingHistoryModel
from src.service.seat_booking.driven_adapter.model.seat_preference_model import SeatPreferenceModel

__all__ = ['BookingHistoryModel', 'SeatPreferenceModel']
