"""Seat Booking State"""

from src.service.seat_booking.domain.state.app_state import AppState, AppStateSnapshot

__all__ = ['AppState', 'AppStateSnapshot']
