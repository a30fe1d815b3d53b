"""
Notifier Interface

User-visible, non-blocking notices (the "toast" channel).
"""

from typing import Protocol

from src.service.seat_booking.app.dto.notice import Notice


class INotifier(Protocol):
    def notify(self, notice: Notice) -> None:
        """Must never block or raise into the booking flow"""
        ...
