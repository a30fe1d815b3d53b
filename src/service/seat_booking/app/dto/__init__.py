from src.service.seat_booking.app.dto.notice import Notice, NoticeLevel

__all__ = ['Notice', 'NoticeLevel']
