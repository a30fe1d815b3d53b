from typing import Optional
from uuid import UUID

from src.platform.exception.exceptions import PersistenceError
from src.platform.logging.loguru_io import Logger
from src.service.seat_booking.app.dto import Notice
from src.service.seat_booking.app.interface import IBookingHistoryRepo, INotifier
from src.service.seat_booking.domain.entity import HistoryRecord
from src.service.seat_booking.domain.enum import PreferenceType


class RecordBookingHistoryUseCase:
    """
    Best-effort history write after an accepted submission

    Never touches AppState and never raises for a store failure: the failure
    becomes a warning notice and the booking flow carries on.
    """

    def __init__(self, *, history_repo: IBookingHistoryRepo, notifier: INotifier) -> None:
        self.history_repo = history_repo
        self.notifier = notifier

    @Logger.io
    async def record_submission(
        self,
        *,
        request_id: str,
        num_seats: int,
        seat_preference: Optional[PreferenceType],
        user_id: UUID,
    ) -> None:
        record = HistoryRecord.for_submission(
            user_id=user_id,
            request_id=request_id,
            num_seats=num_seats,
            seat_preference=seat_preference,
        )
        try:
            await self.history_repo.insert(record=record)
        except PersistenceError as e:
            Logger.base.warning(f'⚠️ [HISTORY] Could not record request {request_id}: {e.message}')
            self.notifier.notify(Notice.warning('Booking History Not Saved', e.message))
            return

        Logger.base.info(f'🗂️ [HISTORY] Recorded request {request_id} for user {user_id}')
