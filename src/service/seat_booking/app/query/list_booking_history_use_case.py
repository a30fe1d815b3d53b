from typing import List, Optional
from uuid import UUID

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.service.seat_booking.app.interface import IBookingHistoryRepo
from src.service.seat_booking.domain.entity import HistoryRecord


class ListBookingHistoryUseCase:
    def __init__(self, *, history_repo: IBookingHistoryRepo) -> None:
        self.history_repo = history_repo

    @Logger.io
    async def list_history(
        self, *, user_id: Optional[UUID], limit: Optional[int] = None
    ) -> List[HistoryRecord]:
        if user_id is None:
            return []
        return await self.history_repo.list_recent(
            user_id=user_id, limit=limit or settings.HISTORY_LIST_LIMIT
        )
