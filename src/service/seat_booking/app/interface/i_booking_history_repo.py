from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from src.service.seat_booking.domain.entity import HistoryRecord


class IBookingHistoryRepo(ABC):
    @abstractmethod
    async def insert(self, *, record: HistoryRecord) -> HistoryRecord:
        pass

    @abstractmethod
    async def list_recent(self, *, user_id: UUID, limit: int) -> List[HistoryRecord]:
        """Most recent first"""
        pass
