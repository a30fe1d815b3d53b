from abc import ABC, abstractmethod
from uuid import UUID

from src.service.seat_booking.domain.entity import SeatPreference
from src.service.seat_booking.domain.enum import PreferenceType


class ISeatPreferenceRepo(ABC):
    @abstractmethod
    async def get_by_user_id(self, *, user_id: UUID) -> SeatPreference | None:
        """Returns None when the user never saved a preference"""
        pass

    @abstractmethod
    async def upsert(self, *, user_id: UUID, preference_type: PreferenceType) -> SeatPreference:
        """Create or replace the user's preference"""
        pass
