from typing import Optional
from uuid import UUID

from src.platform.logging.loguru_io import Logger
from src.service.seat_booking.app.interface import ISeatPreferenceRepo
from src.service.seat_booking.domain.entity import SeatPreference


class FetchSeatPreferenceUseCase:
    """
    Saved seat preference, or the `any` default

    Anonymous sessions and users without a saved row both get `any`; that
    is an expected outcome, not an error. A store failure is raised as
    PersistenceError and the caller decides whether to fall back.
    """

    def __init__(self, *, preference_repo: ISeatPreferenceRepo) -> None:
        self.preference_repo = preference_repo

    @Logger.io
    async def fetch_preference(self, *, user_id: Optional[UUID]) -> SeatPreference:
        if user_id is None:
            return SeatPreference.default()

        preference = await self.preference_repo.get_by_user_id(user_id=user_id)
        return preference or SeatPreference.default()
