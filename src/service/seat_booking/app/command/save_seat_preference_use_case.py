from typing import Optional
from uuid import UUID

from src.platform.exception.exceptions import AuthenticationError, ValidationError
from src.platform.logging.loguru_io import Logger
from src.service.seat_booking.app.interface import ISeatPreferenceRepo
from src.service.seat_booking.domain.entity import SeatPreference
from src.service.seat_booking.domain.enum import PreferenceType


class SaveSeatPreferenceUseCase:
    def __init__(self, *, preference_repo: ISeatPreferenceRepo) -> None:
        self.preference_repo = preference_repo

    @Logger.io
    async def save_preference(
        self, *, user_id: Optional[UUID], preference_type: PreferenceType | str
    ) -> SeatPreference:
        """
        Upsert the user's default seat type

        Raises:
            AuthenticationError: no authenticated user
            ValidationError: unknown preference type
            PersistenceError: store failure
        """
        if user_id is None:
            raise AuthenticationError('Not authenticated')

        try:
            preference = PreferenceType(preference_type)
        except ValueError as e:
            raise ValidationError(f'Unknown seat preference: {preference_type}') from e

        return await self.preference_repo.upsert(user_id=user_id, preference_type=preference)
