from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.sql import func

from src.platform.logging.loguru_io import Logger
from src.service.seat_booking.app.interface import ISeatPreferenceRepo
from src.service.seat_booking.domain.entity import SeatPreference
from src.service.seat_booking.domain.enum import PreferenceType
from src.service.seat_booking.driven_adapter.model import SeatPreferenceModel
from src.service.seat_booking.driven_adapter.repo.session_scope import (
    SessionFactory,
    persistence_session,
)


class SeatPreferenceRepoImpl(ISeatPreferenceRepo):
    def __init__(self, *, session_factory: SessionFactory) -> None:
        self.session_factory = session_factory

    @staticmethod
    def _to_entity(db_preference: SeatPreferenceModel) -> SeatPreference:
        return SeatPreference(
            preference_type=PreferenceType(db_preference.preference_type),
            user_id=db_preference.user_id,
            updated_at=db_preference.updated_at,
        )

    @Logger.io
    async def get_by_user_id(self, *, user_id: UUID) -> SeatPreference | None:
        async with persistence_session(
            self.session_factory, operation='load seat preference'
        ) as session:
            result = await session.execute(
                select(SeatPreferenceModel).where(SeatPreferenceModel.user_id == user_id)
            )
            db_preference = result.scalar_one_or_none()
            return self._to_entity(db_preference) if db_preference else None

    @Logger.io
    async def upsert(self, *, user_id: UUID, preference_type: PreferenceType) -> SeatPreference:
        stmt = (
            insert(SeatPreferenceModel)
            .values(user_id=user_id, preference_type=preference_type.value)
            .on_conflict_do_update(
                index_elements=[SeatPreferenceModel.user_id],
                set_={'preference_type': preference_type.value, 'updated_at': func.now()},
            )
            .returning(SeatPreferenceModel)
        )
        async with persistence_session(
            self.session_factory, operation='save seat preference'
        ) as session:
            result = await session.execute(stmt)
            db_preference = result.scalar_one()
            await session.commit()
            return self._to_entity(db_preference)
