from typing import List
from uuid import UUID

from sqlalchemy import select
import uuid_utils

from src.platform.logging.loguru_io import Logger
from src.service.seat_booking.app.interface import IBookingHistoryRepo
from src.service.seat_booking.domain.entity import HistoryRecord
from src.service.seat_booking.domain.enum import BookingStatus, PreferenceType
from src.service.seat_booking.driven_adapter.model import BookingHistoryModel
from src.service.seat_booking.driven_adapter.repo.session_scope import (
    SessionFactory,
    persistence_session,
)


class BookingHistoryRepoImpl(IBookingHistoryRepo):
    def __init__(self, *, session_factory: SessionFactory) -> None:
        self.session_factory = session_factory

    @staticmethod
    def _to_entity(db_record: BookingHistoryModel) -> HistoryRecord:
        return HistoryRecord(
            user_id=db_record.user_id,
            request_id=db_record.request_id,
            num_seats=db_record.num_seats,
            seat_preference=(
                PreferenceType(db_record.seat_preference) if db_record.seat_preference else None
            ),
            status=BookingStatus(db_record.status),
            created_at=db_record.created_at,
            allocated_seats=db_record.allocated_seats or (),
            error_message=db_record.error_message,
        )

    @staticmethod
    def _to_model(record: HistoryRecord) -> BookingHistoryModel:
        return BookingHistoryModel(
            # uuid_utils.UUID → stdlib UUID for the asyncpg UUID column
            id=UUID(str(uuid_utils.uuid7())),
            user_id=record.user_id,
            request_id=record.request_id,
            num_seats=record.num_seats,
            seat_preference=record.seat_preference.value if record.seat_preference else None,
            status=record.status.value,
            created_at=record.created_at,
        )

    @Logger.io
    async def insert(self, *, record: HistoryRecord) -> HistoryRecord:
        async with persistence_session(
            self.session_factory, operation='record booking history'
        ) as session:
            session.add(self._to_model(record))
            await session.commit()
        return record

    @Logger.io
    async def list_recent(self, *, user_id: UUID, limit: int) -> List[HistoryRecord]:
        async with persistence_session(
            self.session_factory, operation='load booking history'
        ) as session:
            result = await session.execute(
                select(BookingHistoryModel)
                .where(BookingHistoryModel.user_id == user_id)
                .order_by(BookingHistoryModel.created_at.desc())
                .limit(limit)
            )
            return [self._to_entity(db_record) for db_record in result.scalars().all()]
