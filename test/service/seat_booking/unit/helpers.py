"""Shared fakes for seat booking unit tests"""

from collections.abc import Iterable
from typing import Any, List, Optional

import anyio

from src.service.seat_booking.app.dto import Notice
from src.service.seat_booking.app.interface import IBookingApiClient
from src.service.seat_booking.domain.entity import (
    BookingRequest,
    BookingResponse,
    BookingStatusRecord,
)
from src.service.seat_booking.domain.enum import AppStatus, BookingStatus
from src.service.seat_booking.domain.state import AppState
from src.service.seat_booking.domain.value_object import CoachLayout


class RecordingNotifier:
    def __init__(self) -> None:
        self.notices: List[Notice] = []

    def notify(self, notice: Notice) -> None:
        self.notices.append(notice)

    @property
    def titles(self) -> List[str]:
        return [notice.title for notice in self.notices]

    def find(self, title: str) -> Notice:
        return next(notice for notice in self.notices if notice.title == title)


class ScriptedBookingApiClient(IBookingApiClient):
    """
    Hands out request ids in order and replays a status script per request

    A script entry is either a BookingStatusRecord or an exception to raise.
    The last entry repeats once the script is exhausted.
    """

    def __init__(
        self,
        *,
        request_ids: Iterable[str] = ('req-1', 'req-2', 'req-3'),
        statuses: Optional[List[Any]] = None,
        submit_error: Optional[Exception] = None,
    ) -> None:
        self._request_ids = iter(request_ids)
        self.statuses = statuses or [BookingStatusRecord(status=BookingStatus.PENDING)]
        self.submit_error = submit_error
        self.submitted: List[BookingRequest] = []
        self.status_queries: List[str] = []
        self._cursor: dict[str, int] = {}

    async def request_booking(self, *, request: BookingRequest) -> BookingResponse:
        self.submitted.append(request)
        await anyio.sleep(0)
        if self.submit_error is not None:
            raise self.submit_error
        return BookingResponse(request_id=next(self._request_ids))

    async def get_booking_status(self, *, request_id: str) -> BookingStatusRecord:
        self.status_queries.append(request_id)
        await anyio.sleep(0)
        index = self._cursor.get(request_id, 0)
        self._cursor[request_id] = index + 1
        entry = self.statuses[min(index, len(self.statuses) - 1)]
        if isinstance(entry, Exception):
            raise entry
        return entry

    async def get_coach_layout(self) -> CoachLayout:
        return CoachLayout(seats={'A1': 'available', 'A2': 'booked'})


def pending_record() -> BookingStatusRecord:
    return BookingStatusRecord(status=BookingStatus.PENDING)


def confirmed_record(*seats: str) -> BookingStatusRecord:
    return BookingStatusRecord(status=BookingStatus.CONFIRMED, allocated_seats=seats)


def failed_record(error: Optional[str] = None) -> BookingStatusRecord:
    return BookingStatusRecord(status=BookingStatus.FAILED, error=error)


def pending_state(request_id: str = 'req-1') -> AppState:
    """AppState as left behind by an accepted submission"""
    app_state = AppState()
    app_state.set_app_status(AppStatus.BOOKING)
    app_state.set_request_id(request_id)
    app_state.set_app_status(AppStatus.PENDING)
    return app_state


async def wait_for_status(app_state: AppState, status: AppStatus, *, timeout: float = 2.0) -> None:
    with anyio.fail_after(timeout):
        while app_state.app_status != status:
            await anyio.sleep(0.005)


async def wait_until(predicate: Any, *, timeout: float = 2.0) -> None:
    with anyio.fail_after(timeout):
        while not predicate():
            await anyio.sleep(0.005)
