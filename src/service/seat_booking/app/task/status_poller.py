"""
Booking Status Poller

Polls GET /booking-status/{request_id} for one accepted request until the
allocation service reports a terminal status.

Loop contract:
- first query goes out immediately, then one query per `interval` seconds
  after the previous answer arrived (queries never overlap)
- keeps going only while the poller is not cancelled, AppState still holds
  the same request_id and app_status is still `pending`
- a terminal answer performs exactly one `set_app_status(confirmed|failed)`
  and ends the loop; the terminal record is frozen afterwards
- an answer that arrives after a reset / new submission / cancel is dropped
- a failed query (PollTransientError) counts as `pending`

One poller per request: `run()` may be called once. `cancel()` is safe from
any task and at any time, including before `run()` starts.
"""

from typing import Callable, Optional

import anyio
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import PollTransientError
from src.platform.logging.loguru_io import Logger
from src.platform.logging.loguru_io_utils import bind_request_id
from src.service.seat_booking.app.interface import IBookingApiClient
from src.service.seat_booking.domain.entity import BookingStatusRecord
from src.service.seat_booking.domain.enum import AppStatus
from src.service.seat_booking.domain.state import AppState


TerminalPredicate = Callable[[BookingStatusRecord], bool]


def _is_terminal_record(record: BookingStatusRecord) -> bool:
    return record.is_terminal


class StatusPoller:
    def __init__(
        self,
        *,
        api_client: IBookingApiClient,
        app_state: AppState,
        interval: Optional[float] = None,
        max_consecutive_errors: Optional[int] = None,
        is_terminal: TerminalPredicate = _is_terminal_record,
    ) -> None:
        self._api_client = api_client
        self._app_state = app_state
        self._interval = settings.STATUS_POLL_INTERVAL if interval is None else interval
        self._max_consecutive_errors = (
            settings.STATUS_POLL_MAX_CONSECUTIVE_ERRORS
            if max_consecutive_errors is None
            else max_consecutive_errors
        )
        self._is_terminal = is_terminal
        self._cancel_scope = anyio.CancelScope()
        self._started = False
        self._request_id: Optional[str] = None
        self.queries_issued = 0
        self.latest_record: Optional[BookingStatusRecord] = None
        self.terminal_record: Optional[BookingStatusRecord] = None
        self.tracer = trace.get_tracer(__name__)

    @property
    def request_id(self) -> Optional[str]:
        return self._request_id

    @property
    def cancelled(self) -> bool:
        return self._cancel_scope.cancel_called

    @property
    def finished(self) -> bool:
        return self.terminal_record is not None

    def cancel(self) -> None:
        if not self._cancel_scope.cancel_called:
            Logger.base.info(f'🛑 [POLLER] Cancelled polling for request {self._request_id}')
        self._cancel_scope.cancel()

    def _is_current(self, request_id: str) -> bool:
        return (
            not self._cancel_scope.cancel_called
            and self._app_state.request_id == request_id
            and self._app_state.app_status == AppStatus.PENDING
        )

    @Logger.io
    async def run(self, *, request_id: str) -> Optional[BookingStatusRecord]:
        """
        Returns:
            The terminal record, or None when polling stopped without one
            (cancelled, superseded, or gave up after too many failed queries)
        """
        if self._started:
            raise RuntimeError('StatusPoller is single-use; create a new poller per request')
        self._started = True
        self._request_id = request_id
        consecutive_errors = 0

        with bind_request_id(request_id), self._cancel_scope:
            while self._is_current(request_id):
                record = await self._query(request_id)

                if not self._is_current(request_id):
                    Logger.base.info(f'🗑️ [POLLER] Discarding stale answer for request {request_id}')
                    break

                if record is None:
                    consecutive_errors += 1
                    if 0 < self._max_consecutive_errors <= consecutive_errors:
                        Logger.base.warning(
                            f'⚠️ [POLLER] Giving up on request {request_id} after '
                            f'{consecutive_errors} consecutive failed queries'
                        )
                        break
                else:
                    consecutive_errors = 0
                    self.latest_record = record
                    if self._is_terminal(record):
                        self.terminal_record = record
                        self._app_state.set_app_status(AppStatus(record.status))
                        Logger.base.info(
                            f'🏁 [POLLER] Request {request_id} resolved as {record.status} '
                            f'after {self.queries_issued} queries'
                        )
                        return record

                await anyio.sleep(self._interval)

        return None

    async def _query(self, request_id: str) -> Optional[BookingStatusRecord]:
        self.queries_issued += 1
        with self.tracer.start_as_current_span(
            'status_poller.query',
            attributes={'booking.request_id': request_id, 'poll.attempt': self.queries_issued},
        ):
            try:
                return await self._api_client.get_booking_status(request_id=request_id)
            except PollTransientError as e:
                # Silent for the user: the view keeps showing "processing"
                Logger.base.warning(
                    f'⚠️ [POLLER] Query #{self.queries_issued} for {request_id} failed: {e.message}'
                )
                return None
