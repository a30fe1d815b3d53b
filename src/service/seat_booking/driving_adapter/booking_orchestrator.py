"""
Booking Orchestrator

Composition root of the booking lifecycle. Binds the user actions to the
use cases and owns the task group the background work runs in:

    submit ──► SubmitBookingUseCase ──► (idle → booking → pending)
                   │ success
                   ├──► StatusPoller            (pending → confirmed | failed)
                   └──► history sync            (fire-and-forget, signed-in users only)
    book another ──► cancel poller + AppState.reset()

Rules:
- submit is rejected while app_status is booking / pending
- the previous poller is cancelled before a new one starts (cancel-before-start)
- submitting from a terminal state resets first, so a lifecycle always starts at idle
- history / preference failures become notices and never reach AppState

Usage:
    async with container.booking_orchestrator() as orchestrator:
        await orchestrator.submit(num_seats=3)
"""

from types import TracebackType
from typing import Callable, List, Optional, Self
from uuid import UUID

import anyio
from anyio.abc import TaskGroup

from src.platform.exception.exceptions import (
    AuthenticationError,
    PersistenceError,
    SubmissionInProgressError,
    TransportError,
    ValidationError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.logging.loguru_io_utils import bind_request_id
from src.service.seat_booking.app.command.record_booking_history_use_case import (
    RecordBookingHistoryUseCase,
)
from src.service.seat_booking.app.command.save_seat_preference_use_case import (
    SaveSeatPreferenceUseCase,
)
from src.service.seat_booking.app.command.submit_booking_use_case import SubmitBookingUseCase
from src.service.seat_booking.app.dto import Notice
from src.service.seat_booking.app.interface import INotifier
from src.service.seat_booking.app.query.fetch_seat_preference_use_case import (
    FetchSeatPreferenceUseCase,
)
from src.service.seat_booking.app.query.list_booking_history_use_case import (
    ListBookingHistoryUseCase,
)
from src.service.seat_booking.app.task.coach_layout_monitor import CoachLayoutMonitor
from src.service.seat_booking.app.task.status_poller import StatusPoller
from src.service.seat_booking.domain.entity import (
    BookingRequest,
    BookingResponse,
    BookingStatusRecord,
    HistoryRecord,
    SeatPreference,
)
from src.service.seat_booking.domain.enum import AppStatus, BookingStatus, PreferenceType
from src.service.seat_booking.domain.state import AppState
from src.service.seat_booking.domain.value_object import CurrentUserInfo


DEFAULT_FAILURE_MESSAGE = (
    'Unable to allocate seats. Please try again with fewer seats or try later.'
)


class BookingOrchestrator:
    def __init__(
        self,
        *,
        app_state: AppState,
        submit_booking_use_case: SubmitBookingUseCase,
        record_booking_history_use_case: RecordBookingHistoryUseCase,
        fetch_seat_preference_use_case: FetchSeatPreferenceUseCase,
        save_seat_preference_use_case: SaveSeatPreferenceUseCase,
        list_booking_history_use_case: ListBookingHistoryUseCase,
        notifier: INotifier,
        status_poller_factory: Callable[[], StatusPoller],
        coach_layout_monitor: Optional[CoachLayoutMonitor] = None,
        current_user: Optional[CurrentUserInfo] = None,
    ) -> None:
        self.app_state = app_state
        self.submit_booking_use_case = submit_booking_use_case
        self.record_booking_history_use_case = record_booking_history_use_case
        self.fetch_seat_preference_use_case = fetch_seat_preference_use_case
        self.save_seat_preference_use_case = save_seat_preference_use_case
        self.list_booking_history_use_case = list_booking_history_use_case
        self.notifier = notifier
        self.status_poller_factory = status_poller_factory
        self.coach_layout_monitor = coach_layout_monitor
        self.current_user = current_user
        self._task_group: Optional[TaskGroup] = None
        self._active_poller: Optional[StatusPoller] = None

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> Self:
        task_group = anyio.create_task_group()
        await task_group.__aenter__()
        self._task_group = task_group
        if self.coach_layout_monitor is not None:
            task_group.start_soon(self.coach_layout_monitor.run)
        Logger.base.info('🚀 [ORCHESTRATOR] Booking session started')
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool | None:
        # Tear down the consumers; pending history writes are left to finish
        self._cancel_active_poller()
        if self.coach_layout_monitor is not None:
            self.coach_layout_monitor.cancel()
        task_group, self._task_group = self._task_group, None
        try:
            if task_group is not None:
                return await task_group.__aexit__(exc_type, exc_val, exc_tb)
            return None
        finally:
            Logger.base.info('👋 [ORCHESTRATOR] Booking session closed')

    def _require_task_group(self) -> TaskGroup:
        if self._task_group is None:
            raise RuntimeError('BookingOrchestrator must be entered with "async with" first')
        return self._task_group

    def set_current_user(self, user: Optional[CurrentUserInfo]) -> None:
        self.current_user = user

    @property
    def _user_id(self) -> Optional[UUID]:
        return self.current_user.user_id if self.current_user else None

    # ------------------------------------------------------------------
    # Booking lifecycle
    # ------------------------------------------------------------------

    @property
    def can_submit(self) -> bool:
        return not self.app_state.app_status.is_in_flight

    @property
    def outcome(self) -> Optional[BookingStatusRecord]:
        """Latest status answer applied for the current request (frozen once terminal)"""
        poller = self._active_poller
        if poller is None or poller.request_id != self.app_state.request_id:
            return None
        return poller.terminal_record or poller.latest_record

    @Logger.io
    async def submit(self, *, num_seats: int) -> Optional[BookingResponse]:
        """
        Returns:
            The acceptance receipt, or None when the input was invalid or the
            allocation service refused the request (both already notified)

        Raises:
            SubmissionInProgressError: submit while booking / pending
        """
        task_group = self._require_task_group()
        if not self.can_submit:
            raise SubmissionInProgressError()

        try:
            request = BookingRequest.create(num_seats=num_seats)
        except ValidationError as e:
            self.notifier.notify(Notice.error('Invalid Input', e.message))
            return None

        self._cancel_active_poller()
        if self.app_state.app_status != AppStatus.IDLE:
            self.app_state.reset()

        try:
            response = await self.submit_booking_use_case.submit(request=request)
        except TransportError as e:
            self.notifier.notify(Notice.error('Booking Failed', e.message))
            return None

        self.notifier.notify(
            Notice.success('Booking Request Submitted', f'Request ID: {response.request_id}')
        )

        poller = self.status_poller_factory()
        self._active_poller = poller
        task_group.start_soon(self._watch_status, poller, response.request_id)

        if self._user_id is not None:
            task_group.start_soon(
                self._sync_history, response.request_id, request.num_seats, self._user_id
            )

        return response

    def book_another(self) -> None:
        """
        Raises:
            SubmissionInProgressError: a create-request call is still in flight
        """
        if self.app_state.app_status == AppStatus.BOOKING:
            raise SubmissionInProgressError('Cannot reset while a booking request is being sent')
        self._cancel_active_poller()
        self.app_state.reset()

    def _cancel_active_poller(self) -> None:
        if self._active_poller is not None:
            self._active_poller.cancel()

    async def _watch_status(self, poller: StatusPoller, request_id: str) -> None:
        try:
            record = await poller.run(request_id=request_id)
        except Exception as e:
            Logger.base.error(f'❌ [ORCHESTRATOR] Status polling for {request_id} crashed: {e}')
            return

        if record is None:
            return
        if record.status == BookingStatus.CONFIRMED:
            self.notifier.notify(
                Notice.success(
                    'Booking Confirmed',
                    f'Your seats have been reserved: {", ".join(record.allocated_seats)}',
                )
            )
        else:
            self.notifier.notify(Notice.error('Booking Failed', record.error or DEFAULT_FAILURE_MESSAGE))

    async def _sync_history(self, request_id: str, num_seats: int, user_id: UUID) -> None:
        with bind_request_id(request_id):
            try:
                preference = await self._resolve_preference(user_id)
                await self.record_booking_history_use_case.record_submission(
                    request_id=request_id,
                    num_seats=num_seats,
                    seat_preference=preference.preference_type,
                    user_id=user_id,
                )
            except Exception as e:
                Logger.base.warning(f'⚠️ [ORCHESTRATOR] History sync for {request_id} failed: {e}')

    # ------------------------------------------------------------------
    # Seat preference + history
    # ------------------------------------------------------------------

    async def _resolve_preference(self, user_id: Optional[UUID]) -> SeatPreference:
        try:
            return await self.fetch_seat_preference_use_case.fetch_preference(user_id=user_id)
        except PersistenceError as e:
            Logger.base.warning(f'⚠️ [ORCHESTRATOR] Preference lookup failed, using "any": {e.message}')
            return SeatPreference.default()

    async def fetch_preference(self) -> SeatPreference:
        return await self._resolve_preference(self._user_id)

    @Logger.io
    async def save_preference(
        self, *, preference_type: PreferenceType | str
    ) -> Optional[SeatPreference]:
        try:
            preference = await self.save_seat_preference_use_case.save_preference(
                user_id=self._user_id, preference_type=preference_type
            )
        except (AuthenticationError, ValidationError, PersistenceError) as e:
            self.notifier.notify(Notice.error('Error', e.message))
            return None

        self.notifier.notify(
            Notice.success('Preferences Saved', 'Your seat preferences have been updated successfully.')
        )
        return preference

    @Logger.io
    async def list_history(self, *, limit: Optional[int] = None) -> List[HistoryRecord]:
        try:
            return await self.list_booking_history_use_case.list_history(
                user_id=self._user_id, limit=limit
            )
        except PersistenceError as e:
            self.notifier.notify(Notice.warning('Booking History Unavailable', e.message))
            return []
