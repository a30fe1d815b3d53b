"""
Unit tests for BookingOrchestrator

End-to-end booking lifecycle with real use cases, a real StatusPoller and
AppState; only the allocation service and the stores are faked.
"""

from typing import Optional
from unittest.mock import AsyncMock
from uuid import uuid4

import anyio
import pytest

from src.platform.exception.exceptions import (
    PersistenceError,
    SubmissionInProgressError,
    TransportError,
)
from src.service.seat_booking.app.command.record_booking_history_use_case import (
    RecordBookingHistoryUseCase,
)
from src.service.seat_booking.app.command.save_seat_preference_use_case import (
    SaveSeatPreferenceUseCase,
)
from src.service.seat_booking.app.command.submit_booking_use_case import SubmitBookingUseCase
from src.service.seat_booking.app.dto import NoticeLevel
from src.service.seat_booking.app.query.fetch_seat_preference_use_case import (
    FetchSeatPreferenceUseCase,
)
from src.service.seat_booking.app.query.list_booking_history_use_case import (
    ListBookingHistoryUseCase,
)
from src.service.seat_booking.app.task.coach_layout_monitor import CoachLayoutMonitor
from src.service.seat_booking.app.task.status_poller import StatusPoller
from src.service.seat_booking.domain.entity import SeatPreference
from src.service.seat_booking.domain.enum import AppStatus, PreferenceType
from src.service.seat_booking.domain.state import AppState
from src.service.seat_booking.domain.value_object import CurrentUserInfo
from src.service.seat_booking.driving_adapter.booking_orchestrator import (
    DEFAULT_FAILURE_MESSAGE,
    BookingOrchestrator,
)

from test.service.seat_booking.unit.helpers import (
    RecordingNotifier,
    ScriptedBookingApiClient,
    confirmed_record,
    failed_record,
    pending_record,
    wait_for_status,
    wait_until,
)


POLL_INTERVAL = 0.01


@pytest.fixture
def app_state() -> AppState:
    return AppState()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def api_client() -> ScriptedBookingApiClient:
    return ScriptedBookingApiClient(
        statuses=[pending_record(), confirmed_record('A1', 'A2')]
    )


@pytest.fixture
def mock_preference_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.get_by_user_id = AsyncMock(return_value=None)
    repo.upsert = AsyncMock(
        side_effect=lambda *, user_id, preference_type: SeatPreference(
            preference_type=preference_type, user_id=user_id
        )
    )
    return repo


@pytest.fixture
def mock_history_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.insert = AsyncMock(side_effect=lambda *, record: record)
    repo.list_recent = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def current_user() -> CurrentUserInfo:
    return CurrentUserInfo(user_id=uuid4(), email='rider@example.com')


def build_orchestrator(
    *,
    app_state: AppState,
    api_client: ScriptedBookingApiClient,
    notifier: RecordingNotifier,
    preference_repo: AsyncMock,
    history_repo: AsyncMock,
    current_user: Optional[CurrentUserInfo] = None,
    coach_layout_monitor: Optional[CoachLayoutMonitor] = None,
) -> BookingOrchestrator:
    return BookingOrchestrator(
        app_state=app_state,
        submit_booking_use_case=SubmitBookingUseCase(api_client=api_client, app_state=app_state),
        record_booking_history_use_case=RecordBookingHistoryUseCase(
            history_repo=history_repo, notifier=notifier
        ),
        fetch_seat_preference_use_case=FetchSeatPreferenceUseCase(preference_repo=preference_repo),
        save_seat_preference_use_case=SaveSeatPreferenceUseCase(preference_repo=preference_repo),
        list_booking_history_use_case=ListBookingHistoryUseCase(history_repo=history_repo),
        notifier=notifier,
        status_poller_factory=lambda: StatusPoller(
            api_client=api_client,
            app_state=app_state,
            interval=POLL_INTERVAL,
            max_consecutive_errors=0,
        ),
        coach_layout_monitor=coach_layout_monitor,
        current_user=current_user,
    )


@pytest.fixture
def orchestrator(
    app_state: AppState,
    api_client: ScriptedBookingApiClient,
    notifier: RecordingNotifier,
    mock_preference_repo: AsyncMock,
    mock_history_repo: AsyncMock,
) -> BookingOrchestrator:
    return build_orchestrator(
        app_state=app_state,
        api_client=api_client,
        notifier=notifier,
        preference_repo=mock_preference_repo,
        history_repo=mock_history_repo,
    )


@pytest.mark.unit
class TestSubmit:
    @pytest.mark.asyncio
    async def test_invalid_seat_count_makes_no_call(
        self,
        orchestrator: BookingOrchestrator,
        api_client: ScriptedBookingApiClient,
        app_state: AppState,
        notifier: RecordingNotifier,
    ) -> None:
        """Zero seats: no request goes out and the state stays idle"""
        async with orchestrator as session:
            response = await session.submit(num_seats=0)

            assert response is None
            assert api_client.submitted == []
            assert app_state.app_status == AppStatus.IDLE
            assert app_state.request_id is None
            notice = notifier.find('Invalid Input')
            assert notice.level == NoticeLevel.ERROR
            assert notice.description == 'Please enter between 1 and 7 seats'

    @pytest.mark.asyncio
    async def test_accepted_request_is_polled_to_confirmed(
        self,
        orchestrator: BookingOrchestrator,
        app_state: AppState,
        notifier: RecordingNotifier,
    ) -> None:
        async with orchestrator as session:
            # Act
            response = await session.submit(num_seats=2)

            # Assert
            assert response is not None
            assert response.request_id == 'req-1'
            assert app_state.request_id == 'req-1'
            await wait_for_status(app_state, AppStatus.CONFIRMED)
            assert notifier.find('Booking Request Submitted').description == 'Request ID: req-1'
            confirmed = notifier.find('Booking Confirmed')
            assert confirmed.level == NoticeLevel.SUCCESS
            assert confirmed.description == 'Your seats have been reserved: A1, A2'
            assert session.outcome == confirmed_record('A1', 'A2')

    @pytest.mark.asyncio
    async def test_failed_booking_uses_server_error(
        self,
        api_client: ScriptedBookingApiClient,
        orchestrator: BookingOrchestrator,
        app_state: AppState,
        notifier: RecordingNotifier,
    ) -> None:
        async with orchestrator as session:
            api_client.statuses = [failed_record('capacity exceeded')]

            await session.submit(num_seats=7)

            await wait_for_status(app_state, AppStatus.FAILED)
            await wait_until(lambda: 'Booking Failed' in notifier.titles)
            assert notifier.find('Booking Failed').description == 'capacity exceeded'

    @pytest.mark.asyncio
    async def test_failed_booking_without_error_uses_default_message(
        self,
        api_client: ScriptedBookingApiClient,
        orchestrator: BookingOrchestrator,
        app_state: AppState,
        notifier: RecordingNotifier,
    ) -> None:
        async with orchestrator as session:
            api_client.statuses = [failed_record()]

            await session.submit(num_seats=3)

            await wait_for_status(app_state, AppStatus.FAILED)
            await wait_until(lambda: 'Booking Failed' in notifier.titles)
            assert notifier.find('Booking Failed').description == DEFAULT_FAILURE_MESSAGE

    @pytest.mark.asyncio
    async def test_transport_failure_ends_in_failed_without_polling(
        self,
        api_client: ScriptedBookingApiClient,
        orchestrator: BookingOrchestrator,
        app_state: AppState,
        notifier: RecordingNotifier,
    ) -> None:
        async with orchestrator as session:
            # Arrange
            api_client.submit_error = TransportError('Failed to submit booking request (HTTP 503)', 503)

            # Act
            response = await session.submit(num_seats=2)

            # Assert
            assert response is None
            assert app_state.app_status == AppStatus.FAILED
            assert app_state.request_id is None
            assert notifier.find('Booking Failed').description == (
                'Failed to submit booking request (HTTP 503)'
            )
            await anyio.sleep(POLL_INTERVAL * 3)
            assert api_client.status_queries == []

    @pytest.mark.asyncio
    async def test_cancelled_submit_leaves_session_recoverable(
        self,
        api_client: ScriptedBookingApiClient,
        orchestrator: BookingOrchestrator,
        app_state: AppState,
    ) -> None:
        async with orchestrator as session:
            # Arrange: the create-request call never answers
            async def _hang(*, request: object) -> None:
                await anyio.sleep_forever()

            api_client.request_booking = _hang  # type: ignore[method-assign,assignment]

            # Act: the view goes away mid-call
            with anyio.move_on_after(POLL_INTERVAL * 5):
                await session.submit(num_seats=2)

            # Assert
            assert app_state.app_status == AppStatus.FAILED
            assert app_state.request_id is None
            assert session.can_submit
            session.book_another()
            assert app_state.app_status == AppStatus.IDLE

    @pytest.mark.asyncio
    async def test_unexpected_client_error_leaves_session_recoverable(
        self,
        api_client: ScriptedBookingApiClient,
        orchestrator: BookingOrchestrator,
        app_state: AppState,
    ) -> None:
        async with orchestrator as session:
            # Arrange
            api_client.submit_error = RuntimeError('connection pool exploded')

            # Act
            with pytest.raises(RuntimeError, match='exploded'):
                await session.submit(num_seats=2)

            # Assert: state is released and a retry goes through
            assert app_state.app_status == AppStatus.FAILED
            assert app_state.request_id is None
            api_client.submit_error = None
            response = await session.submit(num_seats=2)
            assert response is not None
            await wait_for_status(app_state, AppStatus.CONFIRMED)

    @pytest.mark.asyncio
    async def test_submit_while_pending_is_rejected(
        self,
        api_client: ScriptedBookingApiClient,
        orchestrator: BookingOrchestrator,
        app_state: AppState,
    ) -> None:
        async with orchestrator as session:
            # Arrange: the request never resolves
            api_client.statuses = [pending_record()]
            await session.submit(num_seats=2)
            assert app_state.app_status == AppStatus.PENDING
            assert not session.can_submit

            # Act & Assert
            with pytest.raises(SubmissionInProgressError):
                await session.submit(num_seats=1)
            assert len(api_client.submitted) == 1

    @pytest.mark.asyncio
    async def test_submit_from_terminal_state_starts_new_lifecycle(
        self,
        orchestrator: BookingOrchestrator,
        api_client: ScriptedBookingApiClient,
        app_state: AppState,
    ) -> None:
        async with orchestrator as session:
            # Arrange
            await session.submit(num_seats=2)
            await wait_for_status(app_state, AppStatus.CONFIRMED)
            stream = app_state.subscribe()

            # Act
            response = await session.submit(num_seats=1)

            # Assert: reset → booking → (id) → pending, then polled to confirmed
            assert response is not None and response.request_id == 'req-2'
            first = stream.receive_nowait()
            assert (first.request_id, first.app_status) == (None, AppStatus.IDLE)
            assert stream.receive_nowait().app_status == AppStatus.BOOKING
            await wait_for_status(app_state, AppStatus.CONFIRMED)
            assert app_state.request_id == 'req-2'

    @pytest.mark.asyncio
    async def test_submit_requires_active_session(self, orchestrator: BookingOrchestrator) -> None:
        with pytest.raises(RuntimeError, match='async with'):
            await orchestrator.submit(num_seats=1)


@pytest.mark.unit
class TestBookAnother:
    @pytest.mark.asyncio
    async def test_reset_while_pending_stops_polling(
        self,
        api_client: ScriptedBookingApiClient,
        orchestrator: BookingOrchestrator,
        app_state: AppState,
    ) -> None:
        async with orchestrator as session:
            # Arrange
            api_client.statuses = [pending_record()]
            await session.submit(num_seats=2)
            await wait_until(lambda: len(api_client.status_queries) >= 1)
            poller = session._active_poller
            assert poller is not None

            # Act
            session.book_another()
            queries_at_reset = len(api_client.status_queries)
            await anyio.sleep(POLL_INTERVAL * 5)

            # Assert
            assert poller.cancelled
            assert app_state.app_status == AppStatus.IDLE
            assert app_state.request_id is None
            assert len(api_client.status_queries) <= queries_at_reset + 1
            assert session.outcome is None
            assert session.can_submit

    @pytest.mark.asyncio
    async def test_reset_after_confirmed_returns_to_idle(
        self, orchestrator: BookingOrchestrator, app_state: AppState
    ) -> None:
        async with orchestrator as session:
            await session.submit(num_seats=2)
            await wait_for_status(app_state, AppStatus.CONFIRMED)

            session.book_another()

            assert app_state.app_status == AppStatus.IDLE
            assert app_state.request_id is None

    @pytest.mark.asyncio
    async def test_reset_while_booking_is_rejected(
        self, orchestrator: BookingOrchestrator, app_state: AppState
    ) -> None:
        async with orchestrator as session:
            app_state.set_app_status(AppStatus.BOOKING)

            with pytest.raises(SubmissionInProgressError):
                session.book_another()

            assert app_state.app_status == AppStatus.BOOKING


@pytest.mark.unit
class TestHistorySync:
    @pytest.mark.asyncio
    async def test_anonymous_submission_writes_no_history(
        self, orchestrator: BookingOrchestrator, app_state: AppState, mock_history_repo: AsyncMock
    ) -> None:
        async with orchestrator as session:
            await session.submit(num_seats=2)
            await wait_for_status(app_state, AppStatus.CONFIRMED)

            mock_history_repo.insert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_signed_in_submission_records_history_with_preference(
        self,
        app_state: AppState,
        api_client: ScriptedBookingApiClient,
        notifier: RecordingNotifier,
        mock_preference_repo: AsyncMock,
        mock_history_repo: AsyncMock,
        current_user: CurrentUserInfo,
    ) -> None:
        # Arrange
        mock_preference_repo.get_by_user_id.return_value = SeatPreference(
            preference_type=PreferenceType.WINDOW, user_id=current_user.user_id
        )
        orchestrator = build_orchestrator(
            app_state=app_state,
            api_client=api_client,
            notifier=notifier,
            preference_repo=mock_preference_repo,
            history_repo=mock_history_repo,
            current_user=current_user,
        )

        # Act
        async with orchestrator:
            await orchestrator.submit(num_seats=3)
            await wait_until(lambda: mock_history_repo.insert.await_count == 1)

        # Assert
        record = mock_history_repo.insert.await_args.kwargs['record']
        assert record.user_id == current_user.user_id
        assert record.request_id == 'req-1'
        assert record.num_seats == 3
        assert record.seat_preference is PreferenceType.WINDOW

    @pytest.mark.asyncio
    async def test_history_failure_does_not_affect_booking(
        self,
        app_state: AppState,
        api_client: ScriptedBookingApiClient,
        notifier: RecordingNotifier,
        mock_preference_repo: AsyncMock,
        mock_history_repo: AsyncMock,
        current_user: CurrentUserInfo,
    ) -> None:
        # Arrange
        mock_preference_repo.get_by_user_id.side_effect = PersistenceError('preferences down')
        mock_history_repo.insert.side_effect = PersistenceError('Failed to record booking history: down')
        orchestrator = build_orchestrator(
            app_state=app_state,
            api_client=api_client,
            notifier=notifier,
            preference_repo=mock_preference_repo,
            history_repo=mock_history_repo,
            current_user=current_user,
        )

        # Act
        async with orchestrator:
            await orchestrator.submit(num_seats=3)
            await wait_for_status(app_state, AppStatus.CONFIRMED)
            await wait_until(lambda: 'Booking History Not Saved' in notifier.titles)

        # Assert: preference lookup fell back to `any`, booking still confirmed
        record = mock_history_repo.insert.await_args.kwargs['record']
        assert record.seat_preference is PreferenceType.ANY
        assert notifier.find('Booking History Not Saved').level == NoticeLevel.WARNING
        assert 'Booking Confirmed' in notifier.titles


@pytest.mark.unit
class TestPreferenceAndHistory:
    @pytest.mark.asyncio
    async def test_save_preference_requires_user(
        self, orchestrator: BookingOrchestrator, notifier: RecordingNotifier
    ) -> None:
        async with orchestrator as session:
            result = await session.save_preference(preference_type=PreferenceType.AISLE)

            assert result is None
            assert notifier.find('Error').description == 'Not authenticated'

    @pytest.mark.asyncio
    async def test_save_preference_for_signed_in_user(
        self,
        orchestrator: BookingOrchestrator,
        notifier: RecordingNotifier,
        mock_preference_repo: AsyncMock,
        current_user: CurrentUserInfo,
    ) -> None:
        async with orchestrator as session:
            session.set_current_user(current_user)

            result = await session.save_preference(preference_type='aisle')

            assert result is not None
            assert result.preference_type is PreferenceType.AISLE
            mock_preference_repo.upsert.assert_awaited_once_with(
                user_id=current_user.user_id, preference_type=PreferenceType.AISLE
            )
            assert notifier.find('Preferences Saved').description == (
                'Your seat preferences have been updated successfully.'
            )

    @pytest.mark.asyncio
    async def test_fetch_preference_falls_back_to_any_on_store_failure(
        self,
        orchestrator: BookingOrchestrator,
        mock_preference_repo: AsyncMock,
        current_user: CurrentUserInfo,
    ) -> None:
        async with orchestrator as session:
            session.set_current_user(current_user)
            mock_preference_repo.get_by_user_id.side_effect = PersistenceError('down')

            preference = await session.fetch_preference()

            assert preference.preference_type is PreferenceType.ANY

    @pytest.mark.asyncio
    async def test_list_history_store_failure_returns_empty(
        self,
        orchestrator: BookingOrchestrator,
        notifier: RecordingNotifier,
        mock_history_repo: AsyncMock,
        current_user: CurrentUserInfo,
    ) -> None:
        async with orchestrator as session:
            session.set_current_user(current_user)
            mock_history_repo.list_recent.side_effect = PersistenceError('Failed to load booking history: down')

            assert await session.list_history() == []
            assert notifier.find('Booking History Unavailable').level == NoticeLevel.WARNING


@pytest.mark.unit
class TestCoachLayoutMonitorLifecycle:
    @pytest.mark.asyncio
    async def test_monitor_runs_for_the_session(
        self,
        app_state: AppState,
        api_client: ScriptedBookingApiClient,
        notifier: RecordingNotifier,
        mock_preference_repo: AsyncMock,
        mock_history_repo: AsyncMock,
    ) -> None:
        # Arrange
        monitor = CoachLayoutMonitor(api_client=api_client, interval=POLL_INTERVAL)
        orchestrator = build_orchestrator(
            app_state=app_state,
            api_client=api_client,
            notifier=notifier,
            preference_repo=mock_preference_repo,
            history_repo=mock_history_repo,
            coach_layout_monitor=monitor,
        )

        # Act
        with anyio.fail_after(2.0):
            async with orchestrator:
                await wait_until(lambda: monitor.refreshes >= 2)

        # Assert: leaving the session stopped the monitor
        refreshes = monitor.refreshes
        await anyio.sleep(POLL_INTERVAL * 3)
        assert monitor.refreshes == refreshes
        assert monitor.latest is not None
