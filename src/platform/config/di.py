"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/providers/factory.html#passing-a-factory-as-a-dependency
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.http.http_client import create_http_client
from src.service.seat_booking.app.command.record_booking_history_use_case import (
    RecordBookingHistoryUseCase,
)
from src.service.seat_booking.app.command.save_seat_preference_use_case import (
    SaveSeatPreferenceUseCase,
)
from src.service.seat_booking.app.command.submit_booking_use_case import SubmitBookingUseCase
from src.service.seat_booking.app.query.fetch_seat_preference_use_case import (
    FetchSeatPreferenceUseCase,
)
from src.service.seat_booking.app.query.list_booking_history_use_case import (
    ListBookingHistoryUseCase,
)
from src.service.seat_booking.app.task.coach_layout_monitor import CoachLayoutMonitor
from src.service.seat_booking.app.task.status_poller import StatusPoller
from src.service.seat_booking.domain.state import AppState
from src.service.seat_booking.driven_adapter.http.booking_api_client_impl import (
    BookingApiClientImpl,
)
from src.service.seat_booking.driven_adapter.notifier.logger_notifier_impl import (
    LoggerNotifierImpl,
)
from src.service.seat_booking.driven_adapter.repo.booking_history_repo_impl import (
    BookingHistoryRepoImpl,
)
from src.service.seat_booking.driven_adapter.repo.seat_preference_repo_impl import (
    SeatPreferenceRepoImpl,
)
from src.service.seat_booking.driving_adapter.booking_orchestrator import BookingOrchestrator


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (uses AsyncEngineManager with settings from config_service)
    database = providers.Singleton(Database)

    # Allocation service (one connection pool per client session)
    http_client = providers.Singleton(
        create_http_client,
        base_url=config_service.provided.BOOKING_API_BASE_URL,
        timeout=config_service.provided.BOOKING_API_TIMEOUT,
    )
    booking_api_client = providers.Singleton(BookingApiClientImpl, http_client=http_client)

    # Repositories (stateless - use session_factory per-call)
    seat_preference_repo = providers.Singleton(
        SeatPreferenceRepoImpl, session_factory=database.provided.session
    )
    booking_history_repo = providers.Singleton(
        BookingHistoryRepoImpl, session_factory=database.provided.session
    )

    notifier = providers.Singleton(LoggerNotifierImpl)

    # Session state (one per container = one per client session)
    app_state = providers.Singleton(AppState)

    # Authenticated user of the session, None = anonymous (override after sign-in)
    current_user = providers.Object(None)

    # Use cases (stateless, can be Singleton)
    submit_booking_use_case = providers.Singleton(
        SubmitBookingUseCase, api_client=booking_api_client, app_state=app_state
    )
    record_booking_history_use_case = providers.Singleton(
        RecordBookingHistoryUseCase, history_repo=booking_history_repo, notifier=notifier
    )
    fetch_seat_preference_use_case = providers.Singleton(
        FetchSeatPreferenceUseCase, preference_repo=seat_preference_repo
    )
    save_seat_preference_use_case = providers.Singleton(
        SaveSeatPreferenceUseCase, preference_repo=seat_preference_repo
    )
    list_booking_history_use_case = providers.Singleton(
        ListBookingHistoryUseCase, history_repo=booking_history_repo
    )

    # Background tasks: a fresh poller per accepted request
    status_poller = providers.Factory(
        StatusPoller,
        api_client=booking_api_client,
        app_state=app_state,
        interval=config_service.provided.STATUS_POLL_INTERVAL,
        max_consecutive_errors=config_service.provided.STATUS_POLL_MAX_CONSECUTIVE_ERRORS,
    )
    coach_layout_monitor = providers.Factory(
        CoachLayoutMonitor,
        api_client=booking_api_client,
        interval=config_service.provided.COACH_LAYOUT_POLL_INTERVAL,
    )

    booking_orchestrator = providers.Factory(
        BookingOrchestrator,
        app_state=app_state,
        submit_booking_use_case=submit_booking_use_case,
        record_booking_history_use_case=record_booking_history_use_case,
        fetch_seat_preference_use_case=fetch_seat_preference_use_case,
        save_seat_preference_use_case=save_seat_preference_use_case,
        list_booking_history_use_case=list_booking_history_use_case,
        notifier=notifier,
        status_poller_factory=status_poller.provider,
        coach_layout_monitor=coach_layout_monitor,
        current_user=current_user,
    )


container = Container()


def setup() -> None:
    container.config_service()


async def shutdown() -> None:
    await container.http_client().aclose()
    await container.database().close()
    container.reset_singletons()
