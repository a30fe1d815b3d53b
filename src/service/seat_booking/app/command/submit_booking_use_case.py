from opentelemetry import trace

from src.platform.exception.exceptions import TransportError
from src.platform.logging.loguru_io import Logger
from src.service.seat_booking.app.interface import IBookingApiClient
from src.service.seat_booking.domain.entity import BookingRequest, BookingResponse
from src.service.seat_booking.domain.enum import AppStatus
from src.service.seat_booking.domain.state import AppState


class SubmitBookingUseCase:
    """
    One-shot "create booking request" call

    State changes, in order:
    1. app_status = booking
    2. POST /request-booking
    3. success → request_id = <server id>, then app_status = pending
    4. failure, cancellation or any other error → app_status = failed,
       request_id left empty, error re-raised

    No retries. The caller keeps the submit entry point disabled while
    app_status is booking / pending, so only one submission is ever in flight.
    """

    def __init__(self, *, api_client: IBookingApiClient, app_state: AppState) -> None:
        self.api_client = api_client
        self.app_state = app_state
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def submit(self, *, request: BookingRequest) -> BookingResponse:
        """
        Raises:
            TransportError: the allocation service did not accept the request
        """
        with self.tracer.start_as_current_span(
            'use_case.submit_booking',
            attributes={'booking.num_seats': request.num_seats},
        ):
            self.app_state.set_app_status(AppStatus.BOOKING)

            try:
                response = await self.api_client.request_booking(request=request)
            except TransportError as e:
                self.app_state.set_app_status(AppStatus.FAILED)
                Logger.base.error(f'❌ [SUBMIT] Booking request for {request.num_seats} seats failed: {e.message}')
                raise
            except BaseException:
                # Cancelled or crashed mid-call: never leave the session stuck in `booking`
                self.app_state.set_app_status(AppStatus.FAILED)
                Logger.base.warning(
                    f'⚠️ [SUBMIT] Booking request for {request.num_seats} seats aborted'
                )
                raise

            self.app_state.set_request_id(response.request_id)
            self.app_state.set_app_status(AppStatus.PENDING)
            Logger.base.info(
                f'📝 [SUBMIT] Accepted request {response.request_id} for {request.num_seats} seats'
            )
            return response
