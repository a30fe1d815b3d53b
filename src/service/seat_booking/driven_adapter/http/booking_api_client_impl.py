from typing import Type

import httpx
import orjson
from pydantic import ValidationError as PydanticValidationError

from src.platform.exception.exceptions import PollTransientError, TransportError
from src.platform.logging.loguru_io import Logger
from src.service.seat_booking.app.interface import IBookingApiClient
from src.service.seat_booking.domain.entity import (
    BookingRequest,
    BookingResponse,
    BookingStatusRecord,
)
from src.service.seat_booking.domain.value_object import CoachLayout
from src.service.seat_booking.driven_adapter.http.booking_api_schema import (
    BookingCreateRequest,
    BookingCreatedResponse,
    BookingStatusResponse,
    CoachLayoutResponse,
)


REQUEST_BOOKING_PATH = '/request-booking'
BOOKING_STATUS_PATH = '/booking-status/{request_id}'
COACH_LAYOUT_PATH = '/coach-layout'


class BookingApiClientImpl(IBookingApiClient):
    """
    httpx adapter for the allocation service

    Every failure mode (connection error, non-2xx, body that does not match
    the wire model) is raised as `error_cls` carrying a readable message.
    """

    def __init__(self, *, http_client: httpx.AsyncClient) -> None:
        self._http_client = http_client

    async def _send(
        self,
        method: str,
        path: str,
        *,
        failure_message: str,
        error_cls: Type[TransportError] = TransportError,
        content: bytes | None = None,
    ) -> bytes:
        headers = {'Content-Type': 'application/json'} if content is not None else None
        try:
            response = await self._http_client.request(
                method, path, content=content, headers=headers
            )
        except httpx.HTTPError as e:
            detail = str(e) or type(e).__name__
            raise error_cls(f'{failure_message}: {detail}') from e

        if response.is_error:
            raise error_cls(f'{failure_message} (HTTP {response.status_code})', response.status_code)
        return response.content

    @Logger.io
    async def request_booking(self, *, request: BookingRequest) -> BookingResponse:
        body = BookingCreateRequest(num_seats=request.num_seats).model_dump(by_alias=True)
        content = await self._send(
            'POST',
            REQUEST_BOOKING_PATH,
            content=orjson.dumps(body),
            failure_message='Failed to submit booking request',
        )
        try:
            payload = BookingCreatedResponse.model_validate_json(content)
        except PydanticValidationError as e:
            raise TransportError(f'Unexpected booking response: {e.error_count()} invalid field(s)') from e
        return BookingResponse(request_id=payload.request_id, status=payload.status)

    @Logger.io
    async def get_booking_status(self, *, request_id: str) -> BookingStatusRecord:
        content = await self._send(
            'GET',
            BOOKING_STATUS_PATH.format(request_id=request_id),
            failure_message='Failed to fetch booking status',
            error_cls=PollTransientError,
        )
        try:
            payload = BookingStatusResponse.model_validate_json(content)
        except PydanticValidationError as e:
            raise PollTransientError(
                f'Unexpected booking status response: {e.error_count()} invalid field(s)'
            ) from e
        return BookingStatusRecord(
            status=payload.status,
            allocated_seats=payload.allocated_seats or (),
            error=payload.error,
        )

    @Logger.io(truncate_content=True)
    async def get_coach_layout(self) -> CoachLayout:
        content = await self._send(
            'GET', COACH_LAYOUT_PATH, failure_message='Failed to fetch coach layout'
        )
        try:
            payload = CoachLayoutResponse.model_validate_json(content)
        except PydanticValidationError as e:
            raise TransportError(f'Unexpected coach layout response: {e.error_count()} invalid seat(s)') from e
        return CoachLayout(seats={seat_id: seat.status for seat_id, seat in payload.root.items()})
