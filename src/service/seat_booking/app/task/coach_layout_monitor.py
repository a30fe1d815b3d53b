"""
Coach Layout Monitor

Near-real-time seat occupancy view: refreshes GET /coach-layout every few
seconds for as long as it runs, regardless of the booking lifecycle.
A failed refresh keeps the last good layout.
"""

from typing import Callable, List, Optional

import anyio

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import TransportError
from src.platform.logging.loguru_io import Logger
from src.service.seat_booking.app.interface import IBookingApiClient
from src.service.seat_booking.domain.value_object import CoachLayout


LayoutListener = Callable[[CoachLayout], None]


class CoachLayoutMonitor:
    def __init__(
        self,
        *,
        api_client: IBookingApiClient,
        interval: Optional[float] = None,
    ) -> None:
        self._api_client = api_client
        self._interval = settings.COACH_LAYOUT_POLL_INTERVAL if interval is None else interval
        self._cancel_scope = anyio.CancelScope()
        self._listeners: List[LayoutListener] = []
        self.latest: Optional[CoachLayout] = None
        self.last_error: Optional[str] = None
        self.refreshes = 0

    def add_listener(self, listener: LayoutListener) -> None:
        self._listeners.append(listener)

    def cancel(self) -> None:
        self._cancel_scope.cancel()

    async def run(self) -> None:
        Logger.base.info(f'🚃 [COACH] Watching coach layout every {self._interval}s')
        with self._cancel_scope:
            while True:
                await self.refresh()
                await anyio.sleep(self._interval)
        Logger.base.info('🚃 [COACH] Stopped watching coach layout')

    async def refresh(self) -> Optional[CoachLayout]:
        self.refreshes += 1
        try:
            layout = await self._api_client.get_coach_layout()
        except TransportError as e:
            self.last_error = e.message
            Logger.base.warning(f'⚠️ [COACH] Failed to load coach layout: {e.message}')
            return None

        self.latest = layout
        self.last_error = None
        for listener in self._listeners:
            try:
                listener(layout)
            except Exception as e:
                Logger.base.warning(f'⚠️ [COACH] Layout listener failed: {e}')
        return layout
