"""
Booking lifecycle state container

Single source of truth for the lifecycle UI: `request_id` + `app_status`.
One instance per client session, owned by the orchestrator and handed by
reference to the tasks that drive it.

Writers keep the invariant themselves: `request_id` is set iff
`app_status` is pending / confirmed / failed. The container does not check it
(a failed submission legitimately ends in `failed` with no request id).

Presentation consumers read through `snapshot()` or `subscribe()`:
- every setter publishes one snapshot, `reset()` publishes exactly one
- streams are bounded; a slow consumer misses snapshots instead of blocking writers
"""

from typing import List, Optional

from anyio import BrokenResourceError, ClosedResourceError, WouldBlock, create_memory_object_stream
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream
import attrs

from src.platform.logging.loguru_io import Logger
from src.service.seat_booking.domain.enum import AppStatus


@attrs.define(frozen=True)
class AppStateSnapshot:
    request_id: Optional[str]
    app_status: AppStatus


class AppState:
    def __init__(self) -> None:
        self._request_id: Optional[str] = None
        self._app_status: AppStatus = AppStatus.IDLE
        self._subscribers: List[MemoryObjectSendStream[AppStateSnapshot]] = []

    @property
    def request_id(self) -> Optional[str]:
        return self._request_id

    @property
    def app_status(self) -> AppStatus:
        return self._app_status

    def snapshot(self) -> AppStateSnapshot:
        return AppStateSnapshot(request_id=self._request_id, app_status=self._app_status)

    def set_request_id(self, request_id: Optional[str]) -> None:
        self._request_id = request_id
        self._publish()

    def set_app_status(self, app_status: AppStatus) -> None:
        Logger.base.info(f'🔀 [APP-STATE] {self._app_status} → {app_status} (request={self._request_id})')
        self._app_status = AppStatus(app_status)
        self._publish()

    def reset(self) -> None:
        """The only way out of a terminal state"""
        Logger.base.info(f'🔀 [APP-STATE] reset from {self._app_status} (request={self._request_id})')
        self._request_id = None
        self._app_status = AppStatus.IDLE
        self._publish()

    def subscribe(self, *, max_buffer_size: int = 32) -> MemoryObjectReceiveStream[AppStateSnapshot]:
        send_stream, receive_stream = create_memory_object_stream[AppStateSnapshot](
            max_buffer_size=max_buffer_size
        )
        self._subscribers.append(send_stream)
        return receive_stream

    def _publish(self) -> None:
        snapshot = self.snapshot()
        for send_stream in list(self._subscribers):
            try:
                send_stream.send_nowait(snapshot)
            except WouldBlock:
                Logger.base.warning(f'⚠️ [APP-STATE] Subscriber buffer full, dropping {snapshot}')
            except (BrokenResourceError, ClosedResourceError):
                # Receiver went away
                self._subscribers.remove(send_stream)
