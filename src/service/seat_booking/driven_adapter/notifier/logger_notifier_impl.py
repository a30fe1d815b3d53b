"""
Notifier Implementation

Writes every notice to the log and fans it out to in-process subscribers
(the presentation layer) over bounded anyio memory streams.
"""

from typing import List

from anyio import BrokenResourceError, ClosedResourceError, WouldBlock, create_memory_object_stream
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream

from src.platform.logging.loguru_io import Logger
from src.service.seat_booking.app.dto import Notice, NoticeLevel
from src.service.seat_booking.app.interface import INotifier


_LOG_LEVEL = {
    NoticeLevel.INFO: 'INFO',
    NoticeLevel.SUCCESS: 'SUCCESS',
    NoticeLevel.WARNING: 'WARNING',
    NoticeLevel.ERROR: 'ERROR',
}


class LoggerNotifierImpl(INotifier):
    def __init__(self, *, max_buffer_size: int = 20) -> None:
        self._max_buffer_size = max_buffer_size
        self._subscribers: List[MemoryObjectSendStream[Notice]] = []

    def subscribe(self) -> MemoryObjectReceiveStream[Notice]:
        send_stream, receive_stream = create_memory_object_stream[Notice](
            max_buffer_size=self._max_buffer_size
        )
        self._subscribers.append(send_stream)
        return receive_stream

    def notify(self, notice: Notice) -> None:
        Logger.base.log(_LOG_LEVEL[notice.level], f'🔔 [NOTICE] {notice.title}: {notice.description}')

        for send_stream in list(self._subscribers):
            try:
                send_stream.send_nowait(notice)
            except WouldBlock:
                Logger.base.warning(f'⚠️ [NOTICE] Subscriber buffer full, dropping "{notice.title}"')
            except (BrokenResourceError, ClosedResourceError):
                self._subscribers.remove(send_stream)
