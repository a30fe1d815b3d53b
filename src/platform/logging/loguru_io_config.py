"""
loguru sinks for the booking client

Every record carries the service context, the decorated call target, the
booking request id of the task that emitted it and the start time of the
decorated call chain. Console always; hourly files only with DEBUG.
"""

from contextvars import ContextVar
from datetime import datetime
from enum import StrEnum
import logging
import os
import sys
from typing import TYPE_CHECKING, Any

from loguru import logger as loguru_logger


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.constant.path import LOG_DIR
from src.platform.logging.service_context import get_service_context


# Use test log directory if in test environment
LOG_DIR = os.environ.get('TEST_LOG_DIR', LOG_DIR)

SENSITIVE_KEYWORDS = {
    'password',
    'access_token',
    'authorization',
}

# Noisy stdlib loggers that are only interesting above DEBUG
QUIET_DEBUG_LOGGERS = ('httpx', 'httpcore', 'asyncio', 'sqlalchemy.pool')

chain_start_time_var: ContextVar[float] = ContextVar('first_time_var', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)
# Booking request the current task works for; tags every record it emits
request_id_var: ContextVar[str] = ContextVar('request_id_var', default='-')


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'
    REQUEST_ID = 'request_id'


def _default_extra() -> dict[str, Any]:
    return {
        ExtraField.SERVICE_CONTEXT: get_service_context(),
        ExtraField.CHAIN_START_TIME: '',
        ExtraField.CALL_TARGET: '',
    }


def _patch_request_id(record: Any) -> None:
    record['extra'][ExtraField.REQUEST_ID] = request_id_var.get()


class InterceptHandler(logging.Handler):
    """Route stdlib logging (httpx, sqlalchemy, asyncpg) into loguru"""

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno <= logging.DEBUG and record.name.startswith(QUIET_DEBUG_LOGGERS):
            return

        try:
            level: str | int = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        custom_logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


io_log_format = ' | '.join(
    (
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        '<lvl>{level:<8}</>',
        f'<m>req={{extra[{ExtraField.REQUEST_ID}]}}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        '{message}',
        '<lk>{elapsed}</>',
        f'<lk>{{extra[{ExtraField.CHAIN_START_TIME}]:<18}}</>',
    )
)


loguru_logger.remove()  # Remove default handler to avoid duplicate output and use custom format
loguru_logger.configure(extra=_default_extra(), patcher=_patch_request_id)
custom_logger: 'LoguruLogger' = loguru_logger.bind(**_default_extra())

min_log_level = settings.LOG_LEVEL or ('DEBUG' if settings.DEBUG else 'INFO')

if settings.LOG_JSON:
    # One JSON object per line for log shippers
    custom_logger.add(sys.stdout, serialize=True, level=min_log_level, enqueue=True)
else:
    custom_logger.add(sys.stdout, format=io_log_format, level=min_log_level, enqueue=True)

if settings.DEBUG:
    now = datetime.now()
    log_filename = (
        f'test_{now.strftime("%Y-%m-%d_%H")}.log'
        if os.environ.get('TEST_LOG_DIR')
        else f'{now.strftime("%Y-%m-%d_%H")}.log'
    )
    custom_logger.add(
        f'{LOG_DIR}/{log_filename}',
        format=io_log_format,
        rotation='1 hour',
        retention='7 days',
        compression='gz',
        enqueue=True,
        level=min_log_level,
    )

logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
