"""
Loguru sinks for the booking service.

Every record carries the service context and, for ``@Logger.io`` calls, the
call target and the start time of the outermost call in the chain. Records
from the standard ``logging`` module (uvicorn, SQLAlchemy, httpx) are routed
through the same sinks.
"""

from contextvars import ContextVar
from datetime import datetime
from enum import StrEnum
import logging
import os
import sys

from loguru import logger as loguru_logger

from src.platform.config.core_setting import settings
from src.platform.constant.path import LOG_DIR
from src.platform.logging.service_context import get_service_context


TEST_LOG_DIR = os.environ.get('TEST_LOG_DIR')

# Argument names whose values never reach a log line
SENSITIVE_KEYWORDS = {
    'password',
    'credential',
    'token',
    'authorization',
}

# Standard loggers that are noisy at DEBUG; SQL statements only with DB_ECHO
QUIET_STD_LOGGERS = ('httpx', 'httpcore', 'aiosqlite', 'asyncio')

chain_start_time_var: ContextVar[float] = ContextVar('chain_start_time_var', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'


io_log_format = ' | '.join(
    (
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        '{message}',
        '<lk>{elapsed}</>',
        f'<lk>{{extra[{ExtraField.CHAIN_START_TIME}]:<18}}</>',
    )
)

min_log_level = 'DEBUG' if settings.DEBUG else 'INFO'

loguru_logger.remove()
custom_logger = loguru_logger.bind(
    **{
        ExtraField.SERVICE_CONTEXT: get_service_context(),
        ExtraField.CHAIN_START_TIME: '',
        ExtraField.CALL_TARGET: '',
    }
)
custom_logger.add(sys.stdout, format=io_log_format, level=min_log_level)

# Hourly files in DEBUG only; production ships stdout to the log collector
if settings.DEBUG:
    log_prefix = 'test_' if TEST_LOG_DIR else 'booking_'
    custom_logger.add(
        f'{TEST_LOG_DIR or LOG_DIR}/{log_prefix}{datetime.now():%Y-%m-%d_%H}.log',
        format=io_log_format,
        rotation='1 hour',
        retention='7 days',
        compression='gz',
        level=min_log_level,
    )


class InterceptHandler(logging.Handler):
    """Forward standard logging records to loguru, keeping the original caller"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        custom_logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
for name in QUIET_STD_LOGGERS:
    logging.getLogger(name).setLevel(logging.WARNING)
logging.getLogger('sqlalchemy.engine').setLevel(
    logging.INFO if settings.DB_ECHO else logging.WARNING
)
