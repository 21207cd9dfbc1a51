from __future__ import annotations

import logging
import sys
import uuid

from loguru import logger as loguru_logger

_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> "
    "<level>{level: <8}</level> "
    "<cyan>{name}</cyan>: {message} <dim>{extra}</dim>"
)

# LogRecord attributes that are not user-supplied ``extra`` fields
_STANDARD_FIELDS = frozenset(
    {
        "args",
        "msg",
        "name",
        "levelno",
        "levelname",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "getMessage",
        "message",
    }
)


class InterceptHandler(logging.Handler):
    """Forward stdlib log records, including ``extra`` fields, to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        level: int | str
        try:
            level = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if not key.startswith("_") and key not in _STANDARD_FIELDS
        }
        loguru_logger.bind(**extra).opt(depth=6, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(
    level: str = "INFO",
    *,
    json_output: bool = False,
    log_file: str | None = None,
    retention: str = "30 days",
) -> None:
    """Configure loguru sinks and bridge the stdlib ``logging`` tree into them.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Emit serialized JSON records instead of the console format
        log_file: Optional log file path for persistent logging
        retention: Log retention period (loguru format)
    """
    lvl = getattr(logging, level.upper(), logging.INFO)

    loguru_logger.remove()
    loguru_logger.add(
        sys.stderr,
        format=_CONSOLE_FORMAT,
        level=level.upper(),
        serialize=json_output,
        backtrace=False,
        diagnose=False,
    )
    if log_file:
        loguru_logger.add(
            log_file,
            level=level.upper(),
            serialize=True,
            rotation="10 MB",
            retention=retention,
            compression="gz",
        )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(lvl)
    root.addHandler(InterceptHandler())

    for noisy_logger in ("httpx", "httpcore", "peewee"):
        logging.getLogger(noisy_logger).setLevel(max(lvl, logging.WARNING))


def generate_correlation_id() -> str:
    """Generate a short correlation ID for tracing one run across log records."""
    return uuid.uuid4().hex[:12]
