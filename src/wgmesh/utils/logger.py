"""
Logging setup for wgmesh.

All modules obtain a logger through ``get_logger(__name__)``. Output goes
through loguru; records emitted by the standard library ``logging`` module
(uvicorn, httpx) are intercepted and forwarded to loguru so that a single
sink and format are used for the whole process.
"""

import logging
import sys

from loguru import logger as _logger

from wgmesh.models.enums import LogLevel

_LEVEL_MAP = {
    LogLevel.FULL: "TRACE",
    LogLevel.DEBUG: "DEBUG",
    LogLevel.INFO: "INFO",
    LogLevel.WARNING: "WARNING",
}

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> - <level>{message}</level>"
)

_logger.configure(extra={"component": "wgmesh"})


class InterceptHandler(logging.Handler):
    """Forward standard library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk back to the frame that issued the logging call
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        _logger.bind(component=record.name).opt(
            depth=depth, exception=record.exc_info
        ).log(level, record.getMessage())


def configure_logging(level: LogLevel = LogLevel.INFO, log_file: str = "") -> None:
    """
    Configure the loguru sinks and intercept standard logging.

    Must be called before uvicorn starts so its loggers are captured.

    Args:
        level: Verbosity level.
        log_file: Optional file path for an additional rotating sink.
    """
    loguru_level = _LEVEL_MAP.get(level, "INFO")
    full_trace = level == LogLevel.FULL

    _logger.remove()
    _logger.add(
        sys.stderr,
        level=loguru_level,
        format=_FORMAT,
        backtrace=full_trace,
        diagnose=full_trace,
    )
    if log_file:
        _logger.add(
            log_file,
            level=loguru_level,
            format=_FORMAT,
            rotation="10 MB",
            retention=5,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "httpx"):
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False


def get_logger(name: str):
    """Return a loguru logger bound to a component name."""
    return _logger.bind(component=name)
