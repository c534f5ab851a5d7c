"""Structlog setup for the Tasks API.

Every event is a single line tagged with the service name. The renderer is
chosen by ``log_format``: ``console`` for people, ``json`` for log shippers,
``auto`` for console on a TTY (or with FORCE_COLOR set) and JSON otherwise.
"""

import logging
import os
import sys

import structlog

SERVICE_NAME = "tasks-api"


def _add_service(
    logger: structlog.types.WrappedLogger, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _wants_console(log_format: str) -> bool:
    if log_format == "console":
        return True
    if log_format == "json":
        return False
    forced = os.environ.get("FORCE_COLOR", "").lower() in ("1", "true", "yes")
    return forced or sys.stdout.isatty()


def _min_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def configure_logging(level: str = "info", log_format: str = "auto") -> None:
    """Configure structlog for the process.

    Args:
        level: Minimum level name to emit (debug, info, warning, error).
            Unknown names fall back to info.
        log_format: ``auto``, ``console`` or ``json``.
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _add_service,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if _wants_console(log_format):
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_min_level(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
