"""
Structured logging configuration using structlog.

Log entries look like:
{
    "ts": "2025-01-01T00:00:00.000000Z",
    "level": "error",
    "service": "xorca-cloudevent",
    "event": "Schema validation failed",
    "schema": "XOrcaCloudEventV1",
    ...additional context...
}
"""
import logging
from typing import Any, Optional

import structlog

from . import settings


def _service_name_adder(service_name: str):
    def add_service_name(logger: Any, method_name: str, event_dict: dict) -> dict:
        event_dict.setdefault("service", service_name)
        return event_dict
    return add_service_name


def configure_logging(
    json_output: Optional[bool] = None,
    level: Optional[str] = None,
    service_name: Optional[str] = None,
) -> None:
    """
    Configure structlog for processes that embed this package.

    Args:
        json_output: Render JSON lines if True, console output if False.
            Defaults to XORCA_LOG_JSON.
        level: Minimum level name. Defaults to XORCA_LOG_LEVEL.
        service_name: Value of the "service" key. Defaults to XORCA_SERVICE_NAME.
    """
    json_output = settings.LOG_JSON if json_output is None else json_output
    level_name = (level or settings.LOG_LEVEL).upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: {level_name}")

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        _service_name_adder(service_name or settings.SERVICE_NAME),
        structlog.processors.TimeStamper(fmt="iso", key="ts"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )