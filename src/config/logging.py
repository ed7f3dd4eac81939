"""Structured logging configuration using structlog."""
import logging
import sys
from datetime import date
from decimal import Decimal
from typing import Any, Optional

import structlog
from pythonjsonlogger import jsonlogger

from src.config.settings import settings

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def prefix_property_code(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Prepend [PROPERTY_CODE] to the event when a property_code is bound."""
    property_code = event_dict.get("property_code")
    if property_code:
        event_dict["event"] = f"[{property_code}] {event_dict.get('event', '')}"
    return event_dict


def stringify_domain_values(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Render money and dates as plain strings.

    Decimal amounts keep their exact cents instead of becoming floats, and
    dates come out as ISO strings in both renderers.

    Args:
        logger: The logger instance
        method_name: The name of the method being called
        event_dict: The event dictionary containing log data

    Returns:
        Event dictionary with Decimal and date values converted
    """
    for key, value in event_dict.items():
        if isinstance(value, Decimal):
            event_dict[key] = str(value)
        elif isinstance(value, date):
            event_dict[key] = value.isoformat()
    return event_dict


def _build_handler(log_format: str, log_level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    if log_format == "json":
        handler.setFormatter(jsonlogger.JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    handler.setLevel(log_level)
    return handler


def _processors(log_format: str) -> list[Any]:
    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        stringify_domain_values,
        prefix_property_code,
        renderer,
    ]


def configure_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Configure stdlib logging and structlog for the engine.

    Args:
        level: Log level name, settings.logging.level when omitted
        log_format: "json" or "console", settings.logging.format when omitted
    """
    log_format = log_format or settings.logging.format
    log_level = getattr(logging, (level or settings.logging.level).upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(_build_handler(log_format, log_level))

    # Request lines from the service clients are noise at INFO
    for noisy in ("httpcore", "httpx"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    structlog.configure(
        processors=_processors(log_format),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if settings.property_code:
        structlog.contextvars.bind_contextvars(property_code=settings.property_code)


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    return structlog.get_logger(name)
