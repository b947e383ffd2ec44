"""Structured logging built on Loguru.

Formatter types:
- **console**: human-readable lines with the bound context inline (development)
- **json**: generic structured format, one JSON document per line
- **aws**: CloudWatch Logs Insights friendly JSON (Lambda, ECS)

Libraries that log through the standard library (``httpx``, ``httpcore``)
are routed into Loguru by ``InterceptHandler`` so every line shares one
format. Request-scoped fields such as ``correlation_id`` and
``operation_id`` are bound by the server pipeline with
``logger.contextualize`` and show up in every formatter.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import Any, Final, Protocol, cast

import orjson
from loguru import logger

from httpapi.core.error_context import is_sensitive_field


class _LoggingState:
    """Simple state holder to track if logging has been configured."""

    def __init__(self) -> None:
        self.configured = False


_state = _LoggingState()


class LogConfigProtocol(Protocol):
    """Protocol for log configuration objects."""

    @property
    def log_level(self) -> str:
        """Logging level."""
        ...

    @property
    def log_formatter_type(self) -> str | None:
        """Log formatter type."""
        ...


class SettingsProtocol(Protocol):
    """Protocol for settings objects that setup_logging can accept."""

    @property
    def debug(self) -> bool:
        """Debug mode flag."""
        ...

    @property
    def log_config(self) -> LogConfigProtocol:
        """Log configuration."""
        ...


CORRELATION_ID_DISPLAY_LENGTH: Final[int] = 8
MAX_FIELD_VALUE_LENGTH: Final[int] = 100

# Fields shown first, in this order, by the console formatter
PRIORITY_FIELDS: Final[tuple[str, ...]] = (
    "correlation_id",
    "operation_id",
    "method",
    "path",
    "status_code",
)


def _escape(value: object) -> str:
    """Escape braces so Loguru does not treat them as format fields."""
    return str(value).replace("{", "{{").replace("}", "}}")


def _format_field(key: str, value: object) -> str:
    """Format a single context field for console display."""
    if key == "correlation_id":
        str_value = str(value)[:CORRELATION_ID_DISPLAY_LENGTH]
    elif is_sensitive_field(key):
        str_value = "[REDACTED]"
    else:
        str_value = str(value)
        if len(str_value) > MAX_FIELD_VALUE_LENGTH:
            str_value = str_value[: MAX_FIELD_VALUE_LENGTH - 3] + "..."
    return f"{_escape(key)}={_escape(str_value)}"


def format_console_with_context(record: dict[str, Any]) -> str:
    """Format log record for console with all context fields visible.

    Args:
        record: Loguru record to format.

    Returns:
        str: Loguru format string for this record.
    """
    extra = record.get("extra", {})

    context_parts = [
        f"<yellow>{_format_field(field, extra[field])}</yellow>"
        for field in PRIORITY_FIELDS
        if extra.get(field) is not None
    ]
    context_parts.extend(
        f"<dim>{_format_field(key, value)}</dim>"
        for key, value in extra.items()
        if key not in PRIORITY_FIELDS and not key.startswith("_") and value is not None
    )

    parts = [
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green>",
        "<level>{level: <8}</level>",
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan>",
    ]
    if context_parts:
        parts.append(" ".join(f"[{part}]" for part in context_parts))
    parts.append(_escape(record.get("message", "")))

    line = " | ".join(parts) + "\n"
    if record.get("exception"):
        line += "{exception}"
    return line


def _base_entry(record: dict[str, Any]) -> dict[str, Any]:
    return {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "logger": record["name"],
        "function": record["function"],
        "line": record["line"],
    }


def _public_extra(record: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in record.get("extra", {}).items() if not k.startswith("_")}


def serialize_for_json(record: dict[str, Any]) -> str:
    """Format log record as generic JSON.

    Args:
        record: Loguru record to format.

    Returns:
        str: JSON-formatted log entry with newline.
    """
    log_entry = _base_entry(record)
    log_entry.update(_public_extra(record))

    if exc := record.get("exception"):
        log_entry["exception"] = {
            "type": exc.type.__name__ if exc.type else None,
            "value": str(exc.value) if exc.value else None,
        }

    return orjson.dumps(log_entry, default=str).decode() + "\n"


def serialize_for_aws(record: dict[str, Any]) -> str:
    """Format log record for AWS CloudWatch Logs Insights.

    Args:
        record: Loguru record to format.

    Returns:
        str: JSON-formatted log entry for AWS with newline.
    """
    log_entry = _base_entry(record)
    extra = _public_extra(record)

    if correlation_id := extra.pop("correlation_id", None):
        log_entry["requestId"] = correlation_id
    for key, value in extra.items():
        log_entry.setdefault(key, value)

    if exc := record.get("exception"):
        log_entry["error"] = {
            "type": exc.type.__name__ if exc.type else None,
            "message": str(exc.value) if exc.value else None,
        }

    return orjson.dumps(log_entry, default=str).decode() + "\n"


LOG_FORMATTERS: dict[str, Callable[[dict[str, Any]], str]] = {
    "json": serialize_for_json,
    "aws": serialize_for_aws,
}


class InterceptHandler(logging.Handler):
    """Intercept standard logging and redirect to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        """Forward log record to Loguru.

        Args:
            record: Standard library LogRecord to forward.
        """
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller that originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(settings: SettingsProtocol) -> None:
    """Configure Loguru with the formatter selected in ``settings``.

    Args:
        settings: Application settings containing log configuration.

    Note:
        This function ensures it's only called once using module state.
    """
    if _state.configured:
        return

    logger.remove()

    formatter_type = settings.log_config.log_formatter_type or "console"
    formatter = LOG_FORMATTERS.get(formatter_type)

    if formatter is None:
        logger.add(
            sys.stderr,
            format=cast("Any", format_console_with_context),
            level=settings.log_config.log_level,
            colorize=True,
            diagnose=settings.debug,
            backtrace=settings.debug,
        )
    else:

        def structured_sink(message: object) -> None:
            """Write one formatted line per record."""
            record = getattr(message, "record", None)
            if record is not None:
                sys.stdout.write(formatter(record))
                sys.stdout.flush()

        logger.add(
            structured_sink,
            level=settings.log_config.log_level,
            diagnose=False,
            backtrace=False,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    logger.info(
        "Logging configured with {} formatter",
        formatter_type,
        log_level=settings.log_config.log_level,
    )

    _state.configured = True
