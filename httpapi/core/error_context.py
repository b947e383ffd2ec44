"""Sensitive data sanitization for safe logging.

Inbound events carry bearer tokens, cookies and authorizer claims. Before any
of that reaches a log line it goes through the helpers here: header values
are redacted by name, nested structures are redacted by field name using a
default pattern plus the ``log_config.sensitive_fields`` setting.

Only logged copies are sanitized; the data handed to handlers is untouched.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from functools import lru_cache
from re import Pattern
from typing import Any, Final

from httpapi.core.config import get_settings
from httpapi.core.constants import REDACTED

SENSITIVE_HEADERS: Final[frozenset[str]] = frozenset(
    {
        "authorization",
        "cookie",
        "set-cookie",
        "proxy-authorization",
        "x-api-key",
        "x-auth-token",
        "x-csrf-token",
        "x-amz-security-token",
    }
)

DEFAULT_SENSITIVE_PATTERN: Final[Pattern[str]] = re.compile(
    r"(password|passwd|pwd|secret|token|api[_-]?key|apikey|auth|authorization|"
    r"credential|private[_-]?key|access[_-]?key|session|cookie|jwt|bearer)",
    re.IGNORECASE,
)

# Maximum depth for nested structure sanitization
MAX_DEPTH: Final[int] = 10


@lru_cache(maxsize=1)
def _get_sensitive_fields() -> tuple[str, ...]:
    """Get the configured sensitive field names, lower-cased."""
    settings = get_settings()
    return tuple(field.lower() for field in settings.log_config.sensitive_fields)


def is_sensitive_field(field_name: str) -> bool:
    """Check a field name against the default pattern and configured fields."""
    if DEFAULT_SENSITIVE_PATTERN.search(field_name):
        return True

    field_lower = field_name.lower()
    return any(field in field_lower for field in _get_sensitive_fields())


def is_sensitive_header(header_name: str) -> bool:
    """Check if a header name is sensitive (case-insensitive)."""
    return header_name.lower() in SENSITIVE_HEADERS


def sanitize_value(value: Any, field_name: str = "", depth: int = 0) -> Any:  # noqa: ANN401 - any loggable value
    """Redact ``value`` if its field name is sensitive, recursing into containers.

    Args:
        value: The value to potentially sanitize.
        field_name: The field name for context.
        depth: Current recursion depth.

    Returns:
        Any: Sanitized value or original if not sensitive.
    """
    if depth > MAX_DEPTH:
        return REDACTED

    if field_name and is_sensitive_field(field_name):
        return REDACTED

    if isinstance(value, Mapping):
        return {k: sanitize_value(v, str(k), depth + 1) for k, v in value.items()}

    if isinstance(value, list | tuple):
        return [sanitize_value(item, "", depth + 1) for item in value]

    return value


def sanitize_dict(data: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``data`` with sensitive values redacted."""
    return {key: sanitize_value(value, key) for key, value in data.items()}


def sanitize_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of ``headers`` with sensitive header values redacted."""
    return {k: REDACTED if is_sensitive_header(k) else v for k, v in headers.items()}


def sanitize_error_context(
    error: BaseException, context: Mapping[str, Any] | None = None
) -> dict[str, Any]:
    """Create sanitized error context for logging.

    Args:
        error: The exception to create context for.
        context: Additional context to include (will be sanitized).

    Returns:
        dict[str, Any]: Sanitized error context safe for logging.
    """
    error_context: dict[str, Any] = {
        "error_type": type(error).__name__,
        "error_message": str(error),
    }

    if context:
        error_context.update(sanitize_dict(context))

    error_attrs = {
        k: v for k, v in getattr(error, "__dict__", {}).items() if not k.startswith("_")
    }
    if error_attrs:
        error_context["error_attributes"] = sanitize_dict(error_attrs)

    return error_context
