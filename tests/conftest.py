"""Root conftest.py for the httpapi test suite.

This file contains project-wide fixtures and pytest configuration.
"""

import contextlib
from collections.abc import Generator
from typing import Any

import pytest
from loguru import logger

from httpapi.core import logging as logging_module
from httpapi.core.config import get_settings
from httpapi.core.context import RequestContext
from httpapi.core.error_context import _get_sensitive_fields


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components in isolation"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that test multiple components"
    )


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove environment variables that change settings or formatter detection."""
    for name in (
        "AWS_EXECUTION_ENV",
        "ENVIRONMENT",
        "DEBUG",
        "LOG_CONFIG__LOG_LEVEL",
        "LOG_CONFIG__LOG_FORMATTER_TYPE",
        "CLIENT_CONFIG__BASE_URL",
        "CLIENT_CONFIG__TIMEOUT",
        "SERVER_CONFIG__CORRELATION_ID_HEADER",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def clear_caches() -> Generator[None]:
    """Clear cached settings and request context around every test."""
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()
    RequestContext.clear()
    yield
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()
    RequestContext.clear()


@pytest.fixture(autouse=True)
def reset_logging_state() -> Generator[None]:
    """Let every test configure logging from scratch."""
    logging_module._state.configured = False
    yield
    logging_module._state.configured = False


@pytest.fixture
def log_records() -> Generator[list[dict[str, Any]]]:
    """Collect the Loguru records emitted during the test.

    Yields:
        list[dict[str, Any]]: Records in emission order.
    """
    records: list[dict[str, Any]] = []
    handler_id = logger.add(lambda message: records.append(message.record), level=0)
    yield records
    with contextlib.suppress(ValueError):
        logger.remove(handler_id)
