"""Shared fixtures for unit tests."""

from collections.abc import Callable
from typing import Any

import pytest

from httpapi.common.operation import Operation, PathPattern, RequestBody
from httpapi.core.config import Settings
from httpapi.core.types import HttpEvent

type EventFactory = Callable[..., HttpEvent]


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Provide a Settings object with test defaults.

    Returns:
        Settings: Real settings built from a controlled environment.
    """
    monkeypatch.setenv("APP_NAME", "TestApp")
    monkeypatch.setenv("ENVIRONMENT", "development")
    return Settings()


@pytest.fixture
def item_operation() -> Operation:
    """GET /items/{itemId}, succeeding with 200 only."""
    return Operation(
        method="GET",
        path=PathPattern(pattern="/items/{itemId}"),
        operation_id="getItem",
        success_codes=frozenset({200}),
    )


@pytest.fixture
def create_operation() -> Operation:
    """POST /items accepting a required JSON or form body."""
    return Operation(
        method="POST",
        path=PathPattern(pattern="/items"),
        operation_id="createItem",
        request_body=RequestBody(
            required=True,
            content={
                "application/json": None,
                "application/x-www-form-urlencoded": None,
            },
        ),
        success_codes=frozenset({201}),
    )


@pytest.fixture
def make_event() -> EventFactory:
    """Build API gateway v2 events with sensible defaults.

    Returns:
        EventFactory: Callable accepting event fields as keyword arguments.
    """

    def factory(**overrides: Any) -> HttpEvent:
        event: HttpEvent = {
            "version": "2.0",
            "routeKey": "$default",
            "rawPath": "/",
            "rawQueryString": "",
            "headers": {},
            "requestContext": {"requestId": "req-123", "http": {"method": "GET"}},
            "isBase64Encoded": False,
        }
        event.update(overrides)
        return event

    return factory
