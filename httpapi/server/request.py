"""Validated inbound request handed to middleware and handlers."""

from dataclasses import dataclass, field
from typing import Any

from httpapi.core.types import HttpEvent


@dataclass(slots=True)
class ServerRequest:
    """Normalized view of an inbound event.

    Header names are lower-cased. ``media_type`` and ``body`` are set only when
    the operation declares a request body and the request carries one.
    """

    event: HttpEvent
    path: dict[str, str] = field(default_factory=dict)
    query: dict[str, str] = field(default_factory=dict)
    header: dict[str, str] = field(default_factory=dict)
    cookie: dict[str, str] = field(default_factory=dict)
    authorizer: dict[str, Any] | None = None
    media_type: str | None = None
    body: Any = None
