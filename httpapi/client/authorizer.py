"""Request signing capabilities for the API client."""

from collections.abc import Awaitable, Callable
from typing import Protocol, runtime_checkable

import httpx

from httpapi.core.constants import AUTHORIZATION_HEADER


@runtime_checkable
class HttpApiClientAuthorizer(Protocol):
    """Signs an outgoing request before it is sent.

    Failures raised by ``sign`` reach the caller unchanged.
    """

    async def sign(self, request: httpx.Request) -> httpx.Request:
        """Return the request to send, typically with credentials added."""
        ...


class TokenAuthorizer:
    """Inject ``authorization: Bearer <token>``.

    Args:
        token: Async provider called once per request, so rotated tokens are
            picked up without rebuilding the client
    """

    def __init__(self, token: Callable[[], Awaitable[str]]) -> None:
        self.token = token

    async def sign(self, request: httpx.Request) -> httpx.Request:
        request.headers[AUTHORIZATION_HEADER] = f"Bearer {await self.token()}"
        return request
